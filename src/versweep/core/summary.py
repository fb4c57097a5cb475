"""Persisted matrix results: the Summary record and its file convention.

File names follow ``<os-descriptor>-python-v<runtimeVersion>-summary-<timestamp>.json``
where the OS descriptor itself contains a hyphen (``ubuntu-22.04``). Only
``summaryVersion`` 1 is understood.
"""

import json
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from versweep.core.entity import Entity, Status
from versweep.core.errors import SummaryFormatError
from versweep.core.host import OsInfo
from versweep.core.ranges import Outcome, Range, build_ranges
from versweep.core.version_spec import VersionSpec

SUMMARY_VERSION = 1
SUMMARY_FILE_PATTERN = re.compile(r"(.+-.+)-python-v(.+)-summary-(.+)\.json")
_FEATURE_RELEASE = re.compile(r"^(\d+)(?:\.(\d+))?")


@dataclass(frozen=True)
class SummaryMeta:
    """Run metadata. Every field but summary_version may be missing (None)."""

    summary_version: int | None = SUMMARY_VERSION
    package: str | None = None
    version: str | None = None
    commit: str | None = None
    runtime: str | None = None
    os: OsInfo | None = None
    timestamp: str | None = None
    start_time: int | None = None
    end_time: int | None = None
    branch: str | None = None
    versions: str | None = None

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> "SummaryMeta":
        raw_os = data.get("os")
        os_info = None
        if isinstance(raw_os, Mapping):
            os_info = OsInfo(id=str(raw_os.get("id", "")), version=str(raw_os.get("version", "")))
        return SummaryMeta(
            summary_version=data.get("summaryVersion"),
            package=data.get("package"),
            version=data.get("version"),
            commit=data.get("commit"),
            runtime=data.get("runtime"),
            os=os_info,
            timestamp=data.get("timestamp"),
            start_time=data.get("startTime"),
            end_time=data.get("endTime"),
            branch=data.get("branch"),
            versions=data.get("versions"),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "summaryVersion": self.summary_version,
            "package": self.package,
            "version": self.version,
            "commit": self.commit,
            "runtime": self.runtime,
            "os": {"id": self.os.id, "version": self.os.version} if self.os else None,
            "timestamp": self.timestamp,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "branch": self.branch,
            "versions": self.versions,
        }

    def overlay(self, later: "SummaryMeta") -> "SummaryMeta":
        """Field-by-field merge where ``later`` wins wherever it has a value.

        A field that ``later`` leaves as None (absent or null in its JSON) keeps
        the earlier value; an explicit null never erases earlier metadata.
        """
        updates = {
            f.name: getattr(later, f.name)
            for f in fields(self)
            if getattr(later, f.name) is not None
        }
        return replace(self, **updates)

    @property
    def os_id(self) -> str:
        return self.os.id if self.os else ""

    @property
    def elapsed(self) -> str:
        """Run duration as HH:MM:SS, empty when either end is unknown."""
        if self.start_time is None or self.end_time is None:
            return ""
        seconds = max(0, (self.end_time - self.start_time) // 1000)
        hours, rest = divmod(seconds, 3600)
        minutes, secs = divmod(rest, 60)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class PackageResults:
    """One package's results: the last version run and its ranges."""

    latest: str | None
    ranges: tuple[Range, ...] = ()


@dataclass(frozen=True)
class Summary:
    meta: SummaryMeta
    packages: dict[str, PackageResults] = field(default_factory=dict)

    @staticmethod
    def from_json(data: Any, source: str) -> "Summary":
        """Validate and convert parsed JSON.

        Raises:
            SummaryFormatError: If ``meta`` is missing, the summary version is
                not supported, or the timing fields, packages or ranges are malformed
        """
        if not isinstance(data, Mapping) or not isinstance(data.get("meta"), Mapping):
            raise SummaryFormatError(f"missing meta key in {source}")
        meta = SummaryMeta.from_json(data["meta"])
        if meta.summary_version != SUMMARY_VERSION:
            raise SummaryFormatError(f"bad version {meta.summary_version} in {source}")

        for key in ("startTime", "endTime"):
            value = data["meta"].get(key)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise SummaryFormatError(f"bad meta {key} {value!r} in {source}")

        raw_packages = data.get("packages")
        if raw_packages is None:
            raw_packages = {}
        if not isinstance(raw_packages, Mapping):
            raise SummaryFormatError(f"packages must be an object in {source}")

        packages: dict[str, PackageResults] = {}
        for name, raw in raw_packages.items():
            if not isinstance(raw, Mapping) or not isinstance(raw.get("ranges", []), list):
                raise SummaryFormatError(f"bad entry for package {name} in {source}")
            try:
                ranges = tuple(Range.from_json(r) for r in raw.get("ranges", []))
            except (KeyError, TypeError, ValueError) as e:
                raise SummaryFormatError(f"bad ranges for {name} in {source}: {e}") from e
            packages[name] = PackageResults(latest=raw.get("latest"), ranges=ranges)
        return Summary(meta=meta, packages=packages)

    def to_json(self) -> dict[str, Any]:
        return {
            "meta": self.meta.to_json(),
            "packages": {
                name: {"latest": p.latest, "ranges": [r.to_json() for r in p.ranges]}
                for name, p in self.packages.items()
            },
        }

    def merged_with(self, later: "Summary") -> "Summary":
        """Overlay ``later``: meta per field, packages per name (later wins)."""
        return Summary(
            meta=self.meta.overlay(later.meta),
            packages={**self.packages, **later.packages},
        )


def feature_release(runtime_version: str) -> str:
    """``3.12`` for ``3.12.4``; the grouping key for summaries."""
    m = _FEATURE_RELEASE.match(runtime_version)
    if m is None:
        return runtime_version
    major, minor = m.groups()
    return major if minor is None else f"{major}.{minor}"


def release_sort_key(release: str) -> tuple[int, ...]:
    return tuple(int(part) for part in release.split(".") if part.isdigit())


@dataclass(frozen=True)
class SummaryFileName:
    """What a summary's file name says about the run."""

    path: Path
    os: str
    runtime_version: str
    major_version: str
    timestamp: str

    @staticmethod
    def parse(path: Path) -> "SummaryFileName | None":
        """Parse a path, returning None when it is not a summary file."""
        m = SUMMARY_FILE_PATTERN.fullmatch(path.name)
        if m is None:
            return None
        os_descriptor, runtime, timestamp = m.groups()
        return SummaryFileName(
            path=path,
            os=os_descriptor,
            runtime_version=runtime,
            major_version=feature_release(runtime),
            timestamp=timestamp,
        )

    @property
    def sort_key(self) -> tuple[tuple[int, ...], str, str]:
        return (release_sort_key(self.major_version), self.os, self.timestamp)


@dataclass(frozen=True)
class SummaryRecord:
    """A summary loaded from disk together with its file-name facts."""

    file: SummaryFileName
    summary: Summary

    @property
    def os(self) -> str:
        return self.file.os

    @property
    def major_version(self) -> str:
        return self.file.major_version

    def merged_with(self, later: "SummaryRecord") -> "SummaryRecord":
        return SummaryRecord(file=later.file, summary=self.summary.merged_with(later.summary))


def load_summary(path: Path) -> Summary:
    """Read and validate one summary file.

    Raises:
        SummaryFormatError: If the file is not valid JSON or fails validation
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SummaryFormatError(f"invalid JSON in {path}: {e}") from e
    return Summary.from_json(data, str(path))


def outcome_of(entity: Entity) -> Outcome:
    if entity.skip:
        return "skip"
    return "pass" if entity.test_status == Status.PASS else "fail"


def package_results(entities: Sequence[Entity]) -> PackageResults:
    """Compress a matrix's entities into ranges; latest is the last version run."""
    run = [e.version for e in entities if not e.skip]
    return PackageResults(
        latest=run[-1] if run else None,
        ranges=tuple(build_ranges((e.version, outcome_of(e)) for e in entities)),
    )


def build_summary(specs: Iterable[VersionSpec], meta: SummaryMeta) -> Summary:
    """Build a Summary from specs decorated with results by the sequencer."""
    return Summary(
        meta=meta,
        packages={spec.name: package_results(spec.results or ()) for spec in specs},
    )


def summary_filename(os_info: OsInfo, runtime: str, timestamp: str) -> str:
    descriptor = f"{os_info.id}-{os_info.version or 'unknown'}"
    return f"{descriptor}-python-v{runtime}-summary-{timestamp}.json"


def write_summary(directory: Path, summary: Summary, file_timestamp: str) -> Path:
    """Write the summary as indented JSON under the conventional file name."""
    meta = summary.meta
    if meta.os is None or meta.runtime is None:
        raise ValueError("Summary meta needs os and runtime to be written")
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / summary_filename(meta.os, meta.runtime, file_timestamp)
    path.write_text(json.dumps(summary.to_json(), indent=2) + "\n", encoding="utf-8")
    return path
