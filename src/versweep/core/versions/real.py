"""Version discovery using ``pip index versions``."""

from pathlib import Path

from packaging.version import InvalidVersion, Version

from versweep.core.process.abc import ProcessRunner
from versweep.core.versions.abc import VersionDiscovery

AVAILABLE_PREFIX = "Available versions:"


class PipIndexVersionDiscovery(VersionDiscovery):
    """Queries the configured package index through pip."""

    def __init__(self, python: str, runner: ProcessRunner, cwd: Path) -> None:
        self._python = python
        self._runner = runner
        self._cwd = cwd

    def list_versions(self, name: str) -> list[str]:
        result = self._runner.run(
            [self._python, "-m", "pip", "index", "versions", name, "--disable-pip-version-check"],
            cwd=self._cwd,
            stdio="pipe",
        )
        if not result.ok:
            raise RuntimeError(
                f"Failed to list versions of {name}\nstderr: {result.stderr.strip()}"
            )
        return parse_available_versions(result.stdout)


def parse_available_versions(output: str) -> list[str]:
    """Parse the ``Available versions:`` line into ascending version strings.

    Entries that are not valid PEP 440 versions are dropped.
    """
    for line in output.splitlines():
        stripped = line.strip()
        if not stripped.startswith(AVAILABLE_PREFIX):
            continue
        raw = stripped[len(AVAILABLE_PREFIX) :]
        parsed: list[tuple[Version, str]] = []
        for item in raw.split(","):
            item = item.strip()
            if not item:
                continue
            try:
                parsed.append((Version(item), item))
            except InvalidVersion:
                continue
        return [text for _, text in sorted(parsed)]
    return []
