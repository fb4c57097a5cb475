"""Tests for MatrixSequencer: per-version runs and install-state restoration."""

import logging
from pathlib import Path

import pytest

from versweep.core.entity import Entity, EntityState, Status
from versweep.core.errors import InstallLocationBusyError
from versweep.core.host import runtime_version
from versweep.core.identity import PackageIdentity
from versweep.core.location import InstallLocation
from versweep.core.process.abc import ProcessResult
from versweep.core.sequencer import MatrixSequencer
from versweep.core.tasks import ShellTask
from versweep.core.version_spec import VersionRange, VersionSpec

from tests.fakes.installer import FakeInstaller
from tests.fakes.process import FakeProcessRunner
from tests.fakes.versions import FakeVersionDiscovery

AP_VERSIONS = ["0.9.0", "1.0.0", "1.1.0", "2.0.0"]


def make_sequencer(
    installer: FakeInstaller,
    versions: dict[str, list[str]],
    runner: FakeProcessRunner | None = None,
) -> tuple[MatrixSequencer, InstallLocation]:
    location = InstallLocation(
        installer, runner if runner is not None else FakeProcessRunner(), cwd=Path("/proj")
    )
    return MatrixSequencer(location, FakeVersionDiscovery(versions)), location


def summary_of(spec: VersionSpec) -> list[tuple[str, bool, Status | None]]:
    assert spec.results is not None
    return [(e.version, e.skip, e.test_status) for e in spec.results]


def test_v1_range_runs_matching_versions_in_order() -> None:
    installer = FakeInstaller()
    sequencer, _ = make_sequencer(installer, {"ap": AP_VERSIONS})

    result = sequencer.run_spec(VersionSpec(name="ap", range=">=1.0,<2"))

    assert summary_of(result) == [
        ("0.9.0", True, None),
        ("1.0.0", False, Status.PASS),
        ("1.1.0", False, Status.PASS),
        ("2.0.0", True, None),
    ]
    assert installer.installed_references == ["ap@1.0.0", "ap@1.1.0"]


def test_original_spec_is_not_mutated() -> None:
    sequencer, _ = make_sequencer(FakeInstaller(), {"ap": AP_VERSIONS})
    spec = VersionSpec(name="ap")

    result = sequencer.run_spec(spec)

    assert spec.results is None
    assert result is not spec
    assert result.results is not None
    assert len(result.results) == 4


def test_previous_version_is_reinstalled_afterwards() -> None:
    installer = FakeInstaller(installed={"ap": "0.5.0"})
    sequencer, _ = make_sequencer(installer, {"ap": AP_VERSIONS})

    sequencer.run_spec(VersionSpec(name="ap"))

    assert installer.installed_references[-1] == "ap@0.5.0"
    assert installer.installed == {"ap": "0.5.0"}
    assert installer.uninstall_calls == []


def test_previous_dependencies_are_reinstalled_with_previous_version() -> None:
    installer = FakeInstaller(installed={"requests": "2.28.0", "urllib3": "1.26.5"})
    sequencer, _ = make_sequencer(installer, {"requests": ["2.30.0", "2.31.0"]})
    spec = VersionSpec(
        name="requests",
        schema_version=2,
        ranges=(VersionRange(">=2.30", (PackageIdentity("urllib3", "2.0.0"),)),),
    )

    sequencer.run_spec(spec)

    assert installer.install_calls[-1] == [
        PackageIdentity("requests", "2.28.0"),
        PackageIdentity("urllib3", "1.26.5"),
    ]
    assert installer.installed == {"requests": "2.28.0", "urllib3": "1.26.5"}


def test_last_tested_version_is_uninstalled_when_nothing_was_installed() -> None:
    installer = FakeInstaller()
    sequencer, _ = make_sequencer(installer, {"ap": AP_VERSIONS})

    result = sequencer.run_spec(VersionSpec(name="ap", range="<2"))

    assert installer.uninstall_calls == ["ap"]
    assert "ap" not in installer.installed
    assert result.results is not None
    assert result.results[2].state is EntityState.UNINSTALLED


def test_nothing_is_uninstalled_when_every_version_was_skipped() -> None:
    installer = FakeInstaller()
    sequencer, _ = make_sequencer(installer, {"ap": AP_VERSIONS})

    sequencer.run_spec(VersionSpec(name="ap", range=">=5"))

    assert installer.install_calls == []
    assert installer.uninstall_calls == []


def test_v2_versions_get_their_range_dependencies() -> None:
    installer = FakeInstaller()
    sequencer, _ = make_sequencer(installer, {"requests": ["2.10.0", "2.31.0"]})
    old, new = PackageIdentity("urllib3", "1.26.0"), PackageIdentity("urllib3", "2.0.0")
    spec = VersionSpec(
        name="requests",
        schema_version=2,
        ranges=(VersionRange(">=2.0", (old,)), VersionRange(">=2.30", (new,))),
    )

    sequencer.run_spec(spec)

    assert installer.install_calls == [
        [PackageIdentity("requests", "2.10.0"), old],
        [PackageIdentity("requests", "2.31.0"), new],
    ]


def test_install_failure_is_recorded_and_run_continues() -> None:
    installer = FakeInstaller(failing_installs=["ap@1.0.0"])
    sequencer, _ = make_sequencer(installer, {"ap": AP_VERSIONS})

    result = sequencer.run_spec(VersionSpec(name="ap", range=">=1.0,<2"))

    assert result.results is not None
    failed = result.results[1]
    assert failed.state is EntityState.INSTALL_FAILED
    assert failed.test_status is Status.FAIL
    assert result.results[2].test_status is Status.PASS


def test_failing_task_is_recorded_per_version() -> None:
    runner = FakeProcessRunner(results={"pytest": ProcessResult(1, "", "")})
    sequencer, _ = make_sequencer(FakeInstaller(), {"ap": ["1.0.0"]}, runner)

    result = sequencer.run_spec(VersionSpec(name="ap", task=ShellTask("pytest")))

    assert summary_of(result) == [("1.0.0", False, Status.FAIL)]


def test_discovery_failure_still_returns_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    sequencer, location = make_sequencer(FakeInstaller(), {})

    with caplog.at_level(logging.ERROR, logger="versweep.core.sequencer"):
        result = sequencer.run_spec(VersionSpec(name="ap"))

    assert result.results == ()
    assert "version matrix aborted" in caplog.text
    assert not location.is_reserved("ap")


def test_builtin_runs_once_at_runtime_version() -> None:
    installer = FakeInstaller()
    discovery = FakeVersionDiscovery()
    location = InstallLocation(installer, FakeProcessRunner(), cwd=Path("/proj"))
    sequencer = MatrixSequencer(location, discovery)

    result = sequencer.run_spec(VersionSpec(name="json"))

    assert summary_of(result) == [(runtime_version(), False, Status.PASS)]
    assert discovery.queries == []
    assert installer.install_calls == []


def test_same_name_cannot_run_twice_at_once() -> None:
    sequencer, location = make_sequencer(FakeInstaller(), {"ap": AP_VERSIONS})

    with location.reserve("ap"):
        with pytest.raises(InstallLocationBusyError):
            sequencer.run_spec(VersionSpec(name="ap"))


def test_entity_mapper_can_substitute_entities() -> None:
    location = InstallLocation(FakeInstaller(), FakeProcessRunner(), cwd=Path("/proj"))

    def skip_everything(entity: Entity) -> Entity:
        entity.skip = True
        return entity

    sequencer = MatrixSequencer(
        location, FakeVersionDiscovery({"ap": AP_VERSIONS}), entity_mapper=skip_everything
    )

    result = sequencer.run_spec(VersionSpec(name="ap"))

    assert [skip for _, skip, _ in summary_of(result)] == [True] * 4


def test_run_suite_runs_specs_in_order() -> None:
    installer = FakeInstaller()
    sequencer, _ = make_sequencer(installer, {"ap": ["1.0.0"], "bq": ["2.0.0"]})

    results = sequencer.run_suite([VersionSpec(name="bq"), VersionSpec(name="ap")])

    assert [r.name for r in results] == ["bq", "ap"]
    assert installer.installed_references == ["bq@2.0.0", "ap@1.0.0"]


def test_bare_version_range_tests_only_that_version() -> None:
    sequencer, _ = make_sequencer(FakeInstaller(), {"ap": ["0.1.0", "0.2.0"]})

    result = sequencer.run_spec(VersionSpec(name="ap", range="0.2.0"))

    assert summary_of(result) == [("0.1.0", True, None), ("0.2.0", False, Status.PASS)]


class CrashingRunner(FakeProcessRunner):
    def run(self, command, *, cwd, stdio="pipe"):  # type: ignore[no-untyped-def]
        raise OSError("exec format error")


def test_task_crash_does_not_stop_the_matrix() -> None:
    installer = FakeInstaller()
    sequencer, location = make_sequencer(
        installer, {"ap": ["1.0.0", "1.1.0", "2.0.0"]}, CrashingRunner()
    )

    result = sequencer.run_spec(VersionSpec(name="ap", task=ShellTask("./run-tests.sh")))

    assert summary_of(result) == [
        ("1.0.0", False, Status.FAIL),
        ("1.1.0", False, Status.FAIL),
        ("2.0.0", False, Status.FAIL),
    ]
    assert installer.installed_references == ["ap@1.0.0", "ap@1.1.0", "ap@2.0.0"]
    assert not location.is_reserved("ap")


def test_restore_failure_is_logged_and_results_returned(
    caplog: pytest.LogCaptureFixture,
) -> None:
    installer = FakeInstaller(installed={"ap": "0.5.0"}, failing_installs=["ap@0.5.0"])
    sequencer, location = make_sequencer(installer, {"ap": ["1.0.0", "1.1.0"]})

    with caplog.at_level(logging.WARNING, logger="versweep.core.sequencer"):
        result = sequencer.run_spec(VersionSpec(name="ap"))

    assert summary_of(result) == [("1.0.0", False, Status.PASS), ("1.1.0", False, Status.PASS)]
    assert "failed to restore initial state" in caplog.text
    assert installer.installed_references[-1] == "ap@0.5.0"
    assert not location.is_reserved("ap")


def test_previous_version_is_restored_when_mapping_raises(
    caplog: pytest.LogCaptureFixture,
) -> None:
    installer = FakeInstaller(installed={"ap": "0.5.0"})
    location = InstallLocation(installer, FakeProcessRunner(), cwd=Path("/proj"))

    def explode(entity: Entity) -> Entity:
        if entity.version == "1.1.0":
            raise ValueError("mapper broke")
        return entity

    sequencer = MatrixSequencer(
        location, FakeVersionDiscovery({"ap": AP_VERSIONS}), entity_mapper=explode
    )

    with caplog.at_level(logging.ERROR, logger="versweep.core.sequencer"):
        result = sequencer.run_spec(VersionSpec(name="ap"))

    assert result.results == ()
    assert "version matrix aborted" in caplog.text
    assert installer.installed_references == ["ap@0.5.0"]
    assert installer.installed == {"ap": "0.5.0"}
    assert not location.is_reserved("ap")
