"""pip-backed installer for one interpreter's environment."""

import logging
from collections.abc import Sequence
from pathlib import Path

from versweep.core.identity import PackageIdentity
from versweep.core.installer.abc import PackageInstaller
from versweep.core.process.abc import ProcessResult, ProcessRunner, Stdio

logger = logging.getLogger(__name__)

PIP_FLAGS = ["--disable-pip-version-check", "--no-input"]


class PipInstaller(PackageInstaller):
    """Runs ``<python> -m pip`` through a ProcessRunner.

    Args:
        python: Interpreter whose environment is the shared install location
        runner: Process runner used for every pip invocation
        cwd: Working directory for pip
    """

    def __init__(self, python: str, runner: ProcessRunner, cwd: Path) -> None:
        self._python = python
        self._runner = runner
        self._cwd = cwd

    def _pip(self, *args: str) -> list[str]:
        return [self._python, "-m", "pip", *args, *PIP_FLAGS]

    def install(
        self, packages: Sequence[PackageIdentity], *, stdio: Stdio = "pipe"
    ) -> ProcessResult:
        requirements = [p.requirement for p in packages]
        logger.debug("pip install %s", " ".join(requirements))
        return self._runner.run(self._pip("install", *requirements), cwd=self._cwd, stdio=stdio)

    def uninstall(self, name: str, *, stdio: Stdio = "pipe") -> ProcessResult:
        logger.debug("pip uninstall %s", name)
        return self._runner.run(self._pip("uninstall", "-y", name), cwd=self._cwd, stdio=stdio)

    def installed_version(self, name: str) -> str | None:
        result = self._runner.run(self._pip("show", name), cwd=self._cwd, stdio="pipe")
        if not result.ok:
            return None
        return parse_pip_show_version(result.stdout)


def parse_pip_show_version(output: str) -> str | None:
    """Extract the ``Version:`` field from ``pip show`` output."""
    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip() == "Version":
            version = value.strip()
            return version or None
    return None
