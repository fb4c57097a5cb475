"""The shared install location as an explicit, single-flighted resource.

One interpreter environment can hold only one version of a distribution at a
time. Matrices for different dependency names may proceed independently, but
two matrices for the same name must never overlap, so each matrix reserves
the name for its whole run.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from versweep.core.errors import InstallLocationBusyError
from versweep.core.identity import PackageIdentity
from versweep.core.installer.abc import PackageInstaller
from versweep.core.process.abc import ProcessRunner, Stdio


class InstallLocation:
    """Handle to the environment packages are installed into and tested from.

    Attributes:
        installer: Installs and removes pinned packages
        runner: Spawns shell test tasks
        cwd: Working directory for installs and tasks
        stdio: Output routing for every spawned process
    """

    def __init__(
        self,
        installer: PackageInstaller,
        runner: ProcessRunner,
        *,
        cwd: Path,
        stdio: Stdio = "pipe",
    ) -> None:
        self.installer = installer
        self.runner = runner
        self.cwd = cwd
        self.stdio = stdio
        self._guard = threading.Lock()
        self._slots: dict[str, threading.Lock] = {}

    def _slot(self, name: str) -> threading.Lock:
        with self._guard:
            return self._slots.setdefault(name, threading.Lock())

    @contextmanager
    def reserve(self, name: str) -> Iterator[None]:
        """Hold the install slot for a dependency name.

        Raises:
            InstallLocationBusyError: If the slot is already held
        """
        slot = self._slot(name)
        if not slot.acquire(blocking=False):
            raise InstallLocationBusyError(name)
        try:
            yield
        finally:
            slot.release()

    def is_reserved(self, name: str) -> bool:
        return self._slot(name).locked()

    def installed(self, name: str) -> PackageIdentity | None:
        """Identity of the version of ``name`` currently installed, if any."""
        version = self.installer.installed_version(name)
        if version is None:
            return None
        return PackageIdentity(name=name, version=version)
