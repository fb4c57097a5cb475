"""Package installation interface for the shared install location.

The shared install location is one interpreter's site-packages. Only one
version of a given distribution can live there at a time, which is why the
sequencer single-flights access per dependency name.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from versweep.core.identity import PackageIdentity
from versweep.core.process.abc import ProcessResult, Stdio


class PackageInstaller(ABC):
    """Abstract interface for installing and removing pinned packages."""

    @abstractmethod
    def install(
        self, packages: Sequence[PackageIdentity], *, stdio: Stdio = "pipe"
    ) -> ProcessResult:
        """Install every package at its pinned version in one operation.

        Args:
            packages: The target first, followed by any pinned dependencies
            stdio: Where the installer output goes

        Returns:
            ProcessResult of the install; non-zero exit means failure
        """
        ...

    @abstractmethod
    def uninstall(self, name: str, *, stdio: Stdio = "pipe") -> ProcessResult:
        """Remove a package from the install location, whatever version it is."""
        ...

    @abstractmethod
    def installed_version(self, name: str) -> str | None:
        """Return the version currently installed, or None if absent."""
        ...
