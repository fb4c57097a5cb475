"""Published-version discovery interface."""

from abc import ABC, abstractmethod


class VersionDiscovery(ABC):
    """Abstract interface for listing a package's published versions."""

    @abstractmethod
    def list_versions(self, name: str) -> list[str]:
        """Return every published version of a package in ascending order.

        Raises:
            RuntimeError: If the registry cannot be queried
        """
        ...
