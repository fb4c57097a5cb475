"""Package identity: a (name, version) pair."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PackageIdentity:
    """A package pinned to one version."""

    name: str
    version: str

    @staticmethod
    def parse(reference: str) -> "PackageIdentity":
        """Parse a pinned reference such as ``urllib3==1.26.0`` or ``urllib3@1.26.0``.

        Raises:
            ValueError: If the reference does not pin a version
        """
        if "==" in reference:
            name, _, version = reference.partition("==")
        elif "@" in reference:
            name, _, version = reference.rpartition("@")
        else:
            raise ValueError(f"Dependency '{reference}' must pin a version (name==version)")

        name = name.strip()
        version = version.strip()
        if not name or not version:
            raise ValueError(f"Dependency '{reference}' must pin a version (name==version)")
        return PackageIdentity(name=name, version=version)

    @property
    def requirement(self) -> str:
        """pip requirement string for this exact version."""
        return f"{self.name}=={self.version}"

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"
