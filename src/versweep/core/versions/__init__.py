from versweep.core.versions.abc import VersionDiscovery
from versweep.core.versions.real import PipIndexVersionDiscovery

__all__ = ["PipIndexVersionDiscovery", "VersionDiscovery"]
