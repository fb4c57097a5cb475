from versweep.core.installer.abc import PackageInstaller
from versweep.core.installer.real import PipInstaller

__all__ = ["PackageInstaller", "PipInstaller"]
