"""Facts about the host interpreter and operating system."""

import platform
import sys
from dataclasses import dataclass


def is_builtin(name: str) -> bool:
    """Whether ``name`` is a top-level standard-library module."""
    return name in sys.stdlib_module_names


def runtime_version() -> str:
    return platform.python_version()


@dataclass(frozen=True)
class OsInfo:
    """Operating system identity as recorded in summaries."""

    id: str
    version: str


def detect_os() -> OsInfo:
    """Read ID/VERSION_ID from os-release, falling back to platform.system()."""
    try:
        release = platform.freedesktop_os_release()
    except OSError:
        return OsInfo(id=platform.system().lower() or "unknown", version=platform.release())
    return OsInfo(id=release.get("ID", "linux"), version=release.get("VERSION_ID", ""))
