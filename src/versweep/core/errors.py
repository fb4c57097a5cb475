"""Exception hierarchy for versweep.

Entity-level failures (InstallError, TaskFailedError) are raised by the
single-step Entity operations and absorbed by Entity.install_and_test().
Report-level failures (SummaryFormatError, MissingBaselineError,
MissingPackageError) abort a humanize run.
"""


class VersweepError(Exception):
    """Base class for all versweep errors."""


class VersionSpecError(VersweepError):
    """A versions file entry is malformed or uses an unsupported schema."""


class InstallError(VersweepError):
    """Installing a pinned package version failed."""

    def __init__(self, package: str, stderr: str) -> None:
        super().__init__(f"Failed to install {package}")
        self.package = package
        self.stderr = stderr


class TaskFailedError(VersweepError):
    """A test task exited non-zero, reported a failing status, or raised."""

    def __init__(self, message: str, *, stdout: str = "", stderr: str = "") -> None:
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr


class InstallLocationBusyError(VersweepError):
    """Another matrix already holds the install slot for this dependency name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Install location for '{name}' is already reserved")
        self.name = name


class SummaryFormatError(VersweepError):
    """A summary file is missing its meta block or has an unsupported version."""


class MissingBaselineError(VersweepError):
    """A runtime group has no record for the baseline OS."""


class MissingPackageError(VersweepError):
    """A non-baseline record lacks a package the baseline record has."""
