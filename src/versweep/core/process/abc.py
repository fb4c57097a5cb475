"""Process execution abstraction.

Install, uninstall and shell test commands are spawned through ProcessRunner so
that the Entity state machine can be exercised with an in-memory fake.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Literal

# "pipe" captures output into the result, "inherit" passes the parent's
# streams through, an open text file receives both streams.
Stdio = Literal["pipe", "inherit"] | IO[str]


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one spawned process.

    stdout/stderr are empty strings when output was not captured.
    """

    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner(ABC):
    """Abstract interface for spawning a command and waiting for it."""

    @abstractmethod
    def run(self, command: Sequence[str], *, cwd: Path, stdio: Stdio = "pipe") -> ProcessResult:
        """Run command to completion.

        Args:
            command: Executable followed by its arguments
            cwd: Working directory for the process
            stdio: Where the process output goes (see Stdio)

        Returns:
            ProcessResult. A missing executable is reported as exit code 127, any
            other OS error while spawning as 126, with the reason in stderr;
            neither is raised. Undecodable output is replaced, not raised.
        """
        ...
