"""Fake ProcessRunner for testing.

FakeProcessRunner returns canned results keyed by the command's executable
and records every invocation instead of spawning processes.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path

from versweep.core.process.abc import ProcessResult, ProcessRunner, Stdio

OK = ProcessResult(exit_code=0, stdout="", stderr="")


class FakeProcessRunner(ProcessRunner):
    """In-memory process runner.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, *, results: Mapping[str, ProcessResult] | None = None) -> None:
        """Create FakeProcessRunner.

        Args:
            results: Result to return per executable name; anything else exits 0
        """
        self._results = dict(results or {})
        self._run_calls: list[tuple[list[str], Path, Stdio]] = []

    @property
    def run_calls(self) -> list[tuple[list[str], Path, Stdio]]:
        """Read-only access to (command, cwd, stdio) for every run."""
        return self._run_calls

    @property
    def commands(self) -> list[list[str]]:
        return [command for command, _, _ in self._run_calls]

    def run(self, command: Sequence[str], *, cwd: Path, stdio: Stdio = "pipe") -> ProcessResult:
        self._run_calls.append((list(command), cwd, stdio))
        return self._results.get(command[0], OK)
