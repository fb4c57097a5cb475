"""Test tasks run against an installed package version.

A task is either a shell command (ShellTask) or an in-process function
(CallableTask). Both expose execute(), so callers never inspect which kind
they hold.
"""

import importlib
import shlex
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from versweep.core.errors import TaskFailedError, VersionSpecError
from versweep.core.process.abc import ProcessRunner, Stdio


@dataclass(frozen=True)
class TaskOutcome:
    """What a task produced: its return value and any captured output."""

    value: Any
    stdout: str = ""
    stderr: str = ""


class Task(ABC):
    """A unit of testing work executed in the currently installed context."""

    @abstractmethod
    def execute(self, runner: ProcessRunner, *, cwd: Path, stdio: Stdio) -> TaskOutcome:
        """Run the task.

        Raises:
            TaskFailedError: If the task did not pass. The error carries any
                captured output in its stdout/stderr attributes.
        """
        ...

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable description for logs."""
        ...


@dataclass(frozen=True)
class ShellTask(Task):
    """Spawn ``command args...``; exit code 0 passes. Resolves with None."""

    command: str
    args: tuple[str, ...] = ()

    @staticmethod
    def from_string(command_line: str) -> "ShellTask":
        parts = shlex.split(command_line)
        if not parts:
            raise VersionSpecError("Task command must not be empty")
        return ShellTask(command=parts[0], args=tuple(parts[1:]))

    def execute(self, runner: ProcessRunner, *, cwd: Path, stdio: Stdio) -> TaskOutcome:
        result = runner.run([self.command, *self.args], cwd=cwd, stdio=stdio)
        if not result.ok:
            raise TaskFailedError(
                f"'{self.describe()}' exited with code {result.exit_code}",
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return TaskOutcome(value=None, stdout=result.stdout, stderr=result.stderr)

    def describe(self) -> str:
        return shlex.join([self.command, *self.args])


@dataclass(frozen=True)
class CallableTask(Task):
    """Invoke a function in-process and inspect the status it returns.

    The function passes when it returns None, 0, or an object or mapping whose
    ``status`` is 0. On success the task resolves with the function's return value.
    """

    fn: Callable[[], Any]
    name: str = field(default="")

    @staticmethod
    def from_import_path(path: str) -> "CallableTask":
        """Resolve ``package.module:function`` into a CallableTask."""
        module_name, sep, attr = path.partition(":")
        if not sep or not module_name or not attr:
            raise VersionSpecError(f"Callable task '{path}' must look like 'module:function'")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise VersionSpecError(f"Cannot import module for callable task '{path}'") from e
        fn = getattr(module, attr, None)
        if not callable(fn):
            raise VersionSpecError(f"Callable task '{path}' does not name a function")
        return CallableTask(fn=fn, name=path)

    def execute(self, runner: ProcessRunner, *, cwd: Path, stdio: Stdio) -> TaskOutcome:
        try:
            value = self.fn()
        except Exception as e:
            raise TaskFailedError(f"'{self.describe()}' raised {type(e).__name__}: {e}") from e

        status = _status_of(value)
        if status != 0:
            raise TaskFailedError(f"'{self.describe()}' returned status {status}")
        return TaskOutcome(value=value)

    def describe(self) -> str:
        return self.name or getattr(self.fn, "__qualname__", repr(self.fn))


def _status_of(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        return 0 if value else 1
    if isinstance(value, int):
        return value
    if isinstance(value, Mapping):
        return int(value.get("status", 0))
    return int(getattr(value, "status", 0))


DEFAULT_TASK = ShellTask(command="true")


def task_from_config(raw: object) -> Task:
    """Build a Task from a versions-file ``task`` value.

    Accepts a command string, ``{command, args}`` or ``{callable}``.
    """
    if raw is None:
        return DEFAULT_TASK
    if isinstance(raw, str):
        return ShellTask.from_string(raw)
    if isinstance(raw, Mapping):
        if "callable" in raw:
            return CallableTask.from_import_path(str(raw["callable"]))
        if "command" in raw:
            args = raw.get("args", [])
            if not isinstance(args, list):
                raise VersionSpecError("Task 'args' must be a list of strings")
            return ShellTask(command=str(raw["command"]), args=tuple(str(a) for a in args))
    raise VersionSpecError(f"Unsupported task definition: {raw!r}")
