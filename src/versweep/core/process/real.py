"""Production ProcessRunner backed by subprocess.run."""

import subprocess
from collections.abc import Sequence
from pathlib import Path

from versweep.core.process.abc import ProcessResult, ProcessRunner, Stdio

COMMAND_NOT_FOUND = 127
CANNOT_EXECUTE = 126


class RealProcessRunner(ProcessRunner):
    """Spawns real processes; no timeout is applied."""

    def run(self, command: Sequence[str], *, cwd: Path, stdio: Stdio = "pipe") -> ProcessResult:
        if stdio == "pipe":
            stream_kwargs = {"capture_output": True}
        elif stdio == "inherit":
            stream_kwargs = {}
        else:
            stream_kwargs = {"stdout": stdio, "stderr": stdio}

        try:
            result = subprocess.run(
                list(command),
                cwd=cwd,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                **stream_kwargs,
            )
        except FileNotFoundError:
            return ProcessResult(
                exit_code=COMMAND_NOT_FOUND,
                stdout="",
                stderr=f"command not found: {command[0]}\n",
            )
        except OSError as e:
            # not executable, bad cwd: report like a shell would
            return ProcessResult(
                exit_code=CANNOT_EXECUTE,
                stdout="",
                stderr=f"cannot execute {command[0]}: {e}\n",
            )

        return ProcessResult(
            exit_code=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
