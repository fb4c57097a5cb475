"""Subprocess execution that fails loudly with the operation that was attempted.

Used for metadata lookups (git) where a failure is an error the caller handles.
Install and test commands go through ProcessRunner instead, because their
non-zero exits are outcomes to record rather than errors.
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command, capturing text output, and raise RuntimeError on failure.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of the operation, used as
            "Failed to <operation_context>" in the error message
        cwd: Working directory for command execution

    Returns:
        CompletedProcess with captured stdout and stderr

    Raises:
        RuntimeError: If the command exits non-zero or its binary is missing
    """
    cmd_str = " ".join(str(arg) for arg in cmd)
    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
        )
    except subprocess.CalledProcessError as e:
        lines = [
            f"Failed to {operation_context}",
            f"Command: {cmd_str}",
            f"Exit code: {e.returncode}",
        ]
        stderr = (e.stderr or "").strip()
        if stderr:
            lines.append(f"stderr: {stderr}")
        raise RuntimeError("\n".join(lines)) from e
    except FileNotFoundError as e:
        raise RuntimeError(
            f"Command not found while trying to {operation_context}: {cmd[0]}\n"
            f"Full command: {cmd_str}"
        ) from e
