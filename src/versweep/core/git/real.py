"""Production Git implementation using subprocess."""

import logging
from pathlib import Path

from versweep.core.git.abc import Git
from versweep.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)


class RealGit(Git):
    """Executes git commands in the given working directory."""

    def get_current_branch(self, cwd: Path) -> str | None:
        try:
            result = run_subprocess_with_context(
                ["git", "rev-parse", "--abbrev-ref", "HEAD"],
                operation_context="read current branch",
                cwd=cwd,
            )
        except RuntimeError as e:
            logger.debug("No branch recorded: %s", e)
            return None

        branch = result.stdout.strip()
        if branch in ("", "HEAD"):
            return None
        return branch

    def get_head_commit(self, cwd: Path) -> str | None:
        try:
            result = run_subprocess_with_context(
                ["git", "rev-parse", "--short", "HEAD"],
                operation_context="read HEAD commit",
                cwd=cwd,
            )
        except RuntimeError as e:
            logger.debug("No commit recorded: %s", e)
            return None
        return result.stdout.strip() or None
