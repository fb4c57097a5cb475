"""Git metadata lookups recorded in summary files."""

from abc import ABC, abstractmethod
from pathlib import Path


class Git(ABC):
    """Abstract interface for the git queries a matrix run needs."""

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch, or None if detached or not a repo."""
        ...

    @abstractmethod
    def get_head_commit(self, cwd: Path) -> str | None:
        """Get the abbreviated HEAD commit sha, or None if not a repo."""
        ...
