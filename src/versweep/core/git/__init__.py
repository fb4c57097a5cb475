from versweep.core.git.abc import Git
from versweep.core.git.real import RealGit

__all__ = ["Git", "RealGit"]
