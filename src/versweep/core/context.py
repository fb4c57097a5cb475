"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from versweep.cli.config import LoadedConfig, load_config
from versweep.core.git.abc import Git
from versweep.core.git.real import RealGit
from versweep.core.installer.abc import PackageInstaller
from versweep.core.installer.real import PipInstaller
from versweep.core.process.abc import ProcessRunner
from versweep.core.process.real import RealProcessRunner
from versweep.core.time.abc import Time
from versweep.core.time.real import RealTime
from versweep.core.versions.abc import VersionDiscovery
from versweep.core.versions.real import PipIndexVersionDiscovery


@dataclass(frozen=True)
class VersweepContext:
    """Immutable context holding all collaborators for versweep commands.

    Created at the CLI entry point and threaded through commands. Tests
    build one from fakes (see tests/fakes/context.py).
    """

    runner: ProcessRunner
    installer: PackageInstaller
    discovery: VersionDiscovery
    git: Git
    time: Time
    cwd: Path
    config: LoadedConfig


def create_context(cwd: Path | None = None) -> VersweepContext:
    """Create the production context rooted at cwd (default: Path.cwd())."""
    root = cwd if cwd is not None else Path.cwd()
    config = load_config(root)
    runner = RealProcessRunner()
    return VersweepContext(
        runner=runner,
        installer=PipInstaller(config.python, runner, root),
        discovery=PipIndexVersionDiscovery(config.python, runner, root),
        git=RealGit(),
        time=RealTime(),
        cwd=root,
        config=config,
    )
