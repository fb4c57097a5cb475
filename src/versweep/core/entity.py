"""Lifecycle state machine for one (package, version) pair.

States::

    initial ──install──▶ installed ──(install_and_test)──▶ tested
       │                     │
       └──install──▶ install-failed
    any ──uninstall──▶ uninstalled

test() on its own never changes ``state`` or ``test_status``; only
install_and_test() records test outcomes. Every transition is published to
the attached TransitionObservers.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from versweep.core.errors import InstallError, TaskFailedError
from versweep.core.host import is_builtin
from versweep.core.identity import PackageIdentity
from versweep.core.location import InstallLocation
from versweep.core.process.abc import ProcessResult
from versweep.core.tasks import DEFAULT_TASK, Task

logger = logging.getLogger(__name__)


class EntityState(Enum):
    INITIAL = "initial"
    INSTALLED = "installed"
    INSTALL_FAILED = "install-failed"
    TESTED = "tested"
    UNINSTALLED = "uninstalled"


class Status(Enum):
    PASS = "pass"
    FAIL = "fail"


@dataclass(frozen=True)
class EntityLog:
    """Output captured from the entity's most recent process."""

    stdout: str = ""
    stderr: str = ""


class TransitionObserver(ABC):
    """Receives every state change of the entities it is attached to."""

    @abstractmethod
    def on_transition(
        self, from_state: EntityState, to_state: EntityState, entity: "Entity"
    ) -> None: ...


class Entity:
    """One package version being installed, tested and uninstalled.

    Args:
        identity: Package name and pinned version; fixed for the entity's life
        task: What to run once installed (defaults to the ``true`` command)
        location: Shared install location the package goes into
        dependencies: Pinned packages installed alongside the target
        builtin: Whether the interpreter provides the package; detected from
            the standard library module list when not given
        skip: Whether install_and_test() should leave this version untouched
    """

    def __init__(
        self,
        identity: PackageIdentity,
        task: Task | None,
        location: InstallLocation,
        *,
        dependencies: Sequence[PackageIdentity] = (),
        builtin: bool | None = None,
        skip: bool = False,
    ) -> None:
        self._identity = identity
        self.task = task if task is not None else DEFAULT_TASK
        self._location = location
        self.dependencies = list(dependencies)
        self.builtin = is_builtin(identity.name) if builtin is None else builtin
        self.skip = skip

        self.state = EntityState.INITIAL
        self.install_status: Status | None = None
        self.test_status: Status | None = None
        self.uninstall_status: Status | None = None
        self.log = EntityLog()
        self._observers: list[TransitionObserver] = []

    @property
    def identity(self) -> PackageIdentity:
        return self._identity

    @property
    def name(self) -> str:
        return self._identity.name

    @property
    def version(self) -> str:
        return self._identity.version

    def subscribe(self, observer: TransitionObserver) -> None:
        self._observers.append(observer)

    def _transition(self, to_state: EntityState) -> None:
        from_state = self.state
        self.state = to_state
        for observer in self._observers:
            observer.on_transition(from_state, to_state, self)

    def install(self) -> ProcessResult | None:
        """Install this exact version (plus dependencies) into the location.

        Returns:
            The installer's ProcessResult, or None for builtins

        Raises:
            InstallError: If the installer exits non-zero. The entity is left in
                ``install-failed`` with the installer's stderr in ``log``.
        """
        if self.builtin:
            self.install_status = Status.PASS
            self._transition(EntityState.INSTALLED)
            return None

        result = self._location.installer.install(
            [self._identity, *self.dependencies], stdio=self._location.stdio
        )
        if not result.ok:
            self.log = EntityLog(stderr=result.stderr)
            self.install_status = Status.FAIL
            self._transition(EntityState.INSTALL_FAILED)
            raise InstallError(str(self), result.stderr)

        self.log = EntityLog(stdout=result.stdout)
        self.install_status = Status.PASS
        self._transition(EntityState.INSTALLED)
        return result

    def uninstall(self) -> None:
        """Remove the package from the location. Never raises."""
        if self.builtin:
            self.uninstall_status = Status.PASS
        else:
            result = self._location.installer.uninstall(self.name, stdio=self._location.stdio)
            self.log = EntityLog(stdout=result.stdout, stderr=result.stderr)
            self.uninstall_status = Status.PASS if result.ok else Status.FAIL
        self._transition(EntityState.UNINSTALLED)

    def test(self) -> Any:
        """Run the task against whatever is currently installed.

        Returns:
            The task's result (None for shell tasks)

        Raises:
            TaskFailedError: If the task fails. ``state`` and ``test_status``
                are left unchanged.
        """
        try:
            outcome = self.task.execute(
                self._location.runner, cwd=self._location.cwd, stdio=self._location.stdio
            )
        except TaskFailedError as e:
            self.log = EntityLog(stdout=e.stdout, stderr=e.stderr)
            raise
        self.log = EntityLog(stdout=outcome.stdout, stderr=outcome.stderr)
        return outcome.value

    def install_and_test(self) -> "Entity":
        """Install then test, recording both outcomes. Never raises.

        Skipped entities come back untouched with both statuses None. A failed
        install records ``test_status=fail`` without running the task. Any other
        exception from install or test is logged and recorded as a failure.
        """
        if self.skip:
            self.install_status = None
            self.test_status = None
            return self

        try:
            self.install()
        except InstallError:
            self.test_status = Status.FAIL
            return self
        except Exception as e:
            logger.exception("%s: install did not complete", self)
            self.log = EntityLog(stderr=f"{type(e).__name__}: {e}\n")
            self.install_status = Status.FAIL
            self.test_status = Status.FAIL
            self._transition(EntityState.INSTALL_FAILED)
            return self

        try:
            self.test()
        except TaskFailedError:
            self.test_status = Status.FAIL
        except Exception as e:
            logger.exception("%s: test did not complete", self)
            self.log = EntityLog(stderr=f"{type(e).__name__}: {e}\n")
            self.test_status = Status.FAIL
        else:
            self.test_status = Status.PASS
        self._transition(EntityState.TESTED)
        return self

    def __str__(self) -> str:
        return str(self._identity)

    def __repr__(self) -> str:
        return f"Entity({self._identity}, state={self.state.value})"
