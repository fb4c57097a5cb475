"""Version Matrix Sequencer.

Walks one dependency's published versions, runs install_and_test() for each
candidate strictly one at a time against the shared install location, then
puts the location back the way it was found.
"""

import logging
from collections.abc import Callable, Sequence

from versweep.core.entity import Entity, Status, TransitionObserver
from versweep.core.errors import InstallError
from versweep.core.host import is_builtin, runtime_version
from versweep.core.identity import PackageIdentity
from versweep.core.location import InstallLocation
from versweep.core.version_spec import VersionSpec
from versweep.core.versions.abc import VersionDiscovery

logger = logging.getLogger(__name__)

EntityMapper = Callable[[Entity], Entity]


class MatrixSequencer:
    """Runs the version matrix for each VersionSpec.

    Args:
        location: Shared install location; reserved per dependency name
        discovery: Source of published versions
        observers: Attached to every entity created, in order
        entity_mapper: Optional hook applied to each candidate entity before
            the run (used to substitute or decorate entities)
    """

    def __init__(
        self,
        location: InstallLocation,
        discovery: VersionDiscovery,
        *,
        observers: Sequence[TransitionObserver] = (),
        entity_mapper: EntityMapper | None = None,
    ) -> None:
        self._location = location
        self._discovery = discovery
        self._observers = list(observers)
        self._entity_mapper = entity_mapper

    def run_suite(self, specs: Sequence[VersionSpec]) -> list[VersionSpec]:
        """Run every spec's matrix, one dependency after another."""
        return [self.run_spec(spec) for spec in specs]

    def run_spec(self, spec: VersionSpec) -> VersionSpec:
        """Run one dependency's matrix and return the spec with its results.

        Never raises for failures inside the matrix: mapping and test errors are
        logged and whatever results exist are returned. Restoring the previous
        install state is attempted regardless of how the run ended.

        Raises:
            InstallLocationBusyError: If another matrix holds this dependency name
        """
        if is_builtin(spec.name):
            entity = self._new_entity(spec, runtime_version(), skip=False, builtin=True)
            return spec.with_results([entity.install_and_test()])

        with self._location.reserve(spec.name):
            previous = self._snapshot(spec)
            entities: list[Entity] = []
            try:
                entities = self._map_versions(spec)
                for entity in entities:
                    entity.install_and_test()
            except Exception:
                logger.exception("%s: version matrix aborted", spec.name)
            finally:
                self._restore(spec.name, previous, entities)

        return spec.with_results(entities)

    def _snapshot(self, spec: VersionSpec) -> Entity | None:
        """Entity for whatever version is installed now, carrying its dependencies."""
        current = self._location.installed(spec.name)
        if current is None:
            logger.info("%s: no previous version installed", spec.name)
            return None

        logger.info("found %s already installed", current)
        dependencies: list[PackageIdentity] = []
        for name in spec.dependency_names():
            installed = self._location.installed(name)
            if installed is None:
                logger.info("%s: no previous version installed", name)
                continue
            logger.info("found %s already installed", installed)
            dependencies.append(installed)

        return Entity(current, None, self._location, dependencies=dependencies, builtin=False)

    def _map_versions(self, spec: VersionSpec) -> list[Entity]:
        entities: list[Entity] = []
        for version in self._discovery.list_versions(spec.name):
            match = spec.match(version)
            entity = self._new_entity(
                spec, version, skip=match.skip, builtin=False, dependencies=match.dependencies
            )
            if self._entity_mapper is not None:
                entity = self._entity_mapper(entity)
            entities.append(entity)
        return entities

    def _new_entity(
        self,
        spec: VersionSpec,
        version: str,
        *,
        skip: bool,
        builtin: bool,
        dependencies: Sequence[PackageIdentity] = (),
    ) -> Entity:
        entity = Entity(
            PackageIdentity(name=spec.name, version=version),
            spec.task,
            self._location,
            dependencies=dependencies,
            builtin=builtin,
            skip=skip,
        )
        for observer in self._observers:
            entity.subscribe(observer)
        return entity

    def _restore(self, name: str, previous: Entity | None, entities: Sequence[Entity]) -> None:
        """Reinstall the previous version, or remove the last tested candidate."""
        if previous is not None:
            logger.info("restoring %s", previous)
            try:
                previous.install()
            except InstallError:
                logger.warning("failed to restore initial state: %s", previous, exc_info=True)
            return

        tested = [e for e in entities if not e.skip]
        if not tested:
            return
        last = tested[-1]
        logger.info("uninstalling %s", last)
        last.uninstall()
        if last.uninstall_status == Status.FAIL:
            logger.warning("failed to restore initial state: could not uninstall %s", name)
