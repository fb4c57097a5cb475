"""TransitionObservers that report entity progress."""

import logging

import click

from versweep.core.entity import Entity, EntityState, Status, TransitionObserver

logger = logging.getLogger(__name__)


class LoggingObserver(TransitionObserver):
    """Logs every transition at DEBUG with the entity's statuses."""

    def on_transition(self, from_state: EntityState, to_state: EntityState, entity: Entity) -> None:
        logger.debug(
            "%s: %s -> %s (install=%s test=%s)",
            entity,
            from_state.value,
            to_state.value,
            entity.install_status.value if entity.install_status else "-",
            entity.test_status.value if entity.test_status else "-",
        )


class ProgressObserver(TransitionObserver):
    """Echoes one line per finished version to stderr."""

    def on_transition(self, from_state: EntityState, to_state: EntityState, entity: Entity) -> None:
        if to_state == EntityState.TESTED:
            passed = entity.test_status == Status.PASS
            label = click.style("pass", fg="green") if passed else click.style("fail", fg="red")
            click.echo(f"  {label} {entity}", err=True)
        elif to_state == EntityState.INSTALL_FAILED:
            click.echo(f"  {click.style('install failed', fg='red')} {entity}", err=True)
