"""Real clock."""

from datetime import UTC, datetime

from versweep.core.time.abc import Time


class RealTime(Time):
    """Production implementation reading the system clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)
