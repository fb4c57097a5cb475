"""Fake Time implementation for testing.

FakeTime hands out a scripted sequence of instants so elapsed times and
summary file names are deterministic.
"""

from collections.abc import Sequence
from datetime import UTC, datetime

from versweep.core.time.abc import Time

DEFAULT_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)


class FakeTime(Time):
    """Fake clock.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, instants: Sequence[datetime] = (DEFAULT_NOW,)) -> None:
        """Create FakeTime.

        Args:
            instants: Returned by successive now() calls; the last one repeats
        """
        self._instants = list(instants)
        self._calls = 0

    def now(self) -> datetime:
        index = min(self._calls, len(self._instants) - 1)
        self._calls += 1
        return self._instants[index]
