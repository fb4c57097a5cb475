from versweep.core.time.abc import Time
from versweep.core.time.real import RealTime

__all__ = ["RealTime", "Time"]
