"""
Pulse scheduler: bounded-concurrency batch execution.

Usage:
    from plex.pulse import PulseScheduler
    from plex.config import PulseConfig

    scheduler = PulseScheduler(PulseConfig(pulse_size=32, max_concurrency=8))
    results = await scheduler.run(items, fn)      # List[UnitResult]
    values = await scheduler.run_values(items, fn)  # List[R], raises UnitFailureError
"""

from .units import ExecutionUnit, UnitResult, UnitStatus, make_units, split_pulses
from .scheduler import PulseScheduler, SchedulerState

__all__ = [
    "ExecutionUnit",
    "UnitResult",
    "UnitStatus",
    "make_units",
    "split_pulses",
    "PulseScheduler",
    "SchedulerState",
]
