"""
Execution units and pulses for the pulse scheduler.

A unit pairs one dataset item with its original position; the position is the
only way to put results back in order after unordered completion.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Iterable, List, Optional, Sequence, TypeVar

from ..errors import InvalidConfigError, UnitFailureError

T = TypeVar("T")


@dataclass(frozen=True)
class ExecutionUnit(Generic[T]):
    """One dataset item and its index"""
    id: int
    input: T


class UnitStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class UnitResult:
    """Outcome of one unit, stored at its dataset index"""
    id: int
    status: UnitStatus
    value: Any = None
    error: Optional[BaseException] = None  # Set for FAILED units

    @property
    def ok(self) -> bool:
        return self.status is UnitStatus.SUCCEEDED

    def unwrap(self) -> Any:
        """Return the value, or raise UnitFailureError for failed/cancelled units"""
        if not self.ok:
            raise UnitFailureError([self]) from self.error
        return self.value


def make_units(dataset: Iterable[T]) -> List[ExecutionUnit[T]]:
    return [ExecutionUnit(i, item) for i, item in enumerate(dataset)]


def split_pulses(units: Sequence[ExecutionUnit], pulse_size: int) -> List[List[ExecutionUnit]]:
    """
    Split units into sequential, non-overlapping pulses.

    Examples:
        >>> [[u.id for u in p] for p in split_pulses(make_units("abcde"), 2)]
        [[0, 1], [2, 3], [4]]
    """
    if pulse_size <= 0:
        raise InvalidConfigError(f"pulse_size must be positive, got {pulse_size}")
    return [list(units[i:i + pulse_size]) for i in range(0, len(units), pulse_size)]
