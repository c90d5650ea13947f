"""
Pulse scheduler - bounded-concurrency batch execution.

Maps a function over a dataset in fixed-size sequential pulses:

    dataset ──► units (id, input) ──► pulse 1 ──barrier──► pulse 2 ──barrier──► ... ──► results

Within a pulse at most max_concurrency units are active at once. When the
ceiling is reached, admission waits until one in-flight unit finishes (one
completion admits exactly one new unit). A pulse starts only after every unit
of the previous pulse has completed.

Results are stored at each unit's dataset index, so the output order equals the
input order whatever the completion order was. A unit whose function raises is
recorded as FAILED; sibling units and later pulses keep running.

State machine:
    IDLE → PULSE_RUNNING → PULSE_BARRIER → (PULSE_RUNNING | DONE)
"""

import asyncio
import functools
import inspect
import logging
import time
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional

from ..config import PulseConfig
from ..errors import InvalidConfigError, MalformedInputError, UnitFailureError
from .units import ExecutionUnit, UnitResult, UnitStatus, make_units, split_pulses

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    PULSE_RUNNING = "pulse-running"
    PULSE_BARRIER = "pulse-barrier"
    DONE = "done"


def _is_async_callable(fn: Any) -> bool:
    while isinstance(fn, functools.partial):
        fn = fn.func
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    )


def _cancelled(cancel_event: Optional[asyncio.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()


class PulseScheduler:
    """
    Bounded-concurrency executor.

    The only state shared between concurrently running units is active_count,
    guarded by an asyncio.Condition. A scheduler runs one dataset at a time;
    create separate instances for independent concurrent runs.

    Example:
        >>> scheduler = PulseScheduler(PulseConfig(pulse_size=2, max_concurrency=1))
        >>> scheduler.run_values_sync([1, 2, 3, 4, 5], lambda x: x * 2)
        [2, 4, 6, 8, 10]
    """

    def __init__(self, config: Optional[PulseConfig] = None):
        if config is None:
            config = PulseConfig()
        elif not isinstance(config, PulseConfig):
            raise InvalidConfigError(
                f"PulseScheduler expects a PulseConfig, got {type(config).__name__}"
            )
        self.config = config
        self.state = SchedulerState.IDLE
        self.active_count = 0
        self.peak_active = 0
        self._condition: Optional[asyncio.Condition] = None

    @property
    def pulse_size(self) -> int:
        return self.config.pulse_size

    @property
    def max_concurrency(self) -> int:
        return self.config.max_concurrency

    async def run(
        self,
        dataset: Iterable[Any],
        fn: Callable[[Any], Any],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[UnitResult]:
        """
        Apply fn to every dataset item under the pulse/concurrency limits.

        Args:
            dataset: Items to process
            fn: Per-item function; coroutine functions are awaited, plain
                callables run in a worker thread (asyncio.to_thread) and an
                awaitable they return is awaited
            cancel_event: Optional event checked at every admission point and
                unit boundary; once set, units not yet started are CANCELLED

        Returns:
            UnitResult per item, index-aligned with dataset
        """
        if not callable(fn):
            raise MalformedInputError(f"fn must be callable, got {type(fn).__name__}")
        if self.state in (SchedulerState.PULSE_RUNNING, SchedulerState.PULSE_BARRIER):
            raise RuntimeError("PulseScheduler is already running; use a separate instance")

        units = make_units(dataset)
        pulses = split_pulses(units, self.pulse_size)
        results: List[Optional[UnitResult]] = [None] * len(units)
        is_async = _is_async_callable(fn)

        self.active_count = 0
        self.peak_active = 0
        self._condition = asyncio.Condition()

        logger.info(
            f"Pulse run: {len(units)} units in {len(pulses)} pulses "
            f"(pulse_size={self.pulse_size}, max_concurrency={self.max_concurrency})"
        )
        start_time = time.time()

        try:
            for number, pulse in enumerate(pulses, start=1):
                self.state = SchedulerState.PULSE_RUNNING
                logger.debug(f"Pulse {number}/{len(pulses)} START ({len(pulse)} units)")
                await self._execute_pulse(pulse, fn, is_async, results, cancel_event)
                logger.debug(f"Pulse {number}/{len(pulses)} DONE")
        except BaseException:
            self.state = SchedulerState.IDLE
            raise

        self.state = SchedulerState.DONE

        failed = sum(1 for r in results if r.status is UnitStatus.FAILED)
        cancelled = sum(1 for r in results if r.status is UnitStatus.CANCELLED)
        logger.info(
            f"Pulse run complete in {time.time() - start_time:.2f}s: "
            f"{len(units) - failed - cancelled} succeeded, {failed} failed, "
            f"{cancelled} cancelled (peak concurrency {self.peak_active})"
        )
        return results

    async def _execute_pulse(
        self,
        pulse: List[ExecutionUnit],
        fn: Callable[[Any], Any],
        is_async: bool,
        results: List[Optional[UnitResult]],
        cancel_event: Optional[asyncio.Event],
    ) -> None:
        inflight: List[asyncio.Task] = []
        try:
            for unit in pulse:
                if not await self._admit(cancel_event):
                    results[unit.id] = UnitResult(unit.id, UnitStatus.CANCELLED)
                    continue
                inflight.append(asyncio.create_task(
                    self._run_unit(unit, fn, is_async, results, cancel_event)
                ))

            # Barrier: the next pulse waits for every unit of this one
            self.state = SchedulerState.PULSE_BARRIER
            await asyncio.gather(*inflight)
        except BaseException:
            for task in inflight:
                task.cancel()
            await asyncio.gather(*inflight, return_exceptions=True)
            raise

    async def _admit(self, cancel_event: Optional[asyncio.Event]) -> bool:
        """Wait for a free slot and claim it; False if the run was cancelled"""
        async with self._condition:
            await self._condition.wait_for(
                lambda: self.active_count < self.max_concurrency or _cancelled(cancel_event)
            )
            if _cancelled(cancel_event):
                return False
            self.active_count += 1
            self.peak_active = max(self.peak_active, self.active_count)
            return True

    async def _release(self) -> None:
        async with self._condition:
            self.active_count -= 1
            self._condition.notify(1)

    async def _run_unit(
        self,
        unit: ExecutionUnit,
        fn: Callable[[Any], Any],
        is_async: bool,
        results: List[Optional[UnitResult]],
        cancel_event: Optional[asyncio.Event],
    ) -> None:
        try:
            if _cancelled(cancel_event):
                results[unit.id] = UnitResult(unit.id, UnitStatus.CANCELLED)
                return
            try:
                if is_async:
                    value = await fn(unit.input)
                else:
                    # Run sync work in thread pool to avoid blocking event loop
                    value = await asyncio.to_thread(fn, unit.input)
                    # Plain callables may hand back a coroutine (lambda x: fetch(x))
                    if inspect.isawaitable(value):
                        value = await value
            except Exception as e:
                logger.warning(f"Unit {unit.id} failed: {e!r}")
                results[unit.id] = UnitResult(unit.id, UnitStatus.FAILED, error=e)
            else:
                results[unit.id] = UnitResult(unit.id, UnitStatus.SUCCEEDED, value=value)
        finally:
            # Decrement on every path (success, failure, cancellation)
            await self._release()

    async def run_values(
        self,
        dataset: Iterable[Any],
        fn: Callable[[Any], Any],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[Any]:
        """
        Like run(), but return plain values in dataset order.

        Raises:
            UnitFailureError: after the whole run, if any unit failed or was cancelled
        """
        results = await self.run(dataset, fn, cancel_event=cancel_event)
        failures = [r for r in results if not r.ok]
        if failures:
            raise UnitFailureError(failures)
        return [r.value for r in results]

    def run_sync(self, dataset: Iterable[Any], fn: Callable[[Any], Any]) -> List[UnitResult]:
        """Blocking wrapper around run() for callers without an event loop"""
        return asyncio.run(self.run(dataset, fn))

    def run_values_sync(self, dataset: Iterable[Any], fn: Callable[[Any], Any]) -> List[Any]:
        return asyncio.run(self.run_values(dataset, fn))
