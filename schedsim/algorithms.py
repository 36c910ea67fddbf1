from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .errors import EmptyScheduleError, InvalidProcessError
from .gantt import GanttRecorder
from .metrics import MetricsAccumulator
from .models import Process, ScheduleResult

logger = logging.getLogger(__name__)

QUANTUM = 4

TITLES = {
    "fcfs": "First-come, first-serve",
    "sjf": "Shortest-job-first",
    "priority": "Priority",
    "rr": "Round-robin",
}


def validate_catalog(processes: Sequence[Process]) -> None:
    """
    Check the preconditions every scheduler relies on.

    An empty catalog is rejected outright rather than producing all-zero
    metrics.
    """
    if not processes:
        raise EmptyScheduleError()

    seen: set[int] = set()
    for p in processes:
        if p.burst_time <= 0:
            raise InvalidProcessError(f"process {p.pid} has non-positive burst duration {p.burst_time}")
        if p.arrival_time < 0:
            raise InvalidProcessError(f"process {p.pid} has negative arrival time {p.arrival_time}")
        if p.pid in seen:
            raise InvalidProcessError(f"duplicate process id {p.pid}")
        seen.add(p.pid)


def _finish(
    name: str,
    quantum: Optional[int],
    metrics: MetricsAccumulator,
    gantt: GanttRecorder,
) -> ScheduleResult:
    return ScheduleResult(
        algorithm=TITLES[name],
        quantum=quantum,
        rows=metrics.rows(),
        timeline=gantt.slices(),
        summary=metrics.summary(),
    )


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive).

    Catalog order is execution order; callers wanting arrival order must sort
    beforehand.
    """
    validate_catalog(processes)

    metrics = MetricsAccumulator(processes)
    gantt = GanttRecorder()
    service_time = 0

    for i, p in enumerate(processes):
        start = max(service_time, p.arrival_time)
        if start > service_time:
            logger.debug("FCFS: processor idle from %d to %d", service_time, start)

        service_time = start + p.burst_time
        gantt.add(p.pid, start, service_time)
        metrics.record(i, service_time)

    return _finish("fcfs", None, metrics, gantt)


SelectKey = Callable[[Process, int], Tuple[int, ...]]


def _simulate_by_tick(processes: Sequence[Process], key: SelectKey) -> Tuple[MetricsAccumulator, GanttRecorder]:
    """
    Re-evaluate the running process every tick.

    Among arrived processes with work left, the one with the smallest
    ``key(process, remaining)`` runs for the tick; equal keys go to the
    lowest catalog index.
    """
    remaining: List[int] = [p.burst_time for p in processes]
    metrics = MetricsAccumulator(processes)
    gantt = GanttRecorder()

    running: Optional[int] = None
    slice_start = 0
    horizon = max(p.arrival_time for p in processes) + sum(remaining)

    for tick in range(horizon):
        if metrics.completed == len(processes):
            break

        chosen: Optional[int] = None
        best: Optional[Tuple[int, ...]] = None
        for j, p in enumerate(processes):
            if p.arrival_time > tick or remaining[j] == 0:
                continue
            candidate = key(p, remaining[j])
            if best is None or candidate < best:
                chosen, best = j, candidate

        if chosen != running:
            if running is not None:
                logger.debug(
                    "tick %d: process %d preempted by %s",
                    tick,
                    processes[running].pid,
                    "idle" if chosen is None else processes[chosen].pid,
                )
                gantt.add(processes[running].pid, slice_start, tick)
            running = chosen
            slice_start = tick

        if chosen is None:
            continue

        remaining[chosen] -= 1
        if remaining[chosen] == 0:
            p = processes[chosen]
            logger.debug("tick %d: process %d completed", tick + 1, p.pid)
            gantt.add(p.pid, slice_start, tick + 1)
            metrics.record(chosen, tick + 1)
            running = None

    return metrics, gantt


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First, decided tick by tick on remaining burst.

    A shorter job that arrives mid-run takes over at the next tick boundary.
    """
    validate_catalog(processes)
    metrics, gantt = _simulate_by_tick(processes, lambda p, left: (left,))
    return _finish("sjf", None, metrics, gantt)


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Preemptive priority scheduling.

    Lower numeric priority runs first; equal priorities fall back to the
    shorter remaining burst.
    """
    validate_catalog(processes)
    metrics, gantt = _simulate_by_tick(processes, lambda p, left: (p.priority, left))
    return _finish("priority", None, metrics, gantt)


def _next_with_work(remaining: List[int], current: int) -> int:
    n = len(remaining)
    for step in range(1, n + 1):
        candidate = (current + step) % n
        if remaining[candidate] > 0:
            return candidate
    raise RuntimeError("round robin cursor found no process with remaining work")


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin over the catalog with a fixed time quantum.

    The cursor walks the catalog circularly and only skips processes that
    have finished. It does not look at arrival times, so a process that has
    not arrived yet can be dispatched; that case is logged as a warning.
    """
    if quantum is None:
        quantum = QUANTUM
    if quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")

    validate_catalog(processes)

    remaining: List[int] = [p.burst_time for p in processes]
    metrics = MetricsAccumulator(processes)
    gantt = GanttRecorder()

    current = 0
    ticks_on_current = 0
    slice_start = 0

    for tick in range(sum(remaining)):
        previous = current

        if ticks_on_current == quantum or remaining[current] == 0:
            current = _next_with_work(remaining, current)
            ticks_on_current = 0

        if current != previous:
            if remaining[previous] > 0:
                # a switch away from unfinished work only happens at a quantum boundary
                logger.debug("tick %d: quantum expired for process %d", tick, processes[previous].pid)
                gantt.add(processes[previous].pid, tick - quantum, tick)
            slice_start = tick

        p = processes[current]
        if p.arrival_time > tick:
            logger.warning(
                "Round Robin dispatched process %d at tick %d before its arrival at %d",
                p.pid,
                tick,
                p.arrival_time,
            )

        remaining[current] -= 1
        ticks_on_current += 1

        if remaining[current] == 0:
            logger.debug("tick %d: process %d completed", tick + 1, p.pid)
            gantt.add(p.pid, slice_start, tick + 1)
            metrics.record(current, tick + 1)

    return _finish("rr", quantum, metrics, gantt)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
}


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum only matters for round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)
