from __future__ import annotations

from typing import Dict, List, Sequence

from .errors import EmptyScheduleError, SchedulingError
from .models import Process, RunSummary, ScheduleRow


class MetricsAccumulator:
    """
    Running totals and per-process result rows for one scheduler run.

    Rows are keyed by catalog index so they can be handed back in catalog
    order regardless of the order in which processes complete.
    """

    def __init__(self, processes: Sequence[Process]) -> None:
        self._processes = processes
        self._rows: Dict[int, ScheduleRow] = {}
        self.total_wait = 0
        self.total_turnaround = 0
        self.last_completion = 0

    def record(self, index: int, completion: int) -> ScheduleRow:
        """
        Finalize the row for ``processes[index]`` which completed at tick
        ``completion``.
        """
        if index in self._rows:
            raise SchedulingError(f"process {self._processes[index].pid} completed twice")

        p = self._processes[index]
        turnaround_time = completion - p.arrival_time
        waiting_time = turnaround_time - p.burst_time

        row = ScheduleRow(
            pid=p.pid,
            priority=p.priority,
            burst_time=p.burst_time,
            arrival_time=p.arrival_time,
            waiting_time=waiting_time,
            turnaround_time=turnaround_time,
            completion_time=completion,
        )
        self._rows[index] = row

        self.total_wait += waiting_time
        self.total_turnaround += turnaround_time
        self.last_completion = max(self.last_completion, completion)
        return row

    @property
    def completed(self) -> int:
        return len(self._rows)

    def rows(self) -> List[ScheduleRow]:
        missing = [p.pid for i, p in enumerate(self._processes) if i not in self._rows]
        if missing:
            raise SchedulingError(f"processes never completed: {missing}")
        return [self._rows[i] for i in range(len(self._processes))]

    def summary(self) -> RunSummary:
        n = len(self._processes)
        if n == 0:
            raise EmptyScheduleError()
        return RunSummary(
            average_wait=self.total_wait / n,
            average_turnaround=self.total_turnaround / n,
            throughput=n / self.last_completion,
        )


def summarize_rows(rows: List[ScheduleRow]) -> RunSummary:
    """
    Recompute a run summary from finished rows, as the comparison table does
    for each algorithm it lists.
    """
    if not rows:
        raise EmptyScheduleError()

    n = len(rows)
    last_completion = max(r.completion_time for r in rows)
    return RunSummary(
        average_wait=sum(r.waiting_time for r in rows) / n,
        average_turnaround=sum(r.turnaround_time for r in rows) / n,
        throughput=n / last_completion,
    )
