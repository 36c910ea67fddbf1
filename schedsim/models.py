from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass
class TimeSlice:
    """
    One contiguous stretch of processor occupancy, half-open [start, stop).
    """

    pid: int
    start: int
    stop: int

    @property
    def length(self) -> int:
        return self.stop - self.start


@dataclass
class ScheduleRow:
    pid: int
    priority: int
    burst_time: int
    arrival_time: int
    waiting_time: int
    turnaround_time: int
    completion_time: int


@dataclass
class RunSummary:
    average_wait: float
    average_turnaround: float
    throughput: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    summary: RunSummary
    rows: List[ScheduleRow] = field(default_factory=list)
    timeline: List[TimeSlice] = field(default_factory=list)
