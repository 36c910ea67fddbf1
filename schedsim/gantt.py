from __future__ import annotations

from typing import Dict, List, Sequence

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .errors import SchedulingError
from .models import TimeSlice


class GanttRecorder:
    """
    Append-only log of processor occupancy for a single run.
    """

    def __init__(self) -> None:
        self._slices: List[TimeSlice] = []

    def add(self, pid: int, start: int, stop: int) -> TimeSlice:
        if stop <= start:
            raise SchedulingError(f"empty slice for process {pid}: [{start}, {stop})")
        if self._slices and start < self._slices[-1].start:
            raise SchedulingError(
                f"slice for process {pid} starts at {start}, before the previous slice at {self._slices[-1].start}"
            )
        sl = TimeSlice(pid=pid, start=start, stop=stop)
        self._slices.append(sl)
        return sl

    def slices(self) -> List[TimeSlice]:
        return list(self._slices)


def check_timeline(slices: Sequence[TimeSlice]) -> None:
    """
    Raise SchedulingError unless the slices are ordered and never overlap.
    Idle gaps between slices are allowed.
    """
    for prev, cur in zip(slices, slices[1:]):
        if cur.start < prev.stop:
            raise SchedulingError(
                f"slice {cur.pid}@[{cur.start}, {cur.stop}) overlaps {prev.pid}@[{prev.start}, {prev.stop})"
            )


def render_gantt(slices: Sequence[TimeSlice]) -> str:
    """
    Plain-text Gantt trace: one cell per slice, followed by the start ticks
    and the final stop tick.
    """
    lines = ["Gantt schedule"]

    cells = "|"
    for sl in slices:
        pid = str(sl.pid)
        padding = " " * ((8 - len(pid)) // 2)
        cells += f"{padding}{pid}{padding}|"
    lines.append(cells)

    marks = ""
    for i, sl in enumerate(slices):
        marks += f"{sl.start}\t"
        if i == len(slices) - 1:
            marks += str(sl.stop)
    lines.append(marks)

    return "\n".join(lines)


PALETTE = ("red", "green", "yellow", "blue", "magenta", "cyan")


def build_rich_gantt(slices: Sequence[TimeSlice], palette: Sequence[str] = PALETTE) -> Panel:
    """
    Colored Gantt chart, one character per tick.

    Three rows: the occupancy bar, the process ids under each slice and the
    tick at which each slice starts. Idle ticks are drawn as dots.
    """
    if not slices:
        return Panel("No execution", title="Gantt chart")

    styles: Dict[int, str] = {}
    bar = Text()
    labels = Text()
    marks = Text()
    clock = 0

    def mark(tick: int, width: int) -> str:
        label = str(tick)
        return label.ljust(width) if len(label) < width else " " * width

    for sl in slices:
        if sl.start > clock:
            gap = sl.start - clock
            bar.append("." * gap, style="dim")
            labels.append(" " * gap)
            marks.append(mark(clock, gap), style="dim")

        if sl.pid not in styles:
            styles[sl.pid] = f"on {palette[len(styles) % len(palette)]}"
        bar.append(" " * sl.length, style=styles[sl.pid])
        labels.append(str(sl.pid)[: sl.length].ljust(sl.length), style="bold")
        marks.append(mark(sl.start, sl.length))
        clock = sl.stop

    marks.append(str(clock))

    return Panel.fit(Group(bar, labels, marks), title="Gantt chart")
