"""
Text report for a scheduler run: title banner, Gantt trace and schedule table.

The four ``*_schedule`` functions are the engine's public entry points: each
simulates one algorithm over the catalog and writes the report to ``out``.
"""

from __future__ import annotations

from typing import Optional, Sequence, TextIO

from rich import box
from rich.console import Console
from rich.table import Table

from .algorithms import run_algorithm
from .gantt import render_gantt
from .models import Process, ScheduleResult


def _console(out: TextIO) -> Console:
    return Console(file=out, highlight=False, soft_wrap=False, width=100)


def output_title(console: Console, title: str) -> None:
    rule = "-" * (len(title) * 2)
    console.print(rule)
    console.print(" " * (len(title) // 2), title, markup=False)
    console.print(rule)


def output_gantt(console: Console, result: ScheduleResult) -> None:
    console.print(render_gantt(result.timeline), markup=False)
    console.print()


def build_schedule_table(result: ScheduleResult) -> Table:
    summary = result.summary
    footers = [
        "",
        "",
        "",
        "",
        f"Average\n{summary.average_wait:.2f}",
        f"Average\n{summary.average_turnaround:.2f}",
        f"Throughput\n{summary.throughput:.2f}/t",
    ]

    headers = ["ID", "Priority", "Burst", "Arrival", "Wait", "Turnaround", "Exit"]

    table = Table(box=box.ASCII, show_footer=True)
    for h, footer in zip(headers, footers):
        table.add_column(h, footer=footer, justify="center" if h == "ID" else "right")

    for r in result.rows:
        table.add_row(
            str(r.pid),
            str(r.priority),
            str(r.burst_time),
            str(r.arrival_time),
            str(r.waiting_time),
            str(r.turnaround_time),
            str(r.completion_time),
        )
    return table


def output_schedule(console: Console, result: ScheduleResult) -> None:
    console.print("Schedule table")
    console.print(build_schedule_table(result))


def write_report(out: TextIO, result: ScheduleResult, title: Optional[str] = None) -> None:
    console = _console(out)
    output_title(console, title or result.algorithm)
    output_gantt(console, result)
    output_schedule(console, result)


def _simulate_and_report(
    name: str,
    out: TextIO,
    title: Optional[str],
    processes: Sequence[Process],
    quantum: Optional[int] = None,
) -> ScheduleResult:
    result = run_algorithm(name, processes, quantum=quantum)
    write_report(out, result, title)
    return result


def fcfs_schedule(out: TextIO, title: Optional[str], processes: Sequence[Process]) -> ScheduleResult:
    return _simulate_and_report("fcfs", out, title, processes)


def sjf_schedule(out: TextIO, title: Optional[str], processes: Sequence[Process]) -> ScheduleResult:
    return _simulate_and_report("sjf", out, title, processes)


def priority_schedule(out: TextIO, title: Optional[str], processes: Sequence[Process]) -> ScheduleResult:
    return _simulate_and_report("priority", out, title, processes)


def rr_schedule(
    out: TextIO,
    title: Optional[str],
    processes: Sequence[Process],
    quantum: Optional[int] = None,
) -> ScheduleResult:
    return _simulate_and_report("rr", out, title, processes, quantum=quantum)
