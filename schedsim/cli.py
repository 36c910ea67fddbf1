from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, QUANTUM, run_algorithm
from .config import DEFAULT_ALGORITHMS, LOG_LEVELS, SimulationConfig
from .errors import SchedulingError
from .gantt import build_rich_gantt
from .metrics import summarize_rows
from .models import Process, ScheduleResult
from .report import write_report
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="Single-processor CPU scheduling simulator (FCFS, SJF, Priority, RR).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Simulate a workload and print one report per algorithm.")
    run_parser.add_argument("workload", help="Path to CSV or JSON workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        dest="algorithms",
        action="append",
        choices=list(ALGORITHMS),
        help="Algorithm to run; repeat for several (default: fcfs sjf priority rr).",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=QUANTUM,
        help=f"Time quantum for round-robin (default: {QUANTUM}).",
    )
    run_parser.add_argument(
        "--chart",
        action="store_true",
        help="Also draw a colored Gantt chart for each run.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run several algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument("workload", help="Path to CSV or JSON workload file.")
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=list(DEFAULT_ALGORITHMS),
        help="Algorithms to compare (default: fcfs sjf priority rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=QUANTUM,
        help=f"Time quantum used for RR when included (default: {QUANTUM}).",
    )

    return parser


def _run_reports(config: SimulationConfig, processes: List[Process], console: Console) -> None:
    for alg in config.algorithms:
        q = config.quantum if alg == "rr" else None
        result = run_algorithm(alg, processes, quantum=q)
        write_report(console.file, result)
        if config.chart:
            console.print(build_rich_gantt(result.timeline))
        console.print()


def build_comparison_table(results: Sequence[ScheduleResult], title: str) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Algorithm")
    table.add_column("Quantum", justify="right")
    table.add_column("Avg waiting", justify="right")
    table.add_column("Avg turnaround", justify="right")
    table.add_column("Throughput", justify="right")

    for result in results:
        summary = summarize_rows(result.rows)
        table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary.average_wait:.2f}",
            f"{summary.average_turnaround:.2f}",
            f"{summary.throughput:.3f}",
        )
    return table


def _run_compare(config: SimulationConfig, processes: List[Process], workload_path: Path, console: Console) -> None:
    results = [
        run_algorithm(alg, processes, quantum=config.quantum if alg == "rr" else None)
        for alg in config.algorithms
    ]
    console.print(build_comparison_table(results, f"Algorithm comparison: {workload_path}"))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    err_console = Console(stderr=True)

    try:
        config = SimulationConfig.from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    workload_path = Path(args.workload)
    try:
        processes = load_workload(workload_path)
        if args.command == "run":
            _run_reports(config, processes, console)
        elif args.command == "compare":
            _run_compare(config, processes, workload_path, console)
        else:
            parser.error(f"Unknown command: {args.command}")
    except (SchedulingError, OSError) as exc:
        logger.debug("run failed", exc_info=True)
        err_console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
