from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping, Sequence

from .errors import WorkloadError
from .models import Process

logger = logging.getLogger(__name__)

# Column order of a header-less CSV row.
POSITIONAL_FIELDS = ("pid", "burst_time", "arrival_time", "priority")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    CSV files may carry a header row (pid, arrival_time, burst_time,
    priority) or be bare rows of ``pid, burst, arrival[, priority]``.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise WorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info("loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except UnicodeDecodeError as exc:
        raise WorkloadError(f"{path}: not valid UTF-8") from exc
    except json.JSONDecodeError as exc:
        raise WorkloadError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            rows = [row for row in csv.reader(f) if row and any(cell.strip() for cell in row)]
    except UnicodeDecodeError as exc:
        raise WorkloadError(f"{path}: not valid UTF-8") from exc

    if not rows:
        return []

    if _is_header(rows[0]):
        header = [cell.strip() for cell in rows[0]]
        return [_process_from_mapping(dict(zip(header, row))) for row in rows[1:]]

    return [_process_from_row(row) for row in rows]


def _is_header(row: Sequence[str]) -> bool:
    try:
        int(row[0])
    except ValueError:
        return True
    return False


def _process_from_row(row: Sequence[str]) -> Process:
    if len(row) not in (3, 4):
        raise WorkloadError(f"Invalid process row (expected 3 or 4 fields): {row!r}")
    return _process_from_mapping(dict(zip(POSITIONAL_FIELDS, row)))


def _process_from_mapping(mapping: Mapping) -> Process:
    try:
        pid = int(mapping["pid"])
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise WorkloadError(f"Invalid process entry: {mapping!r}") from exc

    priority_val = mapping.get("priority")
    try:
        priority = int(priority_val) if priority_val not in (None, "") else 0
    except (TypeError, ValueError) as exc:
        raise WorkloadError(f"Invalid priority in process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
