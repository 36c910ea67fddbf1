from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Tuple

from .algorithms import ALGORITHMS, QUANTUM

DEFAULT_ALGORITHMS: Tuple[str, ...] = ("fcfs", "sjf", "priority", "rr")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class SimulationConfig:
    quantum: int = QUANTUM
    algorithms: Tuple[str, ...] = DEFAULT_ALGORITHMS
    chart: bool = False
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.quantum <= 0:
            raise ValueError(f"quantum must be positive, got {self.quantum}")
        unknown = [a for a in self.algorithms if a not in ALGORITHMS]
        if unknown:
            raise ValueError(f"Unknown algorithm(s): {', '.join(unknown)}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{self.log_level}'")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "SimulationConfig":
        algorithms = tuple(a.lower() for a in (getattr(args, "algorithms", None) or DEFAULT_ALGORITHMS))
        return cls(
            quantum=args.quantum,
            algorithms=algorithms,
            chart=getattr(args, "chart", False),
            log_level=args.log_level.upper(),
        )
