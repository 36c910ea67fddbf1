from __future__ import annotations


class SchedulingError(Exception):
    """Base class for errors raised by the simulator."""


class EmptyScheduleError(SchedulingError, ValueError):
    """Raised when a scheduler is handed an empty process catalog."""

    def __init__(self, message: str = "empty schedule: no processes to run") -> None:
        super().__init__(message)


class InvalidProcessError(SchedulingError, ValueError):
    """Raised when a process record breaks the engine's preconditions."""


class WorkloadError(SchedulingError, ValueError):
    """Raised when a workload file cannot be turned into processes."""
