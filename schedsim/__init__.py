"""
schedsim package.

Simulates single-processor CPU scheduling (FCFS, SJF, Priority, Round-Robin)
over a fixed batch of processes and reports per-process timing metrics along
with a Gantt trace of processor occupancy.
"""

__all__ = ["algorithms", "cli", "report"]
