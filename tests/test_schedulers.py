import logging

import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    run_algorithm,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from schedsim.errors import EmptyScheduleError, InvalidProcessError
from schedsim.gantt import check_timeline
from schedsim.models import Process


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=5, priority=2),
        Process(2, arrival_time=1, burst_time=3, priority=1),
        Process(3, arrival_time=2, burst_time=8, priority=3),
    ]


def _srtf_procs():
    # (id, burst, arrival)
    return [
        Process(1, arrival_time=0, burst_time=7),
        Process(2, arrival_time=2, burst_time=4),
        Process(3, arrival_time=4, burst_time=1),
        Process(4, arrival_time=5, burst_time=4),
    ]


def _rr_procs():
    return [
        Process(1, arrival_time=0, burst_time=24),
        Process(2, arrival_time=0, burst_time=3),
        Process(3, arrival_time=0, burst_time=3),
    ]


def _trace(result):
    return [(s.pid, s.start, s.stop) for s in result.timeline]


def test_fcfs_two_processes():
    res = schedule_fcfs([Process(1, arrival_time=0, burst_time=5), Process(2, arrival_time=5, burst_time=3)])
    assert [r.waiting_time for r in res.rows] == [0, 0]
    assert [r.turnaround_time for r in res.rows] == [5, 3]
    assert [r.completion_time for r in res.rows] == [5, 8]
    assert _trace(res) == [(1, 0, 5), (2, 5, 8)]


def test_fcfs_order():
    res = schedule_fcfs(_procs())
    assert [s.pid for s in res.timeline] == [1, 2, 3]
    assert [r.waiting_time for r in res.rows] == [0, 4, 6]
    assert res.quantum is None


def test_fcfs_runs_in_catalog_order():
    res = schedule_fcfs([Process(1, arrival_time=4, burst_time=3), Process(2, arrival_time=0, burst_time=2)])
    assert _trace(res) == [(1, 4, 7), (2, 7, 9)]
    assert [r.waiting_time for r in res.rows] == [0, 7]


def test_fcfs_idle_gap():
    res = schedule_fcfs([Process(1, arrival_time=2, burst_time=3), Process(2, arrival_time=10, burst_time=1)])
    assert _trace(res) == [(1, 2, 5), (2, 10, 11)]
    assert [r.waiting_time for r in res.rows] == [0, 0]
    assert res.summary.throughput == pytest.approx(2 / 11)


def test_sjf_textbook_trace():
    res = schedule_sjf(_srtf_procs())
    assert [r.waiting_time for r in res.rows] == [9, 1, 0, 2]
    assert [r.completion_time for r in res.rows] == [16, 7, 5, 11]
    assert _trace(res) == [
        (1, 0, 2),
        (2, 2, 4),
        (3, 4, 5),
        (2, 5, 7),
        (4, 7, 11),
        (1, 11, 16),
    ]
    assert res.summary.average_wait == pytest.approx(3.0)
    assert res.summary.average_turnaround == pytest.approx(7.0)
    assert res.summary.throughput == pytest.approx(4 / 16)


def test_sjf_ties_go_to_catalog_order():
    res = schedule_sjf([Process(7, arrival_time=0, burst_time=3), Process(3, arrival_time=0, burst_time=3)])
    assert _trace(res) == [(7, 0, 3), (3, 3, 6)]


def test_sjf_repeated_preemption_keeps_true_wait():
    procs = [
        Process(1, arrival_time=0, burst_time=10),
        Process(2, arrival_time=1, burst_time=1),
        Process(3, arrival_time=3, burst_time=1),
        Process(4, arrival_time=5, burst_time=1),
    ]
    res = schedule_sjf(procs)
    assert _trace(res) == [
        (1, 0, 1),
        (2, 1, 2),
        (1, 2, 3),
        (3, 3, 4),
        (1, 4, 5),
        (4, 5, 6),
        (1, 6, 13),
    ]
    assert [r.waiting_time for r in res.rows] == [3, 0, 0, 0]


def test_sjf_late_first_arrival_idles():
    res = schedule_sjf([Process(1, arrival_time=3, burst_time=2), Process(2, arrival_time=4, burst_time=1)])
    assert _trace(res) == [(1, 3, 5), (2, 5, 6)]
    assert [r.waiting_time for r in res.rows] == [0, 1]


def test_priority_tie_breaks_on_shorter_burst():
    res = schedule_priority(
        [
            Process(1, arrival_time=0, burst_time=5, priority=1),
            Process(2, arrival_time=0, burst_time=2, priority=1),
        ]
    )
    assert _trace(res) == [(2, 0, 2), (1, 2, 7)]
    assert [r.waiting_time for r in res.rows] == [2, 0]


def test_priority_preempts_on_arrival():
    res = schedule_priority(
        [
            Process(1, arrival_time=0, burst_time=4, priority=3),
            Process(2, arrival_time=1, burst_time=2, priority=1),
        ]
    )
    assert _trace(res) == [(1, 0, 1), (2, 1, 3), (1, 3, 6)]
    assert [r.waiting_time for r in res.rows] == [2, 0]


def test_priority_static():
    res = schedule_priority(_procs())
    # P2 has highest priority (1) and takes over as soon as it arrives
    assert _trace(res) == [(1, 0, 1), (2, 1, 4), (1, 4, 8), (3, 8, 16)]


def test_rr_textbook_average_wait():
    res = schedule_rr(_rr_procs(), quantum=4)
    assert [r.waiting_time for r in res.rows] == [6, 4, 7]
    assert res.summary.average_wait == pytest.approx(17 / 3)
    assert _trace(res) == [(1, 0, 4), (2, 4, 7), (3, 7, 10), (1, 10, 30)]
    assert res.quantum == 4


def test_rr_defaults_to_quantum_four():
    res = schedule_rr(_rr_procs())
    assert res.quantum == 4
    assert res.summary.average_wait == pytest.approx(17 / 3)


def test_rr_quantum_2():
    res = schedule_rr(_procs(), quantum=2)
    assert {s.pid for s in res.timeline} == {1, 2, 3}
    assert sum(s.length for s in res.timeline) == sum(p.burst_time for p in _procs())


def test_rr_rejects_bad_quantum():
    with pytest.raises(ValueError):
        schedule_rr(_procs(), quantum=0)


def test_rr_warns_on_dispatch_before_arrival(caplog):
    procs = [Process(1, arrival_time=0, burst_time=1), Process(2, arrival_time=5, burst_time=2)]
    with caplog.at_level(logging.WARNING, logger="schedsim.algorithms"):
        res = schedule_rr(procs)
    assert "before its arrival" in caplog.text
    assert _trace(res) == [(1, 0, 1), (2, 1, 3)]
    late = res.rows[1]
    assert late.completion_time == 3
    assert late.turnaround_time == -2
    assert late.waiting_time == -4


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
@pytest.mark.parametrize("procs", [_procs(), _srtf_procs(), _rr_procs()])
def test_row_invariants(name, procs):
    res = run_algorithm(name, procs)
    assert [r.pid for r in res.rows] == [p.pid for p in procs]
    for row in res.rows:
        assert row.turnaround_time == row.waiting_time + row.burst_time
        assert row.completion_time == row.arrival_time + row.turnaround_time
        assert row.waiting_time >= 0


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
@pytest.mark.parametrize("procs", [_procs(), _srtf_procs(), _rr_procs()])
def test_gantt_is_contiguous(name, procs):
    res = run_algorithm(name, procs)
    check_timeline(res.timeline)
    for prev, cur in zip(res.timeline, res.timeline[1:]):
        assert cur.start == prev.stop
    assert sum(s.length for s in res.timeline) == sum(p.burst_time for p in procs)
    assert res.timeline[-1].stop == max(r.completion_time for r in res.rows)


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_empty_catalog_fails_fast(name):
    with pytest.raises(EmptyScheduleError):
        run_algorithm(name, [])


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_non_positive_burst_rejected(name):
    with pytest.raises(InvalidProcessError):
        run_algorithm(name, [Process(1, arrival_time=0, burst_time=0)])


def test_duplicate_pid_rejected():
    with pytest.raises(InvalidProcessError):
        schedule_fcfs([Process(1, arrival_time=0, burst_time=1), Process(1, arrival_time=1, burst_time=1)])


def test_unknown_algorithm():
    with pytest.raises(ValueError):
        run_algorithm("mlfq", _procs())


def test_catalog_is_not_mutated():
    procs = _srtf_procs()
    snapshot = list(procs)
    for name in ALGORITHMS:
        run_algorithm(name, procs)
    assert procs == snapshot
