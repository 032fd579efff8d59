from dataclasses import replace

import pytest

from core.history import HistoryBuffer, HistorySnapshot
from core.state import default_start_state


def _state(d, s, a):
    base = default_start_state()
    return replace(
        base,
        dopamine=base.dopamine.with_current(d),
        serotonin=base.serotonin.with_current(s),
        adrenaline=base.adrenaline.with_current(a),
    )


def test_snapshot_rounds_to_two_decimals():
    buf = HistoryBuffer()
    snap = buf.append(_state(0.72345, 0.3333, 1.999))
    assert snap == HistorySnapshot(day=0, dopamine=0.72, serotonin=0.33, adrenaline=2.0)


def test_days_are_sequential_capture_tags():
    buf = HistoryBuffer()
    for _ in range(3):
        buf.append(default_start_state())
    assert buf.days() == [0, 1, 2]


def test_eviction_after_101_appends():
    buf = HistoryBuffer()
    for _ in range(101):
        buf.append(default_start_state())
    assert len(buf) == 100
    assert buf.find(0) is None
    assert buf.find(1).day == 1
    assert buf.find(100).day == 100
    # no renumbering after eviction
    assert buf.snapshots()[0].day == 1


def test_never_exceeds_capacity():
    buf = HistoryBuffer(capacity=100)
    for i in range(250):
        buf.append(default_start_state())
        assert len(buf) <= 100
    assert buf.latest().day == 249


def test_find_missing_and_none():
    buf = HistoryBuffer()
    buf.append(default_start_state())
    assert buf.find(None) is None
    assert buf.find(7) is None


def test_invalid_capacity():
    with pytest.raises(ValueError):
        HistoryBuffer(capacity=0)


def test_records_round_trip_resumes_counter():
    buf = HistoryBuffer(capacity=3)
    for d in (0.1, 0.2, 0.3, 0.4):
        buf.append(_state(d, 0.7, 0.5))
    restored = HistoryBuffer.from_records(buf.to_records(), capacity=3)
    assert restored.snapshots() == buf.snapshots()
    assert restored.append(default_start_state()).day == 4


def test_iteration_is_a_copy():
    buf = HistoryBuffer()
    buf.append(default_start_state())
    it = iter(buf)
    buf.append(default_start_state())
    assert len(list(it)) == 1
