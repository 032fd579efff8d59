"""
core.history
Bounded, append-only log of level snapshots.

The `day` tag is a capture counter, not a list index: eviction drops the oldest
snapshot without renumbering the rest.
"""

from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from typing import Any, Deque, Dict, Iterable, Iterator, List, Mapping, Optional

from .state import SimulationState


DEFAULT_HISTORY_CAPACITY = 100


@dataclass(frozen=True)
class HistorySnapshot:
    day: int
    dopamine: float
    serotonin: float
    adrenaline: float


def snapshot_of(state: SimulationState, day: int) -> HistorySnapshot:
    return HistorySnapshot(
        day=int(day),
        dopamine=round(float(state.dopamine.current), 2),
        serotonin=round(float(state.serotonin.current), 2),
        adrenaline=round(float(state.adrenaline.current), 2),
    )


class HistoryBuffer:
    """Ordered snapshots, oldest first, capped at `capacity`."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        if int(capacity) < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = int(capacity)
        self._items: Deque[HistorySnapshot] = deque(maxlen=self.capacity)
        self._next_day = 0

    def append(self, state: SimulationState) -> HistorySnapshot:
        snap = snapshot_of(state, self._next_day)
        self._next_day += 1
        self._items.append(snap)
        return snap

    def find(self, day: Optional[int]) -> Optional[HistorySnapshot]:
        if day is None:
            return None
        for snap in self._items:
            if snap.day == int(day):
                return snap
        return None

    def latest(self) -> Optional[HistorySnapshot]:
        return self._items[-1] if self._items else None

    def snapshots(self) -> List[HistorySnapshot]:
        return list(self._items)

    def days(self) -> List[int]:
        return [s.day for s in self._items]

    def to_records(self) -> List[Dict[str, Any]]:
        return [asdict(s) for s in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[HistorySnapshot]:
        return iter(list(self._items))

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], capacity: int = DEFAULT_HISTORY_CAPACITY) -> "HistoryBuffer":
        """Rebuild a buffer from exported records; the counter resumes after the largest tag."""
        buf = cls(capacity)
        last = -1
        for r in records:
            snap = HistorySnapshot(
                day=int(r["day"]),
                dopamine=float(r["dopamine"]),
                serotonin=float(r["serotonin"]),
                adrenaline=float(r["adrenaline"]),
            )
            buf._items.append(snap)
            last = max(last, snap.day)
        buf._next_day = last + 1
        return buf
