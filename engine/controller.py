"""engine.controller

Owns the one mutable simulation state and its history.

Every dispatch is atomic: reduce -> replace state -> append exactly one snapshot.
The event log shares the history capacity, so retained events line up with snapshots.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from core.history import HistoryBuffer, HistorySnapshot
from core.state import SimulationState, Stage, Substance

from .config import EngineConfig
from .reducer import (
    Dose,
    Event,
    Reset,
    SetRecoveryDay,
    SetStage,
    SetSubstance,
    StartRecovery,
    event_to_dict,
    initial_state,
    reduce,
)

log = logging.getLogger("neuropath.engine")


class SimulationController:
    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()
        self.history = HistoryBuffer(self.config.history_capacity)
        self.events: Deque[Dict[str, Any]] = deque(maxlen=self.config.history_capacity)
        self._state = initial_state(self.config)
        self.history.append(self._state)

    @property
    def state(self) -> SimulationState:
        return self._state

    def dispatch(self, event: Event) -> SimulationState:
        new_state = reduce(self._state, event, self.config)
        self._state = new_state
        snap = self.history.append(new_state)
        rec = event_to_dict(event)
        rec["seq"] = snap.day
        self.events.append(rec)
        log.debug(
            "%s -> stage=%s substance=%s d=%.2f s=%.2f a=%.2f",
            rec["event"],
            new_state.stage.value,
            new_state.substance.value,
            snap.dopamine,
            snap.serotonin,
            snap.adrenaline,
        )
        return new_state

    def set_stage(self, stage: Stage) -> SimulationState:
        return self.dispatch(SetStage(Stage(stage)))

    def set_recovery_day(self, day: int) -> SimulationState:
        return self.dispatch(SetRecoveryDay(int(day)))

    def set_substance(self, substance: Substance) -> SimulationState:
        return self.dispatch(SetSubstance(Substance(substance)))

    def start_recovery(self) -> SimulationState:
        return self.dispatch(StartRecovery())

    def dose(self) -> SimulationState:
        return self.dispatch(Dose())

    def reset(self) -> SimulationState:
        return self.dispatch(Reset())

    def find(self, day: Optional[int]) -> Optional[HistorySnapshot]:
        return self.history.find(day)

    @classmethod
    def restore(
        cls,
        config: EngineConfig,
        state: SimulationState,
        history: HistoryBuffer,
        events: Optional[List[Dict[str, Any]]] = None,
    ) -> "SimulationController":
        """Rebuild a controller from an exported run (no snapshot is appended)."""
        ctl = cls(config)
        ctl._state = state
        ctl.history = history
        ctl.events = deque(events or [], maxlen=config.history_capacity)
        return ctl
