"""engine.reducer

Transition rules (headless).

Responsibilities:
- Define the UI-driven events
- reduce(state, event) -> new state, recomputed from baseline and clamped

This layer is UI-agnostic and has no side effects; history is the controller's job.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Union

from core.effects import apply_dose, derive_levels
from core.state import SimulationState, Stage, Substance, default_start_state

from .config import EngineConfig


@dataclass(frozen=True)
class SetStage:
    stage: Stage


@dataclass(frozen=True)
class SetRecoveryDay:
    day: int


@dataclass(frozen=True)
class SetSubstance:
    substance: Substance


@dataclass(frozen=True)
class StartRecovery:
    pass


@dataclass(frozen=True)
class Dose:
    pass


@dataclass(frozen=True)
class Reset:
    pass


Event = Union[SetStage, SetRecoveryDay, SetSubstance, StartRecovery, Dose, Reset]


def initial_state(config: EngineConfig) -> SimulationState:
    return default_start_state(config.default_substance)


def reduce(state: SimulationState, event: Event, config: EngineConfig = EngineConfig()) -> SimulationState:
    """Apply one event to state (pure). Every branch returns a fully recomputed state."""
    cap = float(config.level_cap)

    if isinstance(event, SetStage):
        return derive_levels(replace(state, stage=Stage(event.stage)), level_cap=cap)

    if isinstance(event, StartRecovery):
        return derive_levels(replace(state, stage=Stage.RECOVERY), level_cap=cap)

    if isinstance(event, SetRecoveryDay):
        return derive_levels(
            replace(state, stage=Stage.RECOVERY, recovery_day=max(0, int(event.day))),
            level_cap=cap,
        )

    if isinstance(event, SetSubstance):
        return derive_levels(
            replace(state, substance=Substance(event.substance), stage=Stage.NORMAL, recovery_day=0),
            level_cap=cap,
        )

    if isinstance(event, Dose):
        return apply_dose(state, level_cap=cap, serotonin_floor=float(config.serotonin_floor))

    if isinstance(event, Reset):
        return initial_state(config)

    raise TypeError(f"unknown event: {event!r}")


def event_to_dict(event: Event) -> Dict[str, Any]:
    payload = {k: (v.value if isinstance(v, (Stage, Substance)) else v) for k, v in asdict(event).items()}
    return {"event": type(event).__name__, "payload": payload}
