"""
core.state
Core domain data models (UI/LLM independent).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


class Stage(str, Enum):
    NORMAL = "normal"
    EARLY = "early"
    MODERATE = "moderate"
    SEVERE = "severe"
    RECOVERY = "recovery"


class Substance(str, Enum):
    ALCOHOL = "alcohol"
    OPIOIDS = "opioids"
    STIMULANTS = "stimulants"
    MDMA = "mdma"


CHANNELS = ("dopamine", "serotonin", "adrenaline")

# Fixed resting levels; substance switches never move them.
BASELINE_DOPAMINE = 0.6
BASELINE_SEROTONIN = 0.7
BASELINE_ADRENALINE = 0.5


@dataclass(frozen=True)
class ChannelState:
    """One neurochemical channel.

    baseline: resting reference, fixed for the run
    current: displayed level, recomputed on every transition
    """

    baseline: float
    current: float

    def with_current(self, value: float) -> "ChannelState":
        return replace(self, current=float(value))


@dataclass(frozen=True)
class SimulationState:
    """Single source of truth for the simulation.

    recovery_day is only meaningful while stage is RECOVERY.
    """

    dopamine: ChannelState
    serotonin: ChannelState
    adrenaline: ChannelState
    stage: Stage = Stage.NORMAL
    substance: Substance = Substance.ALCOHOL
    recovery_day: int = 0

    def channel(self, name: str) -> ChannelState:
        if name not in CHANNELS:
            raise KeyError(name)
        return getattr(self, name)

    def levels(self) -> Dict[str, float]:
        return {
            "dopamine": float(self.dopamine.current),
            "serotonin": float(self.serotonin.current),
            "adrenaline": float(self.adrenaline.current),
        }


def default_start_state(substance: Substance = Substance.ALCOHOL) -> SimulationState:
    """Baseline start state.

    Keep it in core so headless tests and UI share the same baseline.
    """
    return SimulationState(
        dopamine=ChannelState(BASELINE_DOPAMINE, BASELINE_DOPAMINE),
        serotonin=ChannelState(BASELINE_SEROTONIN, BASELINE_SEROTONIN),
        adrenaline=ChannelState(BASELINE_ADRENALINE, BASELINE_ADRENALINE),
        stage=Stage.NORMAL,
        substance=Substance(substance),
        recovery_day=0,
    )


def parse_stage(value: Any, default: Stage = Stage.NORMAL) -> Stage:
    if isinstance(value, Stage):
        return value
    try:
        return Stage(str(value).strip().lower())
    except ValueError:
        return default


def parse_substance(value: Any, default: Substance = Substance.ALCOHOL) -> Substance:
    if isinstance(value, Substance):
        return value
    try:
        return Substance(str(value).strip().lower())
    except ValueError:
        return default


def state_to_dict(s: SimulationState) -> Dict[str, Any]:
    return {
        "dopamine": {"baseline": float(s.dopamine.baseline), "current": float(s.dopamine.current)},
        "serotonin": {"baseline": float(s.serotonin.baseline), "current": float(s.serotonin.current)},
        "adrenaline": {"baseline": float(s.adrenaline.baseline), "current": float(s.adrenaline.current)},
        "stage": s.stage.value,
        "substance": s.substance.value,
        "recovery_day": int(s.recovery_day),
    }


def state_from_mapping(d: Mapping[str, Any]) -> SimulationState:
    """Bridge helper for exported dict-based state."""
    base = default_start_state()

    def _channel(key: str, fallback: ChannelState) -> ChannelState:
        raw = d.get(key) or {}
        return ChannelState(
            baseline=float(raw.get("baseline", fallback.baseline)),
            current=float(raw.get("current", fallback.current)),
        )

    return SimulationState(
        dopamine=_channel("dopamine", base.dopamine),
        serotonin=_channel("serotonin", base.serotonin),
        adrenaline=_channel("adrenaline", base.adrenaline),
        stage=parse_stage(d.get("stage", Stage.NORMAL.value)),
        substance=parse_substance(d.get("substance", Substance.ALCOHOL.value)),
        recovery_day=max(0, int(d.get("recovery_day", 0))),
    )
