"""
core.effects
Neurochemistry rules:
- stage impacts (baseline * multipliers)
- recovery curve
- acute dose shock
- clamp rules
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .profiles import dose_shock, impact_of, recovery_modifier
from .state import SimulationState, Stage, Substance, clamp


DEFAULT_LEVEL_CAP = 3.0
DEFAULT_SEROTONIN_FLOOR = 0.1

# Recovery curve shape (days until full recovery before modifiers).
DOPAMINE_RECOVERY_DAYS = 365.0
SEROTONIN_RECOVERY_DAYS = 180.0
ADRENALINE_RECOVERY_DAYS = 120.0


@dataclass(frozen=True)
class RecoveryFractions:
    """Fractions of baseline during recovery."""

    dopamine: float
    serotonin: float
    adrenaline: float


def recovery_fractions(day: int, substance: Substance) -> RecoveryFractions:
    """Recovery progress at `day` for a substance (pure, no range check on day).

    dopamine/serotonin climb towards 1.0, adrenaline decays from 1.5 to a 0.5 floor.
    """
    mods = recovery_modifier(substance)
    day = float(day)

    raw_dopamine = 0.3 + (day / DOPAMINE_RECOVERY_DAYS) * 0.7
    raw_serotonin = 0.4 + (day / SEROTONIN_RECOVERY_DAYS) * 0.6

    return RecoveryFractions(
        dopamine=min(1.0, raw_dopamine * mods.d),
        serotonin=min(1.0, raw_serotonin * mods.s),
        adrenaline=max(0.5, 1.5 - (day / (ADRENALINE_RECOVERY_DAYS / mods.a)) * 0.5),
    )


def clamp_levels(
    dopamine: float,
    serotonin: float,
    adrenaline: float,
    *,
    level_cap: float = DEFAULT_LEVEL_CAP,
) -> Tuple[float, float, float]:
    return (
        clamp(float(dopamine), 0.0, level_cap),
        max(0.0, float(serotonin)),
        clamp(float(adrenaline), 0.0, level_cap),
    )


def derive_levels(state: SimulationState, *, level_cap: float = DEFAULT_LEVEL_CAP) -> SimulationState:
    """Recompute every `current` from baseline for the state's stage (pure)."""
    if state.stage == Stage.RECOVERY:
        fr = recovery_fractions(state.recovery_day, state.substance)
        d, s, a = fr.dopamine, fr.serotonin, fr.adrenaline
    else:
        imp = impact_of(state.substance, state.stage)
        d, s, a = imp.d, imp.s, imp.a

    dopamine, serotonin, adrenaline = clamp_levels(
        state.dopamine.baseline * d,
        state.serotonin.baseline * s,
        state.adrenaline.baseline * a,
        level_cap=level_cap,
    )
    return replace(
        state,
        dopamine=state.dopamine.with_current(dopamine),
        serotonin=state.serotonin.with_current(serotonin),
        adrenaline=state.adrenaline.with_current(adrenaline),
    )


def apply_dose(
    state: SimulationState,
    substance: Optional[Substance] = None,
    *,
    level_cap: float = DEFAULT_LEVEL_CAP,
    serotonin_floor: float = DEFAULT_SEROTONIN_FLOOR,
) -> SimulationState:
    """Acute intake: shock current levels, force SEVERE and wipe recovery progress (pure)."""
    shock = dose_shock(substance if substance is not None else state.substance)

    dopamine = clamp(state.dopamine.current * shock.d, 0.0, level_cap)
    serotonin = clamp(state.serotonin.current * shock.s, serotonin_floor, level_cap)
    adrenaline = clamp(state.adrenaline.current * shock.a, 0.0, level_cap)

    return replace(
        state,
        dopamine=state.dopamine.with_current(dopamine),
        serotonin=state.serotonin.with_current(serotonin),
        adrenaline=state.adrenaline.with_current(adrenaline),
        stage=Stage.SEVERE,
        recovery_day=0,
    )
