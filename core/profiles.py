"""
core.profiles
Substance profiles: stage impacts, recovery modifiers, dose shocks.

Kept in core so balancing lives in one place, but UI can still display labels.
All tables are keyed by enum members (or (substance, stage) pairs), never by raw strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .state import Stage, Substance


@dataclass(frozen=True)
class Impact:
    """Dimensionless multipliers applied to baseline (d=dopamine, s=serotonin, a=adrenaline)."""

    d: float
    s: float
    a: float


NORMAL_IMPACT = Impact(1.0, 1.0, 1.0)


# (substance, stage) -> multipliers on baseline
SUBSTANCE_IMPACTS: Dict[Tuple[Substance, Stage], Impact] = {
    (Substance.ALCOHOL, Stage.NORMAL):       NORMAL_IMPACT,
    (Substance.ALCOHOL, Stage.EARLY):        Impact(1.2, 1.1, 0.9),
    (Substance.ALCOHOL, Stage.MODERATE):     Impact(0.7, 0.6, 1.3),
    (Substance.ALCOHOL, Stage.SEVERE):       Impact(0.3, 0.3, 1.8),

    (Substance.OPIOIDS, Stage.NORMAL):       NORMAL_IMPACT,
    (Substance.OPIOIDS, Stage.EARLY):        Impact(1.8, 1.2, 0.6),
    (Substance.OPIOIDS, Stage.MODERATE):     Impact(0.5, 0.5, 1.2),
    (Substance.OPIOIDS, Stage.SEVERE):       Impact(0.15, 0.2, 1.9),

    (Substance.STIMULANTS, Stage.NORMAL):    NORMAL_IMPACT,
    (Substance.STIMULANTS, Stage.EARLY):     Impact(2.5, 1.1, 2.0),
    (Substance.STIMULANTS, Stage.MODERATE):  Impact(0.4, 0.5, 1.5),
    (Substance.STIMULANTS, Stage.SEVERE):    Impact(0.1, 0.2, 0.4),

    (Substance.MDMA, Stage.NORMAL):          NORMAL_IMPACT,
    (Substance.MDMA, Stage.EARLY):           Impact(1.5, 3.0, 1.4),
    (Substance.MDMA, Stage.MODERATE):        Impact(0.6, 0.4, 1.2),
    (Substance.MDMA, Stage.SEVERE):          Impact(0.3, 0.1, 1.5),
}


# substance -> (d, s, a) speed modifiers for the recovery curve
RECOVERY_MODIFIERS: Dict[Substance, Impact] = {
    Substance.ALCOHOL:    Impact(1.0, 0.8, 1.0),
    Substance.OPIOIDS:    Impact(0.6, 0.9, 0.7),
    Substance.STIMULANTS: Impact(0.7, 0.9, 1.2),
    Substance.MDMA:       Impact(0.8, 0.6, 1.0),
}


# substance -> acute multipliers applied to current levels on a dose
DOSE_SHOCKS: Dict[Substance, Impact] = {
    Substance.ALCOHOL:    Impact(1.5, 0.8, 0.9),
    Substance.OPIOIDS:    Impact(2.5, 0.5, 0.4),
    Substance.STIMULANTS: Impact(3.0, 0.6, 2.5),
    Substance.MDMA:       Impact(2.0, 4.0, 1.5),
}


SUBSTANCE_LABELS: Dict[Substance, str] = {
    Substance.ALCOHOL: "Alcohol",
    Substance.OPIOIDS: "Opioids",
    Substance.STIMULANTS: "Stimulants",
    Substance.MDMA: "MDMA",
}

STAGE_LABELS: Dict[Stage, str] = {
    Stage.NORMAL: "Normal",
    Stage.EARLY: "Early use",
    Stage.MODERATE: "Moderate dependence",
    Stage.SEVERE: "Severe dependence",
    Stage.RECOVERY: "Recovery",
}


def impact_of(substance: Substance, stage: Stage) -> Impact:
    """Stage multipliers for a substance. Undefined pairs (incl. RECOVERY) use the NORMAL profile."""
    return SUBSTANCE_IMPACTS.get((substance, stage), NORMAL_IMPACT)


def recovery_modifier(substance: Substance) -> Impact:
    return RECOVERY_MODIFIERS.get(substance, NORMAL_IMPACT)


def dose_shock(substance: Substance) -> Impact:
    return DOSE_SHOCKS.get(substance, NORMAL_IMPACT)
