"""
core.metrics
Display-only summaries derived from the current state.

Nothing here feeds back into SimulationState.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .history import HistorySnapshot
from .state import CHANNELS, SimulationState, Stage, clamp


# "Normal" references the gap/wellness metrics measure against.
NORMAL_LEVELS: Dict[str, float] = {
    "dopamine": 1.0,
    "serotonin": 1.0,
    "adrenaline": 0.5,
}

WELLNESS_WEIGHTS: Dict[str, float] = {
    "dopamine": 0.40,
    "serotonin": 0.35,
    "adrenaline": 0.25,
}

RECOVERY_GOAL_DAYS = 365


def deviation_score(state: SimulationState) -> int:
    """Percent gap to the normal brain (0 = on reference). Can exceed 100 under heavy shocks."""
    gap = sum(abs(NORMAL_LEVELS[ch] - state.channel(ch).current) for ch in CHANNELS)
    return int(round((gap / 2.5) * 100))


def wellness_score(state: SimulationState) -> int:
    """0..100 (higher = closer to normal). Weighted per-channel closeness."""
    total = 0.0
    for ch in CHANNELS:
        ref = NORMAL_LEVELS[ch]
        closeness = max(0.0, 1.0 - abs(state.channel(ch).current - ref) / ref)
        total += WELLNESS_WEIGHTS[ch] * closeness
    return int(round(clamp(total, 0.0, 1.0) * 100))


def recovery_progress(state: SimulationState) -> int:
    """Percent of the one-year goal; 0 outside RECOVERY."""
    if state.stage != Stage.RECOVERY:
        return 0
    return int(round((state.recovery_day / RECOVERY_GOAL_DAYS) * 100))


def gauge_fraction(level: float, scale: float = 2.0) -> float:
    return clamp(float(level) / scale, 0.0, 1.0)


@dataclass(frozen=True)
class ChannelDelta:
    channel: str
    current: float
    historical: float
    delta: float
    percent: int

    @property
    def improved(self) -> bool:
        return self.current >= self.historical


def compare_to_snapshot(state: SimulationState, snapshot: HistorySnapshot) -> List[ChannelDelta]:
    out: List[ChannelDelta] = []
    for ch in CHANNELS:
        cur = float(state.channel(ch).current)
        hist = float(getattr(snapshot, ch))
        out.append(
            ChannelDelta(
                channel=ch,
                current=cur,
                historical=hist,
                delta=cur - hist,
                percent=int(round((cur - hist) * 100)),
            )
        )
    return out


@dataclass(frozen=True)
class RegionReadout:
    channel: str
    title: str
    chemical: str
    level: float
    historical: Optional[float]
    status: str
    description: str


REGION_TITLES: Dict[str, str] = {
    "dopamine": "Reward Pathway (Nucleus Accumbens)",
    "serotonin": "Mood & Satiety (Raphe Nuclei)",
    "adrenaline": "Stress & Vigilance (Locus Coeruleus)",
}


def _region_status(channel: str, level: float) -> tuple[str, str]:
    if channel == "dopamine":
        if level > 1.2:
            return "CRITICAL", (
                "Excessive flooding detected. Receptors downregulating to prevent excitotoxicity. "
                "High probability of addictive reinforcement."
            )
        if level < 0.6:
            return "DEFICIT", (
                "Reward centers unresponsive. Anhedonia detected. "
                "Motivation and joy are hard to reach."
            )
        return "STABLE", "Healthy reward feedback loop."
    if channel == "serotonin":
        if level < 0.6:
            return "DEPLETED", (
                "Emotional regulation failure. Heightened risk of impulsive behavior "
                "and persistent low-affect states."
            )
        return "STABLE", "Emotional baseline achieved. Neuroplastic recovery pathways active."
    if level > 1.5:
        return "ALARM", (
            "Sustained high stress-hormone loop. Constant fight/flight. "
            "Accelerated wear on neural tissue."
        )
    return "CALM", "Parasympathetic system dominant. Recovery environment optimal."


def region_readout(
    state: SimulationState,
    channel: str,
    snapshot: Optional[HistorySnapshot] = None,
) -> RegionReadout:
    level = float(state.channel(channel).current)
    status, desc = _region_status(channel, level)
    return RegionReadout(
        channel=channel,
        title=REGION_TITLES[channel],
        chemical=channel.capitalize(),
        level=level,
        historical=float(getattr(snapshot, channel)) if snapshot is not None else None,
        status=status,
        description=desc,
    )


def alerts(state: SimulationState) -> List[str]:
    out: List[str] = []
    if state.dopamine.current > 1.2:
        out.append("ALERT: High dopaminergic flux detected.")
    if state.serotonin.current < 0.6:
        out.append("WARN: Serotonin uptake inhibited.")
    if state.adrenaline.current > 1.2:
        out.append("ALERT: Adrenal cortex overactive.")
    return out
