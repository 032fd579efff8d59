"""engine.scan_log

Cosmetic "neuro-scan" feed shown next to the brain image.

Lines are picked deterministically from (seed, tick, state) so reruns agree.
"""

from __future__ import annotations

from typing import List

from core.metrics import alerts
from core.rng import stable_choice
from core.state import SimulationState

GENERIC_ACTIONS = [
    "Tracing synaptic pathways...",
    "Measuring receptor density...",
    "Analyzing neurochemical gradients...",
    "Mapping cortex activity...",
    "Verifying amygdala response...",
    "Calculating plasticity index...",
    "Pathway convergence check...",
]

# Status lines from image calls shown above the feed.
IMAGE_LOG_KEEP = 3


def scan_pool(state: SimulationState) -> List[str]:
    return [
        *GENERIC_ACTIONS,
        f"Monitoring {state.substance.value} metabolites...",
        *alerts(state),
    ]


def scan_line(state: SimulationState, tick: int, *, seed: int) -> str:
    text = stable_choice(
        scan_pool(state),
        "scan",
        int(tick),
        state.stage.value,
        state.substance.value,
        base_seed=int(seed),
    )
    return f"[{int(tick):04d}] > {text}"


def scan_feed(state: SimulationState, ticks: int, *, seed: int, keep: int = 7) -> List[str]:
    """The last `keep` lines after `ticks` ticks."""
    start = max(0, int(ticks) - int(keep))
    return [scan_line(state, t, seed=seed) for t in range(start, int(ticks))]


def push_log_line(lines: List[str], line: str, *, keep: int = IMAGE_LOG_KEEP) -> List[str]:
    """Append `line` and drop all but the newest `keep` entries."""
    if keep <= 0:
        return []
    return [*lines, line][-int(keep):]
