"""
core.selfcheck
Minimal "it runs" proof for the neurochemical core.

Run:
  python -m core.selfcheck
"""

from __future__ import annotations

from dataclasses import asdict, replace

from .effects import apply_dose, derive_levels, recovery_fractions
from .history import HistoryBuffer
from .metrics import deviation_score, wellness_score
from .state import Stage, Substance, default_start_state


def run_path_smoke() -> None:
    history = HistoryBuffer()

    for substance in Substance:
        state = default_start_state(substance)
        history.append(state)

        for stage in (Stage.EARLY, Stage.MODERATE, Stage.SEVERE):
            state = derive_levels(replace(state, stage=stage))
            history.append(state)

        state = apply_dose(state)
        history.append(state)
        assert state.stage == Stage.SEVERE and state.recovery_day == 0
        assert state.serotonin.current >= 0.1

        prev = recovery_fractions(0, substance)
        for day in range(0, 366, 15):
            state = derive_levels(replace(state, stage=Stage.RECOVERY, recovery_day=day))
            history.append(state)

            # invariants
            fr = recovery_fractions(day, substance)
            assert fr.dopamine >= prev.dopamine and fr.serotonin >= prev.serotonin
            assert fr.adrenaline <= prev.adrenaline
            assert fr.dopamine <= 1.0 and fr.serotonin <= 1.0 and fr.adrenaline >= 0.5
            assert state.dopamine.current >= 0.0 and state.serotonin.current >= 0.0
            prev = fr

        assert len(history) <= history.capacity

    print("OK: recovery path smoke test passed.")
    print("Final state:", asdict(state))
    print("Deviation:", deviation_score(state), "Wellness:", wellness_score(state))
    print("History size:", len(history))


if __name__ == "__main__":
    run_path_smoke()
