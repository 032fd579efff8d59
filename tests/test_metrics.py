from dataclasses import replace

from core.history import HistorySnapshot
from core.metrics import (
    alerts,
    compare_to_snapshot,
    deviation_score,
    gauge_fraction,
    recovery_progress,
    region_readout,
    wellness_score,
)
from core.state import Stage, Substance, default_start_state
from engine.controller import SimulationController


def _state(d, s, a, **kw):
    base = default_start_state()
    return replace(
        base,
        dopamine=base.dopamine.with_current(d),
        serotonin=base.serotonin.with_current(s),
        adrenaline=base.adrenaline.with_current(a),
        **kw,
    )


def test_deviation_initial_state():
    # |1-0.6| + |1-0.7| + |0.5-0.5| = 0.7 -> 0.7 / 2.5 = 28%
    assert deviation_score(default_start_state()) == 28


def test_deviation_zero_at_normal_reference():
    assert deviation_score(_state(1.0, 1.0, 0.5)) == 0


def test_wellness_bounds():
    assert wellness_score(_state(1.0, 1.0, 0.5)) == 100
    assert wellness_score(_state(2.0, 2.0, 1.0)) == 0
    assert wellness_score(_state(3.0, 0.0, 3.0)) == 0


def test_wellness_in_range_for_every_profile():
    ctl = SimulationController()
    for sub in Substance:
        ctl.set_substance(sub)
        for stage in Stage:
            s = ctl.set_stage(stage)
            assert 0 <= wellness_score(s) <= 100
        s = ctl.dose()
        assert 0 <= wellness_score(s) <= 100


def test_recovery_improves_wellness():
    ctl = SimulationController()
    severe = wellness_score(ctl.set_stage(Stage.SEVERE))
    recovered = wellness_score(ctl.set_recovery_day(365))
    assert recovered > severe


def test_recovery_progress():
    assert recovery_progress(_state(0.6, 0.7, 0.5, stage=Stage.RECOVERY, recovery_day=73)) == 20
    assert recovery_progress(_state(0.6, 0.7, 0.5, stage=Stage.RECOVERY, recovery_day=365)) == 100
    assert recovery_progress(_state(0.6, 0.7, 0.5, stage=Stage.SEVERE, recovery_day=200)) == 0


def test_compare_to_snapshot():
    snap = HistorySnapshot(day=3, dopamine=0.6, serotonin=0.7, adrenaline=0.5)
    deltas = {d.channel: d for d in compare_to_snapshot(_state(0.72, 0.35, 0.5), snap)}
    assert deltas["dopamine"].percent == 12
    assert deltas["dopamine"].improved
    assert deltas["serotonin"].percent == -35
    assert not deltas["serotonin"].improved
    assert deltas["adrenaline"].percent == 0


def test_region_readout_thresholds():
    assert region_readout(_state(1.5, 0.7, 0.5), "dopamine").status == "CRITICAL"
    assert region_readout(_state(0.3, 0.7, 0.5), "dopamine").status == "DEFICIT"
    assert region_readout(_state(0.8, 0.7, 0.5), "dopamine").status == "STABLE"
    assert region_readout(_state(0.8, 0.4, 0.5), "serotonin").status == "DEPLETED"
    assert region_readout(_state(0.8, 0.7, 1.6), "adrenaline").status == "ALARM"
    assert region_readout(_state(0.8, 0.7, 0.5), "adrenaline").status == "CALM"


def test_region_readout_with_history():
    snap = HistorySnapshot(day=0, dopamine=0.6, serotonin=0.7, adrenaline=0.5)
    r = region_readout(_state(1.5, 0.7, 0.5), "dopamine", snap)
    assert r.historical == 0.6
    assert r.level == 1.5
    assert region_readout(_state(1.5, 0.7, 0.5), "dopamine").historical is None


def test_alerts():
    assert alerts(default_start_state()) == []
    msgs = alerts(_state(1.5, 0.35, 1.3))
    assert len(msgs) == 3


def test_gauge_fraction():
    assert gauge_fraction(1.0) == 0.5
    assert gauge_fraction(3.0) == 1.0
    assert gauge_fraction(-1.0) == 0.0


def test_metrics_stay_finite_after_many_doses():
    ctl = SimulationController()
    ctl.set_substance(Substance.MDMA)
    for _ in range(600):
        s = ctl.dose()
    assert s.serotonin.current == 3.0
    assert deviation_score(s) == 260
    assert 0 <= wellness_score(s) <= 100
    assert ctl.history.latest().serotonin == 3.0
