import pytest

from core.state import Stage, Substance, default_start_state
from engine.config import EngineConfig
from engine.controller import SimulationController
from engine.reducer import Dose, Reset, SetRecoveryDay, SetStage, SetSubstance, StartRecovery, reduce


def test_initial_state_is_captured(controller):
    assert len(controller.history) == 1
    snap = controller.history.latest()
    assert (snap.day, snap.dopamine, snap.serotonin, snap.adrenaline) == (0, 0.6, 0.7, 0.5)
    assert controller.state == default_start_state()


def test_each_transition_appends_exactly_one_snapshot(controller):
    controller.set_stage(Stage.EARLY)
    controller.set_recovery_day(30)
    controller.set_substance(Substance.OPIOIDS)
    controller.dose()
    controller.start_recovery()
    controller.reset()
    assert len(controller.history) == 7
    assert controller.history.days() == list(range(7))
    assert [e["event"] for e in controller.events] == [
        "SetStage", "SetRecoveryDay", "SetSubstance", "Dose", "StartRecovery", "Reset",
    ]


def test_alcohol_early_scenario(controller):
    s = controller.set_stage(Stage.EARLY)
    assert s.dopamine.current == pytest.approx(0.72)
    assert controller.history.latest().dopamine == 0.72


def test_opioid_dose_scenario(controller):
    controller.set_substance(Substance.OPIOIDS)
    s = controller.dose()
    assert s.dopamine.current == pytest.approx(1.5)
    assert s.serotonin.current == pytest.approx(0.35)
    assert s.stage == Stage.SEVERE
    assert s.recovery_day == 0


def test_set_recovery_day_forces_recovery_stage(controller):
    s = controller.set_recovery_day(365)
    assert s.stage == Stage.RECOVERY
    assert s.recovery_day == 365
    assert s.dopamine.current == pytest.approx(0.6)  # fraction capped at 1.0
    assert s.adrenaline.current == pytest.approx(0.25)


def test_set_stage_recovery_uses_existing_day(controller):
    controller.set_recovery_day(90)
    controller.set_stage(Stage.MODERATE)
    assert controller.state.recovery_day == 90
    s = controller.set_stage(Stage.RECOVERY)
    again = controller.set_recovery_day(90)
    assert s.levels() == again.levels()


def test_start_recovery_equals_set_stage_recovery(config):
    base = reduce(default_start_state(), SetRecoveryDay(45), config)
    base = reduce(base, SetStage(Stage.SEVERE), config)
    assert reduce(base, StartRecovery(), config) == reduce(base, SetStage(Stage.RECOVERY), config)


def test_set_substance_resets_stage_and_day(controller):
    controller.set_recovery_day(120)
    s = controller.set_substance(Substance.STIMULANTS)
    assert s.stage == Stage.NORMAL
    assert s.recovery_day == 0
    assert s.levels() == pytest.approx({"dopamine": 0.6, "serotonin": 0.7, "adrenaline": 0.5})


def test_stage_change_after_dose_recomputes_from_baseline(controller):
    controller.dose()
    controller.dose()
    s = controller.set_stage(Stage.NORMAL)
    assert s.levels() == pytest.approx({"dopamine": 0.6, "serotonin": 0.7, "adrenaline": 0.5})


def test_reset_round_trip(controller):
    controller.set_substance(Substance.MDMA)
    controller.set_stage(Stage.EARLY)
    controller.dose()
    s = controller.reset()
    assert s == default_start_state()
    snap = controller.history.latest()
    assert (snap.dopamine, snap.serotonin, snap.adrenaline) == (0.6, 0.7, 0.5)


def test_reset_uses_configured_default_substance():
    ctl = SimulationController(EngineConfig(default_substance=Substance.MDMA))
    ctl.set_substance(Substance.ALCOHOL)
    assert ctl.reset().substance == Substance.MDMA


def test_negative_recovery_day_is_clamped(controller):
    assert controller.set_recovery_day(-5).recovery_day == 0


def test_reducer_is_pure(config):
    s0 = default_start_state()
    s1 = reduce(s0, Dose(), config)
    assert s0 == default_start_state()
    assert s1 != s0
    assert reduce(s0, Dose(), config) == s1


def test_reducer_rejects_unknown_event(config):
    with pytest.raises(TypeError):
        reduce(default_start_state(), object(), config)


def test_reducer_reset_event(config):
    s = reduce(default_start_state(), SetSubstance(Substance.OPIOIDS), config)
    assert reduce(s, Reset(), config) == default_start_state()


def test_dispatch_log_records_payload(controller):
    controller.set_substance(Substance.OPIOIDS)
    rec = controller.events[-1]
    assert rec == {"event": "SetSubstance", "payload": {"substance": "opioids"}, "seq": 1}


def test_history_window_in_controller():
    ctl = SimulationController(EngineConfig(history_capacity=5))
    for day in range(10):
        ctl.set_recovery_day(day)
    assert len(ctl.history) == 5
    assert ctl.find(0) is None
    assert ctl.find(10).day == 10


def test_event_log_is_bounded_by_history_capacity():
    ctl = SimulationController()
    for _ in range(1000):
        ctl.dose()
    assert len(ctl.history) == 100
    assert len(ctl.events) == 100
    assert [e["seq"] for e in ctl.events] == ctl.history.days()


def test_restore_trims_oversized_event_log():
    cfg = EngineConfig(history_capacity=3)
    events = [{"event": "Dose", "payload": {}, "seq": i} for i in range(10)]
    ctl = SimulationController.restore(cfg, default_start_state(), SimulationController(cfg).history, events)
    assert [e["seq"] for e in ctl.events] == [7, 8, 9]
