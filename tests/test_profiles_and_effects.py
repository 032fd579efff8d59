from dataclasses import replace

import pytest

from core.effects import apply_dose, derive_levels, recovery_fractions
from core.profiles import NORMAL_IMPACT, RECOVERY_MODIFIERS, SUBSTANCE_IMPACTS, Impact, impact_of
from core.state import Stage, Substance, default_start_state


# --- Impact table ---

def test_impact_defined_for_every_pair():
    for sub in Substance:
        for stage in Stage:
            imp = impact_of(sub, stage)
            assert isinstance(imp, Impact)
            assert imp.d > 0 and imp.s > 0 and imp.a > 0


def test_impact_normal_and_recovery_fall_back_to_identity():
    for sub in Substance:
        assert impact_of(sub, Stage.NORMAL) == NORMAL_IMPACT
        assert impact_of(sub, Stage.RECOVERY) == NORMAL_IMPACT
        assert (sub, Stage.RECOVERY) not in SUBSTANCE_IMPACTS


def test_impact_unknown_pair_degrades_to_normal():
    assert impact_of("ketamine", Stage.SEVERE) == Impact(1.0, 1.0, 1.0)


def test_alcohol_early_multipliers():
    assert impact_of(Substance.ALCOHOL, Stage.EARLY) == Impact(1.2, 1.1, 0.9)


# --- Recovery curve ---

@pytest.mark.parametrize("sub", list(Substance))
def test_recovery_day_zero(sub):
    mods = RECOVERY_MODIFIERS[sub]
    fr = recovery_fractions(0, sub)
    assert fr.dopamine == pytest.approx(min(1.0, 0.3 * mods.d))
    assert fr.serotonin == pytest.approx(min(1.0, 0.4 * mods.s))
    assert fr.adrenaline == pytest.approx(1.5)


@pytest.mark.parametrize("sub", list(Substance))
def test_recovery_monotonic_and_bounded(sub):
    prev = recovery_fractions(0, sub)
    for day in range(1, 500):
        fr = recovery_fractions(day, sub)
        assert fr.dopamine >= prev.dopamine
        assert fr.serotonin >= prev.serotonin
        assert fr.adrenaline <= prev.adrenaline
        assert fr.dopamine <= 1.0 and fr.serotonin <= 1.0
        assert fr.adrenaline >= 0.5
        prev = fr


def test_recovery_alcohol_full_year():
    fr = recovery_fractions(365, Substance.ALCOHOL)
    assert fr.dopamine == pytest.approx(1.0)
    assert fr.serotonin == pytest.approx(min(1.0, (0.4 + 365 / 180 * 0.6) * 0.8))
    assert fr.adrenaline == 0.5


def test_recovery_alcohol_serotonin_at_180_days():
    assert recovery_fractions(180, Substance.ALCOHOL).serotonin == pytest.approx(0.8)


def test_recovery_adrenaline_speed_depends_on_substance():
    # stimulants settle faster (modifier 1.2), opioids slower (0.7)
    day = 60
    assert recovery_fractions(day, Substance.STIMULANTS).adrenaline < recovery_fractions(day, Substance.ALCOHOL).adrenaline
    assert recovery_fractions(day, Substance.OPIOIDS).adrenaline > recovery_fractions(day, Substance.ALCOHOL).adrenaline


def test_recovery_negative_day_is_extrapolated_not_rejected():
    fr = recovery_fractions(-100, Substance.ALCOHOL)
    assert fr.dopamine < 0.3
    assert fr.adrenaline > 1.5


# --- derive / dose ---

def test_derive_levels_alcohol_early():
    s = derive_levels(replace(default_start_state(), stage=Stage.EARLY))
    assert s.dopamine.current == pytest.approx(0.72)
    assert s.serotonin.current == pytest.approx(0.77)
    assert s.adrenaline.current == pytest.approx(0.45)
    # baselines never move
    assert s.dopamine.baseline == 0.6


def test_derive_levels_respects_cap():
    s = derive_levels(replace(default_start_state(Substance.STIMULANTS), stage=Stage.EARLY), level_cap=1.0)
    assert s.dopamine.current == 1.0


def test_dose_opioids_from_baseline():
    s = apply_dose(default_start_state(Substance.OPIOIDS))
    assert s.dopamine.current == pytest.approx(1.5)
    assert s.serotonin.current == pytest.approx(0.35)
    assert s.adrenaline.current == pytest.approx(0.2)
    assert s.stage == Stage.SEVERE
    assert s.recovery_day == 0


def test_dose_resets_recovery_progress():
    s = replace(default_start_state(), stage=Stage.RECOVERY, recovery_day=200)
    s = apply_dose(s)
    assert s.stage == Stage.SEVERE and s.recovery_day == 0


def test_dose_clamps_and_floors():
    s = default_start_state(Substance.STIMULANTS)
    for _ in range(5):
        s = apply_dose(s)
    assert s.dopamine.current == 3.0
    assert s.adrenaline.current == 3.0

    s = default_start_state(Substance.OPIOIDS)
    for _ in range(6):
        s = apply_dose(s)
    assert s.serotonin.current == pytest.approx(0.1)


def test_dose_mdma_raises_serotonin():
    s = apply_dose(default_start_state(Substance.MDMA))
    assert s.serotonin.current == pytest.approx(2.8)


def test_repeated_mdma_doses_saturate_serotonin():
    s = default_start_state(Substance.MDMA)
    for _ in range(600):
        s = apply_dose(s)
    assert s.serotonin.current == 3.0
    assert s.dopamine.current == 3.0

    s = apply_dose(default_start_state(Substance.MDMA), level_cap=2.0)
    assert s.serotonin.current == 2.0
