"""engine.config

Engine configuration passed from UI (or read from the environment).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.effects import DEFAULT_LEVEL_CAP, DEFAULT_SEROTONIN_FLOOR
from core.history import DEFAULT_HISTORY_CAPACITY
from core.state import Substance, parse_substance


@dataclass(frozen=True)
class EngineConfig:
    history_capacity: int = DEFAULT_HISTORY_CAPACITY
    level_cap: float = DEFAULT_LEVEL_CAP
    serotonin_floor: float = DEFAULT_SEROTONIN_FLOOR
    default_substance: Substance = Substance.ALCOHOL
    scan_seed: int = 42


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    try:
        return float(env.get(key, default))
    except (TypeError, ValueError):
        return float(default)


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env.get(key, default))
    except (TypeError, ValueError):
        return int(default)


def load_engine_config(env: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """EngineConfig from NEUROPATH_* variables; bad or missing values keep defaults."""
    env = os.environ if env is None else env
    base = EngineConfig()
    capacity = _env_int(env, "NEUROPATH_HISTORY_CAPACITY", base.history_capacity)
    cap = _env_float(env, "NEUROPATH_LEVEL_CAP", base.level_cap)
    return EngineConfig(
        history_capacity=capacity if capacity >= 1 else base.history_capacity,
        level_cap=cap if cap > 0 else base.level_cap,
        serotonin_floor=max(0.0, _env_float(env, "NEUROPATH_SEROTONIN_FLOOR", base.serotonin_floor)),
        default_substance=parse_substance(env.get("NEUROPATH_DEFAULT_SUBSTANCE", ""), base.default_substance),
        scan_seed=_env_int(env, "NEUROPATH_SCAN_SEED", base.scan_seed),
    )
