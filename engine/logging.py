"""engine.logging

Small helpers for storing run logs.

A run log is JSON-serializable so it can be exported/imported later.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Tuple

from core.history import HistoryBuffer
from core.state import SimulationState, parse_substance, state_from_mapping, state_to_dict

from .config import EngineConfig

EXPORT_VERSION = 1


def make_run_export(
    *,
    config: EngineConfig,
    state: SimulationState,
    history: HistoryBuffer,
    events: List[Dict[str, Any]],
) -> Dict[str, Any]:
    cfg = asdict(config)
    cfg["default_substance"] = config.default_substance.value
    return {
        "version": EXPORT_VERSION,
        "config": cfg,
        "state": state_to_dict(state),
        "history": history.to_records(),
        "events": list(events),
    }


def dumps_run_export(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)


def load_run_export(obj: Mapping[str, Any]) -> Tuple[EngineConfig, SimulationState, HistoryBuffer, List[Dict[str, Any]]]:
    """Inverse of make_run_export. Raises ValueError on an unknown version."""
    version = int(obj.get("version", 0))
    if version != EXPORT_VERSION:
        raise ValueError(f"unsupported run export version: {version}")

    raw_cfg = dict(obj.get("config") or {})
    base = EngineConfig()
    config = EngineConfig(
        history_capacity=int(raw_cfg.get("history_capacity", base.history_capacity)),
        level_cap=float(raw_cfg.get("level_cap", base.level_cap)),
        serotonin_floor=float(raw_cfg.get("serotonin_floor", base.serotonin_floor)),
        default_substance=parse_substance(raw_cfg.get("default_substance"), base.default_substance),
        scan_seed=int(raw_cfg.get("scan_seed", base.scan_seed)),
    )
    state = state_from_mapping(obj.get("state") or {})
    history = HistoryBuffer.from_records(obj.get("history") or [], capacity=config.history_capacity)
    events = [dict(e) for e in (obj.get("events") or [])]
    return config, state, history, events
