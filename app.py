"""NeuroPath Engineer (Streamlit)

UI/Experience

Principles:
- UI only renders + triggers.
- Core model and engine are pure Python modules.
- Brain images come from Gemini. If the image call fails we show a clear error;
  the simulation state is never touched by it.

Entry point for Streamlit Cloud: app.py
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

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
from core.profiles import STAGE_LABELS, SUBSTANCE_LABELS
from core.state import CHANNELS, SimulationState, Stage, Substance, state_to_dict

from engine.config import load_engine_config
from engine.controller import SimulationController
from engine.logging import dumps_run_export, load_run_export, make_run_export
from engine.scan_log import push_log_line, scan_feed

from imaging.errors import ImagingError
from imaging.providers.base import ProviderStatus
from imaging.providers.gemini import GeminiImageProvider
from imaging.schemas import ImageHandle


APP_TITLE = "NeuroPath Engineer"
APP_SUBTITLE = "Controlled recovery path intelligence: how substances reshape reward, mood and stress, and how recovery rebuilds them."
APP_VERSION = "2.6.0"

st.set_page_config(page_title=APP_TITLE, page_icon="🧠", layout="wide", initial_sidebar_state="expanded")

CSS = """
<style>
.block-container {padding-top: 3.2rem; padding-bottom: 2rem;}
section[data-testid="stSidebar"] .block-container {padding-top: 2.0rem;}
.card {
  border: 1px solid rgba(255,255,255,0.08);
  border-radius: 16px;
  padding: 14px 16px;
  background: rgba(255,255,255,0.03);
}
.scanlog {
  font-family: monospace;
  font-size: 12px;
  opacity: .8;
  white-space: pre-wrap;
}
hr.soft {border: none; border-top: 1px solid rgba(255,255,255,0.08); margin: 1rem 0;}
.small {font-size: 13px; opacity:.75;}
</style>
"""

st.markdown(CSS, unsafe_allow_html=True)

CHANNEL_LABELS: Dict[str, str] = {
    "dopamine": "Dopamine (Reward)",
    "serotonin": "Serotonin (Mood)",
    "adrenaline": "Adrenaline (Stress)",
}

CHANNEL_COLORS: Dict[str, str] = {
    "dopamine": "#FB7185",
    "serotonin": "#22D3EE",
    "adrenaline": "#FBBF24",
}

RECOVERY_BENEFITS = [
    ("🛡️ Hyper-Resilience", "Synaptic re-wiring leaves a brain more resistant to external stress than the average baseline."),
    ("💡 Meta-Knowledge", "A deep understanding of one's own neurochemical levers: mastery over habit loops."),
    ("❤️ Internal Beauty", "The broken-bowl effect: pathways repaired with gold (experience) are worth more than unbroken ones."),
    ("👁️ Self-Awareness", "Heightened metacognition: observing internal states without being consumed by them."),
]

PLOTLY_CONFIG = {
    "displayModeBar": False,
    "scrollZoom": False,
    "responsive": True,
}

PLOTLY_LAYOUT = dict(
    template="plotly_dark",
    margin=dict(l=40, r=20, t=40, b=35),
    legend=dict(orientation="h", yanchor="bottom", y=1.02),
)


# =========================
# Helpers
# =========================


def _now_id() -> str:
    return datetime.utcnow().strftime("%Y%m%d%H%M%S%f")


def _get_api_key() -> str:
    # Streamlit Cloud: st.secrets
    try:
        if "GEMINI_API_KEY" in st.secrets:
            return str(st.secrets["GEMINI_API_KEY"])  # type: ignore
    except FileNotFoundError:
        pass
    # Local
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY") or ""


@st.cache_resource(show_spinner=False)
def _provider_for(key: str) -> GeminiImageProvider:
    return GeminiImageProvider.from_api_key_string(key)


def _provider() -> GeminiImageProvider:
    return _provider_for(_get_api_key())


def _provider_status() -> ProviderStatus:
    try:
        return _provider().status()
    except Exception as e:
        return ProviderStatus(False, "none", "", note="", error=str(e))


def _pct(x: float) -> str:
    return f"{int(round(x * 100))}%"


def _signed_pct(p: int) -> str:
    return f"+{p}%" if p > 0 else f"{p}%"


def _set_status(text: str, kind: str = "info") -> None:
    st.session_state.status = {"text": text, "kind": kind}


def _show_status() -> None:
    ss = st.session_state
    msg = ss.get("status")
    if not msg:
        return
    kind = msg.get("kind", "info")
    {"error": st.error, "warning": st.warning, "success": st.success}.get(kind, st.info)(msg.get("text", ""))
    ss.status = None


# =========================
# Session State
# =========================


def _ensure_state() -> None:
    ss = st.session_state
    if "run_id" not in ss:
        ss.run_id = _now_id()
    if "engine_config" not in ss:
        ss.engine_config = load_engine_config()
    if "controller" not in ss:
        ss.controller = SimulationController(ss.engine_config)
    if "selected_day" not in ss:
        ss.selected_day = None
    if "show_normal" not in ss:
        ss.show_normal = False
    if "image" not in ss:
        ss.image = None
    if "image_log" not in ss:
        ss.image_log = []
    if "scan_ticks" not in ss:
        ss.scan_ticks = 0
    if "status" not in ss:
        ss.status = None


def _ctl() -> SimulationController:
    return st.session_state.controller


# =========================
# Callbacks
# =========================


def _on_substance() -> None:
    sub = Substance(st.session_state.ui_substance)
    _ctl().set_substance(sub)
    _set_status(f"Bio-profile loaded: {SUBSTANCE_LABELS[sub].upper()}", "info")


def _on_stage() -> None:
    _ctl().set_stage(Stage(st.session_state.ui_stage))


def _on_recovery_day() -> None:
    _ctl().set_recovery_day(int(st.session_state.ui_recovery_day))


def _on_dose() -> None:
    sub = _ctl().state.substance
    _ctl().dose()
    _set_status(f"⚠️ Critical reaction: acute {sub.value} intake detected.", "error")


def _on_start_recovery() -> None:
    _ctl().start_recovery()


def _on_reset() -> None:
    _ctl().reset()
    st.session_state.selected_day = None
    _set_status("🔄 Path reset to baseline.", "info")


def _sync_widgets(state: SimulationState) -> None:
    """Keep sidebar widgets in step with state changed by buttons."""
    ss = st.session_state
    ss.ui_substance = state.substance.value
    ss.ui_stage = state.stage.value
    ss.ui_recovery_day = int(state.recovery_day)


# =========================
# Image generation
# =========================


def _log_image(line: str) -> None:
    ss = st.session_state
    ss.image_log = push_log_line(ss.image_log, line)


def _generate_scan() -> None:
    ss = st.session_state
    state = _ctl().state
    _log_image(">>> INITIALIZING NEURO-SCAN SEQUENCE...")
    try:
        ss.image = _provider().generate(state.dopamine.current, state.serotonin.current, state.substance)
        _log_image(">>> MODEL GENERATED. SYNAPTIC LINK ESTABLISHED.")
    except ImagingError as e:
        _log_image(">>> ERROR: SCAN FAILED.")
        _set_status(f"Failed to generate neural scan: {e}", "error")


def _edit_scan(instruction: str) -> None:
    ss = st.session_state
    image: Optional[ImageHandle] = ss.image
    if image is None or not instruction.strip():
        return
    _log_image(f'>>> INJECTING MODIFIER: "{instruction.strip().upper()}"...')
    try:
        ss.image = _provider().edit(image, instruction)
        _log_image(">>> MODEL UPDATED.")
    except (ImagingError, ValueError) as e:
        _log_image(">>> ERROR: MODIFICATION FAILED.")
        _set_status(f"Failed to modify visual model: {e}", "error")


# =========================
# UI blocks
# =========================


def _history_chart(records: List[Dict[str, Any]], selected: Optional[int], show_normal: bool) -> None:
    if not records:
        st.info("No history yet.")
        return
    df = pd.DataFrame(records)
    fig = go.Figure()
    for ch in CHANNELS:
        fig.add_trace(go.Scatter(
            x=df["day"], y=df[ch],
            mode="lines",
            name=CHANNEL_LABELS[ch],
            line=dict(color=CHANNEL_COLORS[ch], width=2),
        ))
    if show_normal:
        fig.add_hline(y=1.0, line=dict(color="#9E9E9E", width=1, dash="dot"), annotation_text="normal d/s")
        fig.add_hline(y=0.5, line=dict(color="#9E9E9E", width=1, dash="dot"), annotation_text="normal a")
    if selected is not None:
        fig.add_vline(x=selected, line=dict(color="#F59E0B", width=1, dash="dash"))
    top = max(2.0, float(df[list(CHANNELS)].max().max()) + 0.2)
    fig.update_layout(**PLOTLY_LAYOUT, height=320, title="Neurochemical history", yaxis=dict(range=[0, top]), xaxis_title="step")
    st.plotly_chart(fig, use_container_width=True, config=PLOTLY_CONFIG)


def _comparison_panel(state: SimulationState, snap: HistorySnapshot) -> None:
    st.markdown("<div class='card'>", unsafe_allow_html=True)
    st.markdown(f"#### 🕘 History sync (step {snap.day})")
    cols = st.columns(len(CHANNELS))
    for col, d in zip(cols, compare_to_snapshot(state, snap)):
        col.metric(CHANNEL_LABELS[d.channel], _pct(d.current), _signed_pct(d.percent))
    if st.button("Clear comparison"):
        st.session_state.selected_day = None
        st.rerun()
    st.markdown("</div>", unsafe_allow_html=True)


def _brain_panel(state: SimulationState, snap: Optional[HistorySnapshot], ps: ProviderStatus) -> None:
    ss = st.session_state
    st.markdown("#### 🧠 Brain scan")

    image: Optional[ImageHandle] = ss.image
    if image is None:
        st.markdown("<div class='small'>No scan yet. Generate one from the current levels.</div>", unsafe_allow_html=True)
    else:
        st.image(image.to_bytes(), use_container_width=True)
        ss.scan_ticks += 1

    c1, c2 = st.columns([1, 2])
    with c1:
        if st.button("Generate scan", disabled=not ps.ok, use_container_width=True):
            with st.spinner("Rendering neural scan (Gemini)…"):
                _generate_scan()
            st.rerun()
    with c2:
        with st.form("edit_scan", clear_on_submit=True):
            instruction = st.text_input("Modify the visual model", placeholder="e.g. highlight the amygdala")
            if st.form_submit_button("Apply", disabled=image is None or not ps.ok):
                with st.spinner("Updating visual model…"):
                    _edit_scan(instruction)
                st.rerun()

    lines = list(ss.image_log)
    if image is not None:
        lines += scan_feed(state, ss.scan_ticks, seed=ss.engine_config.scan_seed)
    if lines:
        st.markdown(f"<div class='scanlog'>{'<br/>'.join(lines)}</div>", unsafe_allow_html=True)

    with st.expander("🔬 Region readouts"):
        for ch in CHANNELS:
            r = region_readout(state, ch, snap)
            hist = f" · was {_pct(r.historical)}" if r.historical is not None else ""
            st.markdown(f"**{r.title}** · {r.chemical} {_pct(r.level)}{hist}")
            st.markdown(f"<div class='small'>{r.status}: {r.description}</div>", unsafe_allow_html=True)


def _benefits_panel(state: SimulationState) -> None:
    st.markdown("#### 🏆 Recovery benefits profile")
    if state.stage != Stage.RECOVERY:
        st.markdown("<div class='small'>Initiate recovery mode to view the benefits profile.</div>", unsafe_allow_html=True)
        return
    for title, text in RECOVERY_BENEFITS:
        st.markdown(f"**{title}**")
        st.markdown(f"<div class='small'>{text}</div>", unsafe_allow_html=True)
    prog = recovery_progress(state)
    st.progress(min(1.0, prog / 100.0), text=f"Goal progress: {prog}% to stability")


# =========================
# UI Pages
# =========================


def page_simulate() -> None:
    ss = st.session_state
    ctl = _ctl()
    state = ctl.state

    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)

    _show_status()

    dev = deviation_score(state)
    a, b, c, d = st.columns([1.0, 1.0, 1.2, 1.0])
    a.metric("Deviation", f"{dev}%", help="Average distance of the three channels from a normal brain.")
    b.metric("Wellness", f"{wellness_score(state)}/100")
    c.metric("Stage", STAGE_LABELS[state.stage])
    d.metric("Substance", SUBSTANCE_LABELS[state.substance])

    for msg in alerts(state):
        st.warning(msg)

    cols = st.columns(len(CHANNELS))
    for col, ch in zip(cols, CHANNELS):
        lvl = float(state.channel(ch).current)
        col.progress(gauge_fraction(lvl), text=f"{CHANNEL_LABELS[ch]}: {_pct(lvl)}")

    st.markdown("<hr class='soft'/>", unsafe_allow_html=True)

    left, right = st.columns([2, 1])
    with left:
        c1, c2 = st.columns([1, 2])
        ss.show_normal = c1.toggle("Normal overlay", value=bool(ss.show_normal))
        options: List[Optional[int]] = [None, *ctl.history.days()]
        ix = options.index(ss.selected_day) if ss.selected_day in options else 0
        ss.selected_day = c2.selectbox(
            "Compare with step",
            options,
            index=ix,
            format_func=lambda x: "—" if x is None else f"Step {x}",
        )
        snap = ctl.find(ss.selected_day)

        _history_chart(ctl.history.to_records(), snap.day if snap else None, bool(ss.show_normal))
        if snap is not None:
            _comparison_panel(state, snap)
    with right:
        _benefits_panel(state)

    st.markdown("<hr class='soft'/>", unsafe_allow_html=True)
    _brain_panel(state, snap, _provider_status())


def page_history() -> None:
    st.title("History")
    st.caption("Snapshots captured in this run (oldest first, last 100 kept).")

    records = _ctl().history.to_records()
    if not records:
        st.info("No history yet.")
        return
    st.dataframe(pd.DataFrame(records), use_container_width=True, hide_index=True)

    st.subheader("Events")
    for item in reversed(_ctl().events):
        st.markdown(f"- `{item.get('seq')}` **{item.get('event')}** {item.get('payload') or ''}")


def page_debug() -> None:
    ss = st.session_state
    st.title("Debug")

    st.subheader("Provider")
    st.json(asdict(_provider_status()))

    st.subheader("EngineConfig")
    cfg = asdict(ss.engine_config)
    cfg["default_substance"] = ss.engine_config.default_substance.value
    st.json(cfg)

    st.subheader("SimulationState")
    st.json(state_to_dict(_ctl().state))


def export_import_controls() -> None:
    ss = st.session_state
    ctl = _ctl()
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Run Export / Import")

    export_payload = make_run_export(config=ctl.config, state=ctl.state, history=ctl.history, events=ctl.events)
    export_payload["meta"] = {
        "app": APP_TITLE,
        "version": APP_VERSION,
        "exported_at": datetime.utcnow().isoformat() + "Z",
    }

    st.sidebar.download_button(
        "Download run",
        data=dumps_run_export(export_payload).encode("utf-8"),
        file_name=f"neuropath_run_{ss.get('run_id', 'run')}.json",
        mime="application/json",
    )

    up = st.sidebar.file_uploader("Load run", type=["json"], accept_multiple_files=False)
    if up is not None and ss.get("loaded_upload") != up.file_id:
        try:
            data = json.loads(up.read().decode("utf-8"))
            cfg, state, history, events = load_run_export(data)
            ss.engine_config = cfg
            ss.controller = SimulationController.restore(cfg, state, history, events)
            ss.selected_day = None
            ss.loaded_upload = up.file_id
            st.sidebar.success("Run loaded.")
            st.rerun()
        except (ValueError, KeyError, TypeError) as e:
            st.sidebar.error(f"Import failed: {e}")


# =========================
# Sidebar
# =========================


def sidebar() -> str:
    state = _ctl().state
    _sync_widgets(state)

    st.sidebar.markdown(f"**{APP_TITLE}**  ")
    st.sidebar.markdown(f"v{APP_VERSION}")
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Chemical profile")

    subs = [s.value for s in Substance]
    st.sidebar.selectbox(
        "Target substance",
        subs,
        key="ui_substance",
        format_func=lambda v: SUBSTANCE_LABELS[Substance(v)],
        on_change=_on_substance,
    )
    stages = [s.value for s in Stage]
    st.sidebar.selectbox(
        "Path stage",
        stages,
        key="ui_stage",
        format_func=lambda v: STAGE_LABELS[Stage(v)],
        on_change=_on_stage,
    )
    st.sidebar.slider(
        "Recovery duration (days)",
        min_value=0,
        max_value=365,
        step=1,
        key="ui_recovery_day",
        on_change=_on_recovery_day,
    )

    st.sidebar.button(
        f"💉 Administer {SUBSTANCE_LABELS[state.substance]}",
        on_click=_on_dose,
        use_container_width=True,
    )
    cols = st.sidebar.columns(2)
    with cols[0]:
        st.button("Initiate recovery", on_click=_on_start_recovery, use_container_width=True)
    with cols[1]:
        st.button("Reset baseline", on_click=_on_reset, use_container_width=True)

    st.sidebar.markdown("---")

    ps = _provider_status()
    if ps.ok:
        st.sidebar.success(f"Gemini ready ({ps.backend} / {ps.model})")
    else:
        st.sidebar.error("Gemini not ready")
        st.sidebar.caption(ps.error or "API key missing")

    export_import_controls()

    st.sidebar.markdown("---")
    page = st.sidebar.radio("Page", ["Simulate", "History", "Debug"], index=0)
    return page


# =========================
# Main
# =========================


def main() -> None:
    _ensure_state()
    page = sidebar()

    if page == "Simulate":
        page_simulate()
    elif page == "History":
        page_history()
    else:
        page_debug()


if __name__ == "__main__":
    main()
