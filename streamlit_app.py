# streamlit_app.py – OAKSIP My Progression
# Trainee view of the 5-level artillery training mastery scale

import logging
import sys
from pathlib import Path

# make src/ importable without installing the package
sys.path.insert(0, str(Path(__file__).parent / "src"))

import streamlit as st

from cadet_progression.config import get_settings
from cadet_progression.dashboard import progress_gauge, requirements_frame
from cadet_progression.evaluator import (
    build_nudges,
    get_progress_to_next_level,
    is_max_level,
    unlocked_ai_features,
)
from cadet_progression.models import ContractViolation, NudgeLevel, UnknownCadet
from cadet_progression.seed_demo_data import build_demo_store
from cadet_progression.store import ProgressionStore

settings = get_settings()
logging.basicConfig(
    level=settings.app.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("oaksip.my_progression")

# Color constants
BG_CARD      = "#FFFFFF"
TEXT_PRIMARY = "#1B1B1B"
TEXT_MUTED   = "#616161"
BORDER       = "#E1DFDD"

NUDGE_RENDERER = {
    NudgeLevel.DANGER:  st.error,
    NudgeLevel.WARNING: st.warning,
    NudgeLevel.INFO:    st.info,
    NudgeLevel.SUCCESS: st.success,
}

st.set_page_config(
    page_title="OAKSIP – My Progression",
    page_icon="🎯",
    layout="wide",
    initial_sidebar_state="expanded",
)


def _get_store() -> ProgressionStore:
    """One store per browser session; seeded with the demo cohort when enabled."""
    if "progression_store" not in st.session_state:
        st.session_state["progression_store"] = (
            build_demo_store() if settings.progression.seed_demo_data else ProgressionStore()
        )
    return st.session_state["progression_store"]


def _level_card(level_def, active: bool, certified: bool) -> str:
    border = level_def.color if active else BORDER
    mark = "✅" if certified else ("▶" if active else "")
    return f"""
    <div style="background:{BG_CARD};border:2px solid {border};border-radius:6px;
                padding:10px 12px;min-height:96px;">
      <div style="color:{level_def.color};font-size:0.72rem;font-weight:700;
                  text-transform:uppercase;letter-spacing:.06em;">Level {int(level_def.id)} {mark}</div>
      <div style="color:{TEXT_PRIMARY};font-weight:700;">{level_def.name}</div>
      <div style="color:{TEXT_MUTED};font-size:0.78rem;">{level_def.description}</div>
    </div>"""


store = _get_store()

# ─── Sidebar: cadet picker + drill logger ────────────────────────────────────
with st.sidebar:
    st.markdown("### 🎯 My Progression")
    od_numbers = sorted(store.cadets)
    default_od = settings.progression.default_od_number
    od_number = st.selectbox(
        "OD number",
        od_numbers or [default_od],
        index=od_numbers.index(default_od) if default_od in od_numbers else 0,
    )

    st.markdown("---")
    st.markdown("**Log a completed drill**")
    with st.form("drill_form", clear_on_submit=True):
        accuracy = st.slider("Drill accuracy (%)", 0, 100, 85)
        violation = st.checkbox("Safety violation recorded")
        logged = st.form_submit_button("Record drill", use_container_width=True)
    if logged:
        try:
            store.record_drill_completion(od_number, accuracy, violation)
            st.success("Drill recorded.")
        except ContractViolation as exc:
            st.error(str(exc))

    st.markdown("---")
    for name, status in settings.status_summary().items():
        st.caption(f"{name}: {status}")


# ─── Main panel ──────────────────────────────────────────────────────────────
progress = store.get_cadet_progress(od_number)
if progress is None:
    st.info("Progression data not found. Record a drill to start tracking this cadet.")
    st.stop()

catalog = store.catalog
current = catalog.get_level(progress.current_level)

st.title(f"{progress.name or progress.od_number}")
st.caption(
    f"{progress.od_number} · {progress.batch or 'No batch'} · "
    f"Level {int(current.id)} since {progress.level_start_date.isoformat()}"
)

# Progression path
cols = st.columns(len(catalog))
for col, level_def in zip(cols, catalog):
    with col:
        st.markdown(
            _level_card(
                level_def,
                active=level_def.id == progress.current_level,
                certified=progress.is_certified(level_def.id),
            ),
            unsafe_allow_html=True,
        )

# Stats
m1, m2, m3 = st.columns(3)
m1.metric("Drills completed", progress.drills_completed)
m2.metric("Accuracy", f"{progress.total_accuracy:.4g}%")
m3.metric("Safety violations", progress.safety_violations)

try:
    left, right = st.columns([1, 1])
    with left:
        st.plotly_chart(progress_gauge(progress, catalog), use_container_width=True)
        for nudge in build_nudges(progress, catalog):
            NUDGE_RENDERER[nudge.level](f"**{nudge.title}** — {nudge.message}")

    with right:
        if is_max_level(progress):
            st.subheader("Requirements")
            st.caption("Maximum level reached.")
        else:
            nxt = catalog.get_level(progress.current_level + 1)
            nlp = get_progress_to_next_level(progress, catalog)
            st.subheader(f"Level {int(nxt.id)}: {nxt.name}")
            st.dataframe(requirements_frame(progress, catalog), hide_index=True, use_container_width=True)
            if nlp.ready_for_promotion:
                st.caption("All requirements met. Promotion awaits instructor approval.")
            st.markdown("**Unlocks at next level**")
            for feature in nxt.ai_unlocks:
                st.markdown(f"- 🔒 {feature}")
            st.markdown("**Safety gates**")
            for gate in nxt.safety_gates:
                st.markdown(f"- {gate}")
except (ContractViolation, UnknownCadet):
    logger.exception("Progression view failed for %s", od_number)
    st.error("Progression data unavailable for this cadet.")
    st.stop()

st.subheader("Unlocked AI features")
for feature in unlocked_ai_features(progress, catalog):
    st.markdown(f"- ✅ {feature}")

st.subheader("Certifications")
st.markdown(
    " ".join(
        f"`L{int(level_def.id)} {'✓' if progress.is_certified(level_def.id) else '·'}`"
        for level_def in catalog
    )
)
