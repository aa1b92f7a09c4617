"""
pages/1_Command_Dashboard.py – Instructor command dashboard.

Batch level distribution across the progression scale, plus the promotion
queue: cadets whose counters meet every next-level requirement and who are
waiting on an instructor to approve the level-up. Protected by a
session-scoped mock login gate.
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import streamlit as st

from cadet_progression.config import get_settings
from cadet_progression.dashboard import batch_distribution_figure, batch_distribution_frame
from cadet_progression.evaluator import get_progress_to_next_level, is_max_level
from cadet_progression.models import ContractViolation, UnknownCadet
from cadet_progression.seed_demo_data import build_demo_store
from cadet_progression.store import ProgressionStore

settings = get_settings()

# ─── Page config ─────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="Command Dashboard – OAKSIP",
    page_icon="📊",
    layout="wide",
)


def _get_store() -> ProgressionStore:
    if "progression_store" not in st.session_state:
        st.session_state["progression_store"] = (
            build_demo_store() if settings.progression.seed_demo_data else ProgressionStore()
        )
    return st.session_state["progression_store"]


# ─── Login gate ───────────────────────────────────────────────────────────────

if "instructor_logged_in" not in st.session_state:
    st.session_state["instructor_logged_in"] = False


def _show_login() -> None:
    st.markdown("## 🔐 Instructor Access")
    st.caption("The command dashboard is restricted to instructors.")
    with st.form("instructor_login_form", clear_on_submit=False):
        username = st.text_input("Username", placeholder=settings.instructor.username)
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In →", type="primary", use_container_width=True)

    if submitted:
        if (
            settings.instructor.is_configured
            and username == settings.instructor.username
            and password == settings.instructor.password
        ):
            st.session_state["instructor_logged_in"] = True
            st.session_state["instructor_name"] = username
            st.rerun()
        else:
            st.error("Invalid credentials. Please try again.")


if not st.session_state["instructor_logged_in"]:
    _show_login()
    st.stop()


store = _get_store()
instructor = st.session_state.get("instructor_name", settings.instructor.username)

with st.sidebar:
    st.markdown("### 📊 Command Dashboard")
    st.markdown(f"Signed in as **{instructor}**")
    if st.button("Sign Out", use_container_width=True):
        st.session_state["instructor_logged_in"] = False
        st.rerun()

st.title("Command Dashboard")

# ─── Batch Progression Level Distribution ─────────────────────────────────────
st.subheader("Batch Progression Level Distribution")
batches = list(settings.progression.default_batches) or store.batches()
for extra in store.batches():
    if extra not in batches:
        batches.append(extra)

try:
    frame = batch_distribution_frame(store, batches)
except ContractViolation:
    st.error("Batch statistics unavailable.")
    st.stop()

for batch in batches:
    stats = store.get_batch_stats(batch)
    st.caption(f"**{batch}** — {stats.cadet_count} cadets, {stats.avg_accuracy:.0f}% avg accuracy")
st.plotly_chart(batch_distribution_figure(frame), use_container_width=True)

with st.expander("Distribution table"):
    st.dataframe(
        frame.pivot(index="batch", columns="level", values="count"),
        use_container_width=True,
    )

# ─── Promotion queue ──────────────────────────────────────────────────────────
st.subheader("Promotion queue")
ready = [
    cadet for cadet in store.cadets.values()
    if not is_max_level(cadet)
    and get_progress_to_next_level(cadet, store.catalog).ready_for_promotion
]

if not ready:
    st.caption("No cadet currently meets every next-level requirement.")

for cadet in sorted(ready, key=lambda c: c.od_number):
    target = cadet.current_level + 1
    c1, c2 = st.columns([3, 1])
    c1.markdown(
        f"**{cadet.name or cadet.od_number}** ({cadet.od_number}, {cadet.batch}) — "
        f"Level {int(cadet.current_level)} → {target}: {store.catalog.get_level(target).name}"
    )
    if c2.button("Approve", key=f"promote_{cadet.od_number}"):
        try:
            store.promote_to_level(cadet.od_number, target, approved_by=instructor)
            st.success(f"{cadet.od_number} promoted to level {target}.")
            st.rerun()
        except (ContractViolation, UnknownCadet) as exc:
            st.error(str(exc))
