"""
dashboard.py — View-model builders for the progression dashboards
==================================================================
Turns engine outputs into pandas frames and plotly figures so the
Streamlit pages stay thin and the shaping logic stays testable.

  batch_distribution_frame(store, batches)   long-form level histogram
  batch_distribution_figure(frame)           stacked horizontal bars
  requirements_frame(progress)               current vs required, next level
  progress_gauge(progress)                   next-level gauge
"""

from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd
import plotly.graph_objects as go

from cadet_progression.catalog import LevelCatalog, get_catalog
from cadet_progression.evaluator import get_progress_to_next_level, is_max_level
from cadet_progression.models import CadetProgress
from cadet_progression.store import ProgressionStore

GREEN = "#107C41"
GREY  = "#616161"

DISTRIBUTION_COLUMNS = [
    "batch", "level", "level_name", "count", "share_pct", "cadets", "avg_accuracy", "color",
]


def batch_distribution_frame(
    store: ProgressionStore,
    batches: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """One row per (batch, level); every level appears even at count 0."""
    batches = list(batches) if batches is not None else store.batches()
    rows = []
    for batch in batches:
        stats = store.get_batch_stats(batch)
        total = stats.cadet_count
        for level_def in store.catalog:
            count = stats.level_distribution[level_def.id]
            rows.append({
                "batch":        batch,
                "level":        int(level_def.id),
                "level_name":   level_def.name,
                "count":        count,
                "share_pct":    round(count / total * 100, 1) if total else 0.0,
                "cadets":       total,
                "avg_accuracy": round(stats.avg_accuracy, 1),
                "color":        level_def.color,
            })
    return pd.DataFrame(rows, columns=DISTRIBUTION_COLUMNS)


def batch_distribution_figure(frame: pd.DataFrame) -> go.Figure:
    fig = go.Figure()
    if frame.empty:
        return fig

    for level, level_rows in frame.groupby("level", sort=True):
        first = level_rows.iloc[0]
        fig.add_trace(go.Bar(
            name=f"L{level}: {first['level_name']}",
            y=level_rows["batch"],
            x=level_rows["share_pct"],
            orientation="h",
            marker=dict(color=first["color"]),
            text=[f"L{level}" if share > 10 else "" for share in level_rows["share_pct"]],
            textposition="inside",
            customdata=level_rows[["count"]].to_numpy(),
            hovertemplate=(
                "<b>%{y}</b><br>"
                f"Level {level}: " + "%{customdata[0]} cadets (%{x:.0f}%)<extra></extra>"
            ),
        ))

    fig.update_layout(
        barmode="stack",
        height=120 + 50 * frame["batch"].nunique(),
        margin=dict(l=10, r=20, t=30, b=20),
        xaxis=dict(range=[0, 100], ticksuffix="%", showgrid=False),
        yaxis=dict(autorange="reversed"),
        paper_bgcolor="white",
        plot_bgcolor="white",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0),
    )
    return fig


def requirements_frame(
    progress: CadetProgress,
    catalog: Optional[LevelCatalog] = None,
) -> pd.DataFrame:
    """Current counters against the next level's thresholds (empty at level 5)."""
    columns = ["requirement", "current", "required", "gap", "met"]
    if is_max_level(progress):
        return pd.DataFrame(columns=columns)

    catalog = catalog or get_catalog()
    req = catalog.get_level(progress.current_level + 1).requirements
    nlp = get_progress_to_next_level(progress, catalog)
    # met is decided on the exact gap; only the displayed numbers are rounded
    rows = [
        ("Drills completed",        progress.drills_completed,  req.drills_completed,  nlp.drills_needed),
        ("Accuracy %",              progress.total_accuracy,    req.accuracy,          nlp.accuracy_needed),
        ("Safety violations (max)", progress.safety_violations, req.safety_violations, nlp.safety_gap),
    ]
    return pd.DataFrame(
        [(name, round(cur, 2), need, round(gap, 2), gap == 0) for name, cur, need, gap in rows],
        columns=columns,
    )


def progress_gauge(
    progress: CadetProgress,
    catalog: Optional[LevelCatalog] = None,
) -> go.Figure:
    catalog = catalog or get_catalog()
    current = catalog.get_level(progress.current_level)

    if is_max_level(progress):
        value, title = 100, f"Level {int(current.id)}: {current.name}"
    else:
        nxt = catalog.get_level(current.id + 1)
        value = get_progress_to_next_level(progress, catalog).percentage
        title = f"Progress to Level {int(nxt.id)}<br><span style='font-size:0.85rem;color:{GREY};'>{nxt.name}</span>"

    fig = go.Figure(go.Indicator(
        mode  = "gauge+number",
        value = value,
        gauge = {
            "axis": {"range": [0, 100], "ticksuffix": "%"},
            "bar":  {"color": GREEN if value == 100 else current.color, "thickness": 0.25},
        },
        title  = {"text": title},
        number = {"suffix": "%"},
    ))
    fig.update_layout(height=260, margin=dict(t=60, b=10, l=20, r=20), paper_bgcolor="white")
    return fig
