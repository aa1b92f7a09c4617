"""
seed_demo_data.py
─────────────────
Demo cohort for the trainee and command dashboards: five cadets across two
batches, spread over every progression level.

Print the cohort:
    python -m cadet_progression.seed_demo_data
"""

from __future__ import annotations

from datetime import date

from cadet_progression.models import CadetProgress
from cadet_progression.store import ProgressionStore


# ─────────────────────────────────────────────────────────────────────────────
# Helper: keeps each row on one readable line
# ─────────────────────────────────────────────────────────────────────────────

def _cadet(
    od_number: str,
    name: str,
    batch: str,
    level: int,
    drills: int,
    accuracy: float,
    violations: int,
    certifications: list[int],
    level_start: str,
    last_activity: str,
) -> CadetProgress:
    return CadetProgress(
        od_number          = od_number,
        name               = name,
        batch              = batch,
        current_level      = level,
        drills_completed   = drills,
        total_accuracy     = accuracy,
        safety_violations  = violations,
        certifications     = set(certifications),
        level_start_date   = date.fromisoformat(level_start),
        last_activity_date = date.fromisoformat(last_activity),
    )


def demo_cadets() -> list[CadetProgress]:
    return [
        _cadet("OD-2024-001", "Cadet Arjun Singh",  "Batch-2024-A", 3,  32, 82, 2, [1, 2],       "2024-11-15", "2025-01-20"),
        _cadet("OD-2024-002", "Cadet Priya Sharma", "Batch-2024-A", 4,  58, 96, 0, [1, 2, 3],    "2024-10-01", "2025-01-21"),
        _cadet("OD-2024-003", "Cadet Rahul Verma",  "Batch-2024-A", 2,  15, 71, 4, [1],          "2024-12-01", "2025-01-19"),
        _cadet("OD-2024-004", "Cadet Amit Kumar",   "Batch-2024-B", 1,   5, 65, 3, [],           "2025-01-01", "2025-01-18"),
        _cadet("OD-2024-005", "Cadet Neha Patel",   "Batch-2024-B", 5, 112, 98, 0, [1, 2, 3, 4], "2024-06-01", "2025-01-21"),
    ]


def build_demo_store(**kwargs) -> ProgressionStore:
    """A fresh store pre-loaded with the demo cohort."""
    return ProgressionStore(cadets=demo_cadets(), **kwargs)


# ─────────────────────────────────────────────────────────────────────────────
# Main
# ─────────────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    store = build_demo_store()
    print(f"🌱 Demo cohort: {len(store)} cadets")
    for batch in store.batches():
        stats = store.get_batch_stats(batch)
        print(f"  {batch}: {stats.cadet_count} cadets, {stats.avg_accuracy:.0f}% avg accuracy")
        for cadet in store.cadets_in_batch(batch):
            print(f"    L{int(cadet.current_level)}  {cadet.od_number}  {cadet.name}")
