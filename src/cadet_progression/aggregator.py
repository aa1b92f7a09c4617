"""
Batch Aggregator: folds a cohort's progress records into BatchStats.

Pure read. An empty batch is an expected state (new intake, no drills yet)
and yields zero counts for every level and an average accuracy of 0.
The histogram is handed out read-only, since the store memoizes results.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable

from cadet_progression.models import ALL_LEVELS, BatchStats, CadetProgress, ProgressionLevel


def empty_distribution() -> dict[ProgressionLevel, int]:
    return {level: 0 for level in ALL_LEVELS}


def get_batch_stats(records: Iterable[CadetProgress], batch: str) -> BatchStats:
    distribution = empty_distribution()
    total_accuracy = 0.0
    count = 0

    for cadet in records:
        if cadet.batch != batch:
            continue
        distribution[ProgressionLevel.coerce(cadet.current_level)] += 1
        total_accuracy += cadet.total_accuracy
        count += 1

    return BatchStats(
        batch              = batch,
        level_distribution = MappingProxyType(distribution),
        avg_accuracy       = total_accuracy / count if count else 0.0,
    )
