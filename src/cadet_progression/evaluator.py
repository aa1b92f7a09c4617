"""
evaluator.py – Progression Evaluator & Promotion Readiness
==========================================================
Pure functions over a CadetProgress snapshot and the Level Catalog:

  get_progress_to_next_level(progress) → NextLevelProgress
    Gap to the next level on three axes (drills, accuracy, safety) plus a
    single 0–100 percentage for the progress bar.

  check_level_eligibility(progress, target_level) → EligibilityResult
    Yes/no plus human-readable gap lines for an arbitrary target level.

  calculate_level(progress) → ProgressionLevel
    Highest level whose thresholds the raw counters already satisfy.
    Informational only: promotion is always an explicit instructor action.

  unlocked_ai_features(progress) / build_nudges(progress)
    Render helpers for the trainee progression card.

Percentage formula
------------------
Each axis is scored 0–100 and the three scores are averaged with equal
weight:

  drills    min(100, drills / required × 100)          (100 if required == 0)
  accuracy  min(100, accuracy / required × 100)        (100 if required == 0)
  safety    100 if within ceiling, else max(0, 100 − 20 × excess)

The average is rounded half-up. A result of 100 is reserved for the
zero-gap triple; anything short of that is capped at 99.
"""

from __future__ import annotations

import math
from typing import Optional

from cadet_progression.catalog import LevelCatalog, get_catalog
from cadet_progression.models import (
    ALL_LEVELS,
    MAX_LEVEL,
    CadetProgress,
    ContractViolation,
    EligibilityResult,
    LevelRequirements,
    NextLevelProgress,
    Nudge,
    NudgeLevel,
    ProgressionLevel,
)

SAFETY_PENALTY_PER_VIOLATION = 20


def _ratio_score(actual: float, required: float) -> float:
    if required <= 0:
        return 100.0
    return min(100.0, actual / required * 100.0)


def _safety_score(violations: int, ceiling: int) -> float:
    if violations <= ceiling:
        return 100.0
    return max(0.0, 100.0 - (violations - ceiling) * SAFETY_PENALTY_PER_VIOLATION)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def is_max_level(progress: CadetProgress) -> bool:
    return progress.current_level >= MAX_LEVEL


def get_progress_to_next_level(
    progress: CadetProgress,
    catalog: Optional[LevelCatalog] = None,
) -> NextLevelProgress:
    """
    Measure how far *progress* is from the level above its current one.

    Callers must check ``is_max_level`` first: at level 5 there is no next
    level and a ContractViolation is raised rather than a zeroed result,
    which would read as "ready to promote".
    """
    catalog = catalog or get_catalog()
    current = ProgressionLevel.coerce(progress.current_level)
    if current >= MAX_LEVEL:
        raise ContractViolation(
            f"Cadet {progress.od_number} is at the maximum level; there is no next level"
        )

    req = catalog.get_level(current + 1).requirements

    drills_needed   = max(0, req.drills_completed - progress.drills_completed)
    accuracy_needed = max(0.0, req.accuracy - progress.total_accuracy)
    safety_gap      = max(0, progress.safety_violations - req.safety_violations)

    if drills_needed == 0 and accuracy_needed == 0 and safety_gap == 0:
        percentage = 100
    else:
        raw = (
            _ratio_score(progress.drills_completed, req.drills_completed)
            + _ratio_score(progress.total_accuracy, req.accuracy)
            + _safety_score(progress.safety_violations, req.safety_violations)
        ) / 3
        percentage = min(99, _round_half_up(raw))

    return NextLevelProgress(
        percentage      = percentage,
        drills_needed   = drills_needed,
        accuracy_needed = accuracy_needed,
        safety_gap      = safety_gap,
    )


def _meets(progress: CadetProgress, req: LevelRequirements) -> bool:
    return (
        progress.drills_completed >= req.drills_completed
        and progress.total_accuracy >= req.accuracy
        and progress.safety_violations <= req.safety_violations
    )


def calculate_level(
    progress: CadetProgress,
    catalog: Optional[LevelCatalog] = None,
) -> ProgressionLevel:
    """Highest level whose requirements the counters meet (level 1 otherwise)."""
    catalog = catalog or get_catalog()
    for level in reversed(ALL_LEVELS):
        if _meets(progress, catalog.get_level(level).requirements):
            return level
    return ProgressionLevel.ROTE_DRILL


def check_level_eligibility(
    progress: CadetProgress,
    target_level: int,
    catalog: Optional[LevelCatalog] = None,
) -> EligibilityResult:
    catalog = catalog or get_catalog()
    req = catalog.get_level(target_level).requirements
    gaps: list[str] = []

    if progress.drills_completed < req.drills_completed:
        gaps.append(f"Need {req.drills_completed - progress.drills_completed} more drills")
    if progress.total_accuracy < req.accuracy:
        gaps.append(
            f"Accuracy {progress.total_accuracy:g}% below required {req.accuracy:g}%"
        )
    if progress.safety_violations > req.safety_violations:
        gaps.append(
            f"{progress.safety_violations - req.safety_violations} excess safety violations"
        )

    return EligibilityResult(eligible=not gaps, gaps=gaps)


def unlocked_ai_features(
    progress: CadetProgress,
    catalog: Optional[LevelCatalog] = None,
) -> list[str]:
    """All AI features unlocked at or below the cadet's current level, in level order."""
    catalog = catalog or get_catalog()
    current = ProgressionLevel.coerce(progress.current_level)
    features: list[str] = []
    for level in catalog:
        if level.id <= current:
            features.extend(level.ai_unlocks)
    return features


# ─── Nudge builder ────────────────────────────────────────────────────────────

def build_nudges(
    progress: CadetProgress,
    catalog: Optional[LevelCatalog] = None,
) -> list[Nudge]:
    catalog = catalog or get_catalog()
    current = catalog.get_level(progress.current_level)

    if is_max_level(progress):
        return [Nudge(
            level=NudgeLevel.INFO,
            title=f"Level {int(current.id)}: {current.name}",
            message=(
                "You have reached the top of the progression scale. "
                "Keep your accuracy up and your violation count at zero."
            ),
        )]

    nxt = catalog.get_level(current.id + 1)
    nlp = get_progress_to_next_level(progress, catalog)

    if nlp.ready_for_promotion:
        return [Nudge(
            level=NudgeLevel.SUCCESS,
            title=f"Ready for Level {int(nxt.id)} 🎉",
            message=(
                f"All requirements for **{nxt.name}** are met. "
                "Ask your instructor to approve the level-up."
            ),
        )]

    nudges: list[Nudge] = []
    if nlp.safety_gap > 0:
        nudges.append(Nudge(
            level=NudgeLevel.DANGER,
            title="Safety record blocks promotion",
            message=(
                f"You have **{nlp.safety_gap}** excess violations. "
                f"Level {int(nxt.id)} allows at most "
                f"{nxt.requirements.safety_violations}."
            ),
        ))
    if nlp.drills_needed > 0:
        nudges.append(Nudge(
            level=NudgeLevel.WARNING,
            title="More drills needed",
            message=(
                f"**{nlp.drills_needed}** more drills needed "
                f"({progress.drills_completed} / {nxt.requirements.drills_completed})."
            ),
        ))
    if nlp.accuracy_needed > 0:
        nudges.append(Nudge(
            level=NudgeLevel.WARNING,
            title="Accuracy below target",
            message=(
                f"Need **{nlp.accuracy_needed:.3g}%** more accuracy "
                f"({progress.total_accuracy:.4g}% / {nxt.requirements.accuracy:g}%)."
            ),
        ))
    return nudges
