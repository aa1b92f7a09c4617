"""
catalog.py — Level Catalog for the 5-step cadet mastery scale
=============================================================
Static, process-wide table of progression levels. Each level carries the
thresholds a cadet must hold (drills, accuracy, maximum safety
violations), the AI features it unlocks and the safety gates attached
to it.

Load-time invariants (checked once by ``LevelCatalog.__init__``)
----------------------------------------------------------------
  * exactly one entry per level 1..5
  * drills_completed and accuracy never decrease as the level rises
  * the safety_violations ceiling never increases as the level rises

Lookups after construction never re-check these.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from cadet_progression.models import (
    ALL_LEVELS,
    MAX_LEVEL,
    ContractViolation,
    LevelDefinition,
    ProgressionLevel,
)

logger = logging.getLogger(__name__)


# ─── Default level table ─────────────────────────────────────────────────────

PROGRESSION_LEVELS: list[dict] = [
    {
        "id":          1,
        "name":        "Rote Drill",
        "description": "Memorize and execute drill steps with AI guidance",
        "color":       "#6b7280",   # gray
        "icon":        "BookOpen",
        # Entry level: no drills or accuracy needed. The ceiling matches
        # level 2 so the catalog stays monotonic.
        "requirements": {"drills_completed": 0, "accuracy": 0, "safety_violations": 5},
        "ai_unlocks": [
            "Step-by-step drill guidance",
            "Voice commands for each action",
            "Immediate error correction",
        ],
        "safety_gates": [
            "Basic safety briefing completed",
            "Supervisor present required",
        ],
    },
    {
        "id":          2,
        "name":        "Conceptual Understanding",
        "description": "Understand WHY each step matters, doctrine knowledge",
        "color":       "#3b82f6",   # blue
        "icon":        "Brain",
        "requirements": {"drills_completed": 10, "accuracy": 70, "safety_violations": 5},
        "ai_unlocks": [
            "Doctrine explanations on demand",
            "Why-based questioning",
            "Component function details",
        ],
        "safety_gates": [
            "Level 1 certified",
            "Written test passed (60%+)",
        ],
    },
    {
        "id":          3,
        "name":        "Spatial Awareness",
        "description": "3D visualization mastery, component identification",
        "color":       "#8b5cf6",   # purple
        "icon":        "Box",
        "requirements": {"drills_completed": 25, "accuracy": 80, "safety_violations": 3},
        "ai_unlocks": [
            "Full 3D Digital Twin interaction",
            "Exploded view analysis",
            "X-ray mode for internals",
            "Trajectory visualization",
        ],
        "safety_gates": [
            "Level 2 certified",
            "3D assessment passed",
            "No major violations in 10 drills",
        ],
    },
    {
        "id":          4,
        "name":        "Error-Free Execution",
        "description": "Execute drills without mistakes under time pressure",
        "color":       "#10b981",   # green
        "icon":        "CheckCircle",
        "requirements": {"drills_completed": 50, "accuracy": 95, "safety_violations": 1},
        "ai_unlocks": [
            "Timed drill assessments",
            "Performance analytics",
            "Comparative benchmarking",
            "Certification examinations",
        ],
        "safety_gates": [
            "Level 3 certified",
            "5 consecutive error-free drills",
            "Instructor sign-off",
        ],
    },
    {
        "id":          5,
        "name":        "Tactical Reasoning",
        "description": "Apply doctrine in scenarios, make tactical decisions",
        "color":       "#f59e0b",   # amber/gold
        "icon":        "Target",
        "requirements": {"drills_completed": 100, "accuracy": 98, "safety_violations": 0},
        "ai_unlocks": [
            "Scenario-based training",
            "FDC calculations",
            "Multi-gun coordination",
            "Emergency drill simulation",
            "After Action Review (AAR)",
        ],
        "safety_gates": [
            "Level 4 certified",
            "Tactical assessment passed",
            "Zero safety violations in 20 drills",
            "Board examination cleared",
        ],
    },
]


# ─── Catalog ─────────────────────────────────────────────────────────────────

class LevelCatalog:
    """Immutable lookup over the five level definitions."""

    def __init__(self, levels: Iterable[LevelDefinition | dict]) -> None:
        parsed = [
            lvl if isinstance(lvl, LevelDefinition) else LevelDefinition.model_validate(lvl)
            for lvl in levels
        ]
        ids = sorted(lvl.id for lvl in parsed)
        if ids != list(ALL_LEVELS):
            raise ContractViolation(
                f"Level catalog must define each of levels 1..5 exactly once, got {[int(i) for i in ids]}"
            )

        by_id = {lvl.id: lvl for lvl in parsed}
        for lower, upper in zip(ALL_LEVELS, ALL_LEVELS[1:]):
            lo, hi = by_id[lower].requirements, by_id[upper].requirements
            if hi.drills_completed < lo.drills_completed:
                raise ContractViolation(
                    f"Level {int(upper)} requires fewer drills than level {int(lower)}"
                )
            if hi.accuracy < lo.accuracy:
                raise ContractViolation(
                    f"Level {int(upper)} requires lower accuracy than level {int(lower)}"
                )
            if hi.safety_violations > lo.safety_violations:
                raise ContractViolation(
                    f"Level {int(upper)} allows more safety violations than level {int(lower)}"
                )

        self._levels: dict[ProgressionLevel, LevelDefinition] = {
            lvl_id: by_id[lvl_id] for lvl_id in ALL_LEVELS
        }
        logger.debug("Level catalog loaded: %s", [lvl.name for lvl in self])

    def get_level(self, level: int) -> LevelDefinition:
        """Return the definition for *level*; ContractViolation outside 1..5."""
        return self._levels[ProgressionLevel.coerce(level)]

    def next_level(self, level: int) -> Optional[LevelDefinition]:
        current = ProgressionLevel.coerce(level)
        if current >= MAX_LEVEL:
            return None
        return self._levels[ProgressionLevel(current + 1)]

    def __iter__(self) -> Iterator[LevelDefinition]:
        return iter(self._levels.values())

    def __len__(self) -> int:
        return len(self._levels)


_default_catalog: Optional[LevelCatalog] = None


def get_catalog() -> LevelCatalog:
    """Return the default catalog, building it on first use."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = LevelCatalog(PROGRESSION_LEVELS)
    return _default_catalog


def get_level(level: int) -> LevelDefinition:
    """Shortcut for ``get_catalog().get_level(level)``."""
    return get_catalog().get_level(level)
