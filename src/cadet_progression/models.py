"""
Data models for the Cadet Progression Engine.

Level definitions and cadet records are pydantic models (validated on the
way in); evaluator / aggregator outputs are plain dataclasses that the
dashboards render directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ─── Errors ──────────────────────────────────────────────────────────────────

class ContractViolation(ValueError):
    """A caller broke the engine's contract (bad level, max-level query, …)."""


class UnknownCadet(KeyError):
    """No progress record exists for the requested OD number."""


# ─── Enumerations ────────────────────────────────────────────────────────────

class ProgressionLevel(IntEnum):
    """The five-step mastery scale. Closed: there is no level 0 or 6."""
    ROTE_DRILL               = 1
    CONCEPTUAL_UNDERSTANDING = 2
    SPATIAL_AWARENESS        = 3
    ERROR_FREE_EXECUTION     = 4
    TACTICAL_REASONING       = 5

    @classmethod
    def coerce(cls, value: int) -> "ProgressionLevel":
        """Return the enum member for *value* or raise ContractViolation.

        Only whole numbers are accepted; 2.7 is not level 2.
        """
        try:
            as_int = int(value)
            if isinstance(value, bool) or as_int != value:
                raise ValueError(value)
            return cls(as_int)
        except (TypeError, ValueError):
            raise ContractViolation(f"Level {value!r} is not a whole level in 1..5") from None


MAX_LEVEL = ProgressionLevel.TACTICAL_REASONING
ALL_LEVELS: tuple[ProgressionLevel, ...] = tuple(ProgressionLevel)


class NudgeLevel(str, Enum):
    DANGER  = "danger"   # red
    WARNING = "warning"  # amber
    INFO    = "info"     # blue
    SUCCESS = "success"  # green


# ─── Level Catalog models ────────────────────────────────────────────────────

class LevelRequirements(BaseModel):
    """Thresholds a cadet must meet to hold a level."""
    model_config = ConfigDict(frozen=True)

    drills_completed:  int   = Field(ge=0)
    accuracy:          float = Field(ge=0.0, le=100.0)
    safety_violations: int   = Field(ge=0, description="Maximum allowed")


class LevelDefinition(BaseModel):
    """One row of the Level Catalog."""
    model_config = ConfigDict(frozen=True)

    id:           ProgressionLevel
    name:         str
    description:  str
    color:        str                   # display hint only
    icon:         str = ""
    requirements: LevelRequirements
    ai_unlocks:   tuple[str, ...] = ()
    safety_gates: tuple[str, ...] = ()


# ─── Cadet Progress Record ───────────────────────────────────────────────────

class CadetProgress(BaseModel):
    """
    Per-trainee progression state.

    Counters are cumulative; only the store mutates them, and only upward.
    ``certifications`` may never name a level above ``current_level``.
    """
    od_number:          str = Field(min_length=1)
    name:               str = ""
    batch:              str = ""
    current_level:      ProgressionLevel = ProgressionLevel.ROTE_DRILL
    drills_completed:   int   = Field(default=0, ge=0)
    total_accuracy:     float = Field(default=0.0, ge=0.0, le=100.0)
    safety_violations:  int   = Field(default=0, ge=0)
    certifications:     set[ProgressionLevel] = Field(default_factory=set)
    level_start_date:   date = Field(default_factory=date.today)
    last_activity_date: date = Field(default_factory=date.today)

    @model_validator(mode="after")
    def _certifications_not_above_level(self) -> "CadetProgress":
        above = sorted(int(lvl) for lvl in self.certifications if lvl > self.current_level)
        if above:
            raise ValueError(
                f"certifications {above} exceed current level {int(self.current_level)}"
            )
        return self

    def is_certified(self, level: int) -> bool:
        return ProgressionLevel.coerce(level) in self.certifications


# ─── Evaluator / aggregator outputs ──────────────────────────────────────────

@dataclass(frozen=True)
class NextLevelProgress:
    """Distance from a cadet's current counters to the next level's thresholds."""
    percentage:      int     # 0–100
    drills_needed:   int
    accuracy_needed: float
    safety_gap:      int     # excess violations over the next level's ceiling

    @property
    def ready_for_promotion(self) -> bool:
        """True only for the exact zero-gap triple."""
        return (
            self.drills_needed == 0
            and self.accuracy_needed == 0
            and self.safety_gap == 0
        )


@dataclass(frozen=True)
class EligibilityResult:
    eligible: bool
    gaps:     list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BatchStats:
    """Derived per-batch summary. Recomputed on read, never stored."""
    batch:              str
    level_distribution: Mapping[ProgressionLevel, int]
    avg_accuracy:       float

    @property
    def cadet_count(self) -> int:
        return sum(self.level_distribution.values())


@dataclass
class Nudge:
    """A single actionable message for the trainee progression card."""
    level:   NudgeLevel
    title:   str
    message: str
