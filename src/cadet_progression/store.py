"""
store.py — ProgressionStore: the explicit state container for cadet records
===========================================================================
Holds every CadetProgress record for one process (a Streamlit session, the
terminal demo, a test). Callers construct it and pass it around; there is
no module-level instance.

Mutation rules
--------------
- Records are replaced, never edited in place: every change re-validates a
  fresh CadetProgress built from the old one plus the updates.
- drills_completed and safety_violations only ever go up.
- current_level and certifications change only through promote_to_level,
  which is an explicit, instructor-approved action. Nothing here promotes
  automatically.
- Every mutation bumps ``version``; get_batch_stats memoizes on
  (batch, version) so cached stats can never outlive the data they
  describe.

All calls are synchronous and expected on one thread; last writer wins.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable, Optional

from cadet_progression.aggregator import get_batch_stats as _aggregate
from cadet_progression.catalog import LevelCatalog, get_catalog
from cadet_progression.evaluator import check_level_eligibility as _check_eligibility
from cadet_progression.models import (
    BatchStats,
    CadetProgress,
    ContractViolation,
    EligibilityResult,
    ProgressionLevel,
    UnknownCadet,
)

logger = logging.getLogger(__name__)

_APPEND_ONLY   = ("drills_completed", "safety_violations")
_PROMOTION_ONLY = ("current_level", "certifications", "level_start_date")


class ProgressionStore:
    """In-memory repository of CadetProgress records keyed by OD number."""

    def __init__(
        self,
        cadets: Optional[Iterable[CadetProgress]] = None,
        catalog: Optional[LevelCatalog] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.catalog = catalog or get_catalog()
        self._today = today
        self._cadets: dict[str, CadetProgress] = {}
        self._version = 0
        self._stats_cache: dict[tuple[str, int], BatchStats] = {}
        for cadet in cadets or ():
            self._cadets[cadet.od_number] = cadet

    # ── Read side ─────────────────────────────────────────────────────────────

    @property
    def version(self) -> int:
        return self._version

    @property
    def cadets(self) -> dict[str, CadetProgress]:
        return dict(self._cadets)

    def __len__(self) -> int:
        return len(self._cadets)

    def __contains__(self, od_number: object) -> bool:
        return od_number in self._cadets

    def get_cadet_progress(self, od_number: str) -> Optional[CadetProgress]:
        return self._cadets.get(od_number)

    def batches(self) -> list[str]:
        return sorted({c.batch for c in self._cadets.values() if c.batch})

    def cadets_in_batch(self, batch: str) -> list[CadetProgress]:
        return sorted(
            (c for c in self._cadets.values() if c.batch == batch),
            key=lambda c: c.od_number,
        )

    def check_level_eligibility(self, od_number: str, target_level: int) -> EligibilityResult:
        cadet = self._cadets.get(od_number)
        if cadet is None:
            return EligibilityResult(eligible=False, gaps=["Cadet not found"])
        return _check_eligibility(cadet, target_level, self.catalog)

    def get_batch_stats(self, batch: str) -> BatchStats:
        key = (batch, self._version)
        stats = self._stats_cache.get(key)
        if stats is None:
            # Entries from older versions are stale; drop them wholesale.
            self._stats_cache = {k: v for k, v in self._stats_cache.items() if k[1] == self._version}
            stats = _aggregate(self._cadets.values(), batch)
            self._stats_cache[key] = stats
        return stats

    # ── Write side ────────────────────────────────────────────────────────────

    def _require(self, od_number: str) -> CadetProgress:
        try:
            return self._cadets[od_number]
        except KeyError:
            raise UnknownCadet(od_number) from None

    def _build(self, cadet: CadetProgress, updates: dict[str, Any]) -> CadetProgress:
        data = cadet.model_dump()
        data.update(updates)
        return CadetProgress.model_validate(data)

    def _store(self, record: CadetProgress) -> CadetProgress:
        self._cadets[record.od_number] = record
        self._version += 1
        return record

    def ensure_cadet(self, od_number: str, name: str = "", batch: str = "") -> CadetProgress:
        """Return the cadet's record, creating a level-1 zero-counter one if absent."""
        existing = self._cadets.get(od_number)
        if existing is not None:
            return existing
        today = self._today()
        record = CadetProgress(
            od_number          = od_number,
            name               = name,
            batch              = batch,
            level_start_date   = today,
            last_activity_date = today,
        )
        self._store(record)
        logger.info("Created progress record for %s (%s)", od_number, batch or "no batch")
        return record

    def update_cadet_progress(self, od_number: str, **updates: Any) -> CadetProgress:
        cadet = self._require(od_number)

        unknown = set(updates) - set(CadetProgress.model_fields)
        if unknown:
            raise ContractViolation(f"Unknown progress fields: {sorted(unknown)}")
        if "od_number" in updates and updates["od_number"] != od_number:
            raise ContractViolation("od_number cannot be changed")
        locked = [f for f in _PROMOTION_ONLY if f in updates]
        if locked:
            raise ContractViolation(f"{locked} change only through promote_to_level")

        updates.setdefault("last_activity_date", self._today())
        # Validate first so the counter comparison below sees typed values.
        record = self._build(cadet, updates)
        for counter in _APPEND_ONLY:
            if getattr(record, counter) < getattr(cadet, counter):
                raise ContractViolation(
                    f"{counter} is cumulative and cannot decrease "
                    f"({getattr(cadet, counter)} → {getattr(record, counter)})"
                )
        self._store(record)
        logger.debug("Updated %s: %s", od_number, sorted(updates))
        return record

    def record_drill_completion(
        self,
        od_number: str,
        accuracy: float,
        safety_violation: bool = False,
        *,
        name: str = "",
        batch: str = "",
    ) -> CadetProgress:
        """Fold one completed drill into the cadet's counters."""
        if not 0 <= accuracy <= 100:
            raise ContractViolation(f"Drill accuracy {accuracy!r} is outside 0–100")

        cadet = self.ensure_cadet(od_number, name=name, batch=batch)
        drills = cadet.drills_completed + 1
        running = (cadet.total_accuracy * cadet.drills_completed + accuracy) / drills

        record = self._store(self._build(cadet, {
            "drills_completed":   drills,
            "total_accuracy":     min(100.0, running),
            "safety_violations":  cadet.safety_violations + (1 if safety_violation else 0),
            "last_activity_date": self._today(),
        }))
        logger.debug(
            "Drill recorded for %s: accuracy=%.1f violation=%s → drills=%d avg=%.2f",
            od_number, accuracy, safety_violation, record.drills_completed, record.total_accuracy,
        )
        return record

    def promote_to_level(
        self,
        od_number: str,
        level: int,
        approved_by: str,
        force: bool = False,
    ) -> CadetProgress:
        """
        Instructor-approved level-up to exactly ``current_level + 1``.

        The level being left is added to the cadet's certifications. Unless
        *force* is set, the target level's requirements must already be met.
        """
        cadet = self._require(od_number)
        target = ProgressionLevel.coerce(level)
        if target != cadet.current_level + 1:
            raise ContractViolation(
                f"{od_number} is at level {int(cadet.current_level)}; "
                f"promotion must go to level {int(cadet.current_level) + 1}, not {int(target)}"
            )
        if not approved_by:
            raise ContractViolation("Promotion requires an approving instructor")

        if not force:
            eligibility = _check_eligibility(cadet, target, self.catalog)
            if not eligibility.eligible:
                raise ContractViolation(
                    f"{od_number} does not meet level {int(target)} requirements: "
                    + "; ".join(eligibility.gaps)
                )

        today = self._today()
        record = self._store(self._build(cadet, {
            "current_level":      target,
            "certifications":     set(cadet.certifications) | {cadet.current_level},
            "level_start_date":   today,
            "last_activity_date": today,
        }))
        logger.info(
            "Cadet %s promoted to level %d (%s) by %s%s",
            od_number, int(target), self.catalog.get_level(target).name,
            approved_by, " [override]" if force else "",
        )
        return record
