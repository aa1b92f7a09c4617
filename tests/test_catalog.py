"""
Tests for the Level Catalog: default table contents, lookups, and the
load-time invariants (five levels, monotonic thresholds).
"""
import copy

import pytest
from pydantic import ValidationError

from cadet_progression.catalog import PROGRESSION_LEVELS, LevelCatalog, get_catalog, get_level
from cadet_progression.models import ContractViolation, ProgressionLevel


class TestDefaultCatalog:
    def test_has_exactly_five_levels(self, catalog):
        assert len(catalog) == 5
        assert [lvl.id for lvl in catalog] == list(ProgressionLevel)

    def test_level_names(self, catalog):
        assert [lvl.name for lvl in catalog] == [
            "Rote Drill",
            "Conceptual Understanding",
            "Spatial Awareness",
            "Error-Free Execution",
            "Tactical Reasoning",
        ]

    def test_thresholds_are_monotonic(self, catalog):
        levels = list(catalog)
        for lower, upper in zip(levels, levels[1:]):
            assert upper.requirements.drills_completed >= lower.requirements.drills_completed
            assert upper.requirements.accuracy >= lower.requirements.accuracy
            assert upper.requirements.safety_violations <= lower.requirements.safety_violations

    def test_level_4_requirements(self):
        req = get_level(4).requirements
        assert (req.drills_completed, req.accuracy, req.safety_violations) == (50, 95, 1)

    def test_every_level_has_unlocks_and_gates(self, catalog):
        for lvl in catalog:
            assert lvl.ai_unlocks, f"Level {lvl.id} has no AI unlocks"
            assert lvl.safety_gates, f"Level {lvl.id} has no safety gates"

    def test_get_catalog_is_shared(self):
        assert get_catalog() is get_catalog()


class TestLookups:
    def test_get_level_accepts_enum_and_int(self, catalog):
        assert catalog.get_level(ProgressionLevel.SPATIAL_AWARENESS) is catalog.get_level(3)

    @pytest.mark.parametrize("bad", [0, 6, -3, "x", None])
    def test_get_level_out_of_range(self, catalog, bad):
        with pytest.raises(ContractViolation):
            catalog.get_level(bad)

    def test_next_level(self, catalog):
        assert catalog.next_level(2).id == ProgressionLevel.SPATIAL_AWARENESS
        assert catalog.next_level(5) is None

    def test_definitions_are_frozen(self, catalog):
        with pytest.raises(ValidationError):
            catalog.get_level(1).name = "Renamed"


class TestLoadTimeInvariants:
    def _levels(self):
        return copy.deepcopy(PROGRESSION_LEVELS)

    def test_missing_level_rejected(self):
        with pytest.raises(ContractViolation):
            LevelCatalog(self._levels()[:4])

    def test_duplicate_level_rejected(self):
        levels = self._levels()
        levels[4]["id"] = 4
        with pytest.raises(ContractViolation):
            LevelCatalog(levels)

    def test_decreasing_drills_rejected(self):
        levels = self._levels()
        levels[2]["requirements"]["drills_completed"] = 5
        with pytest.raises(ContractViolation, match="fewer drills"):
            LevelCatalog(levels)

    def test_decreasing_accuracy_rejected(self):
        levels = self._levels()
        levels[3]["requirements"]["accuracy"] = 60
        with pytest.raises(ContractViolation, match="lower accuracy"):
            LevelCatalog(levels)

    def test_rising_violation_ceiling_rejected(self):
        levels = self._levels()
        levels[4]["requirements"]["safety_violations"] = 4
        with pytest.raises(ContractViolation, match="more safety violations"):
            LevelCatalog(levels)

    def test_order_of_input_does_not_matter(self):
        catalog = LevelCatalog(list(reversed(self._levels())))
        assert [int(lvl.id) for lvl in catalog] == [1, 2, 3, 4, 5]

    def test_accuracy_above_100_rejected(self):
        levels = self._levels()
        levels[4]["requirements"]["accuracy"] = 120
        with pytest.raises(ValidationError):
            LevelCatalog(levels)
