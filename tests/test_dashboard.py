"""
Tests for the dashboard view models (pandas frames + plotly figures) and
the demo cohort that feeds them.
"""
import pytest
from factories import make_cadet, make_store

from cadet_progression.dashboard import (
    DISTRIBUTION_COLUMNS,
    batch_distribution_figure,
    batch_distribution_frame,
    progress_gauge,
    requirements_frame,
)
from cadet_progression.seed_demo_data import build_demo_store, demo_cadets


class TestDemoCohort:
    def test_five_cadets_two_batches(self):
        store = build_demo_store()
        assert len(store) == 5
        assert store.batches() == ["Batch-2024-A", "Batch-2024-B"]

    def test_every_level_represented(self):
        assert sorted(int(c.current_level) for c in demo_cadets()) == [1, 2, 3, 4, 5]

    def test_batch_a_stats(self):
        stats = build_demo_store().get_batch_stats("Batch-2024-A")
        assert stats.level_distribution == {1: 0, 2: 1, 3: 1, 4: 1, 5: 0}
        assert stats.avg_accuracy == pytest.approx((82 + 96 + 71) / 3)


class TestBatchDistributionFrame:
    def test_one_row_per_batch_and_level(self, demo_store):
        frame = batch_distribution_frame(demo_store)
        assert list(frame.columns) == DISTRIBUTION_COLUMNS
        assert len(frame) == 10
        assert frame.groupby("batch")["count"].sum().to_dict() == {
            "Batch-2024-A": 3, "Batch-2024-B": 2,
        }

    def test_share_pct(self, demo_store):
        frame = batch_distribution_frame(demo_store, ["Batch-2024-B"])
        shares = dict(zip(frame["level"], frame["share_pct"]))
        assert shares == {1: 50.0, 2: 0.0, 3: 0.0, 4: 0.0, 5: 50.0}

    def test_empty_batch_rows_are_zero(self, demo_store):
        frame = batch_distribution_frame(demo_store, ["Batch-Empty"])
        assert len(frame) == 5
        assert frame["count"].sum() == 0
        assert (frame["share_pct"] == 0).all()
        assert (frame["avg_accuracy"] == 0).all()

    def test_no_batches_gives_empty_frame(self, empty_store):
        frame = batch_distribution_frame(empty_store)
        assert frame.empty
        assert list(frame.columns) == DISTRIBUTION_COLUMNS


class TestBatchDistributionFigure:
    def test_one_trace_per_level(self, demo_store):
        fig = batch_distribution_figure(batch_distribution_frame(demo_store))
        assert len(fig.data) == 5
        assert fig.layout.barmode == "stack"
        assert fig.data[0].name.startswith("L1")

    def test_empty_frame_gives_empty_figure(self, empty_store):
        fig = batch_distribution_figure(batch_distribution_frame(empty_store))
        assert len(fig.data) == 0


class TestRequirementsFrame:
    def test_rows_for_next_level(self, catalog):
        cadet = make_cadet(level=3, drills=32, accuracy=82, violations=2)
        frame = requirements_frame(cadet, catalog)
        assert list(frame["required"]) == [50, 95, 1]
        assert list(frame["gap"]) == [18, 13.0, 1]
        assert not frame["met"].any()

    def test_empty_at_max_level(self, catalog):
        frame = requirements_frame(make_cadet(level=5, drills=120, accuracy=99), catalog)
        assert frame.empty


class TestProgressGauge:
    def test_value_is_percentage(self, catalog):
        cadet = make_cadet(level=3, drills=32, accuracy=82, violations=2)
        assert progress_gauge(cadet, catalog).data[0].value == 77

    def test_max_level_full(self, catalog):
        cadet = make_cadet(level=5, drills=120, accuracy=99)
        assert progress_gauge(cadet, catalog).data[0].value == 100

    def test_works_with_store_catalog(self, scenario_catalog):
        store = make_store(cadets=[make_cadet(od_number="OD-S", drills=25, accuracy=80, violations=1)],
                           catalog=scenario_catalog)
        cadet = store.get_cadet_progress("OD-S")
        assert progress_gauge(cadet, store.catalog).data[0].value == 100
