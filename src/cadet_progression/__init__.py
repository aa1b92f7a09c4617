"""
cadet_progression — Cadet Cognitive Progression & Skill Maturity Model
======================================================================
Rules engine behind the oaksip trainee progression card, the
My Progression page and the instructor command dashboard.

Module map
----------
  models.py          Level enum, pydantic records, result dataclasses, errors.
  catalog.py         Level Catalog: the 5 levels, thresholds, unlocks, gates.
  evaluator.py       Next-level gaps + percentage, eligibility, nudges.
  aggregator.py      Batch level histogram + average accuracy.
  store.py           ProgressionStore: explicit container for cadet records.
  config.py          Settings loaded from .env.
  seed_demo_data.py  Demo cohort for the dashboards.
  dashboard.py       pandas / plotly view models for the Streamlit pages.

Data flow
---------
  drill / assessment event → ProgressionStore.record_drill_completion
  → evaluator.get_progress_to_next_level (pure) → UI re-render
  ** instructor approval ** → ProgressionStore.promote_to_level
  command dashboard → ProgressionStore.get_batch_stats (pure, memoized)
"""
__version__ = "0.1.0"
