"""
Shared pytest fixtures for the cadet progression test suite.
Factory helpers live in tests/factories.py so they can be imported
directly by test modules as well as being used here.
"""
import sys
import os

_tests_dir = os.path.dirname(__file__)
_src_dir   = os.path.join(_tests_dir, "..", "src")
for _p in (_tests_dir, _src_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)


import pytest

from factories import make_scenario_catalog, make_store

from cadet_progression.catalog import get_catalog
from cadet_progression.seed_demo_data import demo_cadets


# ─── pytest fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def catalog():
    return get_catalog()


@pytest.fixture
def scenario_catalog():
    return make_scenario_catalog()


@pytest.fixture
def empty_store():
    return make_store()


@pytest.fixture
def demo_store():
    return make_store(cadets=demo_cadets())
