"""Shared fixtures for matcher tests"""
from pathlib import Path

import pytest

from shared.config import Settings, get_settings

SAMPLE_CATALOG = Path(__file__).parent.parent / "config" / "validation_rules.yaml"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test sees settings built from its own environment"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Settings that ignore any local .env file"""
    return Settings(_env_file=None)


@pytest.fixture
def sample_catalog_path():
    return SAMPLE_CATALOG


@pytest.fixture
def scenario_rules():
    """Six rule rows keyed by outcome, species, method and season"""
    return [
        {"outcome": 1, "species": 2, "method": 3, "season": 4},
        {"outcome": None, "species": None, "method": None, "season": None},
        {"outcome": 1, "species": 2, "method": None, "season": None},
        {"outcome": None, "species": 2, "method": None, "season": 4},
        {"outcome": 2, "species": None, "method": 3, "season": None},
        {"outcome": 1, "species": None, "method": None, "season": 4},
    ]


@pytest.fixture
def scenario_query():
    return {"outcome": None, "species": 2, "method": 3, "season": 4}
