"""Pytest configuration and fixtures for the test suite.

Provides:
- Basic environment variable defaults
- Shared engine, classifier and rule table fixtures
"""
import os

import pytest

from partsort.config import EngineSettings, get_settings
from partsort.rules import RuleTableStore, default_rule_table
from partsort.services.classification import ProductClassifier


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up basic test environment variables before any tests run."""
    os.environ.setdefault("PARTSORT_ENVIRONMENT", "development")
    os.environ.setdefault("PARTSORT_LOG_LEVEL", "INFO")
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def settings() -> EngineSettings:
    """Default thresholds, independent of any local .env file."""
    return EngineSettings(_env_file=None, resort_max_workers=2)


@pytest.fixture(scope="session")
def rule_table():
    return default_rule_table()


@pytest.fixture
def classifier(rule_table, settings) -> ProductClassifier:
    return ProductClassifier(rule_table, settings)


@pytest.fixture
def store(rule_table) -> RuleTableStore:
    return RuleTableStore(rule_table)
