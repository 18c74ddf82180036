"""Unit tests for engine settings."""
import pytest
from pydantic import ValidationError

from partsort.config import EngineSettings, ResortPolicy, configure_logging, get_settings
from partsort.errors import ConfigurationError


class TestEngineSettings:
    def test_defaults(self):
        settings = EngineSettings(_env_file=None)

        assert settings.min_confidence == 40
        assert settings.high_confidence == 80
        assert settings.auto_merge_threshold == 0.9
        assert settings.review_threshold == 0.7
        assert settings.max_candidates == 5
        assert settings.resort_policy is ResortPolicy.OVERWRITE_WHEN_CONFIDENT
        assert settings.resort_max_workers >= 1
        assert settings.rule_table_path is None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PARTSORT_MIN_CONFIDENCE", "55")
        monkeypatch.setenv("PARTSORT_RESORT_POLICY", "always_overwrite")

        settings = EngineSettings(_env_file=None)

        assert settings.min_confidence == 55
        assert settings.resort_policy is ResortPolicy.ALWAYS_OVERWRITE

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None, min_confidence=140)

    def test_is_production(self):
        assert EngineSettings(_env_file=None, environment="production").is_production
        assert not EngineSettings(_env_file=None, environment="staging").is_production

    @pytest.mark.parametrize(
        "overrides",
        [
            {"review_threshold": 0.95, "auto_merge_threshold": 0.9},
            {"min_confidence": 90, "high_confidence": 80},
        ],
    )
    def test_inconsistent_thresholds(self, overrides):
        settings = EngineSettings(_env_file=None, **overrides)

        with pytest.raises(ConfigurationError) as exc_info:
            settings.check_consistency()
        assert exc_info.value.details

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()

    @pytest.mark.parametrize("environment", ["development", "production"])
    def test_configure_logging(self, environment):
        configure_logging(EngineSettings(_env_file=None, environment=environment))
