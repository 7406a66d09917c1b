"""Tests for environment-driven settings."""

from __future__ import annotations

from claims_engine.config import Settings
from claims_engine.routing.thresholds import RoutingThresholds


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.high_dollar_threshold == 10000.0
        assert settings.min_quality_score == 70.0
        assert settings.auto_submit_confidence == 90.0
        assert settings.timely_filing_days == 365
        assert settings.rules_file is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CLAIMS_HIGH_DOLLAR_THRESHOLD", "5000")
        monkeypatch.setenv("CLAIMS_AUTO_SUBMIT_CONFIDENCE", "95")
        monkeypatch.setenv("CLAIMS_TIMELY_FILING_DAYS", "90")
        monkeypatch.setenv("CLAIMS_RULES_FILE", "/etc/claims/rules.yaml")
        settings = Settings.from_env()
        assert settings.high_dollar_threshold == 5000.0
        assert settings.auto_submit_confidence == 95.0
        assert settings.timely_filing_days == 90
        assert settings.rules_file == "/etc/claims/rules.yaml"

    def test_routing_thresholds_from_settings(self):
        thresholds = RoutingThresholds.from_settings(Settings(auto_submit_confidence=80.0))
        assert thresholds.auto_submit_confidence == 80.0
        assert thresholds.allows_auto_submit(80.0)
        assert not thresholds.allows_auto_submit(79.99)
