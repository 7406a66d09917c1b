"""Shared configuration for the claims validation engine.

This module centralizes environment variable access and default values
to prevent drift between modules.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# Claims above this amount are flagged for additional review
HIGH_DOLLAR_THRESHOLD = float(os.getenv("CLAIMS_HIGH_DOLLAR_THRESHOLD", "10000"))

# Document quality scores below this are flagged for rescanning
MIN_QUALITY_SCORE = float(os.getenv("CLAIMS_MIN_QUALITY_SCORE", "70"))

# Confidence (0-100) a claim needs to be auto-submitted
AUTO_SUBMIT_CONFIDENCE = float(os.getenv("CLAIMS_AUTO_SUBMIT_CONFIDENCE", "90"))

# Days after the date of service within which a claim may be filed
TIMELY_FILING_DAYS = int(os.getenv("CLAIMS_TIMELY_FILING_DAYS", "365"))

# Optional YAML/JSON file of extra rule definitions
RULES_FILE = os.getenv("CLAIMS_RULES_FILE")


@dataclass(frozen=True)
class Settings:
    high_dollar_threshold: float = 10000.0
    min_quality_score: float = 70.0
    auto_submit_confidence: float = 90.0
    timely_filing_days: int = 365
    rules_file: str | None = None

    @classmethod
    def from_env(cls) -> Settings:
        """Read settings from the environment at call time."""
        return cls(
            high_dollar_threshold=float(
                os.getenv("CLAIMS_HIGH_DOLLAR_THRESHOLD", str(HIGH_DOLLAR_THRESHOLD))
            ),
            min_quality_score=float(
                os.getenv("CLAIMS_MIN_QUALITY_SCORE", str(MIN_QUALITY_SCORE))
            ),
            auto_submit_confidence=float(
                os.getenv("CLAIMS_AUTO_SUBMIT_CONFIDENCE", str(AUTO_SUBMIT_CONFIDENCE))
            ),
            timely_filing_days=int(
                os.getenv("CLAIMS_TIMELY_FILING_DAYS", str(TIMELY_FILING_DAYS))
            ),
            rules_file=os.getenv("CLAIMS_RULES_FILE", RULES_FILE),
        )
