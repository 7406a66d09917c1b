"""Threshold configuration for routing decisions."""
from __future__ import annotations

from dataclasses import dataclass

from claims_engine.config import Settings


@dataclass(frozen=True)
class RoutingThresholds:
    auto_submit_confidence: float = 90.0
    # more failing categories than this escalate human review to urgent
    urgent_failed_categories: int = 1

    @classmethod
    def from_settings(cls, settings: Settings) -> RoutingThresholds:
        return cls(auto_submit_confidence=settings.auto_submit_confidence)

    def allows_auto_submit(self, confidence_score: float) -> bool:
        return confidence_score >= self.auto_submit_confidence

    @staticmethod
    def clamp_score(score: float) -> float:
        if score < 0.0:
            return 0.0
        if score > 100.0:
            return 100.0
        return score
