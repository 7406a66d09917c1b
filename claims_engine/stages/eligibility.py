"""Eligibility stage: member and coverage identifiers."""

from __future__ import annotations

from claims_engine.rules.models import RuleCategory

from .base import ValidationStage


class EligibilityStage(ValidationStage):
    category = RuleCategory.ELIGIBILITY
    name = "eligibility"
