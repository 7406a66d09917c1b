"""Business rule stage: service dates, filing limits, high-dollar review."""

from __future__ import annotations

from claims_engine.rules.models import RuleCategory

from .base import ValidationStage


class BusinessRuleStage(ValidationStage):
    category = RuleCategory.BUSINESS_RULE
    name = "business_rules"
