"""Code validation stage: NPI, diagnosis and procedure codes."""

from __future__ import annotations

from claims_engine.rules.models import RuleCategory

from .base import ValidationStage


class CodeValidationStage(ValidationStage):
    category = RuleCategory.CODE
    name = "code_validation"
