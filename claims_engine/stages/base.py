"""Shared pieces of the validation stages."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from claims_engine.rules.engine import RulesEngine
from claims_engine.rules.models import (
    CheckStatus,
    ExecutionContext,
    RuleCategory,
    RuleResult,
    ValidationCheck,
)

logger = logging.getLogger(__name__)


def reduce_status(checks: Iterable[ValidationCheck]) -> CheckStatus:
    """fail dominates warning dominates pass."""
    statuses = {check.status for check in checks}
    if CheckStatus.FAIL in statuses:
        return CheckStatus.FAIL
    if CheckStatus.WARNING in statuses:
        return CheckStatus.WARNING
    return CheckStatus.PASS


@dataclass
class StageSummary:
    """Per-category outcome of one validation stage."""

    category: RuleCategory
    overall_status: CheckStatus
    checks: list[ValidationCheck] = field(default_factory=list)

    @classmethod
    def from_checks(cls, category: RuleCategory, checks: list[ValidationCheck]) -> StageSummary:
        return cls(category=category, overall_status=reduce_status(checks), checks=checks)

    @classmethod
    def degraded(cls, category: RuleCategory) -> StageSummary:
        """Placeholder for a stage that could not run."""
        return cls(category=category, overall_status=CheckStatus.PENDING, checks=[])

    @property
    def is_degraded(self) -> bool:
        return self.overall_status is CheckStatus.PENDING

    def checks_with_status(self, status: CheckStatus) -> list[ValidationCheck]:
        return [check for check in self.checks if check.status is status]

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "overall_status": self.overall_status.value,
            "checks": [check.to_dict() for check in self.checks],
        }


class ValidationStage:
    """Runs the rules of one category and summarizes their results.

    Subclasses set `category` and may extend `summarize` with checks that
    are not rule-driven.
    """

    category: RuleCategory
    name: str = "validation"

    def __init__(self, engine: RulesEngine) -> None:
        self.engine = engine

    def run(self, context: ExecutionContext) -> StageSummary:
        results = self.engine.execute_by_category(context, self.category)
        summary = self.summarize(context, results)
        logger.debug(
            f"{self.name} stage: {len(summary.checks)} check(s), "
            f"status={summary.overall_status.value}"
        )
        return summary

    def summarize(self, context: ExecutionContext, results: list[RuleResult]) -> StageSummary:
        checks = [result.validation_check for result in results]
        return StageSummary.from_checks(self.category, checks)
