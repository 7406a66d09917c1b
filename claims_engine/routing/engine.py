"""Routing decision engine.

Maps the four stage summaries and a confidence score onto a destination
queue. Decision order, first match wins:

1. Missing required documents -> exception queue, request documents, high
2. Any fail in eligibility, code or business rules -> human review,
   urgent when more than one of those categories failed, otherwise high
3. Any warning, any incomplete stage, a failing document check, or a
   confidence below the auto-submit threshold -> exception queue, medium
4. Otherwise -> clean submission, normal
"""
from __future__ import annotations

import logging

from claims_engine.rules.models import CheckStatus, RuleCategory
from claims_engine.stages.base import StageSummary

from .models import (
    RESOLUTION_TIMES,
    AutoCorrection,
    IssueSeverity,
    RoutingAction,
    RoutingDecision,
    RoutingIssue,
    RoutingPriority,
    RoutingQueue,
)
from .thresholds import RoutingThresholds

logger = logging.getLogger(__name__)

ISSUE_CATEGORIES = {
    RuleCategory.ELIGIBILITY: "eligibility",
    RuleCategory.CODE: "coding",
    RuleCategory.BUSINESS_RULE: "compliance",
    RuleCategory.DOCUMENT: "documentation",
}

RECOMMENDATIONS = {
    (RuleCategory.ELIGIBILITY, CheckStatus.FAIL): "Verify member eligibility with payer",
    (RuleCategory.ELIGIBILITY, CheckStatus.WARNING): "Confirm eligibility details before submission",
    (RuleCategory.CODE, CheckStatus.FAIL): "Review and correct the coding error",
    (RuleCategory.CODE, CheckStatus.WARNING): "Review coding for accuracy",
    (RuleCategory.BUSINESS_RULE, CheckStatus.FAIL): "Review and resolve compliance issue",
    (RuleCategory.BUSINESS_RULE, CheckStatus.WARNING): "Consider addressing before submission",
    (RuleCategory.DOCUMENT, CheckStatus.FAIL): "Attach the missing or corrected documentation",
    (RuleCategory.DOCUMENT, CheckStatus.WARNING): "Verify supporting documentation",
}


class RoutingDecisionEngine:
    """Deterministically routes a validated claim to a work queue."""

    def __init__(self, thresholds: RoutingThresholds | None = None) -> None:
        self.thresholds = thresholds or RoutingThresholds()

    def decide(
        self,
        eligibility: StageSummary,
        code_validation: StageSummary,
        document_check: StageSummary,
        business_rules: StageSummary,
        confidence_score: float,
        claim_id: str | None = None,
    ) -> RoutingDecision:
        stages = (eligibility, code_validation, document_check, business_rules)
        confidence_score = RoutingThresholds.clamp_score(confidence_score)

        missing = getattr(document_check, "missing_documents", [])
        failed_categories = [
            stage.category.value
            for stage in (eligibility, code_validation, business_rules)
            if stage.overall_status is CheckStatus.FAIL
        ]

        if missing:
            names = ", ".join(doc.display_name for doc in missing)
            queue = RoutingQueue.EXCEPTION_QUEUE
            action = RoutingAction.REQUEST_MISSING_DOCUMENTS
            priority = RoutingPriority.HIGH
            reason = f"Missing required documentation: {names}"
        elif failed_categories:
            queue = RoutingQueue.HUMAN_REVIEW
            action = RoutingAction.MANUAL_CORRECTION_REQUIRED
            priority = (
                RoutingPriority.URGENT
                if len(failed_categories) > self.thresholds.urgent_failed_categories
                else RoutingPriority.HIGH
            )
            reason = f"Validation failures in: {', '.join(failed_categories)}"
        elif self._needs_review(stages, confidence_score):
            queue = RoutingQueue.EXCEPTION_QUEUE
            action = RoutingAction.REVIEW_RECOMMENDED
            priority = RoutingPriority.MEDIUM
            reason = self._review_reason(stages, confidence_score)
        else:
            queue = RoutingQueue.CLEAN_SUBMISSION
            action = RoutingAction.AUTO_SUBMIT
            priority = RoutingPriority.NORMAL
            reason = "All validations passed with high confidence"

        decision = RoutingDecision(
            queue=queue,
            action=action,
            priority=priority,
            reason=reason,
            confidence_score=confidence_score,
            issues_to_resolve=collect_issues(stages),
            auto_corrections=collect_auto_corrections(stages),
            estimated_resolution_time=RESOLUTION_TIMES[priority],
            claim_id=claim_id,
        )
        logger.info(
            f"Claim {claim_id or '<unknown>'} routed to {queue.value} "
            f"(action={action.value}, priority={priority.value}, "
            f"confidence={confidence_score:.1f})"
        )
        return decision

    def _needs_review(self, stages: tuple[StageSummary, ...], confidence_score: float) -> bool:
        if any(
            stage.overall_status in (CheckStatus.WARNING, CheckStatus.PENDING, CheckStatus.FAIL)
            for stage in stages
        ):
            return True
        return not self.thresholds.allows_auto_submit(confidence_score)

    def _review_reason(self, stages: tuple[StageSummary, ...], confidence_score: float) -> str:
        incomplete = [s.category.value for s in stages if s.is_degraded]
        if incomplete:
            return f"Validation incomplete for: {', '.join(incomplete)}"
        flagged = [
            s.category.value
            for s in stages
            if s.overall_status in (CheckStatus.WARNING, CheckStatus.FAIL)
        ]
        if flagged:
            return f"Warnings require review in: {', '.join(flagged)}"
        return (
            f"Confidence {confidence_score:.1f} is below the auto-submit threshold "
            f"of {self.thresholds.auto_submit_confidence:.1f}"
        )


def collect_issues(stages: tuple[StageSummary, ...]) -> list[RoutingIssue]:
    """One issue per failed or warned check, in stage then check order."""
    issues: list[RoutingIssue] = []
    for stage in stages:
        for check in stage.checks:
            if check.status not in (CheckStatus.FAIL, CheckStatus.WARNING):
                continue
            issues.append(
                RoutingIssue(
                    severity=IssueSeverity.HIGH
                    if check.status is CheckStatus.FAIL
                    else IssueSeverity.WARNING,
                    category=ISSUE_CATEGORIES[check.category],
                    issue=check.details or check.description,
                    recommendation=RECOMMENDATIONS[(check.category, check.status)],
                    check_id=check.id,
                )
            )
    return issues


def collect_auto_corrections(stages: tuple[StageSummary, ...]) -> list[AutoCorrection]:
    return [
        AutoCorrection(check_id=check.id, check_name=check.name, suggestion=check.suggestion)
        for stage in stages
        for check in stage.checks
        if check.suggestion and check.status is not CheckStatus.PASS
    ]


def format_routing_summary(decision: RoutingDecision) -> str:
    """Human-readable summary of a routing decision."""
    lines = [
        f"Claim {decision.claim_id or '<unknown>'}",
        f"Queue: {decision.queue.value}",
        f"Action: {decision.action.value}",
        f"Priority: {decision.priority.value}",
        f"Confidence Score: {decision.confidence_score:.1f}%",
        f"Reason: {decision.reason}",
    ]

    if decision.issues_to_resolve:
        lines.append("")
        lines.append("Issues to Resolve:")
        for issue in decision.issues_to_resolve:
            lines.append(f"  [{issue.severity.value.upper()}] {issue.issue}")
            lines.append(f"    -> {issue.recommendation}")

    if decision.auto_corrections:
        lines.append("")
        lines.append("Suggested Corrections:")
        for correction in decision.auto_corrections:
            lines.append(f"  {correction.check_name}: {correction.suggestion}")

    if decision.estimated_resolution_time:
        lines.append("")
        lines.append(f"Estimated Resolution Time: {decision.estimated_resolution_time}")

    return "\n".join(lines)
