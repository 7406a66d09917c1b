"""Data models for routing decisions."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RoutingQueue(str, Enum):
    CLEAN_SUBMISSION = "clean_submission"
    EXCEPTION_QUEUE = "exception_queue"
    HUMAN_REVIEW = "human_review"


class RoutingAction(str, Enum):
    AUTO_SUBMIT = "auto_submit"
    REVIEW_RECOMMENDED = "review_recommended"
    MANUAL_CORRECTION_REQUIRED = "manual_correction_required"
    REQUEST_MISSING_DOCUMENTS = "request_missing_documents"


class RoutingPriority(str, Enum):
    NORMAL = "normal"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    RoutingPriority.NORMAL: 0,
    RoutingPriority.MEDIUM: 1,
    RoutingPriority.HIGH: 2,
    RoutingPriority.URGENT: 3,
}

# Coarse time-to-resolution bucket shown to reviewers
RESOLUTION_TIMES: dict[RoutingPriority, str | None] = {
    RoutingPriority.URGENT: "same day",
    RoutingPriority.HIGH: "1-2 days",
    RoutingPriority.MEDIUM: "3-5 days",
    RoutingPriority.NORMAL: None,
}


class IssueSeverity(str, Enum):
    HIGH = "high"
    WARNING = "warning"


@dataclass(frozen=True)
class RoutingIssue:
    severity: IssueSeverity
    category: str
    issue: str
    recommendation: str
    check_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "category": self.category,
            "issue": self.issue,
            "recommendation": self.recommendation,
            "check_id": self.check_id,
        }


@dataclass(frozen=True)
class AutoCorrection:
    """A corrective suggestion carried by a failed or warned check."""

    check_id: str
    check_name: str
    suggestion: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "check_id": self.check_id,
            "check_name": self.check_name,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class RoutingDecision:
    queue: RoutingQueue
    action: RoutingAction
    priority: RoutingPriority
    reason: str
    confidence_score: float
    issues_to_resolve: list[RoutingIssue] = field(default_factory=list)
    auto_corrections: list[AutoCorrection] = field(default_factory=list)
    estimated_resolution_time: str | None = None
    claim_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "claim_id": self.claim_id,
            "queue": self.queue.value,
            "action": self.action.value,
            "priority": self.priority.value,
            "reason": self.reason,
            "confidence_score": self.confidence_score,
            "issues_to_resolve": [issue.to_dict() for issue in self.issues_to_resolve],
            "auto_corrections": [c.to_dict() for c in self.auto_corrections],
            "estimated_resolution_time": self.estimated_resolution_time,
        }
