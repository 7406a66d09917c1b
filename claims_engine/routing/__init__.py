"""Routing of validated claims to work queues."""

from .engine import RoutingDecisionEngine, format_routing_summary
from .models import (
    AutoCorrection,
    IssueSeverity,
    RoutingAction,
    RoutingDecision,
    RoutingIssue,
    RoutingPriority,
    RoutingQueue,
)
from .thresholds import RoutingThresholds

__all__ = [
    "RoutingDecisionEngine",
    "format_routing_summary",
    "AutoCorrection",
    "IssueSeverity",
    "RoutingAction",
    "RoutingDecision",
    "RoutingIssue",
    "RoutingPriority",
    "RoutingQueue",
    "RoutingThresholds",
]
