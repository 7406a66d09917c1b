"""Validation stages run by the claim processing pipeline."""

from .base import StageSummary, ValidationStage, reduce_status
from .business import BusinessRuleStage
from .codes import CodeValidationStage
from .documents import (
    DocumentCheckSummary,
    DocumentPriority,
    DocumentRequirement,
    DocumentStage,
    MissingDocument,
    find_missing_documents,
)
from .eligibility import EligibilityStage

__all__ = [
    "StageSummary",
    "ValidationStage",
    "reduce_status",
    "EligibilityStage",
    "CodeValidationStage",
    "BusinessRuleStage",
    "DocumentStage",
    "DocumentCheckSummary",
    "DocumentPriority",
    "DocumentRequirement",
    "MissingDocument",
    "find_missing_documents",
]
