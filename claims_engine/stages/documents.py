"""Document stage.

Combines the document-category rules (scan quality, operative notes) with
a procedure-driven completeness check: each billed CPT code may require
supporting documents, and any that were not received are reported.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from claims_engine.rules.engine import RulesEngine
from claims_engine.rules.models import (
    CheckStatus,
    ExecutionContext,
    RuleCategory,
    RuleResult,
    ValidationCheck,
)
from claims_engine.utils.code_formats import base_cpt_code

from .base import StageSummary, ValidationStage, reduce_status

PROCEDURE_CODE_LABELS = ("CPT Code", "CPT Codes")


class DocumentPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


@dataclass(frozen=True)
class DocumentRequirement:
    document: str
    priority: DocumentPriority
    reason: str


DOCUMENT_DISPLAY_NAMES: dict[str, str] = {
    "prior_authorization": "Prior Authorization",
    "operative_notes": "Operative Notes",
    "history_and_physical": "History & Physical",
    "medical_necessity": "Medical Necessity Documentation",
    "referral": "Referral Letter",
    "pathology_report": "Pathology Report",
    "radiology_report": "Radiology Report",
    "lab_results": "Lab Results",
    "consent_form": "Consent Form",
    "discharge_summary": "Discharge Summary",
}

# Received document types as classified at intake, mapped to requirement names
DOCUMENT_TYPE_ALIASES: dict[str, str] = {
    "h_and_p": "history_and_physical",
    "prior_auth": "prior_authorization",
}

_H = DocumentPriority.HIGH
_M = DocumentPriority.MEDIUM
_L = DocumentPriority.LOW

_SURGICAL_JOINT = (
    DocumentRequirement("prior_authorization", _H, "Required for surgical procedures"),
    DocumentRequirement("operative_notes", _H, "Required for surgical claims"),
    DocumentRequirement("history_and_physical", _M, "Supports medical necessity"),
    DocumentRequirement("medical_necessity", _M, "May be requested on audit"),
)

PROCEDURE_DOCUMENTS: dict[str, tuple[DocumentRequirement, ...]] = {
    # Total knee / hip arthroplasty
    "27447": _SURGICAL_JOINT,
    "27130": _SURGICAL_JOINT,
    # Lumbar laminectomy
    "63030": (
        DocumentRequirement("prior_authorization", _H, "Required for spinal procedures"),
        DocumentRequirement("operative_notes", _H, "Required for surgical claims"),
        DocumentRequirement("radiology_report", _H, "MRI/CT required for spinal surgery"),
        DocumentRequirement("history_and_physical", _M, "Supports medical necessity"),
    ),
    # Cervical fusion
    "22551": (
        DocumentRequirement("prior_authorization", _H, "Required for spinal fusion"),
        DocumentRequirement("operative_notes", _H, "Required for surgical claims"),
        DocumentRequirement("radiology_report", _H, "Imaging required for spinal surgery"),
        DocumentRequirement("history_and_physical", _M, "Supports medical necessity"),
    ),
    # Knee arthroscopy with meniscectomy
    "29881": (
        DocumentRequirement("prior_authorization", _M, "May be required by payer"),
        DocumentRequirement("operative_notes", _H, "Required for surgical claims"),
        DocumentRequirement("radiology_report", _M, "MRI typically performed pre-op"),
    ),
    # Upper GI endoscopy with biopsy
    "43239": (
        DocumentRequirement("pathology_report", _H, "Required when biopsy performed"),
        DocumentRequirement("history_and_physical", _M, "Supports medical necessity"),
    ),
    "99215": (
        DocumentRequirement("history_and_physical", _L, "Supports high-level E/M"),
    ),
}


@dataclass(frozen=True)
class MissingDocument:
    document: str
    display_name: str
    required_for: str
    priority: DocumentPriority
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "document": self.document,
            "display_name": self.display_name,
            "required_for": self.required_for,
            "priority": self.priority.value,
            "reason": self.reason,
        }


@dataclass
class DocumentCheckSummary(StageSummary):
    required_documents: list[str] = field(default_factory=list)
    received_documents: list[str] = field(default_factory=list)
    missing_documents: list[MissingDocument] = field(default_factory=list)

    @classmethod
    def degraded(cls, category: RuleCategory = RuleCategory.DOCUMENT) -> DocumentCheckSummary:
        return cls(category=category, overall_status=CheckStatus.PENDING, checks=[])

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            required_documents=list(self.required_documents),
            received_documents=list(self.received_documents),
            missing_documents=[doc.to_dict() for doc in self.missing_documents],
        )
        return data


def normalize_document_type(document_type: str) -> str:
    key = document_type.strip().lower()
    return DOCUMENT_TYPE_ALIASES.get(key, key)


def find_missing_documents(
    procedure_codes: Iterable[str],
    received_types: Iterable[str],
    requirements: Mapping[str, tuple[DocumentRequirement, ...]] = PROCEDURE_DOCUMENTS,
) -> tuple[list[str], list[str], list[MissingDocument]]:
    """Compute required, received and missing documents for the procedures.

    A document required by several procedures is reported once, under the
    procedure that requires it with the highest priority.

    Returns:
        (required document names, normalized received types, missing documents
        sorted highest priority first)
    """
    required: dict[str, tuple[DocumentRequirement, str]] = {}
    for value in procedure_codes:
        # requirements are keyed by base code, so "27447-RT" counts as 27447
        code = base_cpt_code(value) or value.strip()
        for requirement in requirements.get(code, ()):
            existing = required.get(requirement.document)
            if existing is None or requirement.priority.rank > existing[0].priority.rank:
                required[requirement.document] = (requirement, code)

    received = list(dict.fromkeys(normalize_document_type(t) for t in received_types if t))

    missing = [
        MissingDocument(
            document=name,
            display_name=DOCUMENT_DISPLAY_NAMES.get(name, name),
            required_for=code,
            priority=requirement.priority,
            reason=requirement.reason,
        )
        for name, (requirement, code) in required.items()
        if name not in received
    ]
    missing.sort(key=lambda doc: doc.priority.rank, reverse=True)
    return list(required), received, missing


def missing_document_check(doc: MissingDocument) -> ValidationCheck:
    status = CheckStatus.FAIL if doc.priority is DocumentPriority.HIGH else CheckStatus.WARNING
    return ValidationCheck(
        id=f"doc-missing-{doc.document}",
        category=RuleCategory.DOCUMENT,
        name=f"{doc.display_name} Required",
        description=f"{doc.display_name} is required for CPT {doc.required_for}",
        status=status,
        details=f"Missing {doc.display_name}: {doc.reason}",
    )


class DocumentStage(ValidationStage):
    category = RuleCategory.DOCUMENT
    name = "document_check"

    def __init__(
        self,
        engine: RulesEngine,
        requirements: Mapping[str, tuple[DocumentRequirement, ...]] | None = None,
    ) -> None:
        super().__init__(engine)
        self.requirements = PROCEDURE_DOCUMENTS if requirements is None else requirements

    def summarize(
        self, context: ExecutionContext, results: list[RuleResult]
    ) -> DocumentCheckSummary:
        received_types = list(context.metadata.document_types)
        if context.document_type:
            received_types.append(context.document_type)

        required, received, missing = find_missing_documents(
            context.field_values(*PROCEDURE_CODE_LABELS),
            received_types,
            self.requirements,
        )

        checks = [result.validation_check for result in results]
        checks.extend(missing_document_check(doc) for doc in missing)
        return DocumentCheckSummary(
            category=self.category,
            overall_status=reduce_status(checks),
            checks=checks,
            required_documents=required,
            received_documents=received,
            missing_documents=missing,
        )
