"""Data models for the rules engine."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class FieldCategory(str, Enum):
    """Section of the claim form an extracted field belongs to."""

    PATIENT = "patient"
    PROVIDER = "provider"
    CLAIM = "claim"
    CODES = "codes"


class RuleCategory(str, Enum):
    """Validation category a rule belongs to."""

    ELIGIBILITY = "eligibility"
    CODE = "code"
    BUSINESS_RULE = "business_rule"
    DOCUMENT = "document"


class ConditionOperator(str, Enum):
    """Operators understood by the condition evaluator."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    IN_LIST = "in_list"
    NOT_IN_LIST = "not_in_list"
    REGEX = "regex"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    IS_VALID_NPI = "is_valid_npi"
    IS_VALID_DATE = "is_valid_date"
    IS_VALID_ICD10 = "is_valid_icd10"
    IS_VALID_CPT = "is_valid_cpt"
    WITHIN_DAYS = "within_days"


class ConditionLogic(str, Enum):
    AND = "and"
    OR = "or"


class ActionType(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"
    FLAG = "flag"


class CheckStatus(str, Enum):
    """Status of a single validation check or of a whole stage."""

    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"
    PENDING = "pending"

    @classmethod
    def from_action(cls, action_type: ActionType) -> CheckStatus:
        # flag is displayed as a warning
        if action_type is ActionType.FLAG:
            return cls.WARNING
        return cls(action_type.value)


def _coerce_operator(value: ConditionOperator | str) -> ConditionOperator | str:
    if isinstance(value, ConditionOperator):
        return value
    try:
        return ConditionOperator(value)
    except ValueError:
        # kept as-is; evaluates to False at run time
        return value


@dataclass(frozen=True)
class ExtractedField:
    """A labeled value pulled from a claim document by OCR/AI extraction."""

    id: str
    category: FieldCategory
    label: str
    value: str
    confidence: float = 100.0
    is_edited: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", FieldCategory(self.category))


@dataclass(frozen=True)
class Condition:
    field: str
    operator: ConditionOperator | str
    value: str | float | int | tuple[str, ...] | list[str] | None = None
    case_sensitive: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", _coerce_operator(self.operator))
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(str(item) for item in self.value))


@dataclass(frozen=True)
class RuleAction:
    """Outcome applied when a rule matches (or, as fallback, does not)."""

    type: ActionType
    message: str | None = None
    suggestion: str | None = None


@dataclass(frozen=True)
class BusinessRule:
    """A declarative validation rule evaluated against an execution context."""

    id: str
    name: str
    description: str
    category: RuleCategory
    conditions: tuple[Condition, ...] = ()
    condition_logic: ConditionLogic = ConditionLogic.AND
    actions: tuple[RuleAction, ...] = ()
    priority: int = 1
    is_active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", tuple(self.conditions))
        object.__setattr__(self, "actions", tuple(self.actions))
        object.__setattr__(self, "category", RuleCategory(self.category))
        object.__setattr__(self, "condition_logic", ConditionLogic(self.condition_logic))


@dataclass(frozen=True)
class ClaimMetadata:
    """Typed claim metadata consulted by `_`-prefixed condition fields."""

    quality_score: float | None = None
    has_operative_notes: bool | None = None
    document_types: tuple[str, ...] = ()
    extra: Mapping[str, str] = field(default_factory=dict, hash=False)

    _KNOWN_KEYS = {
        "qualityScore": "quality_score",
        "hasOperativeNotes": "has_operative_notes",
        "documentTypes": "document_types",
    }

    def __post_init__(self) -> None:
        object.__setattr__(self, "document_types", tuple(self.document_types))
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    def get(self, key: str) -> str | None:
        """Return the metadata value for `key` rendered as a match string."""
        attr = self._KNOWN_KEYS.get(key)
        if attr is None:
            return self.extra.get(key)
        value = getattr(self, attr)
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, tuple):
            return ",".join(value)
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)


@dataclass(frozen=True)
class ExecutionContext:
    """Inputs a single rule evaluation pass reads. Never mutated during evaluation."""

    fields: tuple[ExtractedField, ...] = ()
    date_of_service: str | None = None
    claim_amount: float | None = None
    document_type: str | None = None
    metadata: ClaimMetadata = field(default_factory=ClaimMetadata)
    claim_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def find_field(self, label: str) -> ExtractedField | None:
        for extracted in self.fields:
            if extracted.label == label:
                return extracted
        return None

    def field_values(self, *labels: str) -> list[str]:
        """All non-empty values for any of `labels`, comma-separated values split."""
        values: list[str] = []
        for extracted in self.fields:
            if extracted.label not in labels:
                continue
            for part in extracted.value.split(","):
                part = part.strip()
                if part:
                    values.append(part)
        return values


@dataclass(frozen=True)
class ValidationCheck:
    """Normalized record of one rule's outcome against a claim."""

    id: str
    category: RuleCategory
    name: str
    description: str
    status: CheckStatus
    details: str | None = None
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "details": self.details,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class RuleResult:
    rule_id: str
    rule_name: str
    passed: bool
    validation_check: ValidationCheck
