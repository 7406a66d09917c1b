"""Condition evaluation against an execution context.

Every operator resolves the condition's field to a string (or None when
the field is absent) and compares it with the condition value. A condition
that cannot be evaluated, such as an unknown operator, a pattern that does
not compile or a non-numeric comparison value, is logged and evaluates to
False so that one malformed rule never aborts an engine run.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from decimal import Decimal, InvalidOperation

from claims_engine.utils.code_formats import is_valid_cpt, is_valid_icd10, is_valid_npi
from claims_engine.utils.date_parser import days_since, is_valid_service_date

from .models import Condition, ConditionOperator, ExecutionContext

logger = logging.getLogger(__name__)

METADATA_PREFIX = "_"

Comparator = Callable[[str | None, Condition], bool]


def resolve_field(label: str, context: ExecutionContext) -> str | None:
    """Return the value a condition on `label` sees, or None if absent.

    Labels starting with an underscore read claim metadata. Otherwise the
    first extracted field whose label matches exactly wins, and the context
    scalars back the well-known labels when extraction did not supply them.
    """
    if label.startswith(METADATA_PREFIX):
        return context.metadata.get(label[len(METADATA_PREFIX):])

    extracted = context.find_field(label)
    if extracted is not None:
        return extracted.value

    if label == "Date of Service":
        return context.date_of_service
    if label == "Total Charges" and context.claim_amount is not None:
        return _format_number(context.claim_amount)
    if label == "Document Type":
        return context.document_type
    return None


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _to_decimal(value: object) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).strip().replace(",", "").lstrip("$"))
    except (InvalidOperation, ValueError):
        return None


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def _numeric(compare: Callable[[Decimal, Decimal], bool]) -> Comparator:
    def evaluate(field_value: str | None, condition: Condition) -> bool:
        left = _to_decimal(field_value)
        right = _to_decimal(condition.value)
        if right is None:
            logger.warning(
                f"Non-numeric comparison value {condition.value!r} "
                f"for field '{condition.field}'"
            )
            return False
        if left is None or not left.is_finite() or not right.is_finite():
            return False
        return compare(left, right)

    return evaluate


def _equals(field_value: str | None, condition: Condition) -> bool:
    if field_value is None or condition.value is None:
        return False
    expected = str(condition.value)
    if condition.case_sensitive:
        return field_value == expected
    return field_value.casefold() == expected.casefold()


def _contains(field_value: str | None, condition: Condition) -> bool:
    if field_value is None or condition.value is None:
        return False
    return str(condition.value).casefold() in field_value.casefold()


def _starts_with(field_value: str | None, condition: Condition) -> bool:
    if field_value is None or condition.value is None:
        return False
    return field_value.casefold().startswith(str(condition.value).casefold())


def _ends_with(field_value: str | None, condition: Condition) -> bool:
    if field_value is None or condition.value is None:
        return False
    return field_value.casefold().endswith(str(condition.value).casefold())


def _list_values(condition: Condition) -> tuple[str, ...] | None:
    if isinstance(condition.value, (tuple, list)):
        return tuple(str(item) for item in condition.value)
    logger.warning(f"List operator on field '{condition.field}' given a non-list value")
    return None


def _in_list(field_value: str | None, condition: Condition) -> bool:
    options = _list_values(condition)
    if options is None or field_value is None:
        return False
    return field_value in options


def _not_in_list(field_value: str | None, condition: Condition) -> bool:
    options = _list_values(condition)
    if options is None:
        return False
    return field_value is None or field_value not in options


def _regex(field_value: str | None, condition: Condition) -> bool:
    flags = 0 if condition.case_sensitive else re.IGNORECASE
    try:
        pattern = re.compile(str(condition.value), flags)
    except re.error as exc:
        logger.warning(f"Invalid regex {condition.value!r} for field '{condition.field}': {exc}")
        return False
    if field_value is None:
        return False
    return pattern.search(field_value) is not None


def _within_days(field_value: str | None, condition: Condition) -> bool:
    limit = _to_decimal(condition.value)
    if limit is None:
        logger.warning(f"Non-numeric day limit {condition.value!r} for field '{condition.field}'")
        return False
    elapsed = days_since(field_value)
    return elapsed is not None and 0 <= elapsed <= limit


OPERATORS: dict[ConditionOperator, Comparator] = {
    ConditionOperator.EQUALS: _equals,
    ConditionOperator.NOT_EQUALS: lambda v, c: v is not None and not _equals(v, c),
    ConditionOperator.CONTAINS: _contains,
    ConditionOperator.NOT_CONTAINS: lambda v, c: not _contains(v, c),
    ConditionOperator.STARTS_WITH: _starts_with,
    ConditionOperator.ENDS_WITH: _ends_with,
    ConditionOperator.GREATER_THAN: _numeric(lambda a, b: a > b),
    ConditionOperator.LESS_THAN: _numeric(lambda a, b: a < b),
    ConditionOperator.GREATER_THAN_OR_EQUAL: _numeric(lambda a, b: a >= b),
    ConditionOperator.LESS_THAN_OR_EQUAL: _numeric(lambda a, b: a <= b),
    ConditionOperator.IN_LIST: _in_list,
    ConditionOperator.NOT_IN_LIST: _not_in_list,
    ConditionOperator.REGEX: _regex,
    ConditionOperator.IS_EMPTY: lambda v, c: _is_blank(v),
    ConditionOperator.IS_NOT_EMPTY: lambda v, c: not _is_blank(v),
    ConditionOperator.IS_VALID_NPI: lambda v, c: is_valid_npi(v),
    ConditionOperator.IS_VALID_DATE: lambda v, c: is_valid_service_date(v),
    ConditionOperator.IS_VALID_ICD10: lambda v, c: is_valid_icd10(v),
    ConditionOperator.IS_VALID_CPT: lambda v, c: is_valid_cpt(v),
    ConditionOperator.WITHIN_DAYS: _within_days,
}


def evaluate_condition(condition: Condition, context: ExecutionContext) -> bool:
    """Evaluate a single condition. Never raises for malformed conditions."""
    comparator = (
        OPERATORS.get(condition.operator)
        if isinstance(condition.operator, ConditionOperator)
        else None
    )
    if comparator is None:
        logger.warning(
            f"Unknown operator {condition.operator!r} on field '{condition.field}'"
        )
        return False
    return comparator(resolve_field(condition.field, context), condition)
