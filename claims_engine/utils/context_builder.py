"""Utility for building rule execution contexts from claim records.

The rules engine expects an ExecutionContext with:
- fields: extracted field rows (label/value/confidence)
- claim scalars: date of service, claim amount, document type
- metadata: average document quality, operative notes present, document types
"""

from __future__ import annotations

import json
from typing import Any

from claims_engine.rules.models import (
    ClaimMetadata,
    ExecutionContext,
    ExtractedField,
    FieldCategory,
)

OPERATIVE_NOTES_TYPE = "operative_notes"


def build_execution_context(claim_record: dict[str, Any]) -> ExecutionContext:
    """Build an ExecutionContext from a persisted claim record.

    Accepts both snake_case and camelCase keys, and list columns stored
    as JSON strings.

    Args:
        claim_record: Claim record with extracted_fields, documents,
            total_amount, date_of_service and optional metadata

    Returns:
        ExecutionContext ready for the pipeline
    """
    fields = [
        _build_field(row, idx)
        for idx, row in enumerate(parse_json_list(_pick(claim_record, "extracted_fields", "extractedFields")))
        if isinstance(row, dict)
    ]
    documents = [
        doc
        for doc in parse_json_list(claim_record.get("documents"))
        if isinstance(doc, dict)
    ]

    document_types = tuple(str(doc["type"]) for doc in documents if doc.get("type"))
    quality_scores = [
        float(score)
        for score in (_pick(doc, "quality_score", "qualityScore") for doc in documents)
        if score is not None
    ]

    extra = claim_record.get("metadata") or {}
    metadata = ClaimMetadata(
        quality_score=sum(quality_scores) / len(quality_scores) if quality_scores else None,
        has_operative_notes=OPERATIVE_NOTES_TYPE in document_types if documents else None,
        document_types=document_types,
        extra={str(k): str(v) for k, v in extra.items()},
    )

    amount = _pick(claim_record, "total_amount", "totalAmount", "claim_amount")
    return ExecutionContext(
        fields=fields,
        date_of_service=_pick(claim_record, "date_of_service", "dateOfService"),
        claim_amount=float(amount) if amount is not None else None,
        document_type=_pick(claim_record, "document_type", "documentType"),
        metadata=metadata,
        claim_id=_pick(claim_record, "claim_id", "claimId", "id"),
    )


def _pick(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _build_field(row: dict[str, Any], idx: int) -> ExtractedField:
    category = row.get("category") or FieldCategory.CLAIM.value
    confidence = row.get("confidence")
    return ExtractedField(
        id=str(row.get("id") or f"field-{idx}"),
        category=FieldCategory(category),
        label=str(row.get("label", "")),
        value="" if row.get("value") is None else str(row["value"]),
        confidence=float(confidence) if confidence is not None else 100.0,
        is_edited=bool(_pick(row, "is_edited", "isEdited")),
    )


def parse_json_list(value: Any) -> list[Any]:
    """Parse a value that may be a JSON string or list.

    Args:
        value: JSON string, list, or None

    Returns:
        List of parsed items (empty for missing or unparsable values)
    """
    if not value:
        return []

    if isinstance(value, list):
        return value

    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return []
        return parsed if isinstance(parsed, list) else [parsed]

    return [value]
