"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable
from datetime import date, timedelta
from pathlib import Path

import pytest

# Add project root to path for imports when the package is not installed
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from claims_engine.config import Settings  # noqa: E402
from claims_engine.pipeline import ClaimProcessingPipeline  # noqa: E402
from claims_engine.rules.engine import RulesEngine  # noqa: E402
from claims_engine.rules.models import (  # noqa: E402
    ClaimMetadata,
    ExecutionContext,
    ExtractedField,
    FieldCategory,
)


def make_field(
    label: str,
    value: str,
    category: FieldCategory = FieldCategory.CLAIM,
    confidence: float = 100.0,
) -> ExtractedField:
    """Build an extracted field with an id derived from its label."""
    return ExtractedField(
        id=label.lower().replace(" ", "-"),
        category=category,
        label=label,
        value=value,
        confidence=confidence,
    )


def recent_service_date(days_ago: int = 10) -> str:
    return (date.today() - timedelta(days=days_ago)).isoformat()


@pytest.fixture
def settings() -> Settings:
    """Default thresholds, independent of the test environment."""
    return Settings()


@pytest.fixture
def engine(settings: Settings) -> RulesEngine:
    return RulesEngine(settings=settings)


@pytest.fixture
def empty_engine(settings: Settings) -> RulesEngine:
    return RulesEngine(rules=[], settings=settings)


@pytest.fixture
def pipeline(engine: RulesEngine, settings: Settings) -> ClaimProcessingPipeline:
    return ClaimProcessingPipeline(rules_engine=engine, settings=settings)


@pytest.fixture
def clean_fields() -> list[ExtractedField]:
    """Fields for an office visit that satisfies every built-in rule."""
    return [
        make_field("Member ID", "MEM123456", FieldCategory.PATIENT),
        make_field("Insurance ID", "ABC123456789", FieldCategory.PATIENT),
        make_field("Provider NPI", "1234567893", FieldCategory.PROVIDER),
        make_field("Diagnosis Code", "J06.9", FieldCategory.CODES),
        make_field("CPT Code", "99213", FieldCategory.CODES),
        make_field("CPT Codes", "99213", FieldCategory.CODES),
        make_field("Place of Service", "11"),
    ]


@pytest.fixture
def clean_context(clean_fields: list[ExtractedField]) -> ExecutionContext:
    return ExecutionContext(
        fields=clean_fields,
        date_of_service=recent_service_date(),
        claim_amount=250.0,
        document_type="cms_1500",
        metadata=ClaimMetadata(
            quality_score=92.0,
            has_operative_notes=False,
            document_types=("cms_1500",),
        ),
        claim_id="CLM-001",
    )


@pytest.fixture
def context_factory(
    clean_fields: list[ExtractedField],
) -> Callable[..., ExecutionContext]:
    """Build a context from the clean claim with fields overridden or dropped.

    Keyword arguments named after a field label (spaces as underscores)
    replace that field's value; a value of None removes the field. The
    reserved keywords `metadata`, `claim_amount`, `date_of_service` and
    `document_type` set the context scalars.
    """

    def factory(**overrides: object) -> ExecutionContext:
        scalars = {
            "date_of_service": recent_service_date(),
            "claim_amount": 250.0,
            "document_type": "cms_1500",
            "metadata": ClaimMetadata(
                quality_score=92.0,
                has_operative_notes=False,
                document_types=("cms_1500",),
            ),
        }
        for key in list(overrides):
            if key in scalars:
                scalars[key] = overrides.pop(key)

        by_label = {f.label: f for f in clean_fields}
        for key, value in overrides.items():
            label = key.replace("_", " ")
            if value is None:
                by_label.pop(label, None)
            else:
                by_label[label] = make_field(label, str(value))

        return ExecutionContext(fields=list(by_label.values()), claim_id="CLM-TEST", **scalars)

    return factory
