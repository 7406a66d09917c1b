"""Tests for building execution contexts from claim records."""

from __future__ import annotations

import json

from claims_engine.rules.models import FieldCategory
from claims_engine.utils.context_builder import build_execution_context, parse_json_list


class TestParseJsonList:
    """Test the parse_json_list helper."""

    def test_returns_empty_list_for_none(self):
        assert parse_json_list(None) == []

    def test_returns_empty_list_for_empty_string(self):
        assert parse_json_list("") == []

    def test_returns_list_unchanged(self):
        items = [{"a": 1}]
        assert parse_json_list(items) is items

    def test_parses_json_string_array(self):
        assert parse_json_list('[{"label": "Member ID"}]') == [{"label": "Member ID"}]

    def test_parses_json_single_value(self):
        assert parse_json_list('{"label": "Member ID"}') == [{"label": "Member ID"}]

    def test_returns_empty_list_for_malformed_json(self):
        assert parse_json_list("not json") == []


class TestBuildExecutionContext:
    def test_snake_case_record(self):
        record = {
            "claim_id": "CLM-100",
            "extracted_fields": [
                {"id": "f1", "category": "patient", "label": "Member ID", "value": "M1", "confidence": 97.5},
                {"label": "CPT Code", "value": 99213, "category": "codes", "is_edited": True},
            ],
            "documents": [
                {"type": "cms_1500", "quality_score": 80},
                {"type": "operative_notes", "quality_score": 90},
            ],
            "total_amount": "1250.50",
            "date_of_service": "2024-01-15",
            "document_type": "cms_1500",
        }
        context = build_execution_context(record)

        assert context.claim_id == "CLM-100"
        assert context.claim_amount == 1250.5
        assert context.date_of_service == "2024-01-15"
        assert context.document_type == "cms_1500"
        assert len(context.fields) == 2

        member = context.find_field("Member ID")
        assert member.id == "f1"
        assert member.category is FieldCategory.PATIENT
        assert member.confidence == 97.5

        cpt = context.find_field("CPT Code")
        assert cpt.value == "99213"
        assert cpt.id == "field-1"
        assert cpt.is_edited is True
        assert cpt.confidence == 100.0

        assert context.metadata.quality_score == 85.0
        assert context.metadata.has_operative_notes is True
        assert context.metadata.document_types == ("cms_1500", "operative_notes")

    def test_camel_case_record_with_json_columns(self):
        record = {
            "id": "CLM-200",
            "extractedFields": json.dumps([{"label": "Member ID", "value": "M2"}]),
            "documents": json.dumps([{"type": "cms_1500", "qualityScore": 60}]),
            "totalAmount": 99,
            "dateOfService": "01/15/2024",
        }
        context = build_execution_context(record)
        assert context.claim_id == "CLM-200"
        assert context.find_field("Member ID").category is FieldCategory.CLAIM
        assert context.metadata.quality_score == 60.0
        assert context.metadata.has_operative_notes is False
        assert context.metadata.get("qualityScore") == "60"
        assert context.date_of_service == "01/15/2024"

    def test_no_documents_leaves_metadata_unknown(self):
        context = build_execution_context({"extracted_fields": []})
        assert context.fields == ()
        assert context.metadata.quality_score is None
        assert context.metadata.has_operative_notes is None
        assert context.claim_amount is None

    def test_extra_metadata_is_stringified(self):
        context = build_execution_context({"metadata": {"payer": "ACME", "tier": 2}})
        assert context.metadata.get("payer") == "ACME"
        assert context.metadata.get("tier") == "2"

    def test_context_feeds_pipeline(self, pipeline):
        record = {
            "claim_id": "CLM-300",
            "extracted_fields": [{"label": "Member ID", "value": ""}],
        }
        result = pipeline.process(build_execution_context(record))
        assert result.eligibility.overall_status.value == "fail"
        assert result.routing_decision.queue.value == "human_review"
