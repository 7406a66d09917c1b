"""Tests for the built-in rule set."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from claims_engine.config import Settings
from claims_engine.rules.defaults import default_rules
from claims_engine.rules.engine import RulesEngine
from claims_engine.rules.models import CheckStatus, ClaimMetadata, ExecutionContext


def status_of(engine: RulesEngine, context: ExecutionContext, rule_id: str) -> CheckStatus:
    for result in engine.execute(context):
        if result.rule_id == rule_id:
            return result.validation_check.status
    raise AssertionError(f"rule {rule_id} did not run")


class TestDefaultRuleSet:
    def test_rule_ids_are_unique(self):
        ids = [r.id for r in default_rules(Settings())]
        assert len(ids) == len(set(ids))

    def test_every_category_is_covered(self):
        categories = {r.category.value for r in default_rules(Settings())}
        assert categories == {"eligibility", "code", "business_rule", "document"}

    def test_every_rule_has_pass_and_fallback_actions(self):
        for r in default_rules(Settings()):
            assert len(r.actions) == 2, r.id

    def test_thresholds_come_from_settings(self):
        rules = {r.id: r for r in default_rules(Settings(high_dollar_threshold=500))}
        assert rules["biz-004"].conditions[0].value == 500
        assert "$500" in rules["biz-004"].description

    def test_clean_claim_passes_everything(self, engine: RulesEngine, clean_context):
        failing = [r.rule_id for r in engine.execute(clean_context) if not r.passed]
        assert failing == []


class TestEligibilityRules:
    def test_member_id_present(self, engine, context_factory):
        assert status_of(engine, context_factory(), "elig-001") is CheckStatus.PASS

    def test_member_id_missing_fails(self, engine, context_factory):
        context = context_factory(Member_ID=None)
        assert status_of(engine, context, "elig-001") is CheckStatus.FAIL

    def test_member_id_blank_fails(self, engine, context_factory):
        context = context_factory(Member_ID="  ")
        assert status_of(engine, context, "elig-001") is CheckStatus.FAIL

    def test_absent_insurance_id_passes(self, engine, context_factory):
        context = context_factory(Insurance_ID=None)
        assert status_of(engine, context, "elig-002") is CheckStatus.PASS

    def test_malformed_insurance_id_warns_with_suggestion(self, engine, context_factory):
        context = context_factory(Insurance_ID="ABC-123 456")
        result = next(r for r in engine.execute(context) if r.rule_id == "elig-002")
        assert result.validation_check.status is CheckStatus.WARNING
        assert result.validation_check.suggestion


class TestCodeRules:
    @pytest.mark.parametrize(
        "npi,expected",
        [
            ("1234567893", CheckStatus.PASS),
            ("1234567890", CheckStatus.FAIL),
            ("12345", CheckStatus.FAIL),
            (None, CheckStatus.FAIL),
        ],
    )
    def test_npi(self, engine, context_factory, npi, expected):
        context = context_factory(Provider_NPI=npi)
        assert status_of(engine, context, "code-001") is expected

    def test_invalid_icd10_fails(self, engine, context_factory):
        context = context_factory(Diagnosis_Code="XYZ")
        assert status_of(engine, context, "code-002") is CheckStatus.FAIL

    def test_invalid_cpt_warns(self, engine, context_factory):
        context = context_factory(CPT_Code="ABCDE")
        assert status_of(engine, context, "code-003") is CheckStatus.WARNING

    def test_bundled_em_codes_warn(self, engine, context_factory):
        context = context_factory(CPT_Codes="99213, 99214")
        assert status_of(engine, context, "code-004") is CheckStatus.WARNING


class TestBusinessRules:
    def test_future_date_of_service_fails(self, engine, context_factory):
        future = (date.today() + timedelta(days=3)).isoformat()
        context = context_factory(date_of_service=future)
        assert status_of(engine, context, "biz-001") is CheckStatus.FAIL

    def test_missing_date_of_service_fails(self, engine, context_factory):
        context = context_factory(date_of_service=None)
        assert status_of(engine, context, "biz-001") is CheckStatus.FAIL

    def test_stale_date_of_service_warns(self, engine, context_factory):
        stale = (date.today() - timedelta(days=400)).isoformat()
        context = context_factory(date_of_service=stale)
        assert status_of(engine, context, "biz-001") is CheckStatus.PASS
        assert status_of(engine, context, "biz-002") is CheckStatus.WARNING

    def test_consult_without_referring_provider_warns(self, engine, context_factory):
        context = context_factory(Visit_Type="Specialist Consult")
        assert status_of(engine, context, "biz-003") is CheckStatus.WARNING

    def test_consult_with_referring_provider_passes(self, engine, context_factory):
        context = context_factory(Visit_Type="Consult", Referring_Provider_NPI="1234567893")
        assert status_of(engine, context, "biz-003") is CheckStatus.PASS

    def test_high_dollar_claim_is_flagged(self, engine, context_factory):
        context = context_factory(claim_amount=15000.0)
        result = next(r for r in engine.execute(context) if r.rule_id == "biz-004")
        assert result.passed is False
        assert result.validation_check.status is CheckStatus.WARNING

    def test_threshold_amount_is_not_high_dollar(self, engine, context_factory):
        context = context_factory(claim_amount=10000.0)
        assert status_of(engine, context, "biz-004") is CheckStatus.PASS


class TestDocumentRules:
    def test_low_quality_is_flagged(self, engine, context_factory):
        context = context_factory(metadata=ClaimMetadata(quality_score=55.0))
        result = next(r for r in engine.execute(context) if r.rule_id == "doc-001")
        assert result.validation_check.status is CheckStatus.WARNING
        assert "rescan" in result.validation_check.suggestion.lower()

    def test_unknown_quality_passes(self, engine, context_factory):
        context = context_factory(metadata=ClaimMetadata())
        assert status_of(engine, context, "doc-001") is CheckStatus.PASS

    def test_surgery_without_operative_notes_warns(self, engine, context_factory):
        context = context_factory(
            CPT_Code="27447",
            metadata=ClaimMetadata(quality_score=90.0, has_operative_notes=False),
        )
        assert status_of(engine, context, "doc-002") is CheckStatus.WARNING

    def test_surgery_with_modifier_without_operative_notes_warns(self, engine, context_factory):
        context = context_factory(
            CPT_Code="27447-rt",
            metadata=ClaimMetadata(quality_score=90.0, has_operative_notes=False),
        )
        assert status_of(engine, context, "doc-002") is CheckStatus.WARNING

    def test_surgery_with_operative_notes_passes(self, engine, context_factory):
        context = context_factory(
            CPT_Code="27447",
            metadata=ClaimMetadata(quality_score=90.0, has_operative_notes=True),
        )
        assert status_of(engine, context, "doc-002") is CheckStatus.PASS
