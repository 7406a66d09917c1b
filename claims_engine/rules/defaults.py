"""Built-in validation rules seeded into every new engine.

Rules are grouped by category and ordered by priority:
1. Eligibility (member and insurance identifiers)
2. Code validation (NPI, ICD-10, CPT, bundling)
3. Business rules (service date, timely filing, referrals, high dollar)
4. Document rules (scan quality, operative notes)
"""

from __future__ import annotations

from claims_engine.config import Settings

from .models import (
    ActionType,
    BusinessRule,
    Condition,
    ConditionLogic,
    ConditionOperator,
    RuleAction,
    RuleCategory,
)

# Procedures whose claims are expected to carry operative notes
OPERATIVE_NOTE_PROCEDURES = ("27447", "27130", "63030")


def _eligibility_rules() -> list[BusinessRule]:
    return [
        BusinessRule(
            id="elig-001",
            name="Member ID Required",
            description="Member ID must be present for claims processing",
            category=RuleCategory.ELIGIBILITY,
            conditions=(Condition("Member ID", ConditionOperator.IS_NOT_EMPTY),),
            actions=(
                RuleAction(ActionType.PASS, "Member ID is present"),
                RuleAction(
                    ActionType.FAIL,
                    "Member ID is missing - required for eligibility verification",
                ),
            ),
            priority=1,
        ),
        BusinessRule(
            id="elig-002",
            name="Valid Insurance ID Format",
            description="Insurance ID should follow standard format",
            category=RuleCategory.ELIGIBILITY,
            conditions=(
                Condition("Insurance ID", ConditionOperator.IS_EMPTY),
                Condition("Insurance ID", ConditionOperator.REGEX, r"^[A-Z0-9]{9,15}$"),
            ),
            condition_logic=ConditionLogic.OR,
            actions=(
                RuleAction(ActionType.PASS, "Insurance ID format is valid"),
                RuleAction(
                    ActionType.WARNING,
                    "Insurance ID format may be invalid - verify with payer",
                    suggestion="Remove spaces and dashes from the insurance ID",
                ),
            ),
            priority=2,
        ),
    ]


def _code_rules() -> list[BusinessRule]:
    return [
        BusinessRule(
            id="code-001",
            name="Valid NPI Format",
            description="Provider NPI must be 10 digits with a valid check digit",
            category=RuleCategory.CODE,
            conditions=(Condition("Provider NPI", ConditionOperator.IS_VALID_NPI),),
            actions=(
                RuleAction(ActionType.PASS, "Provider NPI is valid"),
                RuleAction(
                    ActionType.FAIL,
                    "Invalid NPI - must be 10 digits with a valid check digit",
                ),
            ),
            priority=1,
        ),
        BusinessRule(
            id="code-002",
            name="Valid ICD-10 Diagnosis Code",
            description="Diagnosis codes must be valid ICD-10 format",
            category=RuleCategory.CODE,
            conditions=(Condition("Diagnosis Code", ConditionOperator.IS_VALID_ICD10),),
            actions=(
                RuleAction(ActionType.PASS, "Diagnosis code format is valid"),
                RuleAction(ActionType.FAIL, "Invalid ICD-10 diagnosis code format"),
            ),
            priority=1,
        ),
        BusinessRule(
            id="code-003",
            name="Valid CPT Code",
            description="Procedure codes must be valid CPT format",
            category=RuleCategory.CODE,
            conditions=(Condition("CPT Code", ConditionOperator.IS_VALID_CPT),),
            actions=(
                RuleAction(ActionType.PASS, "CPT code format is valid"),
                RuleAction(
                    ActionType.WARNING,
                    "CPT code format may be invalid - verify procedure code",
                ),
            ),
            priority=1,
        ),
        BusinessRule(
            id="code-004",
            name="Code Bundling Check",
            description="Check for commonly bundled procedure codes",
            category=RuleCategory.CODE,
            conditions=(
                Condition("CPT Codes", ConditionOperator.CONTAINS, "99213"),
                Condition("CPT Codes", ConditionOperator.CONTAINS, "99214"),
            ),
            actions=(
                RuleAction(
                    ActionType.WARNING,
                    "Potential code bundling issue - 99213 and 99214 may not be billable together",
                    suggestion="Bill a single E/M level or add modifier 25 for a separate service",
                ),
                RuleAction(ActionType.PASS, "No bundled E/M codes detected"),
            ),
            priority=2,
        ),
    ]


def _business_rules(settings: Settings) -> list[BusinessRule]:
    threshold = settings.high_dollar_threshold
    return [
        BusinessRule(
            id="biz-001",
            name="Date of Service Validation",
            description="Date of service must be present and cannot be in the future",
            category=RuleCategory.BUSINESS_RULE,
            conditions=(Condition("Date of Service", ConditionOperator.IS_VALID_DATE),),
            actions=(
                RuleAction(ActionType.PASS, "Date of service is valid"),
                RuleAction(ActionType.FAIL, "Missing, invalid or future date of service"),
            ),
            priority=1,
        ),
        BusinessRule(
            id="biz-002",
            name="Timely Filing Check",
            description="Claims must be submitted within filing deadline",
            category=RuleCategory.BUSINESS_RULE,
            conditions=(
                Condition(
                    "Date of Service",
                    ConditionOperator.WITHIN_DAYS,
                    settings.timely_filing_days,
                ),
            ),
            actions=(
                RuleAction(ActionType.PASS, "Within timely filing limits"),
                RuleAction(
                    ActionType.WARNING,
                    "Claim may be outside the timely filing deadline",
                ),
            ),
            priority=1,
        ),
        BusinessRule(
            id="biz-003",
            name="Referring Provider Required",
            description="Specialist consultations require referring provider",
            category=RuleCategory.BUSINESS_RULE,
            conditions=(
                Condition("Place of Service", ConditionOperator.IN_LIST, ("11", "22")),
                Condition("Referring Provider NPI", ConditionOperator.IS_EMPTY),
                Condition("Visit Type", ConditionOperator.CONTAINS, "consult"),
            ),
            actions=(
                RuleAction(
                    ActionType.WARNING,
                    "Missing referring provider NPI - may be required for specialist consultations",
                ),
                RuleAction(ActionType.PASS, "Referring provider requirements satisfied"),
            ),
            priority=2,
        ),
        BusinessRule(
            id="biz-004",
            name="High Dollar Claim Review",
            description=f"Claims over ${threshold:,.0f} require additional review",
            category=RuleCategory.BUSINESS_RULE,
            conditions=(
                Condition("Total Charges", ConditionOperator.GREATER_THAN, threshold),
            ),
            actions=(
                RuleAction(
                    ActionType.FLAG,
                    "High dollar claim - additional documentation review recommended",
                ),
                RuleAction(ActionType.PASS, "Claim amount within standard review limits"),
            ),
            priority=2,
        ),
    ]


def _document_rules(settings: Settings) -> list[BusinessRule]:
    procedures = "|".join(OPERATIVE_NOTE_PROCEDURES)
    return [
        BusinessRule(
            id="doc-001",
            name="Document Quality Check",
            description="Document must meet minimum quality threshold",
            category=RuleCategory.DOCUMENT,
            conditions=(
                Condition(
                    "_qualityScore",
                    ConditionOperator.LESS_THAN,
                    settings.min_quality_score,
                ),
            ),
            actions=(
                RuleAction(
                    ActionType.FLAG,
                    "Document quality too low - consider rescanning",
                    suggestion="Rescan the claim form at 300 DPI or higher",
                ),
                RuleAction(ActionType.PASS, "Document quality meets threshold"),
            ),
            priority=1,
        ),
        BusinessRule(
            id="doc-002",
            name="Supporting Documentation Required",
            description="Certain procedures require supporting documentation",
            category=RuleCategory.DOCUMENT,
            conditions=(
                Condition(
                    "CPT Code",
                    ConditionOperator.REGEX,
                    f"^({procedures})(-[A-Z0-9]{{2}})?$",
                    case_sensitive=False,
                ),
                Condition("_hasOperativeNotes", ConditionOperator.EQUALS, "false"),
            ),
            actions=(
                RuleAction(
                    ActionType.WARNING,
                    "Procedure may require operative notes - verify documentation",
                ),
                RuleAction(ActionType.PASS, "Supporting documentation present or not required"),
            ),
            priority=2,
        ),
    ]


def default_rules(settings: Settings | None = None) -> list[BusinessRule]:
    """Return the built-in rule set using thresholds from `settings`."""
    settings = settings or Settings.from_env()
    return [
        *_eligibility_rules(),
        *_code_rules(),
        *_business_rules(settings),
        *_document_rules(settings),
    ]
