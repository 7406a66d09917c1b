"""Claim processing pipeline.

Runs the four validation stages in sequence, scores the outcome, and asks
the routing engine where the claim goes next. A failing stage is degraded
to an empty pending summary so that the remaining stages still run and a
best-effort routing decision is produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import Settings
from .routing.engine import RoutingDecisionEngine
from .routing.models import (
    RESOLUTION_TIMES,
    RoutingAction,
    RoutingDecision,
    RoutingPriority,
    RoutingQueue,
)
from .routing.thresholds import RoutingThresholds
from .rules.engine import RulesEngine
from .rules.models import CheckStatus, ExecutionContext, RuleCategory
from .stages.base import StageSummary, ValidationStage
from .stages.business import BusinessRuleStage
from .stages.codes import CodeValidationStage
from .stages.documents import DocumentCheckSummary, DocumentStage
from .stages.eligibility import EligibilityStage

logger = logging.getLogger(__name__)

NO_FIELDS_ERROR = "No extracted fields available for claim"
ERROR_ROUTING_REASON = "Processing error occurred"


class ProcessingStatus(str, Enum):
    OK = "ok"
    ERROR = "error"


@dataclass
class ProcessingResult:
    """Aggregate outcome of one pipeline run."""

    eligibility: StageSummary
    code_validation: StageSummary
    document_check: StageSummary
    business_rules: StageSummary
    routing_decision: RoutingDecision
    status: ProcessingStatus = ProcessingStatus.OK
    error: str | None = None
    confidence_score: float = 0.0
    stage_errors: dict[str, str] = field(default_factory=dict)
    claim_id: str | None = None

    @property
    def stages(self) -> tuple[StageSummary, ...]:
        return (self.eligibility, self.code_validation, self.document_check, self.business_rules)

    def to_dict(self) -> dict[str, Any]:
        return {
            "claim_id": self.claim_id,
            "status": self.status.value,
            "error": self.error,
            "confidence_score": self.confidence_score,
            "eligibility": self.eligibility.to_dict(),
            "code_validation": self.code_validation.to_dict(),
            "document_check": self.document_check.to_dict(),
            "business_rules": self.business_rules.to_dict(),
            "routing_decision": self.routing_decision.to_dict(),
            "stage_errors": dict(self.stage_errors),
        }


def compute_confidence(stages: tuple[StageSummary, ...]) -> float:
    """Percentage of executed checks that passed; 0 when nothing ran."""
    checks = [check for stage in stages for check in stage.checks]
    if not checks:
        return 0.0
    passed = sum(1 for check in checks if check.status is CheckStatus.PASS)
    return round(passed / len(checks) * 100, 2)


def error_routing(claim_id: str | None = None) -> RoutingDecision:
    """Routing for a claim that could not be processed at all."""
    return RoutingDecision(
        queue=RoutingQueue.HUMAN_REVIEW,
        action=RoutingAction.MANUAL_CORRECTION_REQUIRED,
        priority=RoutingPriority.HIGH,
        reason=ERROR_ROUTING_REASON,
        confidence_score=0.0,
        estimated_resolution_time=RESOLUTION_TIMES[RoutingPriority.HIGH],
        claim_id=claim_id,
    )


class ClaimProcessingPipeline:
    """Pipeline for validating and routing a single claim.

    The engines are injected so that one rules catalog can be shared by
    many pipelines (or threads) while each caller keeps its own routing
    thresholds.
    """

    def __init__(
        self,
        rules_engine: RulesEngine | None = None,
        routing_engine: RoutingDecisionEngine | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            rules_engine: Engine holding the rule catalog. Defaults to a new
                engine seeded with the built-in rules.
            routing_engine: Routing engine. Defaults to one using the
                auto-submit threshold from settings.
            settings: Settings used for any defaulted engine
        """
        settings = settings or Settings.from_env()
        self.rules_engine = rules_engine or RulesEngine(settings=settings)
        self.routing_engine = routing_engine or RoutingDecisionEngine(
            RoutingThresholds.from_settings(settings)
        )

        self.eligibility_stage = EligibilityStage(self.rules_engine)
        self.code_stage = CodeValidationStage(self.rules_engine)
        self.document_stage = DocumentStage(self.rules_engine)
        self.business_stage = BusinessRuleStage(self.rules_engine)

    def process(self, context: ExecutionContext) -> ProcessingResult:
        """Validate and route one claim.

        Args:
            context: Extracted fields and claim scalars

        Returns:
            ProcessingResult; status is error only when the claim has no
            extracted fields at all
        """
        claim_id = context.claim_id

        if not context.fields:
            logger.error(f"Cannot process claim {claim_id or '<unknown>'}: {NO_FIELDS_ERROR}")
            return ProcessingResult(
                eligibility=StageSummary.degraded(RuleCategory.ELIGIBILITY),
                code_validation=StageSummary.degraded(RuleCategory.CODE),
                document_check=DocumentCheckSummary.degraded(),
                business_rules=StageSummary.degraded(RuleCategory.BUSINESS_RULE),
                routing_decision=error_routing(claim_id),
                status=ProcessingStatus.ERROR,
                error=NO_FIELDS_ERROR,
                claim_id=claim_id,
            )

        logger.info(f"Processing claim {claim_id or '<unknown>'} ({len(context.fields)} fields)")
        stage_errors: dict[str, str] = {}

        eligibility = self._run_stage(self.eligibility_stage, context, stage_errors)
        code_validation = self._run_stage(self.code_stage, context, stage_errors)
        document_check = self._run_stage(self.document_stage, context, stage_errors)
        business_rules = self._run_stage(self.business_stage, context, stage_errors)

        stages = (eligibility, code_validation, document_check, business_rules)
        confidence = compute_confidence(stages)

        routing_decision = self.routing_engine.decide(
            eligibility,
            code_validation,
            document_check,
            business_rules,
            confidence,
            claim_id=claim_id,
        )

        return ProcessingResult(
            eligibility=eligibility,
            code_validation=code_validation,
            document_check=document_check,
            business_rules=business_rules,
            routing_decision=routing_decision,
            confidence_score=confidence,
            stage_errors=stage_errors,
            claim_id=claim_id,
        )

    def _run_stage(
        self,
        stage: ValidationStage,
        context: ExecutionContext,
        stage_errors: dict[str, str],
    ) -> StageSummary:
        try:
            return stage.run(context)
        except Exception as e:
            logger.exception(f"{stage.name} stage failed, continuing degraded: {e}")
            stage_errors[stage.name] = str(e) or type(e).__name__
            if isinstance(stage, DocumentStage):
                return DocumentCheckSummary.degraded()
            return StageSummary.degraded(stage.category)
