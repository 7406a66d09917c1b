"""Claims Validation & Routing Engine.

This package decides whether an extracted healthcare claim can be
submitted automatically, needs correction, or needs a human reviewer:

- Configurable rules engine (conditions, AND/OR logic, pass/fail actions)
- Eligibility, code, document and business-rule validation stages
- Deterministic routing to clean submission, exception or review queues
- Pipeline orchestration with per-stage failure isolation

Usage:
    from claims_engine import ClaimProcessingPipeline
    from claims_engine.utils.context_builder import build_execution_context

    pipeline = ClaimProcessingPipeline()
    result = pipeline.process(build_execution_context(claim_record))
    result.routing_decision.queue

Modules:
    rules: Rule store, condition evaluator, executor and engine
    stages: Per-category validation stages
    routing: Routing decision engine and thresholds
    pipeline: Claim processing pipeline
    config: Environment-driven settings
"""

from .pipeline import ClaimProcessingPipeline, ProcessingResult, ProcessingStatus

__version__ = "0.1.0"

__all__ = ["ClaimProcessingPipeline", "ProcessingResult", "ProcessingStatus", "__version__"]
