"""Rules engine for healthcare claim validation."""

from .conditions import evaluate_condition
from .defaults import default_rules
from .engine import RulesEngine
from .exceptions import (
    InvalidRulePatchError,
    RuleConfigError,
    RuleNotFoundError,
    RulesEngineError,
)
from .executor import run_rule
from .loader import RuleLoader
from .models import (
    ActionType,
    BusinessRule,
    CheckStatus,
    ClaimMetadata,
    Condition,
    ConditionLogic,
    ConditionOperator,
    ExecutionContext,
    ExtractedField,
    FieldCategory,
    RuleAction,
    RuleCategory,
    RuleResult,
    ValidationCheck,
)

__all__ = [
    "RulesEngine",
    "RuleLoader",
    "default_rules",
    "evaluate_condition",
    "run_rule",
    "ActionType",
    "BusinessRule",
    "CheckStatus",
    "ClaimMetadata",
    "Condition",
    "ConditionLogic",
    "ConditionOperator",
    "ExecutionContext",
    "ExtractedField",
    "FieldCategory",
    "RuleAction",
    "RuleCategory",
    "RuleResult",
    "ValidationCheck",
    "RulesEngineError",
    "RuleNotFoundError",
    "RuleConfigError",
    "InvalidRulePatchError",
]
