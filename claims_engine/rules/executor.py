"""Single-rule execution: condition composition and action selection."""

from __future__ import annotations

from .conditions import evaluate_condition
from .models import (
    ActionType,
    BusinessRule,
    CheckStatus,
    ConditionLogic,
    ExecutionContext,
    RuleAction,
    RuleResult,
    ValidationCheck,
)

NO_MATCH_MESSAGE = "Rule conditions not met"
NO_ACTIONS_MESSAGE = "Rule defines no actions"


def conditions_match(rule: BusinessRule, context: ExecutionContext) -> bool:
    """Combine the rule's conditions in list order, short-circuiting.

    An empty condition list matches under both AND and OR.
    """
    if not rule.conditions:
        return True
    results = (evaluate_condition(condition, context) for condition in rule.conditions)
    if rule.condition_logic is ConditionLogic.OR:
        return any(results)
    return all(results)


def select_action(rule: BusinessRule, matched: bool) -> RuleAction:
    """actions[0] on match, actions[1] on no match, otherwise a synthesized fail."""
    if matched:
        if rule.actions:
            return rule.actions[0]
        return RuleAction(type=ActionType.FAIL, message=NO_ACTIONS_MESSAGE)
    if len(rule.actions) > 1:
        return rule.actions[1]
    return RuleAction(type=ActionType.FAIL, message=NO_MATCH_MESSAGE)


def run_rule(rule: BusinessRule, context: ExecutionContext) -> RuleResult:
    """Evaluate one active rule and normalize its outcome."""
    action = select_action(rule, conditions_match(rule, context))
    status = CheckStatus.from_action(action.type)
    return RuleResult(
        rule_id=rule.id,
        rule_name=rule.name,
        passed=action.type is ActionType.PASS,
        validation_check=ValidationCheck(
            id=rule.id,
            category=rule.category,
            name=rule.name,
            description=rule.description,
            status=status,
            details=action.message,
            suggestion=action.suggestion if status is not CheckStatus.PASS else None,
        ),
    )
