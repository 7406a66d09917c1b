"""Tests for single-rule execution."""

from __future__ import annotations

from conftest import make_field

from claims_engine.rules.executor import (
    NO_ACTIONS_MESSAGE,
    NO_MATCH_MESSAGE,
    conditions_match,
    run_rule,
    select_action,
)
from claims_engine.rules.models import (
    ActionType,
    BusinessRule,
    CheckStatus,
    Condition,
    ConditionLogic,
    ConditionOperator,
    ExecutionContext,
    RuleAction,
    RuleCategory,
)

PRESENT = Condition("Member ID", ConditionOperator.IS_NOT_EMPTY)
ABSENT = Condition("Missing Field", ConditionOperator.IS_NOT_EMPTY)
PASS_FAIL = (
    RuleAction(ActionType.PASS, "ok"),
    RuleAction(ActionType.FAIL, "not ok", suggestion="fix it"),
)


def make_rule(
    conditions=(),
    logic: ConditionLogic = ConditionLogic.AND,
    actions=PASS_FAIL,
) -> BusinessRule:
    return BusinessRule(
        id="test-001",
        name="Test Rule",
        description="Rule under test",
        category=RuleCategory.ELIGIBILITY,
        conditions=conditions,
        condition_logic=logic,
        actions=actions,
    )


CONTEXT = ExecutionContext(fields=[make_field("Member ID", "M1")])


class TestConditionsMatch:
    """Test AND/OR composition."""

    def test_and_requires_all(self):
        assert conditions_match(make_rule((PRESENT, PRESENT)), CONTEXT)
        assert not conditions_match(make_rule((PRESENT, ABSENT)), CONTEXT)

    def test_or_requires_any(self):
        assert conditions_match(make_rule((ABSENT, PRESENT), ConditionLogic.OR), CONTEXT)
        assert not conditions_match(make_rule((ABSENT, ABSENT), ConditionLogic.OR), CONTEXT)

    def test_empty_conditions_match_under_both_logics(self):
        assert conditions_match(make_rule(()), CONTEXT)
        assert conditions_match(make_rule((), ConditionLogic.OR), CONTEXT)

    def test_and_short_circuits(self, caplog):
        unknown = Condition("Member ID", "bogus")
        assert not conditions_match(make_rule((ABSENT, unknown)), CONTEXT)
        # the unknown operator is never evaluated, so nothing is logged
        assert "Unknown operator" not in caplog.text


class TestSelectAction:
    def test_match_uses_first_action(self):
        assert select_action(make_rule(), True) is PASS_FAIL[0]

    def test_no_match_uses_second_action(self):
        assert select_action(make_rule(), False) is PASS_FAIL[1]

    def test_no_match_without_fallback_synthesizes_fail(self):
        rule = make_rule(actions=(RuleAction(ActionType.PASS, "ok"),))
        action = select_action(rule, False)
        assert action.type is ActionType.FAIL
        assert action.message == NO_MATCH_MESSAGE

    def test_match_without_actions_synthesizes_fail(self):
        action = select_action(make_rule(actions=()), True)
        assert action.type is ActionType.FAIL
        assert action.message == NO_ACTIONS_MESSAGE == "Rule defines no actions"

    def test_no_match_without_actions_reports_unmet_conditions(self):
        action = select_action(make_rule(actions=()), False)
        assert action.type is ActionType.FAIL
        assert action.message == NO_MATCH_MESSAGE

    def test_matched_rule_without_actions_fails_with_reason(self):
        result = run_rule(make_rule((PRESENT,), actions=()), CONTEXT)
        assert result.passed is False
        assert result.validation_check.status is CheckStatus.FAIL
        assert result.validation_check.details == NO_ACTIONS_MESSAGE


class TestRunRule:
    """Test normalization of a rule outcome into a validation check."""

    def test_passing_rule(self):
        result = run_rule(make_rule((PRESENT,)), CONTEXT)
        assert result.passed is True
        assert result.rule_id == "test-001"
        assert result.rule_name == "Test Rule"
        check = result.validation_check
        assert check.status is CheckStatus.PASS
        assert check.category is RuleCategory.ELIGIBILITY
        assert check.details == "ok"
        assert check.suggestion is None

    def test_failing_rule_carries_suggestion(self):
        result = run_rule(make_rule((ABSENT,)), CONTEXT)
        assert result.passed is False
        assert result.validation_check.status is CheckStatus.FAIL
        assert result.validation_check.details == "not ok"
        assert result.validation_check.suggestion == "fix it"

    def test_flag_action_displays_as_warning(self):
        rule = make_rule((PRESENT,), actions=(RuleAction(ActionType.FLAG, "look"),))
        result = run_rule(rule, CONTEXT)
        assert result.passed is False
        assert result.validation_check.status is CheckStatus.WARNING

    def test_warning_action(self):
        rule = make_rule(
            (ABSENT,),
            actions=(RuleAction(ActionType.PASS), RuleAction(ActionType.WARNING, "hmm")),
        )
        result = run_rule(rule, CONTEXT)
        assert result.passed is False
        assert result.validation_check.status is CheckStatus.WARNING

    def test_passed_follows_applied_action(self):
        # a matching rule whose first action is a warning did not pass
        rule = make_rule((PRESENT,), actions=(RuleAction(ActionType.WARNING, "hmm"),))
        assert run_rule(rule, CONTEXT).passed is False

    def test_status_is_never_pending(self):
        for actions in (PASS_FAIL, (), (RuleAction(ActionType.FLAG),)):
            for conditions in ((PRESENT,), (ABSENT,)):
                status = run_rule(make_rule(conditions, actions=actions), CONTEXT).validation_check.status
                assert status is not CheckStatus.PENDING
