"""Pydantic schemas for rule definitions supplied as data."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .models import (
    ActionType,
    BusinessRule,
    Condition,
    ConditionLogic,
    ConditionOperator,
    RuleAction,
    RuleCategory,
)

logger = logging.getLogger(__name__)

_KNOWN_OPERATORS = {op.value for op in ConditionOperator}


class ConditionSchema(BaseModel):
    """A single condition. Unknown operators are kept and evaluate false."""

    field: str = Field(..., min_length=1)
    operator: str
    value: str | float | int | list[str] | None = None
    case_sensitive: bool = Field(default=True, alias="caseSensitive")

    model_config = {"populate_by_name": True}

    @field_validator("operator")
    @classmethod
    def warn_unknown_operator(cls, v: str) -> str:
        if v not in _KNOWN_OPERATORS:
            logger.warning(f"Rule condition uses unknown operator '{v}'")
        return v

    def to_condition(self) -> Condition:
        return Condition(
            field=self.field,
            operator=self.operator,
            value=self.value,
            case_sensitive=self.case_sensitive,
        )

    @classmethod
    def from_condition(cls, condition: Condition) -> ConditionSchema:
        operator = condition.operator
        return cls(
            field=condition.field,
            operator=operator.value if isinstance(operator, ConditionOperator) else operator,
            value=list(condition.value) if isinstance(condition.value, tuple) else condition.value,
            case_sensitive=condition.case_sensitive,
        )


class ActionSchema(BaseModel):
    type: ActionType
    message: str | None = None
    suggestion: str | None = None

    def to_action(self) -> RuleAction:
        return RuleAction(type=self.type, message=self.message, suggestion=self.suggestion)

    @classmethod
    def from_action(cls, action: RuleAction) -> ActionSchema:
        return cls(type=action.type, message=action.message, suggestion=action.suggestion)


class RuleSchema(BaseModel):
    """External representation of a business rule (camelCase aliases accepted)."""

    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1)
    description: str = ""
    category: RuleCategory
    conditions: list[ConditionSchema] = Field(default_factory=list)
    condition_logic: ConditionLogic = Field(default=ConditionLogic.AND, alias="conditionLogic")
    actions: list[ActionSchema] = Field(..., min_length=1)
    priority: int = 1
    is_active: bool = Field(default=True, alias="isActive")

    model_config = {"populate_by_name": True}

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Rule id cannot be blank")
        return v

    def to_rule(self) -> BusinessRule:
        return BusinessRule(
            id=self.id,
            name=self.name,
            description=self.description,
            category=self.category,
            conditions=tuple(c.to_condition() for c in self.conditions),
            condition_logic=self.condition_logic,
            actions=tuple(a.to_action() for a in self.actions),
            priority=self.priority,
            is_active=self.is_active,
        )

    @classmethod
    def from_rule(cls, rule: BusinessRule) -> RuleSchema:
        return cls(
            id=rule.id,
            name=rule.name,
            description=rule.description,
            category=rule.category,
            conditions=[ConditionSchema.from_condition(c) for c in rule.conditions],
            condition_logic=rule.condition_logic,
            actions=[ActionSchema.from_action(a) for a in rule.actions],
            priority=rule.priority,
            is_active=rule.is_active,
        )

    @classmethod
    def apply_patch(cls, rule: BusinessRule, patch: Mapping[str, Any]) -> BusinessRule:
        """Merge a partial update into `rule` and validate the result.

        Patch values may be given either as core objects (Condition,
        RuleAction, enums) or in the plain data shape rule files use.

        Raises:
            pydantic.ValidationError: If the merged rule is not valid
        """
        data = cls.from_rule(rule).model_dump()
        for key, value in patch.items():
            if key == "conditions" and isinstance(value, (list, tuple)):
                value = [
                    ConditionSchema.from_condition(c).model_dump() if isinstance(c, Condition) else c
                    for c in value
                ]
            elif key == "actions" and isinstance(value, (list, tuple)):
                value = [
                    ActionSchema.from_action(a).model_dump() if isinstance(a, RuleAction) else a
                    for a in value
                ]
            data[key] = value
        return cls.model_validate(data).to_rule()
