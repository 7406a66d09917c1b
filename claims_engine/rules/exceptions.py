"""Exceptions raised by the rules engine."""

from __future__ import annotations

from typing import Any


class RulesEngineError(Exception):
    """Base class for rules engine errors."""


class RuleNotFoundError(RulesEngineError, KeyError):
    """Raised when updating or removing a rule id the store does not hold."""

    def __init__(self, rule_id: str):
        super().__init__(f"Rule not found: {rule_id}")
        self.rule_id = rule_id

    def __str__(self) -> str:
        return self.args[0]


class InvalidRulePatchError(RulesEngineError, ValueError):
    """Raised when a rule update names unknown attributes or changes the id."""


class RuleConfigError(RulesEngineError):
    """Raised when rule definition validation fails."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []
