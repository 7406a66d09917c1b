"""Core rules evaluation engine."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from claims_engine.config import Settings

from .defaults import default_rules
from .executor import run_rule
from .loader import RuleLoader
from .models import BusinessRule, ExecutionContext, RuleCategory, RuleResult
from .store import RuleStore, filter_rules

logger = logging.getLogger(__name__)


class RulesEngine:
    """Evaluates the active rules of its own rule store against a claim.

    Each engine owns an isolated catalog. Share one instance between
    threads by passing it explicitly; evaluation passes hold the store's
    read lock and catalog mutations hold its write lock.
    """

    def __init__(
        self,
        rules: Iterable[BusinessRule] | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            rules: Initial catalog. Defaults to the built-in rule set plus
                any rules from `settings.rules_file`.
            settings: Thresholds used by the built-in rules
        """
        self.settings = settings or Settings.from_env()
        if rules is None:
            rules = default_rules(self.settings)
            if self.settings.rules_file:
                rules = [*rules, *RuleLoader().load_file(self.settings.rules_file)]
        self._store = RuleStore(rules)

    def get_rules(self) -> list[BusinessRule]:
        """Snapshot of all rules, ordered by priority then insertion."""
        return self._store.snapshot()

    def get_rule(self, rule_id: str) -> BusinessRule | None:
        return self._store.get(rule_id)

    def execute(self, context: ExecutionContext) -> list[RuleResult]:
        """Run every active rule against the context."""
        with self._store.reading() as rules:
            return [run_rule(rule, context) for rule in filter_rules(rules)]

    def execute_by_category(
        self, context: ExecutionContext, category: RuleCategory | str
    ) -> list[RuleResult]:
        """Run the active rules of one category against the context."""
        with self._store.reading() as rules:
            return [run_rule(rule, context) for rule in filter_rules(rules, category)]

    def add_rule(self, rule: BusinessRule) -> bool:
        """Add a rule; an existing rule with the same id is replaced.

        Returns:
            True if an existing rule was replaced
        """
        return self._store.add(rule)

    def update_rule(self, rule_id: str, patch: dict[str, Any]) -> BusinessRule:
        """Apply a partial update.

        Raises:
            RuleNotFoundError: If no rule has this id
            InvalidRulePatchError: If the patch names unknown attributes
        """
        return self._store.update(rule_id, patch)

    def remove_rule(self, rule_id: str) -> BusinessRule:
        """Remove a rule and return it.

        Raises:
            RuleNotFoundError: If no rule has this id
        """
        return self._store.remove(rule_id)

    def load_rules(self, rules: Iterable[BusinessRule]) -> int:
        """Add several rules at once, returning how many were added."""
        count = 0
        for rule in rules:
            self.add_rule(rule)
            count += 1
        return count
