"""In-memory rule catalog guarded by a read-write lock."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import fields
from typing import Any

from pydantic import ValidationError

from .exceptions import InvalidRulePatchError, RuleNotFoundError
from .models import BusinessRule, RuleCategory
from .schemas import RuleSchema

logger = logging.getLogger(__name__)

_RULE_ATTRIBUTES = frozenset(f.name for f in fields(BusinessRule))


class ReadWriteLock:
    """Many concurrent readers or one writer. Writers are not starved."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class RuleStore:
    """Mutable catalog of rule definitions keyed by rule id.

    Insertion order is preserved and used as the tie-breaker when rules
    share a priority. Rules are immutable values, so snapshots handed out
    by `snapshot()` can never be changed by later catalog mutations.
    """

    def __init__(self, rules: Iterable[BusinessRule] = ()) -> None:
        self._lock = ReadWriteLock()
        self._rules: dict[str, BusinessRule] = {}
        for rule in rules:
            self._rules[rule.id] = rule

    @contextmanager
    def reading(self) -> Iterator[tuple[BusinessRule, ...]]:
        """Hold the read lock for one evaluation pass over an ordered snapshot."""
        with self._lock.read():
            yield self._ordered()

    def snapshot(self) -> list[BusinessRule]:
        with self._lock.read():
            return list(self._ordered())

    def get(self, rule_id: str) -> BusinessRule | None:
        with self._lock.read():
            return self._rules.get(rule_id)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        with self._lock.read():
            return rule_id in self._rules

    def add(self, rule: BusinessRule) -> bool:
        """Add a rule. A rule with an existing id replaces it in place.

        Returns:
            True if an existing definition was replaced
        """
        with self._lock.write():
            replaced = rule.id in self._rules
            self._rules[rule.id] = rule
        if replaced:
            logger.info(f"Replaced rule {rule.id} ({rule.name})")
        else:
            logger.info(f"Added rule {rule.id} ({rule.name})")
        return replaced

    def update(self, rule_id: str, patch: dict[str, Any]) -> BusinessRule:
        """Apply a partial update to one rule and return the new definition."""
        unknown = set(patch) - _RULE_ATTRIBUTES
        if unknown:
            raise InvalidRulePatchError(f"Unknown rule attribute(s): {sorted(unknown)}")
        if "id" in patch and patch["id"] != rule_id:
            raise InvalidRulePatchError("Rule id cannot be changed by an update")

        with self._lock.write():
            current = self._rules.get(rule_id)
            if current is None:
                raise RuleNotFoundError(rule_id)
            try:
                updated = RuleSchema.apply_patch(current, patch)
            except ValidationError as e:
                problems = "; ".join(
                    f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
                )
                raise InvalidRulePatchError(f"Invalid update for rule {rule_id}: {problems}") from e
            self._rules[rule_id] = updated
        logger.info(f"Updated rule {rule_id}: {sorted(patch)}")
        return updated

    def remove(self, rule_id: str) -> BusinessRule:
        with self._lock.write():
            removed = self._rules.pop(rule_id, None)
        if removed is None:
            raise RuleNotFoundError(rule_id)
        logger.info(f"Removed rule {rule_id}")
        return removed

    def _ordered(self) -> tuple[BusinessRule, ...]:
        # sorted() is stable, so equal priorities keep insertion order
        return tuple(sorted(self._rules.values(), key=lambda rule: rule.priority))


def filter_rules(
    rules: Iterable[BusinessRule], category: RuleCategory | str | None = None
) -> list[BusinessRule]:
    """Active rules, optionally limited to one category."""
    wanted = RuleCategory(category) if category is not None else None
    return [
        rule
        for rule in rules
        if rule.is_active and (wanted is None or rule.category is wanted)
    ]
