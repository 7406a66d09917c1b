"""Rule definition loader.

Supports loading business rules from YAML and JSON files, so payer- or
client-specific rules can be managed alongside deployment configuration.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import RuleConfigError
from .models import BusinessRule
from .schemas import RuleSchema

logger = logging.getLogger(__name__)


class RuleLoader:
    """Loads and validates rule definitions from files or mappings."""

    def __init__(self, rules_dir: str | Path | None = None):
        """Initialize the rule loader.

        Args:
            rules_dir: Directory containing rule files.
                       Defaults to ./config/rules/
        """
        self.rules_dir = Path(rules_dir) if rules_dir else Path("config/rules")

    def load_file(self, file_path: str | Path) -> list[BusinessRule]:
        """Load rule definitions from a single file.

        Args:
            file_path: Path to YAML or JSON rule file

        Returns:
            List of validated BusinessRule objects

        Raises:
            RuleConfigError: If validation fails
            FileNotFoundError: If file doesn't exist
            ValueError: If the file extension is not supported
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Rule file not found: {path}")

        suffix = path.suffix.lower()
        if suffix in (".yaml", ".yml"):
            with open(path) as f:
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise RuleConfigError(
                        f"Invalid YAML in {path}", errors=[{"file": str(path), "error": str(e)}]
                    ) from e
        elif suffix == ".json":
            with open(path) as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise RuleConfigError(
                        f"Invalid JSON in {path}", errors=[{"file": str(path), "error": str(e)}]
                    ) from e
        else:
            raise ValueError(f"Unsupported rule file format: {suffix}")

        rules = self.parse(data, source=str(path))
        logger.info(f"Loaded {len(rules)} rule(s) from {path.name}")
        return rules

    def load_directory(self, directory: str | Path | None = None) -> list[BusinessRule]:
        """Load all rule files in a directory, in file name order.

        Errors from every file are collected into a single RuleConfigError.
        """
        rules_dir = Path(directory) if directory else self.rules_dir

        if not rules_dir.exists():
            logger.warning(f"Rule directory does not exist: {rules_dir}")
            return []

        paths = sorted(
            p for p in rules_dir.iterdir() if p.suffix.lower() in (".yaml", ".yml", ".json")
        )
        rules: list[BusinessRule] = []
        errors: list[dict[str, Any]] = []
        for path in paths:
            try:
                rules.extend(self.load_file(path))
            except RuleConfigError as e:
                errors.extend(e.errors)

        if errors:
            raise RuleConfigError(
                f"Validation failed for {len(errors)} rule item(s)", errors=errors
            )
        return rules

    def parse(
        self, data: dict[str, Any] | list[dict[str, Any]] | None, source: str = "<data>"
    ) -> list[BusinessRule]:
        """Validate parsed YAML/JSON data into rules.

        Accepts a single rule mapping, a list of rules, or a mapping with a
        top-level "rules" list.
        """
        if isinstance(data, dict) and "rules" in data:
            items = data["rules"]
            if not isinstance(items, list):
                raise RuleConfigError(
                    f"Invalid rule format in {source}",
                    errors=[{"file": source, "error": "Expected a list under 'rules'"}],
                )
        elif isinstance(data, dict):
            items = [data]
        elif isinstance(data, list):
            items = data
        else:
            raise RuleConfigError(
                f"Invalid rule format in {source}",
                errors=[{"file": source, "error": "Expected dict or list"}],
            )

        rules: list[BusinessRule] = []
        errors: list[dict[str, Any]] = []
        seen: set[str] = set()

        for idx, item in enumerate(items):
            if not isinstance(item, dict):
                errors.append({"file": source, "index": idx, "error": "Rule must be a mapping"})
                continue
            try:
                rule = RuleSchema.model_validate(item).to_rule()
            except ValidationError as e:
                errors.extend(
                    {
                        "file": source,
                        "index": idx,
                        "field": ".".join(str(loc) for loc in err["loc"]),
                        "error": err["msg"],
                    }
                    for err in e.errors()
                )
                continue
            if rule.id in seen:
                errors.append(
                    {"file": source, "index": idx, "field": "id", "error": f"Duplicate rule id {rule.id}"}
                )
                continue
            seen.add(rule.id)
            rules.append(rule)

        if errors:
            raise RuleConfigError(
                f"Validation failed for {len(errors)} rule item(s) in {source}",
                errors=errors,
            )
        return rules
