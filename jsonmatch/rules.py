"""Validation rules loaded from YAML files.

A rule file holds a ``rules`` list; each entry names a builder option, the
paths it applies to and, optionally, a scope::

    rules:
      - option: any_order
        paths: ["items[*]"]
      - option: type_match
        paths: ["items[*].id", "items[*].timestamp"]
      - option: equal_count
        scope: subtree
      - option: element_count
        paths: ["items"]
        count: 3
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Optional, Union

import yaml

from .exceptions import RuleError, RuleFileError
from .models import Scope

if TYPE_CHECKING:
    from .assertions import JSONAssertionBuilder

logger = logging.getLogger(__name__)

SCOPED_OPTIONS = (
    "any_order",
    "strict_order",
    "equal_count",
    "flexible_count",
    "exact_match",
    "type_match",
    "value_not_equal",
)
SINGLE_NODE_OPTIONS = ("key_must_be_absent", "element_count")
ALL_OPTIONS = SCOPED_OPTIONS + SINGLE_NODE_OPTIONS


@dataclass
class Rule:
    """A single builder option applied to zero or more paths."""
    option: str
    paths: list[str] = field(default_factory=list)
    scope: Scope = Scope.SINGLE_NODE
    count: Optional[int] = None

    def apply(self, builder: JSONAssertionBuilder) -> JSONAssertionBuilder:
        """Replay this rule on a builder."""
        method = getattr(builder, self.option)
        if self.option == "element_count":
            return method(self.count, *self.paths)
        if self.option in SINGLE_NODE_OPTIONS:
            return method(*self.paths)
        return method(*self.paths, scope=self.scope)

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"option": self.option, "paths": list(self.paths)}
        if self.option in SCOPED_OPTIONS:
            result["scope"] = self.scope.value
        if self.count is not None:
            result["count"] = self.count
        return result


def parse_rule(data: Any) -> Rule:
    """
    Build a Rule from its mapping form.

    Raises:
        RuleError: If the option, paths, scope or count are invalid
    """
    if not isinstance(data, dict):
        raise RuleError(str(data), "rule must be a mapping")

    option = data.get("option")
    if option not in ALL_OPTIONS:
        raise RuleError(
            str(option),
            f"unknown option, expected one of: {', '.join(ALL_OPTIONS)}"
        )

    paths = data.get("paths") or []
    if isinstance(paths, str):
        paths = [paths]
    if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
        raise RuleError(option, "paths must be a string or a list of strings")

    scope_value = data.get("scope", Scope.SINGLE_NODE.value)
    try:
        scope = Scope(scope_value)
    except ValueError:
        raise RuleError(
            option,
            f"unknown scope '{scope_value}', expected single_node or subtree"
        )
    if scope is Scope.SUBTREE and option in SINGLE_NODE_OPTIONS:
        raise RuleError(option, "option only applies to a single node")

    count = data.get("count")
    if option == "element_count":
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise RuleError(option, "count must be a non-negative integer")
    elif count is not None:
        raise RuleError(option, "count is only valid for element_count")

    return Rule(option=option, paths=paths, scope=scope, count=count)


def parse_rules(data: Any) -> list[Rule]:
    """
    Parse rules from a loaded document.

    Accepts either a mapping with a ``rules`` list or the list itself.
    An empty document yields no rules.
    """
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("rules") or []
    if not isinstance(data, list):
        raise RuleError(str(data), "rules must be a list")
    return [parse_rule(entry) for entry in data]


def load_rules(path: Union[str, Path]) -> list[Rule]:
    """
    Load rules from a YAML file.

    Raises:
        RuleFileError: If the file cannot be read or is not valid YAML
        RuleError: If a rule in the file is invalid
    """
    rule_path = Path(path)
    try:
        with open(rule_path, 'r') as f:
            content = f.read()
    except OSError as e:
        raise RuleFileError(str(rule_path), e.strerror or str(e))

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise RuleFileError(str(rule_path), f"invalid YAML: {e}")

    rules = parse_rules(data)
    logger.debug("Loaded %d rule(s) from %s", len(rules), rule_path)
    return rules


def apply_rules(
    builder: JSONAssertionBuilder,
    rules: Iterable[Rule]
) -> JSONAssertionBuilder:
    """Replay rules on a builder in order and return it."""
    for rule in rules:
        rule.apply(builder)
    return builder
