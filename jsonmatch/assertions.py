"""Fluent assertion builder for JSON validation in tests.

Example::

    assert_json(expected, actual) \\
        .any_order("items[*]") \\
        .type_match("items[*].id", "items[*].timestamp") \\
        .equal_count("items") \\
        .validate()

By default values are compared exactly (same type and same value), objects
and arrays in ``actual`` may hold more entries than ``expected``, and array
elements are compared by position.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Iterable, Optional, Union

from .canonical import to_canonical
from .engine import ValidationEngine
from .exceptions import JSONAssertionError
from .models import (
    EngineConfig,
    FailureKind,
    MISSING,
    OptionKind,
    Scope,
    ValidationFailure,
    ValidationResult,
)
from .node_config import NodeConfig
from .path import JSONPath, as_path

logger = logging.getLogger(__name__)

PathLike = Union[str, JSONPath]

EXPECTED_MISSING_MESSAGE = (
    "Expected is nil/None. To assert that actual is absent, check it for None directly."
)


class JSONAssertionBuilder:
    """
    Collects validation options and runs the validation engine.

    Every option method takes zero or more paths; with none, the option is
    applied at the root. Methods return the builder so calls can be chained.
    """

    def __init__(
        self,
        expected: Any,
        actual: Any,
        engine_config: Optional[EngineConfig] = None
    ):
        """
        Initialize the builder.

        Args:
            expected: Canonical expected value (MISSING when absent)
            actual: Canonical actual value (MISSING when absent)
            engine_config: Optional engine configuration
        """
        self.expected = expected
        self.actual = actual
        self.config = NodeConfig()
        self._engine = ValidationEngine(engine_config)

    # Array ordering

    def any_order(self, *paths: PathLike, scope: Scope = Scope.SINGLE_NODE) -> JSONAssertionBuilder:
        """Let the array elements at the given paths match actual elements at any position."""
        return self._apply(OptionKind.ANY_ORDER, True, paths, scope)

    def strict_order(self, *paths: PathLike, scope: Scope = Scope.SINGLE_NODE) -> JSONAssertionBuilder:
        """Require positional matching, overriding an earlier any_order."""
        return self._apply(OptionKind.ANY_ORDER, False, paths, scope)

    # Collection counts

    def equal_count(self, *paths: PathLike, scope: Scope = Scope.SINGLE_NODE) -> JSONAssertionBuilder:
        """Require collections in actual to have exactly as many entries as in expected."""
        return self._apply(OptionKind.EQUAL_COUNT, True, paths, scope)

    def flexible_count(self, *paths: PathLike, scope: Scope = Scope.SINGLE_NODE) -> JSONAssertionBuilder:
        """Allow actual collections to hold extra entries, overriding an earlier equal_count."""
        return self._apply(OptionKind.EQUAL_COUNT, False, paths, scope)

    def element_count(self, count: int, *paths: PathLike) -> JSONAssertionBuilder:
        """Require the actual collections at the given paths to hold exactly ``count`` entries."""
        if isinstance(count, bool) or not isinstance(count, int):
            raise TypeError(f"element_count expects an int, got {type(count).__name__}")
        return self._apply(OptionKind.ELEMENT_COUNT, count, paths, Scope.SINGLE_NODE)

    # Value matching

    def exact_match(self, *paths: PathLike, scope: Scope = Scope.SINGLE_NODE) -> JSONAssertionBuilder:
        """Require same type and same value, overriding an earlier type_match."""
        return self._apply(OptionKind.EXACT_MATCH, True, paths, scope)

    def type_match(self, *paths: PathLike, scope: Scope = Scope.SINGLE_NODE) -> JSONAssertionBuilder:
        """Require only the same type; literal values may differ."""
        return self._apply(OptionKind.EXACT_MATCH, False, paths, scope)

    def value_not_equal(self, *paths: PathLike, scope: Scope = Scope.SINGLE_NODE) -> JSONAssertionBuilder:
        """Require the actual values at the given paths to differ from expected."""
        return self._apply(OptionKind.VALUE_NOT_EQUAL, True, paths, scope)

    # Key presence

    def key_must_be_absent(self, *paths: PathLike) -> JSONAssertionBuilder:
        """Require the keys at the given paths to not exist in actual."""
        return self._apply(OptionKind.KEY_MUST_BE_ABSENT, True, paths, Scope.SINGLE_NODE)

    # Terminal operations

    def validate_with_result(self) -> ValidationResult:
        """Run the validation and return the detailed result."""
        if self.expected is MISSING:
            return ValidationResult.failure(ValidationFailure(
                key_path="",
                message=EXPECTED_MISSING_MESSAGE,
                kind=FailureKind.INVALID_USE,
            ))
        return self._engine.validate(self.expected, self.actual, self.config)

    def check(self) -> bool:
        """Run the validation and return whether it passed."""
        if self.expected is MISSING:
            return False
        return self.validate_with_result().is_valid

    def validate(self) -> None:
        """
        Run the validation and fail the test on any mismatch.

        Raises:
            JSONAssertionError: listing every failure found
        """
        result = self.validate_with_result()
        if result.is_valid:
            return

        logger.debug("JSON assertion failed with %d failure(s)", len(result.failures))
        details = "\n\n---\n\n".join(str(f) for f in result.failures)
        raise JSONAssertionError(
            f"JSON validation failed with {len(result.failures)} failure(s):\n\n{details}",
            result,
        )

    # Helpers

    def _apply(
        self,
        kind: OptionKind,
        value: Union[bool, int],
        paths: Iterable[Any],
        scope: Union[Scope, str]
    ) -> JSONAssertionBuilder:
        scope = Scope(scope)
        for path in _flatten_paths(paths):
            logger.debug("Setting %s=%s at %s (%s)", kind.value, value, path, scope.value)
            self.config.set_option(kind, value, path, scope)
        return self


def _flatten_paths(paths: Iterable[Any]) -> list[JSONPath]:
    """Coerce path arguments, accepting nested lists; no paths means the root."""
    result = []
    for path in paths:
        if isinstance(path, (list, tuple)):
            result.extend(_flatten_paths(path))
        else:
            result.append(as_path(path))
    return result or [JSONPath.root]


def assert_json(
    expected: Any,
    actual: Any,
    engine_config: Optional[EngineConfig] = None
) -> JSONAssertionBuilder:
    """
    Create a fluent assertion comparing two JSON values.

    Both values may be JSON strings, bytes, dicts, lists, primitives or
    objects carrying a JSON payload; they are converted to canonical form
    first.
    """
    return JSONAssertionBuilder(
        to_canonical(expected),
        to_canonical(actual),
        engine_config,
    )


# One-shot helpers

def assert_type_match(expected: Any, actual: Any) -> None:
    """Assert that actual holds the types in expected everywhere; values may differ."""
    assert_json(expected, actual).type_match(scope=Scope.SUBTREE).validate()


def assert_exact_match(expected: Any, actual: Any) -> None:
    """Assert that actual holds the values in expected; extra entries are allowed."""
    assert_json(expected, actual).validate()


# Legacy helpers

def assert_equal(expected: Any, actual: Any) -> None:
    """Assert exact equality: same types, same values and same collection counts everywhere."""
    warnings.warn(
        "assert_equal is deprecated, use "
        "assert_json(expected, actual).equal_count(scope=Scope.SUBTREE).validate()",
        DeprecationWarning,
        stacklevel=2,
    )
    expected_value = to_canonical(expected)
    actual_value = to_canonical(actual)

    if expected_value is MISSING and actual_value is MISSING:
        return
    if expected_value is MISSING or actual_value is MISSING:
        missing, present = ("Expected", "Actual") if expected_value is MISSING else ("Actual", "Expected")
        raise JSONAssertionError(
            f"{missing} is None and {present} is not.\n"
            f"Expected: {expected!r}\nActual: {actual!r}"
        )

    JSONAssertionBuilder(expected_value, actual_value) \
        .equal_count(scope=Scope.SUBTREE) \
        .validate()


def assert_type_subset(expected: Any, actual: Any) -> None:
    """Assert that actual holds the types in expected; values may differ."""
    warnings.warn(
        "assert_type_subset is deprecated, use "
        "assert_json(expected, actual).type_match(scope=Scope.SUBTREE).validate()",
        DeprecationWarning,
        stacklevel=2,
    )
    assert_json(expected, actual).type_match(scope=Scope.SUBTREE).validate()


def assert_value_subset(expected: Any, actual: Any) -> None:
    """Assert that actual holds the values in expected."""
    warnings.warn(
        "assert_value_subset is deprecated, use assert_json(expected, actual).validate()",
        DeprecationWarning,
        stacklevel=2,
    )
    assert_json(expected, actual).validate()
