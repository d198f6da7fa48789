"""Validation engine comparing an expected JSON value against an actual one."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .models import (
    EngineConfig,
    FailureKind,
    JSONKind,
    MISSING,
    ValidationFailure,
    ValidationResult,
)
from .node_config import NodeConfig
from .utils import (
    build_key_path,
    get_type_name,
    kind_of,
    render_value,
    render_with_count,
)

logger = logging.getLogger(__name__)

KeyPath = tuple  # tuple of str keys and int indices


class ValidationEngine:
    """
    Validates an actual JSON value against an expected one.

    Two passes are run and combined:

    1. Actual-only constraints: keys that must be absent and exact element
       counts, checked over the whole actual document.
    2. Expected vs actual: a lock-step walk of the expected document. Anything
       not mentioned in expected is unconstrained.

    Mismatches are returned as data in a ValidationResult; the engine does not
    raise for any input shape.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def validate(
        self,
        expected: Any,
        actual: Any,
        node_config: Optional[NodeConfig] = None
    ) -> ValidationResult:
        """
        Validate ``actual`` against ``expected``.

        Args:
            expected: Canonical expected value, or MISSING
            actual: Canonical actual value, or MISSING
            node_config: Root of the configuration tree (defaults if not provided)

        Returns:
            ValidationResult with every independent failure found
        """
        node_config = node_config if node_config is not None else NodeConfig()

        actual_result = self._validate_actual(actual, (), node_config)
        comparison_result = self._compare(expected, actual, (), node_config)
        result = actual_result.combined(comparison_result)

        logger.debug(
            "Validation finished with %d failure(s)", len(result.failures)
        )
        return result

    # Expected vs actual

    def _compare(
        self,
        expected: Any,
        actual: Any,
        key_path: KeyPath,
        config: NodeConfig
    ) -> ValidationResult:
        # No value in expected means no requirement
        if expected is MISSING or expected is None:
            return ValidationResult.success()

        if actual is MISSING:
            return self._failure(
                key_path,
                FailureKind.MISSING,
                "Expected JSON is present but Actual JSON is missing.",
                expected=self._render(expected),
                actual=self._render(actual),
            )

        expected_kind = kind_of(expected)
        actual_kind = kind_of(actual)

        if expected_kind is None or expected_kind is not actual_kind:
            return self._failure(
                key_path,
                FailureKind.TYPE_MISMATCH,
                "Expected and Actual types do not match.",
                expected=f"{self._render(expected)} (Type: {get_type_name(expected)})",
                actual=f"{self._render(actual)} (Type: {get_type_name(actual)})",
            )

        if expected_kind is JSONKind.OBJECT:
            return self._compare_objects(expected, actual, key_path, config)
        if expected_kind is JSONKind.ARRAY:
            return self._compare_arrays(expected, actual, key_path, config)
        return self._compare_primitives(expected, actual, key_path, config)

    def _compare_primitives(
        self,
        expected: Any,
        actual: Any,
        key_path: KeyPath,
        config: NodeConfig
    ) -> ValidationResult:
        if config.is_value_not_equal:
            if expected == actual:
                return self._failure(
                    key_path,
                    FailureKind.VALUE_EQUAL,
                    "Values must NOT be equal.",
                    expected=self._render(expected),
                    actual=self._render(actual),
                )
            return ValidationResult.success()

        # Under type match the kinds already agree at this point
        if config.is_exact_match and expected != actual:
            return self._failure(
                key_path,
                FailureKind.VALUE_MISMATCH,
                "Values do not match.",
                expected=self._render(expected),
                actual=self._render(actual),
            )
        return ValidationResult.success()

    def _check_counts(
        self,
        expected: list | dict,
        actual: list | dict,
        key_path: KeyPath,
        config: NodeConfig
    ) -> Optional[ValidationResult]:
        if config.is_equal_count:
            if len(expected) != len(actual):
                return self._failure(
                    key_path,
                    FailureKind.COUNT_MISMATCH,
                    "Expected JSON count does not match Actual JSON.",
                    expected=render_with_count(expected, self.config.snapshot_max_length),
                    actual=render_with_count(actual, self.config.snapshot_max_length),
                )
        elif len(expected) > len(actual):
            return self._failure(
                key_path,
                FailureKind.COUNT_MISMATCH,
                "Expected JSON has more elements than Actual JSON.",
                expected=render_with_count(expected, self.config.snapshot_max_length),
                actual=render_with_count(actual, self.config.snapshot_max_length),
            )
        return None

    def _compare_objects(
        self,
        expected: dict,
        actual: dict,
        key_path: KeyPath,
        config: NodeConfig
    ) -> ValidationResult:
        count_failure = self._check_counts(expected, actual, key_path, config)
        if count_failure is not None:
            return count_failure

        result = ValidationResult.success()
        for key, value in expected.items():
            child_result = self._compare(
                value,
                actual.get(key, MISSING),
                key_path + (key,),
                config.resolved_child(key),
            )
            result = result.combined(child_result)
        return result

    def _compare_arrays(
        self,
        expected: list,
        actual: list,
        key_path: KeyPath,
        config: NodeConfig
    ) -> ValidationResult:
        count_failure = self._check_counts(expected, actual, key_path, config)
        if count_failure is not None:
            return count_failure

        child_configs = [config.resolved_child(i) for i in range(len(expected))]
        fixed_indexes = [i for i, c in enumerate(child_configs) if not c.is_any_order]
        any_order_indexes = [i for i, c in enumerate(child_configs) if c.is_any_order]

        result = ValidationResult.success()

        # Fixed positions are consumed whether or not they matched
        for index in fixed_indexes:
            child_result = self._compare(
                expected[index],
                actual[index] if index < len(actual) else MISSING,
                key_path + (index,),
                child_configs[index],
            )
            result = result.combined(child_result)

        consumed = set(fixed_indexes)
        available = [i for i in range(len(actual)) if i not in consumed]

        for index in any_order_indexes:
            child_config = child_configs[index]
            match = self._find_any_order_match(
                expected[index], actual, available, key_path + (index,), child_config
            )
            if match is not None:
                available.remove(match)
                continue

            remaining = [actual[i] for i in available]
            match_mode = "exact" if child_config.is_exact_match else "type"
            result = result.combined(self._failure(
                key_path,
                FailureKind.NO_ANY_ORDER_MATCH,
                f"Any order {match_mode} match found no matches on Actual side "
                f"satisfying the Expected requirement.",
                expected=self._render(expected[index]),
                actual=f"Remaining unmatched elements: {self._render(remaining)}",
            ))
            break

        return result

    def _find_any_order_match(
        self,
        expected_item: Any,
        actual: list,
        available: list[int],
        key_path: KeyPath,
        config: NodeConfig
    ) -> Optional[int]:
        """Return the first available actual index that fully matches, if any."""
        for actual_index in available:
            trial = self._compare(expected_item, actual[actual_index], key_path, config)
            if trial.is_valid:
                return actual_index
        return None

    # Actual-only constraints

    def _validate_actual(
        self,
        actual: Any,
        key_path: KeyPath,
        config: NodeConfig
    ) -> ValidationResult:
        if actual is MISSING:
            return ValidationResult.success()

        kind = kind_of(actual)

        if kind is JSONKind.OBJECT:
            result = ValidationResult.success()
            for key, value in actual.items():
                child_config = config.resolved_child(key)
                if child_config.is_key_must_be_absent:
                    result = result.combined(self._failure(
                        key_path + (key,),
                        FailureKind.KEY_PRESENT,
                        f"Actual JSON must not have key with name: {key}",
                        actual=self._render(actual),
                    ))
                result = result.combined(
                    self._validate_actual(value, key_path + (key,), child_config)
                )
            return result.combined(self._check_element_count(actual, key_path, config))

        if kind is JSONKind.ARRAY:
            result = ValidationResult.success()
            for index, element in enumerate(actual):
                result = result.combined(self._validate_actual(
                    element, key_path + (index,), config.resolved_child(index)
                ))
            return result.combined(self._check_element_count(actual, key_path, config))

        if config.element_count is not None:
            return self._failure(
                key_path,
                FailureKind.INVALID_USE,
                "Invalid element count assertion on a non-collection element. "
                "Remove element_count requirements from this key path in the test setup.",
            )
        return ValidationResult.success()

    def _check_element_count(
        self,
        actual: list | dict,
        key_path: KeyPath,
        config: NodeConfig
    ) -> ValidationResult:
        if config.element_count is None or len(actual) == config.element_count:
            return ValidationResult.success()
        return self._failure(
            key_path,
            FailureKind.ELEMENT_COUNT_MISMATCH,
            "The expected element count is not equal to the actual number of elements.",
            expected=f"count: {config.element_count}",
            actual=f"count: {len(actual)}",
        )

    # Helpers

    def _render(self, value: Any) -> str:
        return render_value(value, self.config.snapshot_max_length)

    def _failure(
        self,
        key_path: KeyPath,
        kind: FailureKind,
        message: str,
        expected: Optional[str] = None,
        actual: Optional[str] = None
    ) -> ValidationResult:
        if not self.config.include_snapshots:
            expected = actual = None
        return ValidationResult.failure(ValidationFailure(
            key_path=build_key_path(key_path),
            message=message,
            kind=kind,
            expected=expected,
            actual=actual,
        ))


def validate(
    expected: Any,
    actual: Any,
    node_config: Optional[NodeConfig] = None,
    config: Optional[EngineConfig] = None
) -> ValidationResult:
    """
    Convenience function to validate two canonical JSON values.

    Args:
        expected: The expected value (MISSING or None means no requirement)
        actual: The actual value
        node_config: Root of the configuration tree
        config: Optional engine configuration

    Returns:
        ValidationResult
    """
    engine = ValidationEngine(config)
    return engine.validate(expected, actual, node_config)
