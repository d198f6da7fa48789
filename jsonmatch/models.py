"""Data models for the jsonmatch validation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARNING"
    ERROR = "ERROR"


class JSONKind(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class Scope(Enum):
    """How far an option applied at a path reaches."""
    SINGLE_NODE = "single_node"
    SUBTREE = "subtree"


class OptionKind(Enum):
    """Options that can be set on a configuration node.

    The value of each member is the attribute name used on both the node
    and its defaults bundle.
    """
    ANY_ORDER = "any_order"
    EXACT_MATCH = "exact_match"
    EQUAL_COUNT = "equal_count"
    KEY_MUST_BE_ABSENT = "key_must_be_absent"
    VALUE_NOT_EQUAL = "value_not_equal"
    ELEMENT_COUNT = "element_count"

    @property
    def has_subtree_scope(self) -> bool:
        return self is not OptionKind.ELEMENT_COUNT


BOOLEAN_OPTIONS = tuple(k for k in OptionKind if k.has_subtree_scope)


class FailureKind(Enum):
    MISSING = "MISSING"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    VALUE_MISMATCH = "VALUE_MISMATCH"
    VALUE_EQUAL = "VALUE_EQUAL"
    COUNT_MISMATCH = "COUNT_MISMATCH"
    ELEMENT_COUNT_MISMATCH = "ELEMENT_COUNT_MISMATCH"
    NO_ANY_ORDER_MATCH = "NO_ANY_ORDER_MATCH"
    KEY_PRESENT = "KEY_PRESENT"
    INVALID_USE = "INVALID_USE"


class _Missing:
    """Marker for a value that is not there at all (as opposed to JSON null)."""

    _instance: Optional[_Missing] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING = _Missing()


@dataclass
class EngineConfig:
    """Global configuration for the validation engine."""
    include_snapshots: bool = True
    snapshot_max_length: int = 2000


@dataclass
class RunnerConfig:
    """Configuration for running a folder of validation cases."""
    rules_path: Optional[str] = None
    report_path: Optional[str] = None
    pattern: str = "*.json"
    log_level: LogLevel = LogLevel.INFO
    engine: EngineConfig = field(default_factory=EngineConfig)


@dataclass(frozen=True)
class ValidationFailure:
    """A single mismatch found during validation."""
    key_path: str
    message: str
    kind: FailureKind
    expected: Optional[str] = None
    actual: Optional[str] = None

    def __str__(self) -> str:
        result = self.message
        if self.expected is not None:
            result += f"\n\nExpected: {self.expected}"
        if self.actual is not None:
            result += f"\n\nActual: {self.actual}"
        if self.key_path:
            result += f"\n\nKey path: {self.key_path}"
        return result

    def to_dict(self) -> dict:
        return {
            "key_path": self.key_path,
            "kind": self.kind.value,
            "message": self.message,
            "expected": self.expected,
            "actual": self.actual,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation run: success, or an ordered list of failures."""
    failures: tuple[ValidationFailure, ...] = ()

    @classmethod
    def success(cls) -> ValidationResult:
        return cls()

    @classmethod
    def failure(cls, *failures: ValidationFailure) -> ValidationResult:
        return cls(failures=tuple(failures))

    @property
    def is_valid(self) -> bool:
        return not self.failures

    def combined(self, other: ValidationResult) -> ValidationResult:
        if self.is_valid and other.is_valid:
            return self
        return ValidationResult(failures=self.failures + other.failures)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "failures_count": len(self.failures),
            "failures": [f.to_dict() for f in self.failures],
        }
