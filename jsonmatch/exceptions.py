"""Custom exceptions for jsonmatch."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ValidationResult


class JSONMatchError(Exception):
    """Base exception for jsonmatch errors."""
    pass


class JSONAssertionError(AssertionError, JSONMatchError):
    """Raised by an assertion builder when validation fails."""
    def __init__(self, message: str, result: ValidationResult = None):
        super().__init__(message)
        self.message = message
        self.result = result

    @property
    def failures(self) -> tuple:
        return self.result.failures if self.result is not None else ()


class RuleError(JSONMatchError):
    """Raised when a validation rule is invalid."""
    def __init__(self, rule: str, message: str):
        super().__init__(f"Invalid rule '{rule}': {message}")
        self.rule = rule
        self.message = message


class RuleFileError(JSONMatchError):
    """Raised when a rule file cannot be read or parsed."""
    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot load rule file {path}: {reason}")
        self.path = path
        self.reason = reason


class CaseError(JSONMatchError):
    """Raised when a validation case file is malformed."""
    def __init__(self, case: str, reason: str):
        super().__init__(f"Invalid case {case}: {reason}")
        self.case = case
        self.reason = reason
