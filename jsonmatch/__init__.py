"""
jsonmatch - Configurable structural JSON validation for tests

Compares an actual JSON value against an expected one. By default actual
may contain more than expected; options addressed by path switch on
any-order array matching, type-only matching, exact counts, element
counts, absent keys and values that must differ.
"""

from .assertions import (
    JSONAssertionBuilder,
    assert_json,
    assert_equal,
    assert_exact_match,
    assert_type_match,
    assert_type_subset,
    assert_value_subset,
)
from .canonical import to_canonical
from .engine import ValidationEngine, validate
from .exceptions import (
    CaseError,
    JSONAssertionError,
    JSONMatchError,
    RuleError,
    RuleFileError,
)
from .models import (
    EngineConfig,
    FailureKind,
    MISSING,
    OptionKind,
    RunnerConfig,
    Scope,
    ValidationFailure,
    ValidationResult,
)
from .node_config import Defaults, NodeConfig
from .path import (
    Index,
    JSONPath,
    Key,
    WILDCARD_INDEX,
    WILDCARD_KEY,
)
from .rules import Rule, apply_rules, load_rules, parse_rules
from .runner import CaseResult, CaseRunner, RunReport, run_cases

__version__ = "1.0.0"
__all__ = [
    # Builder
    "JSONAssertionBuilder",
    "assert_json",
    "assert_equal",
    "assert_type_match",
    "assert_exact_match",
    "assert_type_subset",
    "assert_value_subset",
    "to_canonical",
    # Engine
    "ValidationEngine",
    "validate",
    "EngineConfig",
    "ValidationFailure",
    "ValidationResult",
    "FailureKind",
    "MISSING",
    # Configuration tree
    "NodeConfig",
    "Defaults",
    "OptionKind",
    "Scope",
    # Paths
    "JSONPath",
    "Key",
    "Index",
    "WILDCARD_KEY",
    "WILDCARD_INDEX",
    # Rules
    "Rule",
    "load_rules",
    "parse_rules",
    "apply_rules",
    # Case runner
    "CaseRunner",
    "CaseResult",
    "RunReport",
    "RunnerConfig",
    "run_cases",
    # Errors
    "JSONMatchError",
    "JSONAssertionError",
    "RuleError",
    "RuleFileError",
    "CaseError",
]
