"""Runner for folders of JSON validation cases."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Union

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from .assertions import JSONAssertionBuilder
from .exceptions import CaseError, JSONMatchError
from .models import MISSING, RunnerConfig, ValidationResult
from .rules import Rule, apply_rules, load_rules, parse_rules

logger = logging.getLogger(__name__)


# Cache for compiled actual_path expressions
@lru_cache(maxsize=256)
def _compile_path(path: str):
    """Compile and cache a JSONPath expression."""
    return jsonpath_parse(path)


@dataclass
class CaseResult:
    """Result of a single validation case."""
    name: str
    case_path: str
    passed: bool
    expect_pass: bool = True
    validation: Optional[dict] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        result = {
            "name": self.name,
            "case_path": self.case_path,
            "passed": self.passed,
            "expect_pass": self.expect_pass,
        }
        if self.validation is not None:
            result["validation"] = self.validation
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class RunReport:
    """Report across all cases of a run."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    cases: list[CaseResult] = field(default_factory=list)
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')

    @property
    def pass_rate(self) -> str:
        return f"{(self.passed / self.total * 100):.1f}%" if self.total > 0 else "0.0%"

    def add(self, result: CaseResult) -> None:
        self.cases.append(result)
        self.total += 1
        if result.passed:
            self.passed += 1
        else:
            self.failed += 1

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "summary": {
                "total_cases": self.total,
                "passed": self.passed,
                "failed": self.failed,
                "pass_rate": self.pass_rate,
            },
            "cases": [c.to_dict() for c in self.cases],
        }

    def print_summary(self):
        print(f"\nCase Results: {self.passed}/{self.total} passed ({self.pass_rate})")
        if self.failed > 0:
            print(f"  Failed: {self.failed}")
            for case in self.cases:
                if not case.passed:
                    reason = case.error or _first_failure(case.validation)
                    print(f"    {case.name}: {reason}")


def _first_failure(validation: Optional[dict]) -> str:
    if not validation or not validation.get("failures"):
        return "validation passed but a failure was expected"
    failure = validation["failures"][0]
    key_path = failure.get("key_path") or "<root>"
    return f"{key_path}: {failure['message']}"


class CaseRunner:
    """
    Runs validation cases from a folder.

    Each case is a JSON file::

        {
          "name": "order list",
          "expected": {"items": [{"id": 1}]},
          "actual": {"response": {"items": [{"id": 1, "extra": true}]}},
          "actual_path": "$.response",
          "rules": [{"option": "any_order", "paths": ["items[*]"]}],
          "expect_pass": true
        }

    Rules from the runner's rule file are applied first, then the case's
    inline rules.
    """

    def __init__(
        self,
        rules: Optional[list[Rule]] = None,
        config: Optional[RunnerConfig] = None
    ):
        self.config = config or RunnerConfig()
        if rules is None and self.config.rules_path:
            rules = load_rules(self.config.rules_path)
        self.rules = rules or []

    def run_case(self, case: dict, name: str, case_path: str) -> CaseResult:
        """Run a single case and compare its outcome with ``expect_pass``."""
        expect_pass = case.get("expect_pass", True)

        try:
            if not isinstance(expect_pass, bool):
                raise CaseError(name, "expect_pass must be a boolean")

            actual = self._select_actual(case, name)
            builder = JSONAssertionBuilder(
                case.get("expected", MISSING),
                actual,
                self.config.engine,
            )
            apply_rules(builder, self.rules)
            apply_rules(builder, parse_rules(case.get("rules")))

            result: ValidationResult = builder.validate_with_result()
        except JSONMatchError as e:
            logger.warning("Case %s could not be run: %s", name, e)
            return CaseResult(
                name=name,
                case_path=case_path,
                passed=False,
                expect_pass=expect_pass if isinstance(expect_pass, bool) else True,
                error=str(e),
            )

        logger.debug(
            "Case %s finished with %d failure(s)", name, len(result.failures)
        )
        return CaseResult(
            name=name,
            case_path=case_path,
            passed=result.is_valid == expect_pass,
            expect_pass=expect_pass,
            validation=result.to_dict(),
        )

    def run_folder(self, folder: Union[str, Path], print_report: bool = True) -> RunReport:
        """Run every case file in a folder, in file name order."""
        report = RunReport()
        folder_path = Path(folder)

        for case_file in sorted(folder_path.glob(self.config.pattern)):
            name = case_file.stem
            try:
                with open(case_file) as f:
                    case = json.load(f)
                if not isinstance(case, dict):
                    raise CaseError(name, "case file must hold a JSON object")
            except (OSError, ValueError, CaseError) as e:
                logger.warning("Skipping unreadable case %s: %s", case_file, e)
                result = CaseResult(
                    name=name,
                    case_path=str(case_file),
                    passed=False,
                    error=f"Cannot read case file: {e}",
                )
            else:
                name = case.get("name", name)
                result = self.run_case(case, name, str(case_file))

            report.add(result)
            if print_report:
                print(f"{'PASS' if result.passed else 'FAIL'}: {result.name}")

        if print_report:
            report.print_summary()

        return report

    def _select_actual(self, case: dict, name: str) -> Any:
        actual = case.get("actual", MISSING)
        actual_path = case.get("actual_path")
        if actual_path is None or actual is MISSING:
            return actual
        if not isinstance(actual_path, str):
            raise CaseError(name, "actual_path must be a string")

        try:
            expr = _compile_path(actual_path)
        except (JsonPathLexerError, JsonPathParserError) as e:
            raise CaseError(name, f"invalid actual_path '{actual_path}': {e}")

        matches = expr.find(actual)
        if not matches:
            logger.debug("actual_path %s matched nothing in case %s", actual_path, name)
            return MISSING
        return matches[0].value


def run_cases(
    cases_dir: Union[str, Path],
    rules_path: Optional[str] = None,
    config: Optional[RunnerConfig] = None,
    print_report: bool = True
) -> RunReport:
    """
    Run all cases in a directory.

    Args:
        cases_dir: Folder containing case JSON files
        rules_path: Optional YAML rule file applied to every case
        config: Optional runner configuration
        print_report: Whether to print per-case lines and the summary

    Returns:
        RunReport
    """
    config = config or RunnerConfig()
    if rules_path is not None:
        config.rules_path = rules_path
    runner = CaseRunner(config=config)
    return runner.run_folder(cases_dir, print_report)
