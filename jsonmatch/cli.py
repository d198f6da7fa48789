"""Run jsonmatch validation cases from the command line."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .exceptions import RuleError, RuleFileError
from .models import LogLevel, RunnerConfig
from .runner import CaseRunner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonmatch",
        description="Validate folders of expected/actual JSON cases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  jsonmatch cases/
  jsonmatch cases/ -r rules.yaml -o report.json
  jsonmatch cases/ --rules rules.yaml --quiet
        """
    )

    parser.add_argument("cases", help="Path to folder containing case JSON files")
    parser.add_argument("-r", "--rules", help="Path to YAML rule file applied to every case")
    parser.add_argument("-o", "--report", help="Path to output JSON report file")
    parser.add_argument("-p", "--pattern", default="*.json", help="Glob pattern for case files")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress console output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    config = RunnerConfig(
        rules_path=args.rules,
        report_path=args.report,
        pattern=args.pattern,
        log_level=LogLevel.DEBUG if args.verbose else LogLevel.WARN,
    )
    logging.basicConfig(
        level=config.log_level.value,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not Path(args.cases).is_dir():
        print(f"Error: Cases folder not found: {args.cases}", file=sys.stderr)
        return 2

    try:
        runner = CaseRunner(config=config)
    except (RuleError, RuleFileError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not args.quiet:
        print(f"Cases: {args.cases}")
        if args.rules:
            print(f"Rules: {args.rules}")
        print()

    report = runner.run_folder(args.cases, print_report=not args.quiet)

    if config.report_path:
        with open(config.report_path, 'w') as f:
            json.dump(report.to_dict(), indent=2, fp=f)
        if not args.quiet:
            print(f"\nReport saved to: {config.report_path}")

    return 0 if report.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
