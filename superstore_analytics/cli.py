"""
Command line report runner.

Usage:
    superstore-report data/super_store.csv
    superstore-report data/super_store.csv --report overview_metrics --format json
    superstore-report data/super_store.csv --list
"""

import argparse
import sys
from typing import List, Optional

import structlog

from superstore_analytics.analytics.engine import REPORTS, SalesAnalyticsEngine
from superstore_analytics.config.logging import configure_logging
from superstore_analytics.exceptions import SchemaMismatchError, UnknownReportError
from superstore_analytics.ingestion import FileFormat, load_order_lines
from superstore_analytics.quality import ValidationStatus, create_order_lines_validator
from superstore_analytics.serving import OutputFormat, format_results

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_LOAD_FAILED = 1
EXIT_UNKNOWN_REPORT = 2
EXIT_VALIDATION_FAILED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="superstore-report",
        description="Run sales analytics reports over a super_store extract",
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="Dataset file (CSV, JSONL or Parquet); defaults to DATA_DATASET_PATH",
    )
    parser.add_argument(
        "--report", "-r",
        action="append",
        dest="reports",
        metavar="NAME",
        help="Report to run (repeatable); all reports when omitted",
    )
    parser.add_argument(
        "--format", "-f",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.TABLE.value,
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--input-format",
        choices=[f.value for f in FileFormat],
        help="Input format, inferred from the file suffix when omitted",
    )
    parser.add_argument(
        "--precision",
        type=int,
        help="Decimal places for floats",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Compute reports on a thread pool",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Run data quality checks first; exit 3 if any error-level check fails",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available reports and exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        default=None,
        help="Log renderer",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    if args.list:
        for definition in REPORTS:
            print(f"{definition.name:<34}{definition.title}")
        return EXIT_OK

    input_format = FileFormat(args.input_format) if args.input_format else None
    try:
        data = load_order_lines(args.path, input_format)
    except (FileNotFoundError, ValueError, SchemaMismatchError) as e:
        logger.error("Could not load dataset", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_LOAD_FAILED

    if args.validate:
        validation = create_order_lines_validator().validate(data)
        if validation.status == ValidationStatus.FAILED:
            for check in validation.checks:
                if not check.passed:
                    print(f"validation: {check.name}: {check.message}", file=sys.stderr)
            return EXIT_VALIDATION_FAILED

    engine = SalesAnalyticsEngine(data)
    names = args.reports or [r.name for r in REPORTS]
    try:
        results = engine.run_many(names, parallel=args.parallel)
    except UnknownReportError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_UNKNOWN_REPORT

    print(format_results(results, OutputFormat(args.format), args.precision))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
