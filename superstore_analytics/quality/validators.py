"""
Data Validation Module

Rule-based quality checks over the order line frame.

Checks never drop rows and never stop report computation: they count and
log rows that break the dataset invariants, so a caller can decide what to
do with a dirty extract.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import polars as pl
import structlog

from superstore_analytics.models import Segment, ShipMode

logger = structlog.get_logger(__name__)


class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationStatus(str, Enum):
    """Overall validation status"""
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    failed_rows: int = 0
    total_rows: int = 0


@dataclass
class ValidationResult:
    """Complete validation suite result"""
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        """Percentage of passed checks"""
        if self.total_checks == 0:
            return 100.0
        return (self.passed_checks / self.total_checks) * 100

    def get_check(self, name: str) -> Optional[ValidationCheck]:
        return next((c for c in self.checks if c.name == name), None)


def _missing_column(name: str, column: str, severity: ValidationSeverity) -> ValidationCheck:
    return ValidationCheck(
        name=name,
        passed=False,
        severity=severity,
        message=f"Column '{column}' not found",
    )


class DataValidator:
    """
    Order line validator with a fluent check builder.

    Example:
        validator = DataValidator()
        validator.add_not_null_check("order_id")
        validator.add_range_check("discount", min_value=0, max_value=1, max_inclusive=False)
        result = validator.validate(df)
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode  # Fail on any warning
        self._checks: List[Callable[[pl.DataFrame], ValidationCheck]] = []

    def reset(self) -> None:
        """Reset validator state"""
        self._checks = []

    def add_not_null_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for null values in column"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            name = f"not_null_{column}"
            if column not in df.columns:
                return _missing_column(name, column, severity)

            null_count = df[column].null_count()
            total = len(df)
            passed = null_count == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {null_count} null values" if not passed else f"Column '{column}' has no null values",
                details={"null_count": null_count, "null_percentage": (null_count / total) * 100 if total > 0 else 0},
                failed_rows=null_count,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_range_check(
        self,
        column: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        min_inclusive: bool = True,
        max_inclusive: bool = True,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for non-null values within the given bounds"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            name = f"range_{column}"
            if column not in df.columns:
                return _missing_column(name, column, severity)

            conditions = []
            if min_value is not None:
                conditions.append(
                    pl.col(column) < min_value if min_inclusive else pl.col(column) <= min_value
                )
            if max_value is not None:
                conditions.append(
                    pl.col(column) > max_value if max_inclusive else pl.col(column) >= max_value
                )

            if not conditions:
                return ValidationCheck(
                    name=name,
                    passed=True,
                    severity=severity,
                    message="No range specified",
                )

            combined = conditions[0]
            for cond in conditions[1:]:
                combined = combined | cond

            out_of_range = df.filter(combined).height
            total = len(df)
            passed = out_of_range == 0
            lower = "[" if min_inclusive else "("
            upper = "]" if max_inclusive else ")"

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {out_of_range} values outside {lower}{min_value}, {max_value}{upper}" if not passed else "All values in range",
                details={"min": min_value, "max": max_value, "out_of_range_count": out_of_range},
                failed_rows=out_of_range,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_positive_check(
        self,
        column: str,
        allow_zero: bool = True,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for positive values"""
        return self.add_range_check(column, min_value=0, min_inclusive=allow_zero, severity=severity)

    def add_enum_check(
        self,
        column: str,
        allowed_values: List[Any],
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for values in allowed set"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            name = f"enum_{column}"
            if column not in df.columns:
                return _missing_column(name, column, severity)

            invalid = df.filter(
                ~pl.col(column).is_in(allowed_values) & pl.col(column).is_not_null()
            ).height
            total = len(df)
            passed = invalid == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {invalid} invalid values" if not passed else "All values are valid",
                details={"allowed_values": allowed_values, "invalid_count": invalid},
                failed_rows=invalid,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_expression_check(
        self,
        name: str,
        violation: pl.Expr,
        message_on_fail: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add a row-level check; `violation` is true for offending rows"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            try:
                failed = df.filter(violation).height
            except pl.exceptions.ColumnNotFoundError as e:
                return ValidationCheck(
                    name=name,
                    passed=False,
                    severity=severity,
                    message=f"Check failed with error: {e}",
                )
            passed = failed == 0
            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message="Check passed" if passed else message_on_fail.format(count=failed),
                failed_rows=failed,
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def add_custom_check(
        self,
        name: str,
        check_func: Callable[[pl.DataFrame], bool],
        message_on_fail: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add a dataset-level check"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            try:
                passed = bool(check_func(df))
            except Exception as e:
                return ValidationCheck(
                    name=name,
                    passed=False,
                    severity=severity,
                    message=f"Check failed with error: {str(e)}",
                )
            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message="Check passed" if passed else message_on_fail,
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def validate(self, df: pl.DataFrame) -> ValidationResult:
        """
        Run all validation checks on DataFrame.

        Args:
            df: DataFrame to validate

        Returns:
            ValidationResult with all check results
        """
        started_at = datetime.utcnow()
        results = []

        logger.info(f"Running {len(self._checks)} validation checks on {len(df)} rows")

        for check_func in self._checks:
            result = check_func(df)
            results.append(result)

            if not result.passed:
                logger.warning(
                    f"Validation failed: {result.name}",
                    message=result.message,
                    severity=result.severity.value,
                )

        completed_at = datetime.utcnow()

        passed_checks = sum(1 for r in results if r.passed)
        failed_checks = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.ERROR)
        warning_count = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.WARNING)

        if failed_checks > 0:
            status = ValidationStatus.FAILED
        elif warning_count > 0 and self.strict_mode:
            status = ValidationStatus.FAILED
        elif warning_count > 0:
            status = ValidationStatus.PARTIAL
        else:
            status = ValidationStatus.PASSED

        validation_result = ValidationResult(
            status=status,
            total_checks=len(results),
            passed_checks=passed_checks,
            failed_checks=failed_checks,
            warning_count=warning_count,
            checks=results,
            started_at=started_at,
            completed_at=completed_at,
        )

        logger.info(
            f"Validation complete: {status.value}",
            passed=passed_checks,
            failed=failed_checks,
            warnings=warning_count,
        )

        return validation_result


def create_order_lines_validator() -> DataValidator:
    """Create pre-configured validator for the super_store order lines"""
    return (
        DataValidator()
        .add_not_null_check("order_id")
        .add_not_null_check("customer_id")
        .add_not_null_check("order_date")
        .add_not_null_check("ship_date", severity=ValidationSeverity.WARNING)
        .add_expression_check(
            name="ship_after_order",
            violation=pl.col("ship_date") < pl.col("order_date"),
            message_on_fail="{count} lines ship before they were ordered",
        )
        .add_positive_check("sales")
        .add_positive_check("quantity", allow_zero=False)
        .add_range_check("discount", min_value=0, max_value=1, max_inclusive=False)
        .add_enum_check("segment", [s.value for s in Segment])
        .add_enum_check("ship_mode", [m.value for m in ShipMode], severity=ValidationSeverity.WARNING)
        .add_not_null_check("profit", severity=ValidationSeverity.WARNING)
    )
