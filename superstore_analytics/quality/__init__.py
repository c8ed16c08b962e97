"""
Data Quality Module
"""
from .validators import (
    DataValidator,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
    create_order_lines_validator,
)

__all__ = [
    "DataValidator",
    "ValidationResult",
    "ValidationSeverity",
    "ValidationStatus",
    "create_order_lines_validator",
]
