"""
Serving Module
"""
from .formatter import OutputFormat, format_report, format_result, format_results

__all__ = [
    "OutputFormat",
    "format_report",
    "format_result",
    "format_results",
]
