"""
Analytics Exceptions
"""
from typing import Iterable, List


class AnalyticsError(Exception):
    """Base error for the analytics engine"""


class SchemaMismatchError(AnalyticsError):
    """Required columns are missing from the whole dataset"""

    def __init__(self, missing: Iterable[str], source: str = "dataset"):
        self.missing: List[str] = sorted(missing)
        self.source = source
        super().__init__(f"{source} is missing required columns: {', '.join(self.missing)}")


class UnknownReportError(AnalyticsError, KeyError):
    """No report is registered under the requested name"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown report: {name}")

    def __str__(self) -> str:
        return self.args[0]
