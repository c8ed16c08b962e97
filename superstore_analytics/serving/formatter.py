"""
Report Output Formatter

Renders report frames as text tables, CSV, or JSON. Rounding happens here,
for display only; report frames keep full precision.
"""

from enum import Enum
from typing import Iterable, Optional

import polars as pl

from superstore_analytics.analytics.engine import ReportResult
from superstore_analytics.config import get_settings


class OutputFormat(str, Enum):
    """Supported output formats"""
    TABLE = "table"
    CSV = "csv"
    JSON = "json"


def _round_floats(df: pl.DataFrame, precision: int) -> pl.DataFrame:
    return df.with_columns(pl.col(pl.Float32, pl.Float64).round(precision))


def format_report(
    df: pl.DataFrame,
    fmt: OutputFormat = OutputFormat.TABLE,
    precision: Optional[int] = None,
) -> str:
    """
    Render a report frame.

    Undefined values are `null` in JSON and the table, and empty cells in CSV.
    Dates are ISO-8601.
    """
    if precision is None:
        precision = get_settings().analytics.float_precision
    df = _round_floats(df, precision)

    if fmt == OutputFormat.CSV:
        return df.write_csv(null_value="", date_format="%Y-%m-%d")

    if fmt == OutputFormat.JSON:
        return df.write_json()

    with pl.Config(
        tbl_rows=-1,
        tbl_cols=-1,
        tbl_hide_dataframe_shape=True,
        tbl_hide_column_data_types=True,
        fmt_str_lengths=80,
        float_precision=precision,
    ):
        return str(df)


def format_result(
    result: ReportResult,
    fmt: OutputFormat = OutputFormat.TABLE,
    precision: Optional[int] = None,
) -> str:
    """Render a report result, with a title line for tables"""
    body = format_report(result.rows, fmt, precision)
    if fmt == OutputFormat.TABLE:
        return f"{result.title} ({result.row_count} rows)\n{body}"
    return body


def format_results(
    results: Iterable[ReportResult],
    fmt: OutputFormat = OutputFormat.TABLE,
    precision: Optional[int] = None,
) -> str:
    """Render several results; JSON output is one object keyed by report name"""
    results = list(results)
    if fmt == OutputFormat.JSON:
        parts = [f'"{r.name}":{format_report(r.rows, fmt, precision)}' for r in results]
        return "{" + ",".join(parts) + "}"
    if fmt == OutputFormat.CSV:
        return "\n".join(f"# {r.name}\n{format_result(r, fmt, precision)}" for r in results)
    return "\n\n".join(format_result(r, fmt, precision) for r in results)
