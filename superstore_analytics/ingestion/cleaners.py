"""
Order Line Cleaning Module

Normalizes raw super_store rows into the OrderLine schema.
Handles:
- Header normalization ("Order ID" -> order_id, "Sub-Category" -> sub_category)
- String trimming and blank-to-null conversion
- MM/DD/YYYY date parsing
- Currency-formatted measure normalization
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import re

import polars as pl
import structlog

from superstore_analytics.models import DATE_COLUMNS, ORDER_LINE_SCHEMA

logger = structlog.get_logger(__name__)

_NON_ALNUM = re.compile(r"[^0-9a-zA-Z]+")


@dataclass
class CleaningStats:
    """Statistics from cleaning operations"""
    total_rows: int
    renamed_columns: int
    blank_strings_nulled: int
    malformed_dates: int
    malformed_measures: int


def normalize_column_name(name: str) -> str:
    """Convert a source header to its snake_case column name"""
    return _NON_ALNUM.sub("_", name.strip()).strip("_").lower()


class OrderLineCleaner:
    """
    Cleaner for raw order line frames.

    Every cleaning step is null-preserving: a value that cannot be parsed
    becomes null and the row is kept, so each report can exclude it on its
    own grouping keys.

    Example:
        cleaner = OrderLineCleaner(date_format="%m/%d/%Y")
        df_clean, stats = cleaner.clean(raw_df)
    """

    def __init__(self, date_format: str = "%m/%d/%Y"):
        self.date_format = date_format

    def _normalize_headers(self, df: pl.DataFrame) -> pl.DataFrame:
        mapping = {col: normalize_column_name(col) for col in df.columns}
        return df.rename({old: new for old, new in mapping.items() if old != new})

    def _trim_strings(self, df: pl.DataFrame, columns: Optional[List[str]] = None) -> pl.DataFrame:
        """Trim whitespace from string columns and turn blanks into nulls"""
        string_cols = columns if columns is not None else [
            col for col, dtype in zip(df.columns, df.dtypes)
            if dtype == pl.Utf8
        ]

        for col in string_cols:
            if col in df.columns and df[col].dtype == pl.Utf8:
                trimmed = pl.col(col).str.strip_chars()
                df = df.with_columns(
                    pl.when(trimmed == "").then(None).otherwise(trimmed).alias(col)
                )

        return df

    def _standardize_dates(self, df: pl.DataFrame, date_columns: List[str]) -> pl.DataFrame:
        """Parse date columns to pl.Date, unparseable text becomes null"""
        for col in date_columns:
            if col not in df.columns:
                continue
            dtype = df[col].dtype
            if dtype == pl.Utf8:
                expr = pl.col(col).str.strptime(pl.Date, self.date_format, strict=False)
            elif dtype == pl.Datetime:
                expr = pl.col(col).dt.date()
            else:
                expr = pl.col(col).cast(pl.Date, strict=False)
            df = df.with_columns(expr.alias(col))

        return df

    def _normalize_measures(self, df: pl.DataFrame, schema: Dict[str, pl.DataType]) -> pl.DataFrame:
        """Cast numeric columns, stripping currency symbols from text values"""
        for col, dtype in schema.items():
            if col not in df.columns:
                continue
            expr = pl.col(col)
            if df[col].dtype == pl.Utf8:
                expr = expr.str.replace_all(r"[$€£¥,]", "").str.strip_chars()
                if dtype == pl.Int64:
                    # "2.0" style quantities
                    expr = expr.cast(pl.Float64, strict=False)
            df = df.with_columns(expr.cast(dtype, strict=False).alias(col))

        return df

    def _count_new_nulls(self, before: pl.DataFrame, after: pl.DataFrame, columns: List[str]) -> int:
        present = [c for c in columns if c in after.columns]
        if not present:
            return 0
        return sum(
            after[c].null_count() - before[c].null_count()
            for c in present
        )

    def clean(self, df: pl.DataFrame) -> Tuple[pl.DataFrame, CleaningStats]:
        """
        Apply order line cleaning transformations.

        Returns:
            Cleaned DataFrame restricted to known columns, plus stats
        """
        total_rows = len(df)
        original_columns = list(df.columns)

        df = self._normalize_headers(df)
        renamed = sum(1 for old, new in zip(original_columns, df.columns) if old != new)

        known = [col for col in ORDER_LINE_SCHEMA if col in df.columns]
        df = df.select(known)

        # Text columns are cast first so postal codes and ids read as numbers stay text
        text_cols = [c for c in known if ORDER_LINE_SCHEMA[c] == pl.Utf8]
        df = df.with_columns([pl.col(c).cast(pl.Utf8) for c in text_cols])

        before_trim = df
        df = self._trim_strings(df, text_cols)
        blank_nulled = self._count_new_nulls(before_trim, df, text_cols)

        # Dates and measures arrive as text when read without schema inference
        before_dates = self._trim_strings(df, [c for c in DATE_COLUMNS if c in df.columns])
        df = self._standardize_dates(before_dates, DATE_COLUMNS)
        malformed_dates = self._count_new_nulls(before_dates, df, DATE_COLUMNS)

        numeric_schema = {
            c: t for c, t in ORDER_LINE_SCHEMA.items()
            if c in df.columns and t in (pl.Float64, pl.Int64)
        }
        before_measures = self._trim_strings(df, list(numeric_schema))
        df = self._normalize_measures(before_measures, numeric_schema)
        malformed_measures = self._count_new_nulls(before_measures, df, list(numeric_schema))

        stats = CleaningStats(
            total_rows=total_rows,
            renamed_columns=renamed,
            blank_strings_nulled=blank_nulled,
            malformed_dates=malformed_dates,
            malformed_measures=malformed_measures,
        )

        if malformed_dates or malformed_measures:
            logger.warning(
                "Malformed values set to null",
                malformed_dates=malformed_dates,
                malformed_measures=malformed_measures,
                total_rows=total_rows,
            )

        return df, stats
