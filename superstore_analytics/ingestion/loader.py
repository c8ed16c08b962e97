"""
Order Line Loader

Reads the super_store dataset from CSV, JSON Lines or Parquet files, or from
in-memory records, and produces the cleaned immutable OrderLine frame every
report runs on.

A dataset that lacks a required column fails here, before any report runs.
Per-row malformation (bad dates, blank keys) is kept as nulls.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import hashlib

import polars as pl
import structlog

from superstore_analytics.config import get_settings
from superstore_analytics.exceptions import SchemaMismatchError
from superstore_analytics.models import ORDER_LINE_SCHEMA, REQUIRED_COLUMNS
from .cleaners import CleaningStats, OrderLineCleaner, normalize_column_name

logger = structlog.get_logger(__name__)


class FileFormat(str, Enum):
    """Supported file formats"""
    CSV = "csv"
    JSONL = "jsonl"
    PARQUET = "parquet"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileFormat":
        """Infer the format from a file suffix"""
        suffix = Path(path).suffix.lower().lstrip(".")
        if suffix == "ndjson":
            suffix = "jsonl"
        try:
            return cls(suffix)
        except ValueError:
            raise ValueError(f"Unsupported file format: {path}") from None


@dataclass
class LoadConfig:
    """Configuration for loading an order line file"""
    file_path: Union[str, Path]
    file_format: Optional[FileFormat] = None
    delimiter: str = ","
    encoding: str = "utf8-lossy"
    date_format: str = "%m/%d/%Y"
    null_values: List[str] = field(default_factory=lambda: ["", "NULL", "null", "None", "NA", "N/A"])

    @classmethod
    def from_settings(cls, file_path: Union[str, Path, None] = None, **overrides: Any) -> "LoadConfig":
        """Build a config from application settings"""
        settings = get_settings()
        values: Dict[str, Any] = {
            "file_path": file_path or settings.data.dataset_path,
            "delimiter": settings.data.delimiter,
            "encoding": settings.data.encoding,
            "date_format": settings.analytics.date_format,
            "null_values": list(settings.data.null_values),
        }
        values.update(overrides)
        return cls(**values)


@dataclass
class LoadResult:
    """Result of a load operation"""
    source: str
    data: pl.DataFrame
    rows_loaded: int
    stats: CleaningStats
    started_at: datetime
    completed_at: datetime
    file_hash: Optional[str] = None

    @property
    def load_duration_seconds(self) -> float:
        return (self.completed_at - self.started_at).total_seconds()


class OrderLineLoader:
    """
    Loader for super_store order lines.

    Example:
        loader = OrderLineLoader()
        result = loader.load(LoadConfig(file_path="data/super_store.csv"))
        df = result.data
    """

    def __init__(self, cleaner: Optional[OrderLineCleaner] = None):
        self._cleaner = cleaner

    def _compute_file_hash(self, file_path: Path) -> str:
        """Compute MD5 hash of the source file"""
        hash_md5 = hashlib.md5()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(4096), b""):
                hash_md5.update(chunk)
        return hash_md5.hexdigest()

    def _read_csv(self, config: LoadConfig) -> pl.DataFrame:
        # Every column as text; the cleaner owns typing
        return pl.read_csv(
            config.file_path,
            separator=config.delimiter,
            encoding=config.encoding,
            null_values=config.null_values,
            infer_schema_length=0,
        )

    def _read_jsonl(self, config: LoadConfig) -> pl.DataFrame:
        return pl.read_ndjson(config.file_path)

    def _read_parquet(self, config: LoadConfig) -> pl.DataFrame:
        return pl.read_parquet(config.file_path)

    def _read_file(self, config: LoadConfig, file_format: FileFormat) -> pl.DataFrame:
        """Read file based on format"""
        readers = {
            FileFormat.CSV: self._read_csv,
            FileFormat.JSONL: self._read_jsonl,
            FileFormat.PARQUET: self._read_parquet,
        }
        return readers[file_format](config)

    def _finalize(
        self,
        raw: pl.DataFrame,
        source: str,
        date_format: str,
        started_at: datetime,
        file_hash: Optional[str] = None,
    ) -> LoadResult:
        """Check the schema, clean, and complete the frame with optional columns"""
        normalized = {normalize_column_name(col) for col in raw.columns}
        missing = [col for col in REQUIRED_COLUMNS if col not in normalized]
        if missing:
            logger.error("Schema mismatch", source=source, missing=missing)
            raise SchemaMismatchError(missing, source=source)

        cleaner = self._cleaner or OrderLineCleaner(date_format=date_format)
        df, stats = cleaner.clean(raw)

        # Optional columns absent from the source are added as typed nulls
        df = df.with_columns([
            pl.lit(None, dtype=dtype).alias(col)
            for col, dtype in ORDER_LINE_SCHEMA.items()
            if col not in df.columns
        ]).select(list(ORDER_LINE_SCHEMA))

        completed_at = datetime.utcnow()
        result = LoadResult(
            source=source,
            data=df,
            rows_loaded=len(df),
            stats=stats,
            started_at=started_at,
            completed_at=completed_at,
            file_hash=file_hash,
        )

        logger.info(
            "Order lines loaded",
            source=source,
            rows_loaded=result.rows_loaded,
            malformed_dates=stats.malformed_dates,
            duration_seconds=result.load_duration_seconds,
        )

        return result

    def load(self, config: LoadConfig) -> LoadResult:
        """
        Load an order line file.

        Args:
            config: Load configuration

        Returns:
            LoadResult holding the cleaned frame

        Raises:
            FileNotFoundError: the file does not exist
            SchemaMismatchError: a required column is absent
        """
        file_path = Path(config.file_path)
        started_at = datetime.utcnow()
        file_format = config.file_format or FileFormat.from_path(file_path)

        logger.info("Starting load", file=str(file_path), format=file_format.value)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        file_hash = self._compute_file_hash(file_path)
        raw = self._read_file(config, file_format)
        logger.debug(f"Read {len(raw)} rows from file", columns=len(raw.columns))

        return self._finalize(raw, str(file_path), config.date_format, started_at, file_hash)

    def load_records(
        self,
        records: Iterable[Mapping[str, Any]],
        date_format: str = "%m/%d/%Y",
    ) -> LoadResult:
        """Load order lines supplied by a table scan or another in-memory source"""
        started_at = datetime.utcnow()
        rows = [dict(r) for r in records]
        # Scan every row so sparse columns keep their real type
        raw = pl.DataFrame(rows, infer_schema_length=None) if rows else pl.DataFrame()
        return self._finalize(raw, "records", date_format, started_at)


def load_order_lines(
    path: Union[str, Path, None] = None,
    file_format: Optional[FileFormat] = None,
) -> pl.DataFrame:
    """
    Convenience function to load the dataset with configured defaults.

    Args:
        path: Dataset file, defaults to settings.data.dataset_path
        file_format: Format override, inferred from the suffix otherwise

    Returns:
        Cleaned order line DataFrame
    """
    config = LoadConfig.from_settings(path, file_format=file_format)
    return OrderLineLoader().load(config).data


def order_lines_from_records(
    records: Iterable[Mapping[str, Any]],
    date_format: Optional[str] = None,
) -> pl.DataFrame:
    """Convenience function to build the cleaned frame from dict records"""
    fmt = date_format or get_settings().analytics.date_format
    return OrderLineLoader().load_records(records, date_format=fmt).data
