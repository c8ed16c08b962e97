"""
Unit Tests - Ingestion
"""
from datetime import date

import pytest
import polars as pl

from superstore_analytics.exceptions import SchemaMismatchError
from superstore_analytics.ingestion import (
    FileFormat,
    LoadConfig,
    OrderLineCleaner,
    OrderLineLoader,
    load_order_lines,
    normalize_column_name,
    order_lines_from_records,
)
from superstore_analytics.models import ORDER_LINE_SCHEMA

SOURCE_HEADER = (
    "Row ID,Order ID,Order Date,Ship Date,Ship Mode,Customer ID,Customer Name,Segment,"
    "Country,City,State,Postal Code,Region,Product ID,Category,Sub-Category,Product Name,"
    "Sales,Quantity,Discount,Profit"
)


def _line(**overrides) -> str:
    values = {
        "row_id": "1",
        "order_id": "CA-2016-152156",
        "order_date": "11/08/2016",
        "ship_date": "11/11/2016",
        "ship_mode": "Second Class",
        "customer_id": "CG-12520",
        "customer_name": "Claire Gute",
        "segment": "Consumer",
        "country": "United States",
        "city": "Henderson",
        "state": "Kentucky",
        "postal_code": "42420",
        "region": "South",
        "product_id": "FUR-BO-10001798",
        "category": "Furniture",
        "sub_category": "Bookcases",
        "product_name": "Bush Somerset Collection Bookcase",
        "sales": "261.96",
        "quantity": "2",
        "discount": "0",
        "profit": "41.9136",
    }
    values.update(overrides)
    return ",".join(values.values())


@pytest.fixture
def write_csv(tmp_path):
    """Write source-style CSV text and return its path"""
    def _write(*lines: str, header: str = SOURCE_HEADER, name: str = "super_store.csv"):
        path = tmp_path / name
        path.write_text("\n".join([header, *lines]) + "\n", encoding="utf-8")
        return path
    return _write


class TestColumnNames:
    """Tests for header normalization"""

    @pytest.mark.parametrize("raw,expected", [
        ("Order ID", "order_id"),
        ("Sub-Category", "sub_category"),
        (" Postal Code ", "postal_code"),
        ("profit", "profit"),
    ])
    def test_normalize_column_name(self, raw, expected):
        assert normalize_column_name(raw) == expected


class TestFileFormat:
    """Tests for FileFormat inference"""

    def test_from_suffix(self):
        assert FileFormat.from_path("data/super_store.csv") == FileFormat.CSV
        assert FileFormat.from_path("lines.NDJSON") == FileFormat.JSONL
        assert FileFormat.from_path("lines.parquet") == FileFormat.PARQUET

    def test_unsupported_suffix(self):
        with pytest.raises(ValueError, match="Unsupported file format"):
            FileFormat.from_path("report.xlsx")


class TestCsvLoading:
    """Tests for loading source CSV extracts"""

    def test_source_headers_and_types(self, write_csv):
        path = write_csv(_line(), _line(row_id="2", product_id="FUR-CH-10000454", sales="731.94"))

        result = OrderLineLoader().load(LoadConfig(file_path=path))
        df = result.data

        assert df.columns == list(ORDER_LINE_SCHEMA)
        assert df.schema["order_date"] == pl.Date
        assert df["order_date"][0] == date(2016, 11, 8)
        assert df["sales"].to_list() == [261.96, 731.94]
        assert df["quantity"].dtype == pl.Int64
        assert result.rows_loaded == 2
        assert result.file_hash is not None

    def test_postal_code_keeps_leading_zero(self, write_csv):
        path = write_csv(_line(postal_code="01852", city="Lowell", state="Massachusetts"))

        df = load_order_lines(path)

        assert df["postal_code"][0] == "01852"

    def test_currency_formatted_measures(self, write_csv):
        path = write_csv(_line(sales='"$1,234.50"', quantity="3.0"))

        df = load_order_lines(path)

        assert df["sales"][0] == pytest.approx(1234.5)
        assert df["quantity"][0] == 3

    def test_malformed_date_becomes_null(self, write_csv):
        path = write_csv(_line(), _line(row_id="2", order_date="2016-11-08"))

        result = OrderLineLoader().load(LoadConfig(file_path=path))

        assert result.data["order_date"].to_list() == [date(2016, 11, 8), None]
        assert result.stats.malformed_dates == 1
        assert result.rows_loaded == 2

    def test_blank_and_padded_strings(self, write_csv):
        path = write_csv(_line(state="  Kentucky ", customer_name="   "))

        df = load_order_lines(path)

        assert df["state"][0] == "Kentucky"
        assert df["customer_name"][0] is None

    def test_missing_required_column(self, write_csv):
        header = SOURCE_HEADER.replace(",Profit", "")
        line = _line().rsplit(",", 1)[0]
        path = write_csv(line, header=header)

        with pytest.raises(SchemaMismatchError) as exc_info:
            load_order_lines(path)

        assert exc_info.value.missing == ["profit"]

    def test_optional_columns_added_as_nulls(self, write_csv):
        header = (
            "Order ID,Order Date,Ship Date,Ship Mode,Customer ID,Customer Name,Segment,"
            "City,State,Product ID,Category,Sub-Category,Product Name,"
            "Sales,Quantity,Discount,Profit,Extra"
        )
        line = (
            "O-1,01/02/2024,01/05/2024,Standard Class,C-1,Ann,Consumer,"
            "Austin,Texas,P-1,Technology,Phones,Phone,10,1,0,2,ignored"
        )
        path = write_csv(line, header=header)

        df = load_order_lines(path)

        assert df.columns == list(ORDER_LINE_SCHEMA)
        assert df["row_id"].dtype == pl.Int64
        assert df["postal_code"].null_count() == 1
        assert "extra" not in df.columns

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_order_lines(tmp_path / "missing.csv")


class TestOtherSources:
    """Tests for JSON Lines, Parquet and in-memory records"""

    def test_parquet_round_trip(self, tmp_path, sample_order_lines):
        path = tmp_path / "lines.parquet"
        sample_order_lines.write_parquet(path)

        df = load_order_lines(path)

        assert df.equals(sample_order_lines)

    def test_jsonl_with_source_headers(self, tmp_path):
        path = tmp_path / "lines.jsonl"
        pl.DataFrame([{
            "Order ID": "O-1", "Order Date": "03/04/2024", "Ship Date": "03/06/2024",
            "Ship Mode": "First Class", "Customer ID": "C-1", "Customer Name": "Ann",
            "Segment": "Corporate", "City": "Austin", "State": "Texas",
            "Postal Code": 73301, "Product ID": "P-1", "Category": "Technology",
            "Sub-Category": "Phones", "Product Name": "Phone",
            "Sales": 10.5, "Quantity": 1, "Discount": 0.0, "Profit": 2.0,
        }]).write_ndjson(path)

        df = load_order_lines(path)

        assert df["order_date"][0] == date(2024, 3, 4)
        assert df["postal_code"][0] == "73301"
        assert df["sales"][0] == pytest.approx(10.5)

    def test_records_fill_sparse_columns(self):
        df = order_lines_from_records([
            {"order_id": "O-1", "order_date": "01/02/2024", "ship_date": None,
             "ship_mode": "Same Day", "customer_id": "C-1", "customer_name": "Ann",
             "segment": "Consumer", "city": "Austin", "state": "Texas",
             "product_id": "P-1", "category": "Technology", "sub_category": "Phones",
             "product_name": "Phone", "sales": 10.0, "quantity": 1, "discount": None,
             "profit": 1.0},
        ])

        assert df.height == 1
        assert df["ship_date"][0] is None
        assert df["discount"][0] is None

    def test_no_records_is_schema_mismatch(self):
        with pytest.raises(SchemaMismatchError):
            order_lines_from_records([])


class TestOrderLineCleaner:
    """Tests for OrderLineCleaner"""

    def test_custom_date_format(self):
        raw = pl.DataFrame({"Order Date": ["2024-05-06"], "Sales": ["5"]})

        df, stats = OrderLineCleaner(date_format="%Y-%m-%d").clean(raw)

        assert df["order_date"][0] == date(2024, 5, 6)
        assert df["sales"][0] == 5.0
        assert stats.renamed_columns == 2
        assert stats.malformed_dates == 0

    def test_unparseable_measure_counted(self):
        raw = pl.DataFrame({"profit": ["12.5", "n/a-ish"]})

        df, stats = OrderLineCleaner().clean(raw)

        assert df["profit"].to_list() == [12.5, None]
        assert stats.malformed_measures == 1
