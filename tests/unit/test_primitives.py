"""
Unit Tests - Aggregation Primitives
"""
import pytest
import polars as pl

from superstore_analytics.analytics.primitives import (
    growth_pct,
    group_sum,
    lag,
    rank,
    running_total,
    safe_ratio,
)


class TestGroupSum:
    """Tests for group_sum"""

    def test_sums_per_key_sorted(self):
        df = pl.DataFrame({
            "state": ["Texas", "Illinois", "Texas"],
            "sales": [10.0, 5.0, 20.0],
            "profit": [1.0, 2.0, 3.0],
            "quantity": [1, 1, 2],
        })

        result = group_sum(df, "state")

        assert result["state"].to_list() == ["Illinois", "Texas"]
        assert result["total_sales"].to_list() == [5.0, 30.0]
        assert result["total_profit"].to_list() == [2.0, 4.0]
        assert result["total_quantity"].to_list() == [1, 3]

    def test_null_keys_excluded(self):
        df = pl.DataFrame({
            "state": ["Texas", None],
            "sales": [10.0, 99.0],
        })

        result = group_sum(df, "state", measures=("sales",))

        assert result["state"].to_list() == ["Texas"]
        assert result["total_sales"].to_list() == [10.0]

    def test_null_measures_count_as_zero(self):
        df = pl.DataFrame({
            "state": ["Texas", "Texas", "Ohio"],
            "sales": [10.0, None, None],
        })

        result = group_sum(df, "state", measures=("sales",))

        assert result["total_sales"].to_list() == [0.0, 10.0]

    def test_multiple_keys(self):
        df = pl.DataFrame({
            "a": ["x", "x", "y"],
            "b": [2, 1, 1],
            "sales": [1.0, 2.0, 3.0],
        })

        result = group_sum(df, ["a", "b"], measures=("sales",))

        assert result.select(["a", "b"]).rows() == [("x", 1), ("x", 2), ("y", 1)]


class TestRank:
    """Tests for competition ranking"""

    def test_ties_share_rank_and_skip(self):
        df = pl.DataFrame({
            "state": ["A", "A", "A", "A"],
            "customer": ["z", "w", "y", "x"],
            "total": [100.0, 500.0, 300.0, 500.0],
        })

        result = rank(df, "total", partition_by="state", tie_break="customer")

        assert result["customer"].to_list() == ["w", "x", "y", "z"]
        assert result["rank"].to_list() == [1, 1, 3, 4]

    def test_rank_restarts_per_partition(self):
        df = pl.DataFrame({
            "state": ["B", "A", "A", "B"],
            "total": [5.0, 1.0, 2.0, 7.0],
        })

        result = rank(df, "total", partition_by="state")

        assert result.select(["state", "total", "rank"]).rows() == [
            ("A", 2.0, 1),
            ("A", 1.0, 2),
            ("B", 7.0, 1),
            ("B", 5.0, 2),
        ]

    def test_ascending_without_partition(self):
        df = pl.DataFrame({"total": [3.0, 1.0, 2.0]})

        result = rank(df, "total", descending=False, alias="pos")

        assert result["total"].to_list() == [1.0, 2.0, 3.0]
        assert result["pos"].to_list() == [1, 2, 3]


class TestLag:
    """Tests for lag"""

    @pytest.fixture
    def series_df(self) -> pl.DataFrame:
        return pl.DataFrame({
            "g": ["b", "a", "a", "b", "a"],
            "t": [2, 3, 1, 1, 2],
            "v": [6.0, 30.0, 10.0, 5.0, 20.0],
        })

    def test_lag_within_partition(self, series_df):
        result = lag(series_df, "v", order_by="t", partition_by="g")

        assert result["g"].to_list() == ["a", "a", "a", "b", "b"]
        assert result["prev_v"].to_list() == [None, 10.0, 20.0, None, 5.0]

    def test_lag_offset(self, series_df):
        result = lag(series_df, "v", order_by="t", partition_by="g", offset=2, alias="v_2")

        assert result["v_2"].to_list() == [None, None, 10.0, None, None]

    def test_lag_without_partition(self):
        df = pl.DataFrame({"t": [2, 1], "v": [20.0, 10.0]})

        result = lag(df, "v", order_by="t")

        assert result["prev_v"].to_list() == [None, 10.0]


class TestRunningTotal:
    """Tests for running_total"""

    def test_resets_per_partition(self):
        df = pl.DataFrame({
            "g": ["b", "a", "a", "b", "a"],
            "t": [2, 3, 1, 1, 2],
            "v": [6.0, 30.0, 10.0, 5.0, 20.0],
        })

        result = running_total(df, "v", order_by="t", partition_by="g", alias="cum")

        assert result["cum"].to_list() == [10.0, 30.0, 60.0, 5.0, 11.0]

    def test_whole_series(self):
        df = pl.DataFrame({"t": [3, 1, 2], "v": [1.0, 2.0, None]})

        result = running_total(df, "v", order_by="t")

        assert result["running_v"].to_list() == [2.0, 2.0, 3.0]


class TestRatios:
    """Tests for null-safe ratio expressions"""

    def test_safe_ratio_undefined_on_zero_or_null(self):
        df = pl.DataFrame({
            "num": [30.0, 5.0, 5.0],
            "den": [150.0, 0.0, None],
        })

        result = df.select(safe_ratio("num", "den").alias("r"))["r"].to_list()

        assert result[0] == pytest.approx(0.2)
        assert result[1] is None
        assert result[2] is None

    def test_safe_ratio_scale(self):
        df = pl.DataFrame({"num": [1.0], "den": [4.0]})

        assert df.select(safe_ratio("num", "den", scale=100.0))[0, 0] == pytest.approx(25.0)

    def test_growth_pct(self):
        df = pl.DataFrame({
            "cur": [200.0, 50.0, 10.0, 10.0],
            "prev": [100.0, 100.0, 0.0, None],
        })

        result = df.select(growth_pct("cur", "prev").alias("g"))["g"].to_list()

        assert result[0] == pytest.approx(100.0)
        assert result[1] == pytest.approx(-50.0)
        assert result[2] is None
        assert result[3] is None
