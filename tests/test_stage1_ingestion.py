"""Tests for Stage 1: row normalization and file loading."""

from datetime import date
from pathlib import Path

import pytest

from forward_curve.stage1.file_loader import load_price_files, read_price_file, read_raw_rows
from forward_curve.stage1.price_parser import (
    PricePoint,
    PriceSeries,
    PriceSeriesParser,
    parse_date,
    parse_price,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestParsePrice:
    """Tests for price normalization."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("102.50", 102.5),
            ("$1,234.50", 1234.5),
            ("105 EUR", 105.0),
            ("-3.25", -3.25),
            (" 7 ", 7.0),
            (".5", 0.5),
            ("1.2.3", 1.2),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_price(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "", "   ", "N/A", "-", "abc", "--5"])
    def test_invalid(self, raw):
        assert parse_price(raw) is None


class TestParseDate:
    """Tests for date normalization."""

    def test_iso(self):
        assert parse_date("2024-01-02") == date(2024, 1, 2)

    def test_datetime_string_truncated_to_day(self):
        assert parse_date("2024-01-02 15:30:00") == date(2024, 1, 2)

    @pytest.mark.parametrize("raw", [None, "", "not a date", "2024-13-45", "now", "today", " NOW "])
    def test_invalid(self, raw):
        assert parse_date(raw) is None


class TestPriceSeriesParser:
    """Tests for row-level parsing."""

    def test_parse_basic(self):
        rows = [
            {"Date": "2024-01-02", "Price": "102.50"},
            {"Date": "2024-01-03", "Price": "103.00"},
        ]
        series = PriceSeriesParser().parse(rows, name="dec24.csv")

        assert series.name == "dec24.csv"
        assert series.points == [
            PricePoint(date(2024, 1, 2), 102.5),
            PricePoint(date(2024, 1, 3), 103.0),
        ]

    def test_drops_bad_rows_without_raising(self):
        rows = [
            {"Date": "2024-01-02", "Price": "102.50"},
            {"Date": "", "Price": "1"},
            {"Date": "2024-01-03"},
            {"Price": "5"},
            {"Date": "garbage", "Price": "1"},
            {"Date": "2024-01-04", "Price": "n/a"},
        ]
        series, stats = PriceSeriesParser().parse_with_stats(rows, name="x")

        assert len(series) == 1
        assert stats.rows_read == 6
        assert stats.rows_kept == 1
        assert stats.rows_dropped == 5
        assert stats.missing_fields == 3
        assert stats.bad_dates == 1
        assert stats.bad_prices == 1

    def test_empty_result_is_valid(self):
        series = PriceSeriesParser().parse([], name="empty.csv")
        assert series.is_empty
        assert len(series) == 0

    def test_duplicate_dates_last_wins(self):
        rows = [
            {"Date": "2024-01-02", "Price": "1"},
            {"Date": "2024-01-02", "Price": "2"},
        ]
        series = PriceSeriesParser().parse(rows)
        assert len(series) == 1
        assert series.price_on(date(2024, 1, 2)) == 2.0

    def test_constructor_keeps_one_point_per_date(self):
        series = PriceSeries(
            "a.csv",
            [PricePoint(date(2024, 1, 2), 1.0), PricePoint(date(2024, 1, 3), 3.0), PricePoint(date(2024, 1, 2), 2.0)],
        )
        assert len(series) == 2
        assert series.price_on(date(2024, 1, 2)) == 2.0
        assert series.to_pandas().index.is_unique

    def test_field_names_case_insensitive(self):
        rows = [{" date ": "2024-01-02", "PRICE": "9.5"}]
        series = PriceSeriesParser().parse(rows)
        assert series.price_on(date(2024, 1, 2)) == 9.5

    def test_custom_fields(self):
        rows = [{"trade_date": "2024-01-02", "settle": "9.5"}]
        series = PriceSeriesParser(date_field="trade_date", price_field="settle").parse(rows)
        assert len(series) == 1

    def test_series_to_pandas(self):
        series = PriceSeries.from_points("s", [PricePoint(date(2024, 1, 2), 1.0)])
        s = series.to_pandas()
        assert s.name == "s"
        assert s.loc[date(2024, 1, 2)] == 1.0


class TestFileLoader:
    """Tests for CSV file loading."""

    def test_read_price_file(self, tmp_path):
        path = _write(tmp_path / "dec24.csv", "Date,Price\n2024-01-02,102.50\n2024-01-03,\"1,103.00\"\n")

        series, stats = read_price_file(path)

        assert series.name == "dec24.csv"
        assert series.price_on(date(2024, 1, 2)) == 102.5
        assert series.price_on(date(2024, 1, 3)) == 1103.0
        assert stats.rows_dropped == 0

    def test_read_raw_rows_keeps_strings(self, tmp_path):
        path = _write(tmp_path / "a.csv", "Date,Price\n2024-01-02,NA\n\n")
        rows = read_raw_rows(path)
        assert rows == [{"Date": "2024-01-02", "Price": "NA"}]

    def test_empty_file_yields_empty_series(self, tmp_path):
        path = _write(tmp_path / "empty.csv", "")
        series, _ = read_price_file(path)
        assert series.is_empty

    def test_load_batch_isolates_failures(self, tmp_path):
        good = _write(tmp_path / "dec24.csv", "Date,Price\n2024-01-02,102.50\n")
        other = _write(tmp_path / "jan25.csv", "Date,Price\n2024-01-02,105.00\n")
        missing = tmp_path / "missing.csv"

        report = load_price_files([good, missing, other], max_workers=2)

        assert list(report.series) == ["dec24.csv", "jan25.csv"]
        assert "missing.csv" in report.failures
        assert not report.ok
        assert report.series["jan25.csv"].price_on(date(2024, 1, 2)) == 105.0

    def test_load_batch_reports_empty_files(self, tmp_path):
        good = _write(tmp_path / "dec24.csv", "Date,Price\n2024-01-02,102.50\n")
        blank = _write(tmp_path / "blank.csv", "Date,Price\n,\n")

        report = load_price_files([good, blank])

        assert report.ok
        assert report.empty_files == ["blank.csv"]

    def test_load_batch_empty(self):
        report = load_price_files([])
        assert report.series == {}
        assert report.ok

    def test_load_batch_isolates_parser_errors(self, tmp_path):
        class FailingParser(PriceSeriesParser):
            def parse_with_stats(self, raw_rows, name=""):
                if name == "bad.csv":
                    raise KeyError("Price")
                return super().parse_with_stats(raw_rows, name=name)

        good = _write(tmp_path / "dec24.csv", "Date,Price\n2024-01-02,102.50\n")
        bad = _write(tmp_path / "bad.csv", "Date,Price\n2024-01-02,1.0\n")

        report = load_price_files([bad, good], parser=FailingParser(), max_workers=2)

        assert list(report.series) == ["dec24.csv"]
        assert "bad.csv" in report.failures
