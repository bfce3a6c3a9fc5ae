"""Tests for Stage 0: Expiry schedule and maturity registry."""

import pytest
from datetime import date

from forward_curve.errors import DuplicateMaturity, InvalidInput
from forward_curve.stage0.expiry_schedule import ContractMonth, ExpiryCalculator, build_expiry_table
from forward_curve.stage0.maturity_registry import MaturityRegistry


class TestExpiryCalculator:
    """Tests for expiry date calculation."""

    def test_third_friday_known_dates(self):
        calc = ExpiryCalculator()

        # March 2024: Fridays on 1, 8, 15, 22, 29
        assert calc.third_friday(2024, 3) == date(2024, 3, 15)
        # January 2024: Fridays on 5, 12, 19, 26
        assert calc.third_friday(2024, 1) == date(2024, 1, 19)
        # December 2024 starts on a Sunday
        assert calc.third_friday(2024, 12) == date(2024, 12, 20)

    def test_third_friday_when_month_starts_on_friday(self):
        """The 1st counts as the first Friday."""
        calc = ExpiryCalculator()
        assert date(2024, 11, 1).weekday() == 4
        assert calc.third_friday(2024, 11) == date(2024, 11, 15)

    def test_third_friday_always_friday_in_range(self):
        calc = ExpiryCalculator()
        for year in [2023, 2024, 2025, 2030]:
            for month in range(1, 13):
                expiry = calc.third_friday(year, month)
                assert expiry.weekday() == 4
                assert expiry.month == month
                assert 15 <= expiry.day <= 21

    def test_third_friday_invalid_month(self):
        with pytest.raises(ValueError):
            ExpiryCalculator().third_friday(2024, 13)

    def test_rollover_single_wrap(self):
        """November then January anchored at 2024 -> Nov 2024, Jan 2025."""
        calc = ExpiryCalculator()
        resolved = calc.infer_rollover_years(2024, [11, 1])
        assert resolved == [ContractMonth(month=11, year=2024), ContractMonth(month=1, year=2025)]

    def test_rollover_monotonic_stays_in_base_year(self):
        calc = ExpiryCalculator()
        resolved = calc.infer_rollover_years(2024, [3, 6, 9, 12])
        assert [c.year for c in resolved] == [2024, 2024, 2024, 2024]

    def test_rollover_increments_on_every_decrease(self):
        calc = ExpiryCalculator()
        resolved = calc.infer_rollover_years(2024, [10, 2, 11, 1])
        assert [c.year for c in resolved] == [2024, 2025, 2025, 2026]
        assert resolved[1].maturity_id == "2025-02"

    def test_rollover_empty(self):
        assert ExpiryCalculator().infer_rollover_years(2024, []) == []

    def test_time_to_maturity(self):
        calc = ExpiryCalculator()
        assert calc.time_to_maturity(date(2024, 1, 2), date(2024, 1, 19)) == 17
        assert calc.time_to_maturity(date(2024, 1, 19), date(2024, 1, 19)) == 0

    def test_time_to_maturity_negative_for_expired(self):
        calc = ExpiryCalculator()
        assert calc.time_to_maturity(date(2024, 2, 1), date(2024, 1, 19)) == -13

    def test_build_expiry_table(self):
        df = build_expiry_table(2024, 2025, symbol="W")

        assert len(df) == 24
        assert {"maturity_id", "year", "month", "label", "expiry_date", "contract"}.issubset(df.columns)
        assert list(df["expiry_date"]) == sorted(df["expiry_date"])

        row = df[df["maturity_id"] == "2024-03"].iloc[0]
        assert row["expiry_date"] == date(2024, 3, 15)
        assert row["label"] == "March 2024"
        assert row["contract"] == "WH24"


class TestMaturityRegistry:
    """Tests for declared maturities."""

    def test_add_returns_entry(self):
        registry = MaturityRegistry()
        entry = registry.add("12", "2024")

        assert entry.id == "2024-12"
        assert entry.month == 12
        assert entry.year == 2024
        assert entry.label == "December 2024"
        assert "2024-12" in registry

    def test_duplicate_rejected(self):
        registry = MaturityRegistry()
        registry.add("12", "2024")

        with pytest.raises(DuplicateMaturity):
            registry.add("12", "2024")
        with pytest.raises(DuplicateMaturity):
            registry.add(12, 2024)
        assert len(registry) == 1

    @pytest.mark.parametrize(
        "month, year",
        [(None, 2024), ("", "2024"), ("12", None), ("13", 2024), (0, 2024), ("ab", 2024), (1, 0), (1, "-5"), (1, 10000)],
    )
    def test_invalid_input(self, month, year):
        registry = MaturityRegistry()
        with pytest.raises(InvalidInput):
            registry.add(month, year)
        assert len(registry) == 0

    def test_any_positive_year_accepted(self):
        registry = MaturityRegistry()
        assert registry.add(1, 1999).id == "1999-01"
        assert registry.add(1, 2100).id == "2100-01"
        assert registry.add(12, 9999).id == "9999-12"

    def test_year_capped_at_four_digits(self):
        registry = MaturityRegistry()
        registry.add(12, 2024)
        with pytest.raises(InvalidInput):
            registry.add(1, 10000)
        with pytest.raises(InvalidInput):
            registry.add_id("10000-01")
        assert registry.ids() == ["2024-12"]

    def test_list_sorted_by_id(self):
        registry = MaturityRegistry()
        registry.add("01", 2025)
        registry.add("12", 2024)
        registry.add("03", 2025)

        assert [d.id for d in registry.list()] == ["2024-12", "2025-01", "2025-03"]
        assert registry.ids() == ["2024-12", "2025-01", "2025-03"]
        assert [d.id for d in registry] == registry.ids()

    def test_remove_idempotent(self):
        registry = MaturityRegistry()
        registry.add(12, 2024)

        assert registry.remove("2024-12") is not None
        assert registry.remove("2024-12") is None
        assert registry.remove("2030-01") is None
        assert len(registry) == 0

    def test_add_id(self):
        registry = MaturityRegistry()
        assert registry.add_id("2025-1").id == "2025-01"
        with pytest.raises(InvalidInput):
            registry.add_id("Jan 2025")
