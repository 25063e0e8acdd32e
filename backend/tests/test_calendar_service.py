"""
Calendar bucketing tests.

Verifies:
- Past years are complete and zero-filled
- The current year is truncated at as_of, with the January daily view
- ISO weeks (52 and 53 week years, Monday starts)
- Half-open bucket matching
- Available years window
- Rolling windows when no year is selected
"""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from insights.errors import CalendarInputError
from insights.services import calendar_service
from insights.services.calendar_service import buckets, fill_buckets
from insights.services.scope_service import ALL_ITEMS


AS_OF = datetime(2025, 6, 15, 12, 0, 0)


def _order(order_id, created_at, product_id=1, cents=100):
    return SimpleNamespace(
        id=order_id,
        created_at=created_at,
        lines=[SimpleNamespace(order_id=order_id, product_id=product_id, quantity=1, unit_price_cents=cents)],
    )


class TestDefaultPeriod:

    def test_past_year_has_twelve_zero_buckets(self):
        result = fill_buckets(buckets(2023, "monthly", AS_OF), [], ALL_ITEMS)
        assert len(result) == 12
        assert [b.label for b in result][:3] == ["Jan", "Feb", "Mar"]
        assert all(b.value_cents == 0 and b.count == 0 for b in result)

    def test_current_year_truncated_to_month(self):
        result = buckets(2025, "monthly", datetime(2025, 3, 15))
        assert [b.label for b in result] == ["Jan", "Feb", "Mar"]
        assert result[-1].end == datetime(2025, 4, 1)

    def test_january_is_daily(self):
        result = buckets(2025, None, datetime(2025, 1, 10, 9, 30))
        assert [b.label for b in result] == [str(day) for day in range(1, 11)]
        assert result[0].start == datetime(2025, 1, 1)
        assert result[-1].end == datetime(2025, 1, 11)

    def test_default_alias(self):
        assert buckets(2024, "default", AS_OF) == buckets(2024, "monthly", AS_OF)

    def test_contiguous(self):
        result = buckets(2024, "monthly", AS_OF)
        for left, right in zip(result, result[1:]):
            assert left.end == right.start


class TestDailyPeriod:

    def test_leap_year(self):
        result = buckets(2024, "daily", AS_OF)
        assert len(result) == 366
        assert result[0].label == "Jan 1"
        assert result[59].label == "Feb 29"
        assert result[-1].label == "Dec 31"

    def test_current_year_truncated(self):
        result = buckets(2025, "daily", datetime(2025, 3, 15))
        assert len(result) == 31 + 28 + 15
        assert result[-1].label == "Mar 15"


class TestWeeklyPeriod:

    @pytest.mark.parametrize("year,weeks", [(2020, 53), (2021, 52), (2024, 52), (2026, 53)])
    def test_week_count(self, year, weeks):
        result = buckets(year, "weekly", datetime(2030, 1, 1))
        assert len(result) == weeks
        assert result[-1].label == f"Week {weeks}"

    def test_week_one_may_start_in_december(self):
        result = buckets(2026, "weekly", datetime(2030, 1, 1))
        assert result[0].start == datetime(2025, 12, 29)
        assert all(b.start.weekday() == 0 for b in result)

    def test_current_year_truncated(self):
        result = buckets(2025, "weekly", AS_OF)
        assert len(result) == date(2025, 6, 15).isocalendar()[1]

    @pytest.mark.parametrize("day", [29, 30, 31])
    def test_year_end_week_belongs_to_next_iso_year(self, day):
        as_of = datetime(2025, 12, day, 12, 0)

        assert buckets(2025, "weekly", as_of)[-1].label == "Week 52"
        (current,) = buckets(2026, "weekly", as_of)
        assert current.label == "Week 1"
        assert current.start <= as_of < current.end

    def test_new_calendar_year_still_in_last_iso_week(self):
        as_of = datetime(2027, 1, 2, 9, 0)

        assert buckets(2027, "weekly", as_of) == []
        last = buckets(2026, "weekly", as_of)[-1]
        assert last.label == "Week 53"
        assert last.start <= as_of < last.end

    def test_current_year_follows_iso_year(self):
        assert calendar_service.current_year("weekly", datetime(2025, 12, 30)) == 2026
        assert calendar_service.current_year("monthly", datetime(2025, 12, 30)) == 2025

    def test_iso_weeks_helper(self):
        assert calendar_service.iso_weeks_in_year(2015) == 53
        assert calendar_service.iso_weeks_in_year(2019) == 52


class TestYearlyPeriod:

    def test_past_year(self):
        (bucket,) = buckets(2023, "yearly", AS_OF)
        assert bucket.label == "2023"
        assert (bucket.start, bucket.end) == (datetime(2023, 1, 1), datetime(2024, 1, 1))

    def test_current_year_truncated(self):
        (bucket,) = buckets(2025, "yearly", AS_OF)
        assert bucket.end == datetime(2025, 6, 16)


class TestInputs:

    @pytest.mark.parametrize("period", [None, "daily", "weekly", "monthly", "yearly"])
    def test_future_year_is_empty(self, period):
        assert buckets(2031, period, AS_OF) == []

    @pytest.mark.parametrize("period", [None, "daily", "weekly", "monthly", "yearly"])
    @pytest.mark.parametrize("year", [0, -5])
    def test_year_below_calendar_range_is_empty(self, year, period):
        assert buckets(year, period, AS_OF) == []

    def test_year_one_is_supported(self):
        assert len(buckets(1, "monthly", AS_OF)) == 12

    def test_unknown_period(self):
        with pytest.raises(CalendarInputError):
            buckets(2025, "fortnightly", AS_OF)

    def test_period_is_case_insensitive(self):
        assert len(buckets(2024, "Monthly", AS_OF)) == 12


class TestRollingBuckets:

    def _contiguous(self, result):
        return all(a.end == b.start for a, b in zip(result, result[1:]))

    def test_daily_last_thirty_days(self):
        result = calendar_service.rolling_buckets("daily", AS_OF)
        assert len(result) == 31
        assert (result[0].label, result[-1].label) == ("16/5", "15/6")
        assert result[-1].start == datetime(2025, 6, 15)
        assert self._contiguous(result)

    def test_weekly_last_ninety_days(self):
        result = calendar_service.rolling_buckets("weekly", AS_OF)
        assert (result[0].label, result[-1].label) == ("Week 12", "Week 24")
        assert result[0].start == datetime(2025, 3, 17)
        assert all(b.start.weekday() == 0 for b in result)
        assert result[-1].start <= AS_OF < result[-1].end
        assert self._contiguous(result)

    @pytest.mark.parametrize("period", [None, "default", "monthly"])
    def test_monthly_last_twelve_months(self, period):
        result = calendar_service.rolling_buckets(period, AS_OF)
        assert [b.label for b in result] == [
            "Jul", "Aug", "Sep", "Oct", "Nov", "Dec", "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        ]
        assert result[0].start == datetime(2024, 7, 1)
        assert result[-1].end == datetime(2025, 7, 1)
        assert self._contiguous(result)

    def test_yearly_from_first_year(self):
        result = calendar_service.rolling_buckets("yearly", AS_OF, first_year=2022)
        assert [b.label for b in result] == ["2022", "2023", "2024", "2025"]
        assert result[-1].end == datetime(2025, 6, 16)

    def test_yearly_without_data(self):
        result = calendar_service.rolling_buckets("yearly", AS_OF)
        assert [b.label for b in result] == ["2025"]

    def test_unknown_period(self):
        with pytest.raises(CalendarInputError):
            calendar_service.rolling_buckets("hourly", AS_OF)

    def test_fill_counts_recent_orders(self):
        orders = [_order(1, datetime(2025, 6, 1, 8, 0)), _order(2, datetime(2025, 4, 1))]
        result = fill_buckets(calendar_service.rolling_buckets("daily", AS_OF), orders, ALL_ITEMS)
        assert sum(b.count for b in result) == 1
        assert [b.label for b in result if b.count] == ["1/6"]


class TestFillBuckets:

    def test_half_open_boundaries(self):
        orders = [
            _order(1, datetime(2024, 1, 31, 23, 59, 59), cents=100),
            _order(2, datetime(2024, 2, 1, 0, 0, 0), cents=200),
            _order(3, datetime(2023, 12, 31, 23, 0, 0), cents=999),
        ]
        result = fill_buckets(buckets(2024, "monthly", AS_OF), orders, ALL_ITEMS)

        assert (result[0].value_cents, result[0].count) == (100, 1)
        assert (result[1].value_cents, result[1].count) == (200, 1)
        assert sum(b.count for b in result) == 2

    def test_after_last_bucket_ignored(self):
        orders = [_order(1, datetime(2025, 4, 2), cents=500)]
        result = fill_buckets(buckets(2025, "monthly", datetime(2025, 3, 15)), orders, ALL_ITEMS)
        assert sum(b.value_cents for b in result) == 0

    def test_scoped_values(self):
        orders = [
            _order(1, datetime(2024, 5, 5), product_id=1, cents=300),
            _order(2, datetime(2024, 5, 6), product_id=2, cents=700),
        ]
        result = fill_buckets(buckets(2024, "monthly", AS_OF), orders, frozenset({2}))
        may = result[4]
        assert (may.label, may.value_cents, may.count) == ("May", 700, 1)

    def test_to_dict(self):
        result = fill_buckets(buckets(2024, "yearly", AS_OF), [], ALL_ITEMS)
        assert result[0].to_dict() == {"name": "2024", "value_cents": 0, "count": 0}

    def test_empty_bucket_list(self):
        assert fill_buckets([], [_order(1, datetime(2024, 1, 1))], ALL_ITEMS) == []


class TestAvailableYears:

    def test_union_sorted_descending(self):
        years = calendar_service.available_years({2019, 2024, 2025}, AS_OF)
        assert years == [2025, 2024, 2023, 2022, 2021, 2019]

    def test_no_orders(self):
        assert calendar_service.available_years(set(), AS_OF) == [2025, 2024, 2023, 2022, 2021]
