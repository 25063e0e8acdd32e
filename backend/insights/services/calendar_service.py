# Overview: Calendar bucketing for trend charts; zero-filled, half-open time buckets.

from __future__ import annotations

import calendar
from bisect import bisect_right
from dataclasses import dataclass
from datetime import MINYEAR, date, datetime, timedelta
from typing import Iterable

from insights.errors import CalendarInputError
from insights.services.attribution_service import touched_slices


PERIOD_DEFAULT = "default"
PERIOD_DAILY = "daily"
PERIOD_WEEKLY = "weekly"
PERIOD_MONTHLY = "monthly"
PERIOD_YEARLY = "yearly"

PERIODS = (PERIOD_DEFAULT, PERIOD_DAILY, PERIOD_WEEKLY, PERIOD_MONTHLY, PERIOD_YEARLY)

YEARS_BACK = 4

# Rolling windows used when no year is selected
ROLLING_DAYS = 30
ROLLING_WEEK_DAYS = 90
ROLLING_MONTHS = 12


@dataclass(frozen=True)
class Bucket:
    """Half-open interval [start, end) with a display label."""
    label: str
    start: datetime
    end: datetime


@dataclass
class FilledBucket:
    label: str
    start: datetime
    end: datetime
    value_cents: int = 0
    count: int = 0

    def to_dict(self) -> dict:
        return {
            "name": self.label,
            "value_cents": self.value_cents,
            "count": self.count,
        }


def _midnight(day: date) -> datetime:
    return datetime(day.year, day.month, day.day)


def _month_start(year: int, month: int) -> datetime:
    return datetime(year, month, 1)


def _next_month_start(year: int, month: int) -> datetime:
    if month == 12:
        return datetime(year + 1, 1, 1)
    return datetime(year, month + 1, 1)


def iso_weeks_in_year(year: int) -> int:
    """52 or 53; Dec 28 always falls in the last ISO week of its year."""
    return date(year, 12, 28).isocalendar()[1]


def iso_week_start(year: int, week: int) -> date:
    # Jan 4 is always in ISO week 1
    jan4 = date(year, 1, 4)
    week1_monday = jan4 - timedelta(days=jan4.isoweekday() - 1)
    return week1_monday + timedelta(weeks=week - 1)


def day_buckets(year: int, month: int, last_day: int, *, label_month: bool = False) -> list[Bucket]:
    out = []
    for day in range(1, last_day + 1):
        start = datetime(year, month, day)
        label = f"{calendar.month_abbr[month]} {day}" if label_month else str(day)
        out.append(Bucket(label=label, start=start, end=start + timedelta(days=1)))
    return out


def month_buckets(year: int, last_month: int) -> list[Bucket]:
    return [
        Bucket(
            label=calendar.month_abbr[month],
            start=_month_start(year, month),
            end=_next_month_start(year, month),
        )
        for month in range(1, last_month + 1)
    ]


def _default_buckets(year: int, as_of: datetime) -> list[Bucket]:
    if year == as_of.year:
        if as_of.month == 1:
            # A single partial month is shown day by day
            return day_buckets(year, 1, as_of.day)
        return month_buckets(year, as_of.month)
    return month_buckets(year, 12)


def _daily_buckets(year: int, as_of: datetime) -> list[Bucket]:
    out: list[Bucket] = []
    last_month = as_of.month if year == as_of.year else 12
    for month in range(1, last_month + 1):
        if year == as_of.year and month == as_of.month:
            last_day = as_of.day
        else:
            last_day = calendar.monthrange(year, month)[1]
        out.extend(day_buckets(year, month, last_day, label_month=True))
    return out


def _weekly_buckets(year: int, as_of: datetime) -> list[Bucket]:
    out = []
    for week in range(1, iso_weeks_in_year(year) + 1):
        start = _midnight(iso_week_start(year, week))
        if start > as_of:
            break
        out.append(Bucket(label=f"Week {week}", start=start, end=start + timedelta(weeks=1)))
    return out


def _yearly_buckets(year: int, as_of: datetime) -> list[Bucket]:
    start = datetime(year, 1, 1)
    end = datetime(year + 1, 1, 1)
    if year == as_of.year:
        end = _midnight(as_of.date()) + timedelta(days=1)
    return [Bucket(label=str(year), start=start, end=end)]


_BUILDERS = {
    PERIOD_DEFAULT: _default_buckets,
    PERIOD_MONTHLY: _default_buckets,
    PERIOD_DAILY: _daily_buckets,
    PERIOD_WEEKLY: _weekly_buckets,
    PERIOD_YEARLY: _yearly_buckets,
}


def normalize_period(period: str | None) -> str:
    if period is None or period == "":
        return PERIOD_DEFAULT
    period = period.strip().lower()
    if period not in _BUILDERS:
        raise CalendarInputError(f"period must be one of: {', '.join(PERIODS)}")
    return period


def current_year(period: str | None, as_of: datetime) -> int:
    """Latest year with buckets; weekly views run on the ISO year."""
    if normalize_period(period) == PERIOD_WEEKLY:
        return as_of.isocalendar()[0]
    return as_of.year


def buckets(year: int, period: str | None, as_of: datetime) -> list[Bucket]:
    """
    Ordered, contiguous buckets for a year.

    A year after as_of, or one no calendar can hold (below 1), has nothing
    to show and yields an empty list. An unknown period raises
    CalendarInputError.
    """
    builder = _BUILDERS[normalize_period(period)]
    if year < MINYEAR or year > current_year(period, as_of):
        return []
    return builder(year, as_of)


def _rolling_daily(as_of: datetime, first_year: int) -> list[Bucket]:
    today = as_of.date()
    out = []
    for offset in range(ROLLING_DAYS, -1, -1):
        day = today - timedelta(days=offset)
        start = _midnight(day)
        out.append(Bucket(label=f"{day.day}/{day.month}", start=start, end=start + timedelta(days=1)))
    return out


def _rolling_weekly(as_of: datetime, first_year: int) -> list[Bucket]:
    earliest = as_of.date() - timedelta(days=ROLLING_WEEK_DAYS)
    start = _midnight(earliest - timedelta(days=earliest.weekday()))
    out = []
    while start <= as_of:
        week = start.isocalendar()[1]
        out.append(Bucket(label=f"Week {week}", start=start, end=start + timedelta(weeks=1)))
        start += timedelta(weeks=1)
    return out


def _rolling_monthly(as_of: datetime, first_year: int) -> list[Bucket]:
    last = as_of.year * 12 + as_of.month - 1
    out = []
    for index in range(last - ROLLING_MONTHS + 1, last + 1):
        year, month = divmod(index, 12)
        month += 1
        out.append(Bucket(
            label=calendar.month_abbr[month],
            start=_month_start(year, month),
            end=_next_month_start(year, month),
        ))
    return out


def _rolling_yearly(as_of: datetime, first_year: int) -> list[Bucket]:
    out: list[Bucket] = []
    for year in range(min(first_year, as_of.year), as_of.year + 1):
        out.extend(_yearly_buckets(year, as_of))
    return out


_ROLLING_BUILDERS = {
    PERIOD_DEFAULT: _rolling_monthly,
    PERIOD_MONTHLY: _rolling_monthly,
    PERIOD_DAILY: _rolling_daily,
    PERIOD_WEEKLY: _rolling_weekly,
    PERIOD_YEARLY: _rolling_yearly,
}


def rolling_buckets(period: str | None, as_of: datetime, first_year: int | None = None) -> list[Bucket]:
    """
    Buckets for a trend with no selected year, ending at as_of.

    daily: the last 30 days. weekly: Monday weeks covering the last 90 days.
    default/monthly: the last 12 months. yearly: every year from first_year
    (the earliest year with data) through as_of.
    """
    builder = _ROLLING_BUILDERS[normalize_period(period)]
    return builder(as_of, as_of.year if first_year is None else first_year)


def fill_buckets(bucket_list: list[Bucket], orders: Iterable, scope, known_product_ids=None) -> list[FilledBucket]:
    """Merge each touched order's scoped revenue into the bucket holding its created_at."""
    filled = [FilledBucket(label=b.label, start=b.start, end=b.end) for b in bucket_list]
    if not filled:
        return filled

    starts = [b.start for b in filled]
    for order, part in touched_slices(orders, scope, known_product_ids):
        position = bisect_right(starts, order.created_at) - 1
        if position < 0:
            continue
        target = filled[position]
        if order.created_at >= target.end:
            continue
        target.value_cents += part.revenue_cents
        target.count += 1

    return filled


def window(bucket_list: list[Bucket]) -> tuple[datetime, datetime] | None:
    """Overall [start, end) covered by a bucket sequence."""
    if not bucket_list:
        return None
    return bucket_list[0].start, bucket_list[-1].end


def available_years(order_years: Iterable[int], as_of: datetime) -> list[int]:
    recent = range(as_of.year - YEARS_BACK, as_of.year + 1)
    return sorted(set(order_years) | set(recent), reverse=True)
