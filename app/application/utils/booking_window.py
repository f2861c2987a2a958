from __future__ import annotations

import calendar
import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from app.application.utils.intervals import Interval
from app.domain.entities.schedule import BusinessHours, OnlineBookingRules, TimeGridConfig

_MONTH_RE = re.compile(r"^\s*(\d{4})-(\d{2})\s*$")


def resolve_positive_minutes(value: Any, fallback: float) -> float:
    """
    Resolve an optional minute setting.
    None, non-numeric and non-finite values fall back; finite values are clamped at 0.
    """
    if value is None:
        return fallback
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(parsed):
        return fallback
    return max(0.0, parsed)


def parse_iso_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def parse_month(value: Any) -> tuple[int, int] | None:
    """Parse "YYYY-MM". Returns (year, month) or None."""
    if not isinstance(value, str):
        return None
    match = _MONTH_RE.match(value)
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        return None
    return year, month


def days_of_month(year: int, month: int) -> list[date]:
    _, last_day = calendar.monthrange(year, month)
    return [date(year, month, d) for d in range(1, last_day + 1)]


def day_bounds(day: date, tz: ZoneInfo) -> Interval:
    """Tenant-local calendar day as [00:00, next 00:00)."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return Interval(start, end)


def operating_window(
    day: date,
    tz: ZoneInfo,
    grid: TimeGridConfig,
    business_hours: BusinessHours | None = None,
) -> Interval | None:
    """
    Bookable window for a day.

    Configured business hours win over the grid defaults; a closed weekday
    or an inverted range has no window.
    """
    if business_hours is not None:
        if business_hours.is_closed:
            return None
        open_at = datetime.combine(day, business_hours.open_time, tzinfo=tz)
        close_at = datetime.combine(day, business_hours.close_time, tzinfo=tz)
    else:
        open_at = datetime.combine(day, time(hour=grid.start_hour % 24), tzinfo=tz)
        close_at = datetime.combine(day, time.min, tzinfo=tz) + timedelta(hours=grid.end_hour)

    if close_at <= open_at:
        return None
    return Interval(open_at, close_at)


@dataclass(frozen=True)
class BookingCutoff:
    """Limits applied to today's public slots. None means unbounded."""

    earliest_start: datetime | None = None
    latest_end: datetime | None = None

    def allows(self, span: Interval) -> bool:
        if self.earliest_start is not None and span.start < self.earliest_start:
            return False
        if self.latest_end is not None and span.end > self.latest_end:
            return False
        return True


NO_CUTOFF = BookingCutoff()


def public_cutoff(
    day: date,
    window: Interval,
    now: datetime,
    rules: OnlineBookingRules,
    default_cutoff_before_close: float,
    default_last_slot_lead: float,
) -> BookingCutoff:
    if day != now.astimezone(window.start.tzinfo).date():
        return NO_CUTOFF

    cutoff = resolve_positive_minutes(rules.cutoff_before_close_minutes, default_cutoff_before_close)
    lead = resolve_positive_minutes(rules.last_slot_before_close_minutes, default_last_slot_lead)
    return BookingCutoff(
        earliest_start=now + timedelta(minutes=lead),
        latest_end=window.end - timedelta(minutes=cutoff),
    )
