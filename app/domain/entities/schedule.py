from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Any, Mapping


def from_sunday_based(day_of_week: int) -> int:
    """Stored rows count weekdays from Sunday = 0; the engine uses date.weekday()."""
    return (int(day_of_week) - 1) % 7


def _parse_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value).strip()[:8])


@dataclass(frozen=True)
class TimeGridConfig:
    start_hour: int = 8
    end_hour: int = 20
    hour_height: int = 64  # presentation only


@dataclass(frozen=True)
class BusinessHours:
    day_of_week: int  # 0 = Monday
    open_time: time
    close_time: time
    is_closed: bool = False

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "BusinessHours":
        return cls(
            day_of_week=from_sunday_based(record["day_of_week"]),
            open_time=_parse_time(record.get("open_time") or "00:00"),
            close_time=_parse_time(record.get("close_time") or "00:00"),
            is_closed=bool(record.get("is_closed") or False),
        )


@dataclass(frozen=True)
class OnlineBookingRules:
    cutoff_before_close_minutes: float | None = None
    last_slot_before_close_minutes: float | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any] | None) -> "OnlineBookingRules":
        if not record:
            return cls()
        return cls(
            cutoff_before_close_minutes=record.get("online_cutoff_before_close_minutes"),
            last_slot_before_close_minutes=record.get("online_last_slot_before_close_minutes"),
        )
