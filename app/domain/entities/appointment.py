from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from enum import Enum
from typing import Any, Mapping

DEFAULT_APPOINTMENT_MINUTES = 30


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    in_progress = "in_progress"
    completed = "completed"
    canceled_by_client = "canceled_by_client"
    canceled_by_studio = "canceled_by_studio"
    no_show = "no_show"

    @classmethod
    def parse(cls, value: str | None) -> "AppointmentStatus":
        # unknown statuses still hold the calendar
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.pending


NON_OCCUPYING_STATUSES = frozenset(
    {
        AppointmentStatus.canceled_by_client,
        AppointmentStatus.canceled_by_studio,
        AppointmentStatus.no_show,
    }
)


@dataclass(frozen=True)
class Appointment:
    id: str
    start_time: datetime
    status: AppointmentStatus = AppointmentStatus.confirmed
    service_duration_minutes: int | None = None
    buffer_before_minutes: int = 0
    buffer_after_minutes: int = 0
    total_duration_minutes: int | None = None

    @property
    def occupies_calendar(self) -> bool:
        return self.status not in NON_OCCUPYING_STATUSES

    def busy_range(self) -> tuple[datetime, datetime]:
        """Half-open [start, end) this appointment holds on the calendar."""
        if self.service_duration_minutes is not None:
            start = self.start_time - timedelta(minutes=self.buffer_before_minutes)
            end = self.start_time + timedelta(
                minutes=self.service_duration_minutes + self.buffer_after_minutes
            )
            return start, end
        total = self.total_duration_minutes or DEFAULT_APPOINTMENT_MINUTES
        return self.start_time, self.start_time + timedelta(minutes=total)

    @classmethod
    def from_record(cls, record: Mapping[str, Any], tz: tzinfo | None = None) -> "Appointment":
        start = parse_timestamp(record["start_time"], tz)
        duration = record.get("service_duration_minutes")
        total = record.get("total_duration_minutes")
        return cls(
            id=str(record["id"]),
            start_time=start,
            status=AppointmentStatus.parse(record.get("status")),
            service_duration_minutes=int(duration) if duration is not None else None,
            buffer_before_minutes=int(record.get("buffer_before_minutes") or 0),
            buffer_after_minutes=int(record.get("buffer_after_minutes") or 0),
            total_duration_minutes=int(total) if total is not None else None,
        )


def parse_timestamp(value: Any, tz: tzinfo | None = None) -> datetime:
    """ISO string or datetime; naive values are read as tenant-local when tz is given."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if value.tzinfo is None and tz is not None:
        value = value.replace(tzinfo=tz)
    return value
