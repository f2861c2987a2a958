from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping


def _minutes(value: Any) -> int:
    if value is None:
        return 0
    return max(0, int(value))


@dataclass(frozen=True)
class ServiceDescriptor:
    id: str
    duration_minutes: int
    buffer_before_minutes: int = 0
    buffer_after_minutes: int = 0
    accepts_home_visit: bool = False
    home_visit_fee: Decimal | None = None
    name: str | None = None

    @property
    def total_span_minutes(self) -> int:
        return self.buffer_before_minutes + self.duration_minutes + self.buffer_after_minutes

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ServiceDescriptor":
        """
        Build a descriptor from a raw catalog row.
        Nullable buffer columns become 0 here so the engine never re-checks them.
        """
        fee = record.get("home_visit_fee")
        return cls(
            id=str(record["id"]),
            duration_minutes=int(record.get("duration_minutes") or 0),
            buffer_before_minutes=_minutes(record.get("buffer_before_minutes")),
            buffer_after_minutes=_minutes(record.get("buffer_after_minutes")),
            accepts_home_visit=bool(record.get("accepts_home_visit") or False),
            home_visit_fee=Decimal(str(fee)) if fee is not None else None,
            name=record.get("name"),
        )
