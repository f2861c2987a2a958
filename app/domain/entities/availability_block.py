from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any, Mapping

from app.domain.entities.appointment import parse_timestamp


class BlockType(str, Enum):
    shift = "shift"
    personal = "personal"
    vacation = "vacation"
    administrative = "administrative"

    @classmethod
    def parse(cls, value: str | None) -> "BlockType":
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.administrative


@dataclass(frozen=True)
class AvailabilityBlock:
    id: str
    start_time: datetime
    end_time: datetime
    block_type: BlockType = BlockType.administrative
    is_full_day: bool = False
    title: str | None = None

    @property
    def is_shift(self) -> bool:
        return self.block_type == BlockType.shift

    @classmethod
    def from_record(cls, record: Mapping[str, Any], tz: tzinfo | None = None) -> "AvailabilityBlock":
        start = parse_timestamp(record["start_time"], tz)
        end = parse_timestamp(record["end_time"], tz)
        # older rows carry the type in "reason"
        return cls(
            id=str(record["id"]),
            start_time=start,
            end_time=end,
            block_type=BlockType.parse(record.get("block_type") or record.get("reason")),
            is_full_day=bool(record.get("is_full_day") or False),
            title=record.get("title"),
        )
