from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BookingChannel(str, Enum):
    internal = "internal"
    public = "public"


@dataclass(frozen=True)
class DateBlockStatus:
    has_blocks: bool = False
    has_shift: bool = False
