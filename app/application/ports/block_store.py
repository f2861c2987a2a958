from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.availability_block import AvailabilityBlock


class AvailabilityBlockStorePort(ABC):
    @abstractmethod
    def list_blocks_in_range(
        self,
        tenant_id: str,
        start: datetime,
        end: datetime,
    ) -> list[AvailabilityBlock]:
        """Blocks whose [start_time, end_time) intersects [start, end). Raises StoreReadError."""
        raise NotImplementedError
