from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.appointment import Appointment


class AppointmentStorePort(ABC):
    @abstractmethod
    def list_appointments_in_range(
        self,
        tenant_id: str,
        start: datetime,
        end: datetime,
    ) -> list[Appointment]:
        """Appointments whose start falls in [start, end), any status. Raises StoreReadError."""
        raise NotImplementedError
