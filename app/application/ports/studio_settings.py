from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.schedule import BusinessHours, OnlineBookingRules


class StudioSettingsPort(ABC):
    @abstractmethod
    def list_business_hours(self, tenant_id: str) -> list[BusinessHours]:
        """Configured weekday rows (0 = Monday). Empty when the tenant has none."""
        raise NotImplementedError

    @abstractmethod
    def get_online_booking_rules(self, tenant_id: str) -> OnlineBookingRules:
        """Tenant overrides for the public booking window. Fields may be None."""
        raise NotImplementedError
