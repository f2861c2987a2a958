from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from app.application.exceptions import StoreReadError
from app.application.ports.appointment_store import AppointmentStorePort
from app.application.ports.block_store import AvailabilityBlockStorePort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.ports.studio_settings import StudioSettingsPort
from app.domain.entities.appointment import Appointment
from app.domain.entities.availability_block import AvailabilityBlock
from app.domain.entities.schedule import BusinessHours, OnlineBookingRules
from app.domain.entities.service import ServiceDescriptor
from app.infrastructure.store.memory_store import MemoryStudioStore


class JsonStudioStore(
    AppointmentStorePort,
    AvailabilityBlockStorePort,
    ServiceCatalogPort,
    StudioSettingsPort,
):
    """
    Read-only studio data from a JSON fixture file.

    Layout:
        {"tenants": {"<tenant_id>": {
            "services": [...], "appointments": [...], "blocks": [...],
            "business_hours": [...], "settings": {...}}}}

    The file is re-read on every call. A missing file is an empty studio;
    an unreadable or malformed one raises StoreReadError.
    """

    def __init__(self, data_file: str = "./data/studio.json", timezone: ZoneInfo | None = None) -> None:
        self._data_file = Path(data_file)
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    def _load_tenant(self, tenant_id: str) -> MemoryStudioStore:
        snapshot = MemoryStudioStore()
        if not self._data_file.exists():
            self._logger.warning("Studio data file missing", extra={"reason": str(self._data_file)})
            return snapshot

        try:
            with open(self._data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            tenant: dict[str, Any] = (data.get("tenants") or {}).get(tenant_id) or {}

            for record in tenant.get("services", []):
                snapshot.add_service(tenant_id, ServiceDescriptor.from_record(record))
            for record in tenant.get("appointments", []):
                snapshot.add_appointment(tenant_id, Appointment.from_record(record, self._timezone))
            for record in tenant.get("blocks", []):
                snapshot.add_block(tenant_id, AvailabilityBlock.from_record(record, self._timezone))
            for record in tenant.get("business_hours", []):
                snapshot.set_business_hours(tenant_id, BusinessHours.from_record(record))
            snapshot.set_online_booking_rules(tenant_id, OnlineBookingRules.from_record(tenant.get("settings")))
        except (OSError, ValueError, KeyError, TypeError, AttributeError, ArithmeticError) as e:
            self._logger.error("Failed to read studio data", extra={"error": str(e)})
            raise StoreReadError(f"Cannot read {self._data_file}: {e}") from e

        return snapshot

    def list_appointments_in_range(self, tenant_id: str, start: datetime, end: datetime) -> list[Appointment]:
        return self._load_tenant(tenant_id).list_appointments_in_range(tenant_id, start, end)

    def list_blocks_in_range(self, tenant_id: str, start: datetime, end: datetime) -> list[AvailabilityBlock]:
        return self._load_tenant(tenant_id).list_blocks_in_range(tenant_id, start, end)

    def get_service(self, tenant_id: str, service_id: str) -> ServiceDescriptor | None:
        return self._load_tenant(tenant_id).get_service(tenant_id, service_id)

    def list_business_hours(self, tenant_id: str) -> list[BusinessHours]:
        return self._load_tenant(tenant_id).list_business_hours(tenant_id)

    def get_online_booking_rules(self, tenant_id: str) -> OnlineBookingRules:
        return self._load_tenant(tenant_id).get_online_booking_rules(tenant_id)
