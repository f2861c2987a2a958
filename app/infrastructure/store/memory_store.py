from __future__ import annotations

from datetime import datetime

from app.application.ports.appointment_store import AppointmentStorePort
from app.application.ports.block_store import AvailabilityBlockStorePort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.ports.studio_settings import StudioSettingsPort
from app.domain.entities.appointment import Appointment
from app.domain.entities.availability_block import AvailabilityBlock
from app.domain.entities.schedule import BusinessHours, OnlineBookingRules
from app.domain.entities.service import ServiceDescriptor


class MemoryStudioStore(
    AppointmentStorePort,
    AvailabilityBlockStorePort,
    ServiceCatalogPort,
    StudioSettingsPort,
):
    def __init__(self) -> None:
        self._services: dict[str, dict[str, ServiceDescriptor]] = {}
        self._appointments: dict[str, list[Appointment]] = {}
        self._blocks: dict[str, list[AvailabilityBlock]] = {}
        self._business_hours: dict[str, dict[int, BusinessHours]] = {}
        self._online_rules: dict[str, OnlineBookingRules] = {}

    def add_service(self, tenant_id: str, service: ServiceDescriptor) -> None:
        self._services.setdefault(tenant_id, {})[service.id] = service

    def add_appointment(self, tenant_id: str, appointment: Appointment) -> None:
        self._appointments.setdefault(tenant_id, []).append(appointment)

    def add_block(self, tenant_id: str, block: AvailabilityBlock) -> None:
        self._blocks.setdefault(tenant_id, []).append(block)

    def set_business_hours(self, tenant_id: str, hours: BusinessHours) -> None:
        self._business_hours.setdefault(tenant_id, {})[hours.day_of_week] = hours

    def set_online_booking_rules(self, tenant_id: str, rules: OnlineBookingRules) -> None:
        self._online_rules[tenant_id] = rules

    def list_appointments_in_range(self, tenant_id: str, start: datetime, end: datetime) -> list[Appointment]:
        return [
            a
            for a in self._appointments.get(tenant_id, [])
            if start <= a.start_time < end
        ]

    def list_blocks_in_range(self, tenant_id: str, start: datetime, end: datetime) -> list[AvailabilityBlock]:
        result = []
        for block in self._blocks.get(tenant_id, []):
            block_end = max(block.end_time, block.start_time)
            if block.start_time < end and (block_end > start or block.start_time >= start):
                result.append(block)
        return result

    def get_service(self, tenant_id: str, service_id: str) -> ServiceDescriptor | None:
        return self._services.get(tenant_id, {}).get(service_id)

    def list_business_hours(self, tenant_id: str) -> list[BusinessHours]:
        hours = self._business_hours.get(tenant_id, {})
        return [hours[weekday] for weekday in sorted(hours)]

    def get_online_booking_rules(self, tenant_id: str) -> OnlineBookingRules:
        return self._online_rules.get(tenant_id, OnlineBookingRules())
