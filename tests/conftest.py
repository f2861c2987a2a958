"""Shared fixtures for availability tests."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from app.application.use_cases.availability import AvailabilityUseCase
from app.domain.entities.appointment import Appointment, AppointmentStatus
from app.domain.entities.availability_block import AvailabilityBlock, BlockType
from app.domain.entities.schedule import BusinessHours
from app.domain.entities.service import ServiceDescriptor
from app.infrastructure.store.memory_store import MemoryStudioStore

TENANT = "tenant-1"
TZ = ZoneInfo("America/Sao_Paulo")

# Tuesday 2026-03-10, 08:00 in the studio's timezone
NOW = datetime(2026, 3, 10, 8, 0, tzinfo=TZ)
TODAY = NOW.date()
TOMORROW = TODAY + timedelta(days=1)


def at(day: date, hhmm: str) -> datetime:
    return datetime.combine(day, time.fromisoformat(hhmm), tzinfo=TZ)


def make_service(
    service_id: str = "svc-60",
    duration: int = 60,
    before: int = 0,
    after: int = 0,
    home_visit: bool = False,
) -> ServiceDescriptor:
    return ServiceDescriptor(
        id=service_id,
        duration_minutes=duration,
        buffer_before_minutes=before,
        buffer_after_minutes=after,
        accepts_home_visit=home_visit,
    )


def make_appointment(
    start: datetime,
    duration: int = 60,
    before: int = 0,
    after: int = 0,
    status: AppointmentStatus = AppointmentStatus.confirmed,
    appointment_id: str = "appt-1",
) -> Appointment:
    return Appointment(
        id=appointment_id,
        start_time=start,
        status=status,
        service_duration_minutes=duration,
        buffer_before_minutes=before,
        buffer_after_minutes=after,
    )


def make_block(
    start: datetime,
    end: datetime,
    block_type: BlockType = BlockType.personal,
    full_day: bool = False,
    block_id: str = "block-1",
) -> AvailabilityBlock:
    return AvailabilityBlock(
        id=block_id,
        start_time=start,
        end_time=end,
        block_type=block_type,
        is_full_day=full_day,
    )


def full_day_block(day: date, block_type: BlockType = BlockType.shift) -> AvailabilityBlock:
    return make_block(at(day, "00:00"), at(day, "23:59"), block_type=block_type, full_day=True)


def open_studio(store: MemoryStudioStore, tenant_id: str = TENANT) -> None:
    """09:00-18:00 Monday to Saturday, closed on Sunday."""
    for weekday in range(6):
        store.set_business_hours(tenant_id, BusinessHours(weekday, time(9, 0), time(18, 0)))
    store.set_business_hours(tenant_id, BusinessHours(6, time(9, 0), time(18, 0), is_closed=True))


@pytest.fixture
def store() -> MemoryStudioStore:
    store = MemoryStudioStore()
    open_studio(store)
    store.add_service(TENANT, make_service())
    return store


def build_use_case(store, now: datetime = NOW, slot_interval_minutes: int = 30, **kwargs) -> AvailabilityUseCase:
    return AvailabilityUseCase(
        appointments=store,
        blocks=store,
        catalog=store,
        studio_settings=store,
        timezone=TZ,
        slot_interval_minutes=slot_interval_minutes,
        clock=lambda: now,
        **kwargs,
    )


@pytest.fixture
def use_case(store) -> AvailabilityUseCase:
    return build_use_case(store)
