"""
Tests for the month-wide day map and the date block status check.
"""

from __future__ import annotations

import logging
from datetime import date, time, timedelta

import pytest

from app.application.exceptions import StoreReadError
from app.domain.entities.availability import BookingChannel
from app.domain.entities.availability_block import BlockType
from app.domain.entities.schedule import BusinessHours
from app.infrastructure.store.memory_store import MemoryStudioStore
from tests.conftest import (
    NOW,
    TENANT,
    TODAY,
    TOMORROW,
    at,
    build_use_case,
    full_day_block,
    make_appointment,
    make_block,
    make_service,
    open_studio,
)


class CountingStore(MemoryStudioStore):
    def __init__(self) -> None:
        super().__init__()
        self.appointment_reads = 0
        self.block_reads = 0

    def list_appointments_in_range(self, tenant_id, start, end):
        self.appointment_reads += 1
        return super().list_appointments_in_range(tenant_id, start, end)

    def list_blocks_in_range(self, tenant_id, start, end):
        self.block_reads += 1
        return super().list_blocks_in_range(tenant_id, start, end)


@pytest.fixture
def counting_store() -> CountingStore:
    store = CountingStore()
    open_studio(store)
    store.add_service(TENANT, make_service())
    store.add_service(TENANT, make_service("svc-home", home_visit=True))
    return store


def test_month_map_has_every_day(use_case):
    days = use_case.get_month_available_days(TENANT, "svc-60", "2026-03")

    assert len(days) == 31
    assert list(days)[0] == "2026-03-01"
    assert list(days)[-1] == "2026-03-31"


def test_past_and_closed_days_are_unavailable(use_case):
    days = use_case.get_month_available_days(TENANT, "svc-60", "2026-03")

    assert days["2026-03-09"] is False
    assert days["2026-03-10"] is True
    assert days["2026-03-15"] is False  # Sunday
    assert days["2026-03-16"] is True


def test_month_map_matches_single_day_computation(counting_store):
    counting_store.add_block(TENANT, full_day_block(date(2026, 3, 12), BlockType.vacation))
    counting_store.add_block(TENANT, full_day_block(date(2026, 3, 13), BlockType.shift))
    for i, start in enumerate(range(9, 18)):
        counting_store.add_appointment(
            TENANT, make_appointment(at(date(2026, 3, 14), f"{start:02d}:00"), appointment_id=f"sat-{i}")
        )
    counting_store.add_appointment(TENANT, make_appointment(at(date(2026, 3, 17), "12:00")))
    use_case = build_use_case(counting_store)

    for ignore_blocks in (False, True):
        for channel in BookingChannel:
            days = use_case.get_month_available_days(
                TENANT, "svc-60", "2026-03", ignore_blocks=ignore_blocks, channel=channel
            )
            for iso, available in days.items():
                slots = use_case.get_available_slots(
                    TENANT, "svc-60", iso, ignore_blocks=ignore_blocks, channel=channel
                )
                assert available == bool(slots), (iso, ignore_blocks, channel)

    strict = use_case.get_month_available_days(TENANT, "svc-60", "2026-03")
    assert strict["2026-03-12"] is False
    assert strict["2026-03-13"] is False
    assert strict["2026-03-14"] is False
    assert strict["2026-03-17"] is True

    relaxed = use_case.get_month_available_days(TENANT, "svc-60", "2026-03", ignore_blocks=True)
    assert relaxed["2026-03-12"] is True
    assert relaxed["2026-03-13"] is False


def test_month_reads_stores_once(counting_store):
    use_case = build_use_case(counting_store)

    use_case.get_month_available_days(TENANT, "svc-60", "2026-03")

    assert counting_store.appointment_reads == 1
    assert counting_store.block_reads == 1


def test_past_month_skips_storage(counting_store):
    use_case = build_use_case(counting_store)

    days = use_case.get_month_available_days(TENANT, "svc-60", "2026-02")

    assert days and not any(days.values())
    assert counting_store.appointment_reads == 0
    assert counting_store.block_reads == 0


def test_home_visit_mismatch_skips_storage(counting_store):
    use_case = build_use_case(counting_store)

    days = use_case.get_month_available_days(TENANT, "svc-60", "2026-03", is_home_visit=True)

    assert len(days) == 31
    assert not any(days.values())
    assert counting_store.appointment_reads == 0

    home = use_case.get_month_available_days(TENANT, "svc-home", "2026-03", is_home_visit=True)
    assert home["2026-03-11"] is True


def test_public_month_hides_today_after_cutoff(store):
    use_case = build_use_case(store, now=NOW.replace(hour=17, minute=30))

    public = use_case.get_month_available_days(TENANT, "svc-60", "2026-03", channel=BookingChannel.public)
    internal = use_case.get_month_available_days(TENANT, "svc-60", "2026-03")

    assert public[TODAY.isoformat()] is False
    assert internal[TODAY.isoformat()] is True
    assert public[TOMORROW.isoformat()] is True


@pytest.mark.parametrize("month", ["2026-13", "March", "", None])
def test_invalid_month_returns_empty_map(use_case, month):
    assert use_case.get_month_available_days(TENANT, "svc-60", month) == {}


def test_unknown_service_month_is_all_false(use_case):
    days = use_case.get_month_available_days(TENANT, "missing", "2026-03")

    assert len(days) == 31
    assert not any(days.values())


def test_month_store_failure_propagates():
    class BrokenStore(MemoryStudioStore):
        def list_blocks_in_range(self, tenant_id, start, end):
            raise StoreReadError("timeout")

    broken = BrokenStore()
    broken.add_service(TENANT, make_service())
    use_case = build_use_case(broken)

    with pytest.raises(StoreReadError):
        use_case.get_month_available_days(TENANT, "svc-60", "2026-03")


def test_block_status_flags(store):
    store.add_block(TENANT, make_block(at(TOMORROW, "12:00"), at(TOMORROW, "13:00"), BlockType.personal, block_id="p"))
    store.add_block(TENANT, full_day_block(TOMORROW + timedelta(days=1), BlockType.shift))
    use_case = build_use_case(store)

    personal = use_case.get_date_block_status(TENANT, TOMORROW.isoformat())
    shift = use_case.get_date_block_status(TENANT, (TOMORROW + timedelta(days=1)).isoformat())
    free = use_case.get_date_block_status(TENANT, (TOMORROW + timedelta(days=2)).isoformat())

    assert (personal.has_blocks, personal.has_shift) == (True, False)
    assert (shift.has_blocks, shift.has_shift) == (True, True)
    assert (free.has_blocks, free.has_shift) == (False, False)


def test_block_status_invalid_date(use_case):
    status = use_case.get_date_block_status(TENANT, "not-a-date")

    assert status.has_blocks is False
    assert status.has_shift is False


def test_weekday_without_hours_row_is_closed():
    store = MemoryStudioStore()
    for weekday in range(6):
        store.set_business_hours(TENANT, BusinessHours(weekday, time(9, 0), time(18, 0)))
    store.add_service(TENANT, make_service())
    use_case = build_use_case(store)
    sunday = date(2026, 3, 15)

    assert use_case.get_available_slots(TENANT, "svc-60", sunday.isoformat()) == []

    days = use_case.get_month_available_days(TENANT, "svc-60", "2026-03")
    assert days[sunday.isoformat()] is False
    assert days["2026-03-22"] is False
    assert days["2026-03-14"] is True


def test_tenant_without_any_hours_uses_grid():
    store = MemoryStudioStore()
    store.add_service(TENANT, make_service())
    use_case = build_use_case(store)

    slots = use_case.get_available_slots(TENANT, "svc-60", "2026-03-15")

    assert slots[0] == "08:00"
    assert slots[-1] == "19:00"


def test_month_log_counts_available_days(use_case, caplog):
    caplog.set_level(logging.INFO, logger="app.application.use_cases.availability")

    days = use_case.get_month_available_days(TENANT, "svc-60", "2026-03")

    record = next(r for r in caplog.records if r.getMessage() == "Month availability computed")
    assert record.available_days == sum(days.values())
    assert not hasattr(record, "slot_count")
