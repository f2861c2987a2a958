from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable
from zoneinfo import ZoneInfo

from app.application.exceptions import DisplacementUnavailableError
from app.application.ports.appointment_store import AppointmentStorePort
from app.application.ports.block_store import AvailabilityBlockStorePort
from app.application.ports.displacement import DisplacementPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.ports.studio_settings import StudioSettingsPort
from app.application.utils.booking_window import (
    NO_CUTOFF,
    BookingCutoff,
    day_bounds,
    days_of_month,
    operating_window,
    parse_iso_date,
    parse_month,
    public_cutoff,
)
from app.application.utils.intervals import Interval, is_free, merge_intervals, overlaps
from app.domain.entities.appointment import Appointment
from app.domain.entities.availability import BookingChannel, DateBlockStatus
from app.domain.entities.availability_block import AvailabilityBlock
from app.domain.entities.displacement import Address
from app.domain.entities.schedule import BusinessHours, TimeGridConfig
from app.domain.entities.service import ServiceDescriptor


def block_touches_day(block: AvailabilityBlock, bounds: Interval) -> bool:
    if block.end_time > block.start_time:
        return overlaps(block.start_time, block.end_time, bounds.start, bounds.end)
    return bounds.start <= block.start_time < bounds.end


def busy_intervals_for_day(
    day: date,
    window: Interval,
    appointments: Iterable[Appointment],
    blocks: Iterable[AvailabilityBlock],
    ignore_blocks: bool = False,
) -> list[Interval]:
    """
    Occupied ranges for one day, merged and sorted.

    Canceled and no-show appointments are skipped. Full-day blocks cover the
    whole operating window. With ignore_blocks only shift blocks are kept,
    since a shift is a hard commitment.
    """
    tz = window.start.tzinfo
    bounds = day_bounds(day, tz)
    busy: list[Interval] = []

    for appointment in appointments:
        if not appointment.occupies_calendar:
            continue
        if appointment.start_time.astimezone(tz).date() != day:
            continue
        start, end = appointment.busy_range()
        busy.append(Interval(start, end))

    for block in blocks:
        if ignore_blocks and not block.is_shift:
            continue
        if not block_touches_day(block, bounds):
            continue
        if block.is_full_day:
            busy.append(window)
        else:
            busy.append(Interval(block.start_time, block.end_time))

    return merge_intervals(busy)


def compute_available_slots(
    day: date,
    window: Interval,
    service: ServiceDescriptor,
    appointments: Iterable[Appointment],
    blocks: Iterable[AvailabilityBlock],
    slot_interval_minutes: int,
    ignore_blocks: bool = False,
    cutoff: BookingCutoff = NO_CUTOFF,
) -> list[str]:
    """
    Scan the operating window at a fixed step and keep every start whose
    span [start, start + total_span) fits before closing, passes the cutoff
    and touches no busy interval.
    """
    if service.duration_minutes <= 0:
        return []

    busy = busy_intervals_for_day(day, window, appointments, blocks, ignore_blocks)
    span_length = timedelta(minutes=service.total_span_minutes)
    step = timedelta(minutes=max(1, slot_interval_minutes))

    slots: list[str] = []
    current = window.start
    while current < window.end:
        span = Interval(current, current + span_length)
        if span.end <= window.end and cutoff.allows(span) and is_free(span, busy):
            label = current.strftime("%H:%M")
            if not slots or slots[-1] != label:
                slots.append(label)
        current += step
    return slots


class AvailabilityUseCase:
    def __init__(
        self,
        appointments: AppointmentStorePort,
        blocks: AvailabilityBlockStorePort,
        catalog: ServiceCatalogPort,
        studio_settings: StudioSettingsPort,
        timezone: ZoneInfo,
        grid: TimeGridConfig | None = None,
        slot_interval_minutes: int = 30,
        default_cutoff_before_close_minutes: int = 60,
        default_last_slot_lead_minutes: int = 30,
        displacement: DisplacementPort | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._appointments = appointments
        self._blocks = blocks
        self._catalog = catalog
        self._studio_settings = studio_settings
        self._timezone = timezone
        self._grid = grid or TimeGridConfig()
        self._slot_interval_minutes = slot_interval_minutes
        self._default_cutoff = default_cutoff_before_close_minutes
        self._default_lead = default_last_slot_lead_minutes
        self._displacement = displacement
        self._clock = clock or (lambda: datetime.now(self._timezone))
        self._logger = logging.getLogger(__name__)

    def get_available_slots(
        self,
        tenant_id: str,
        service_id: str,
        date: Any,
        is_home_visit: bool = False,
        ignore_blocks: bool = False,
        channel: BookingChannel = BookingChannel.internal,
        address: Address | None = None,
    ) -> list[str]:
        """
        Bookable start times ("HH:MM") for a service on a tenant-local date.

        Bad dates, past dates, unknown services and home-visit mismatches
        give an empty list. Store read failures propagate as StoreReadError
        so a broken read never offers unsafe slots.
        """
        day = parse_iso_date(date)
        if day is None:
            self._logger.info("Invalid date for slots", extra={"date": date, "reason": "invalid_date"})
            return []

        now = self._now()
        if day < now.date():
            return []

        service = self._resolve_service(tenant_id, service_id, is_home_visit)
        if service is None:
            return []

        if is_home_visit and address is not None and not self._displacement_resolves(address):
            return []

        window = self._window_for(day, self._weekly_hours(tenant_id))
        if window is None:
            return []

        bounds = day_bounds(day, self._timezone)
        appointments = self._appointments.list_appointments_in_range(tenant_id, bounds.start, bounds.end)
        blocks = self._blocks.list_blocks_in_range(tenant_id, bounds.start, bounds.end)

        slots = compute_available_slots(
            day,
            window,
            service,
            appointments,
            blocks,
            self._slot_interval_minutes,
            ignore_blocks=ignore_blocks,
            cutoff=self._cutoff_for(tenant_id, day, window, channel, now),
        )
        self._logger.info(
            "Slots computed",
            extra={
                "tenant_id": tenant_id,
                "service_id": service_id,
                "date": day.isoformat(),
                "slot_count": len(slots),
            },
        )
        return slots

    def get_month_available_days(
        self,
        tenant_id: str,
        service_id: str,
        month: Any,
        is_home_visit: bool = False,
        ignore_blocks: bool = False,
        channel: BookingChannel = BookingChannel.internal,
    ) -> dict[str, bool]:
        """
        Map every ISO date of a "YYYY-MM" month to whether it has a slot.

        Appointments and blocks are read once for the whole month and split
        per day; each day then goes through the same scan as
        get_available_slots.
        """
        parsed = parse_month(month)
        if parsed is None:
            self._logger.info("Invalid month for availability", extra={"month": month, "reason": "invalid_month"})
            return {}

        days = days_of_month(*parsed)
        result = {d.isoformat(): False for d in days}

        now = self._now()
        candidates = [d for d in days if d >= now.date()]
        if not candidates:
            return result

        service = self._resolve_service(tenant_id, service_id, is_home_visit)
        if service is None:
            return result

        weekly_hours = self._weekly_hours(tenant_id)
        windows = {d: self._window_for(d, weekly_hours) for d in candidates}
        candidates = [d for d in candidates if windows[d] is not None]
        if not candidates:
            return result

        range_start = day_bounds(candidates[0], self._timezone).start
        range_end = day_bounds(candidates[-1], self._timezone).end
        appointments = self._appointments.list_appointments_in_range(tenant_id, range_start, range_end)
        blocks = self._blocks.list_blocks_in_range(tenant_id, range_start, range_end)

        appointments_by_day: dict[date, list[Appointment]] = defaultdict(list)
        for appointment in appointments:
            appointments_by_day[appointment.start_time.astimezone(self._timezone).date()].append(appointment)

        for day in candidates:
            window = windows[day]
            bounds = day_bounds(day, self._timezone)
            day_blocks = [b for b in blocks if block_touches_day(b, bounds)]
            slots = compute_available_slots(
                day,
                window,
                service,
                appointments_by_day.get(day, []),
                day_blocks,
                self._slot_interval_minutes,
                ignore_blocks=ignore_blocks,
                cutoff=self._cutoff_for(tenant_id, day, window, channel, now),
            )
            result[day.isoformat()] = bool(slots)

        self._logger.info(
            "Month availability computed",
            extra={
                "tenant_id": tenant_id,
                "service_id": service_id,
                "month": month,
                "available_days": sum(1 for v in result.values() if v),
            },
        )
        return result

    def get_date_block_status(self, tenant_id: str, date: Any) -> DateBlockStatus:
        """Advisory flags for the agenda; never used to gate slots."""
        day = parse_iso_date(date)
        if day is None:
            return DateBlockStatus()

        bounds = day_bounds(day, self._timezone)
        blocks = [
            b
            for b in self._blocks.list_blocks_in_range(tenant_id, bounds.start, bounds.end)
            if block_touches_day(b, bounds)
        ]
        return DateBlockStatus(
            has_blocks=bool(blocks),
            has_shift=any(b.is_shift for b in blocks),
        )

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=self._timezone)
        return now.astimezone(self._timezone)

    def _resolve_service(self, tenant_id: str, service_id: str, is_home_visit: bool) -> ServiceDescriptor | None:
        if not service_id or not str(service_id).strip():
            return None

        service = self._catalog.get_service(tenant_id, str(service_id).strip())
        if service is None:
            self._logger.info("Service not found", extra={"service_id": service_id, "reason": "not_found"})
            return None
        if service.duration_minutes <= 0:
            self._logger.warning(
                "Service has no duration",
                extra={"service_id": service_id, "reason": "invalid_duration"},
            )
            return None
        if is_home_visit and not service.accepts_home_visit:
            self._logger.info(
                "Service does not accept home visits",
                extra={"service_id": service_id, "reason": "home_visit_mismatch"},
            )
            return None
        return service

    def _displacement_resolves(self, address: Address) -> bool:
        if self._displacement is None:
            return True
        try:
            self._displacement.estimate(address)
        except DisplacementUnavailableError as e:
            self._logger.warning("Displacement unavailable", extra={"reason": "displacement", "error": str(e)})
            return False
        return True

    def _weekly_hours(self, tenant_id: str) -> dict[int, BusinessHours]:
        return {h.day_of_week: h for h in self._studio_settings.list_business_hours(tenant_id)}

    def _window_for(self, day: date, weekly_hours: dict[int, BusinessHours]) -> Interval | None:
        # the grid applies only to tenants with no hours at all; a missing weekday is closed
        if not weekly_hours:
            return operating_window(day, self._timezone, self._grid)
        hours = weekly_hours.get(day.weekday())
        if hours is None:
            return None
        return operating_window(day, self._timezone, self._grid, hours)

    def _cutoff_for(
        self,
        tenant_id: str,
        day: date,
        window: Interval,
        channel: BookingChannel,
        now: datetime,
    ) -> BookingCutoff:
        if channel != BookingChannel.public or day != now.date():
            return NO_CUTOFF
        rules = self._studio_settings.get_online_booking_rules(tenant_id)
        return public_cutoff(day, window, now, rules, self._default_cutoff, self._default_lead)
