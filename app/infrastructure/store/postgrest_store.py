from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import httpx

from app.application.exceptions import StoreReadError
from app.application.ports.appointment_store import AppointmentStorePort
from app.application.ports.block_store import AvailabilityBlockStorePort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.ports.studio_settings import StudioSettingsPort
from app.core.config import settings
from app.domain.entities.appointment import Appointment
from app.domain.entities.availability_block import AvailabilityBlock
from app.domain.entities.schedule import BusinessHours, OnlineBookingRules
from app.domain.entities.service import ServiceDescriptor

APPOINTMENT_COLUMNS = (
    "id,start_time,status,total_duration_minutes,"
    "services(duration_minutes,buffer_before_minutes,buffer_after_minutes)"
)
BLOCK_COLUMNS = "id,title,start_time,end_time,block_type,reason,is_full_day"
SERVICE_COLUMNS = (
    "id,name,duration_minutes,buffer_before_minutes,buffer_after_minutes,"
    "accepts_home_visit,home_visit_fee"
)
BUSINESS_HOURS_COLUMNS = "day_of_week,open_time,close_time,is_closed"
SETTINGS_COLUMNS = "online_cutoff_before_close_minutes,online_last_slot_before_close_minutes"


def _flatten_appointment(row: dict[str, Any]) -> dict[str, Any]:
    service = row.get("services")
    if isinstance(service, list):
        service = service[0] if service else None
    flat = dict(row)
    if isinstance(service, dict) and service.get("duration_minutes") is not None:
        flat["service_duration_minutes"] = service.get("duration_minutes")
        flat["buffer_before_minutes"] = service.get("buffer_before_minutes")
        flat["buffer_after_minutes"] = service.get("buffer_after_minutes")
    return flat


class PostgrestStudioStore(
    AppointmentStorePort,
    AvailabilityBlockStorePort,
    ServiceCatalogPort,
    StudioSettingsPort,
):
    """Studio tables read through a PostgREST endpoint (hosted Postgres REST API)."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timezone: ZoneInfo | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or settings.POSTGREST_URL or "").rstrip("/")
        self._api_key = api_key or settings.POSTGREST_API_KEY
        self._timezone = timezone or ZoneInfo(settings.BUSINESS_TIMEZONE)
        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("POSTGREST_URL is required for the PostgREST store")
        if not self._api_key:
            raise ValueError("POSTGREST_API_KEY is required for the PostgREST store")

    def _select(self, table: str, params: list[tuple[str, str]]) -> list[dict[str, Any]]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        try:
            response = self._client.get(f"{self._base_url}/{table}", params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Store read failed", extra={"reason": table, "error": str(e)})
            raise StoreReadError(f"Failed to read {table}: {e}") from e

        if not isinstance(data, list):
            self._logger.error("Unexpected store payload", extra={"reason": table})
            raise StoreReadError(f"Unexpected payload for {table}")
        return data

    def list_appointments_in_range(self, tenant_id: str, start: datetime, end: datetime) -> list[Appointment]:
        rows = self._select(
            "appointments",
            [
                ("select", APPOINTMENT_COLUMNS),
                ("tenant_id", f"eq.{tenant_id}"),
                ("start_time", f"gte.{start.isoformat()}"),
                ("start_time", f"lt.{end.isoformat()}"),
                ("order", "start_time.asc"),
            ],
        )
        try:
            return [Appointment.from_record(_flatten_appointment(r), self._timezone) for r in rows]
        except (KeyError, TypeError, ValueError) as e:
            raise StoreReadError(f"Malformed appointment row: {e}") from e

    def list_blocks_in_range(self, tenant_id: str, start: datetime, end: datetime) -> list[AvailabilityBlock]:
        rows = self._select(
            "availability_blocks",
            [
                ("select", BLOCK_COLUMNS),
                ("tenant_id", f"eq.{tenant_id}"),
                ("start_time", f"lt.{end.isoformat()}"),
                ("end_time", f"gte.{start.isoformat()}"),
                ("order", "start_time.asc"),
            ],
        )
        try:
            return [AvailabilityBlock.from_record(r, self._timezone) for r in rows]
        except (KeyError, TypeError, ValueError) as e:
            raise StoreReadError(f"Malformed block row: {e}") from e

    def get_service(self, tenant_id: str, service_id: str) -> ServiceDescriptor | None:
        rows = self._select(
            "services",
            [
                ("select", SERVICE_COLUMNS),
                ("tenant_id", f"eq.{tenant_id}"),
                ("id", f"eq.{service_id}"),
                ("limit", "1"),
            ],
        )
        if not rows:
            return None
        try:
            return ServiceDescriptor.from_record(rows[0])
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise StoreReadError(f"Malformed service row: {e}") from e

    def list_business_hours(self, tenant_id: str) -> list[BusinessHours]:
        rows = self._select(
            "business_hours",
            [
                ("select", BUSINESS_HOURS_COLUMNS),
                ("tenant_id", f"eq.{tenant_id}"),
                ("order", "day_of_week.asc"),
            ],
        )
        try:
            return [BusinessHours.from_record(r) for r in rows]
        except (KeyError, TypeError, ValueError) as e:
            raise StoreReadError(f"Malformed business hours row: {e}") from e

    def get_online_booking_rules(self, tenant_id: str) -> OnlineBookingRules:
        rows = self._select(
            "settings",
            [
                ("select", SETTINGS_COLUMNS),
                ("tenant_id", f"eq.{tenant_id}"),
                ("limit", "1"),
            ],
        )
        return OnlineBookingRules.from_record(rows[0] if rows else None)
