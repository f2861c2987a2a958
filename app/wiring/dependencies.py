from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.application.ports.displacement import DisplacementPort
from app.application.use_cases.availability import AvailabilityUseCase
from app.domain.entities.schedule import TimeGridConfig
from app.infrastructure.displacement.google_routes_client import GoogleRoutesDisplacement
from app.infrastructure.displacement.mock_displacement import MockDisplacement
from app.infrastructure.store.json_store import JsonStudioStore
from app.infrastructure.store.memory_store import MemoryStudioStore
from app.infrastructure.store.postgrest_store import PostgrestStudioStore


StudioStore = MemoryStudioStore | JsonStudioStore | PostgrestStudioStore


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_studio_store() -> StudioStore:
    provider = settings.STORE_PROVIDER.lower()
    if provider == "postgrest":
        return PostgrestStudioStore(timezone=get_timezone())
    if provider == "json":
        return JsonStudioStore(data_file=settings.STORE_DATA_FILE, timezone=get_timezone())
    return MemoryStudioStore()


@lru_cache
def get_displacement() -> DisplacementPort:
    logger = logging.getLogger(__name__)
    if not settings.GOOGLE_MAPS_API_KEY:
        if settings.ENV.lower() in {"dev", "local", "test"}:
            logger.info("Using MockDisplacement (GOOGLE_MAPS_API_KEY missing)")
            return MockDisplacement()
        raise ValueError("GOOGLE_MAPS_API_KEY is required to estimate displacement.")
    return GoogleRoutesDisplacement()


def get_time_grid() -> TimeGridConfig:
    return TimeGridConfig(
        start_hour=settings.GRID_START_HOUR,
        end_hour=settings.GRID_END_HOUR,
        hour_height=settings.GRID_HOUR_HEIGHT,
    )


def get_optional_displacement() -> DisplacementPort | None:
    try:
        return get_displacement()
    except ValueError as e:
        logger = logging.getLogger(__name__)
        logger.warning("Displacement not available for availability checks", extra={"error": str(e)})
        return None


def get_availability_use_case() -> AvailabilityUseCase:
    store = get_studio_store()
    return AvailabilityUseCase(
        appointments=store,
        blocks=store,
        catalog=store,
        studio_settings=store,
        timezone=get_timezone(),
        grid=get_time_grid(),
        slot_interval_minutes=settings.SLOT_INTERVAL_MINUTES,
        default_cutoff_before_close_minutes=settings.ONLINE_CUTOFF_BEFORE_CLOSE_MINUTES,
        default_last_slot_lead_minutes=settings.ONLINE_LAST_SLOT_BEFORE_CLOSE_MINUTES,
        displacement=get_optional_displacement(),
    )
