from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.schemas import (
    DateBlockStatusSchema,
    MonthAvailabilityResponseSchema,
    PublicSlotsRequestSchema,
    SlotsResponseSchema,
)
from app.application.exceptions import StoreReadError
from app.application.use_cases.availability import AvailabilityUseCase
from app.core.config import settings
from app.domain.entities.availability import BookingChannel
from app.domain.entities.displacement import Address
from app.wiring.dependencies import get_availability_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


def _unavailable(e: StoreReadError) -> HTTPException:
    logger.error("Availability read failed", extra={"error": str(e)})
    return HTTPException(status_code=503, detail="Availability is temporarily unavailable")


@router.get("/availability/slots", response_model=SlotsResponseSchema)
def internal_slots(
    service_id: str,
    date: str,
    tenant_id: str | None = None,
    is_home_visit: bool = False,
    ignore_blocks: bool = False,
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        slots = uc.get_available_slots(
            tenant_id or settings.TENANT_ID,
            service_id,
            date,
            is_home_visit=is_home_visit,
            ignore_blocks=ignore_blocks,
        )
    except StoreReadError as e:
        raise _unavailable(e)
    return SlotsResponseSchema(date=date, service_id=service_id, slots=slots)


@router.get("/availability/month", response_model=MonthAvailabilityResponseSchema)
def internal_month(
    service_id: str,
    month: str,
    tenant_id: str | None = None,
    is_home_visit: bool = False,
    ignore_blocks: bool = False,
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        days = uc.get_month_available_days(
            tenant_id or settings.TENANT_ID,
            service_id,
            month,
            is_home_visit=is_home_visit,
            ignore_blocks=ignore_blocks,
        )
    except StoreReadError as e:
        raise _unavailable(e)
    return MonthAvailabilityResponseSchema(month=month, service_id=service_id, days=days)


@router.get("/availability/block-status", response_model=DateBlockStatusSchema)
def block_status(
    date: str,
    tenant_id: str | None = None,
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        status = uc.get_date_block_status(tenant_id or settings.TENANT_ID, date)
    except StoreReadError as e:
        raise _unavailable(e)
    return DateBlockStatusSchema(date=date, has_blocks=status.has_blocks, has_shift=status.has_shift)


@router.post("/public/availability/slots", response_model=SlotsResponseSchema)
def public_slots(
    req: PublicSlotsRequestSchema,
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    address = Address(**req.address.model_dump()) if req.address else None
    try:
        slots = uc.get_available_slots(
            req.tenant_id or settings.TENANT_ID,
            req.service_id,
            req.date,
            is_home_visit=req.is_home_visit,
            channel=BookingChannel.public,
            address=address,
        )
    except StoreReadError as e:
        raise _unavailable(e)
    return SlotsResponseSchema(date=req.date, service_id=req.service_id, slots=slots)


@router.get("/public/availability/month", response_model=MonthAvailabilityResponseSchema)
def public_month(
    service_id: str,
    month: str,
    tenant_id: str | None = None,
    is_home_visit: bool = False,
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        days = uc.get_month_available_days(
            tenant_id or settings.TENANT_ID,
            service_id,
            month,
            is_home_visit=is_home_visit,
            channel=BookingChannel.public,
        )
    except StoreReadError as e:
        raise _unavailable(e)
    return MonthAvailabilityResponseSchema(month=month, service_id=service_id, days=days)
