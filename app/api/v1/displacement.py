from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.schemas import AddressSchema, DisplacementFeeResponseSchema
from app.application.exceptions import DisplacementUnavailableError
from app.application.ports.displacement import DisplacementPort
from app.application.utils.displacement_pricing import minimum_fee_estimate
from app.domain.entities.displacement import Address
from app.wiring.dependencies import get_displacement

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/displacement-fee", response_model=DisplacementFeeResponseSchema)
def displacement_fee(
    req: AddressSchema,
    displacement: DisplacementPort = Depends(get_displacement),
):
    address = Address(**req.model_dump())
    if not address.as_destination():
        raise HTTPException(status_code=400, detail="Address is empty")

    try:
        estimate = displacement.estimate(address)
    except DisplacementUnavailableError as e:
        logger.warning("Falling back to minimum displacement fee", extra={"error": str(e)})
        fallback = minimum_fee_estimate()
        return DisplacementFeeResponseSchema(
            distance_km=fallback.distance_km,
            fee_amount=fallback.fee_amount,
            rule=fallback.rule,
            source="fallback_minimum",
            warning="Route lookup failed; the provisional minimum fee was applied.",
            details=str(e),
        )

    return DisplacementFeeResponseSchema(
        distance_km=estimate.distance_km,
        fee_amount=estimate.fee_amount,
        rule=estimate.rule,
        source="routes",
    )
