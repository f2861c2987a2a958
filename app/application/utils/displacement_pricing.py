from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from app.domain.entities.displacement import DisplacementEstimate

MINIMUM_FEE = Decimal("15")
URBAN_LIMIT_KM = 6.0
URBAN_INCLUDED_KM = 3.0
URBAN_EXTRA_PER_KM = Decimal("3.5")
ROAD_PER_KM = Decimal("3")


def _round_to_half(value: Decimal) -> Decimal:
    return ((value * 2).quantize(Decimal("1"), rounding=ROUND_HALF_UP) / 2).quantize(Decimal("0.01"))


def calculate_displacement_fee(distance_km: float) -> DisplacementEstimate:
    """Home-visit fee: flat minimum inside town, per-km rate on the road."""
    if distance_km is None or not math.isfinite(distance_km):
        distance_km = 0.0
    distance = round(max(distance_km, 0.0), 2)

    if distance <= URBAN_LIMIT_KM:
        extra_km = Decimal(str(max(distance - URBAN_INCLUDED_KM, 0.0)))
        fee = max(MINIMUM_FEE + extra_km * URBAN_EXTRA_PER_KM, MINIMUM_FEE)
        return DisplacementEstimate(distance_km=distance, fee_amount=_round_to_half(fee), rule="urban")

    fee = max(Decimal(str(distance)) * ROAD_PER_KM, MINIMUM_FEE)
    return DisplacementEstimate(distance_km=distance, fee_amount=_round_to_half(fee), rule="road")


def minimum_fee_estimate() -> DisplacementEstimate:
    return calculate_displacement_fee(URBAN_INCLUDED_KM)
