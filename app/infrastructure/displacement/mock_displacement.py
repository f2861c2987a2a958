from __future__ import annotations

import logging

from app.application.exceptions import DisplacementUnavailableError
from app.application.ports.displacement import DisplacementPort
from app.application.utils.displacement_pricing import calculate_displacement_fee
from app.domain.entities.displacement import Address, DisplacementEstimate


class MockDisplacement(DisplacementPort):
    def __init__(self, distance_km: float = 4.0) -> None:
        self._distance_km = distance_km
        self._logger = logging.getLogger(__name__)

    def estimate(self, address: Address) -> DisplacementEstimate:
        if not address.as_destination():
            raise DisplacementUnavailableError("Address is empty")
        estimate = calculate_displacement_fee(self._distance_km)
        self._logger.info(
            "Mock displacement estimate",
            extra={"reason": estimate.rule, "distance_km": estimate.distance_km},
        )
        return estimate
