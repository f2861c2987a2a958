from __future__ import annotations

import logging

import httpx

from app.application.exceptions import DisplacementUnavailableError
from app.application.ports.displacement import DisplacementPort
from app.application.utils.displacement_pricing import calculate_displacement_fee
from app.core.config import settings
from app.domain.entities.displacement import Address, DisplacementEstimate


class GoogleRoutesDisplacement(DisplacementPort):
    def __init__(
        self,
        api_key: str | None = None,
        origin: str | None = None,
        routes_url: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key or settings.GOOGLE_MAPS_API_KEY
        self._origin = origin or settings.DISPLACEMENT_ORIGIN
        self._routes_url = routes_url or settings.GOOGLE_ROUTES_URL
        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._api_key:
            raise ValueError("GOOGLE_MAPS_API_KEY is required for Google Routes displacement")

    def estimate(self, address: Address) -> DisplacementEstimate:
        destination = address.as_destination()
        if not destination:
            raise DisplacementUnavailableError("Address is empty")

        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": "routes.distanceMeters",
        }
        payload = {
            "origin": {"address": self._origin},
            "destination": {"address": destination},
            "travelMode": "DRIVE",
        }
        try:
            response = self._client.post(self._routes_url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Routes request failed", extra={"error": str(e)})
            raise DisplacementUnavailableError(f"Routes request failed: {e}") from e

        routes = data.get("routes") or []
        meters = routes[0].get("distanceMeters") if routes else None
        if not isinstance(meters, (int, float)):
            message = (data.get("error") or {}).get("message") or "No route found"
            self._logger.warning("Routes returned no distance", extra={"error": message})
            raise DisplacementUnavailableError(message)

        return calculate_displacement_fee(meters / 1000)
