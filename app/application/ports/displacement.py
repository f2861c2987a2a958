from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.displacement import Address, DisplacementEstimate


class DisplacementPort(ABC):
    @abstractmethod
    def estimate(self, address: Address) -> DisplacementEstimate:
        """Travel distance and fee for a home visit. Raises DisplacementUnavailableError."""
        raise NotImplementedError
