from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.service import ServiceDescriptor


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, tenant_id: str, service_id: str) -> ServiceDescriptor | None:
        """Get a service by id. Returns None if not found."""
        raise NotImplementedError
