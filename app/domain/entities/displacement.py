from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Address:
    logradouro: str | None = None
    numero: str | None = None
    complemento: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    estado: str | None = None
    cep: str | None = None

    def as_destination(self) -> str:
        parts = [
            self.logradouro,
            self.numero,
            self.complemento,
            self.bairro,
            self.cidade,
            self.estado,
            self.cep,
        ]
        return ", ".join(p.strip() for p in parts if p and p.strip())


@dataclass(frozen=True)
class DisplacementEstimate:
    distance_km: float
    fee_amount: Decimal
    rule: str  # "urban" | "road"
