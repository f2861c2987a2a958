from decimal import Decimal

from pydantic import BaseModel, Field


class AddressSchema(BaseModel):
    logradouro: str | None = None
    numero: str | None = None
    complemento: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    estado: str | None = None
    cep: str | None = None


class SlotsResponseSchema(BaseModel):
    date: str
    service_id: str
    slots: list[str] = Field(default_factory=list)


class PublicSlotsRequestSchema(BaseModel):
    tenant_id: str | None = None
    service_id: str
    date: str
    is_home_visit: bool = False
    address: AddressSchema | None = None


class MonthAvailabilityResponseSchema(BaseModel):
    month: str
    service_id: str
    days: dict[str, bool] = Field(default_factory=dict)


class DateBlockStatusSchema(BaseModel):
    date: str
    has_blocks: bool
    has_shift: bool


class DisplacementFeeResponseSchema(BaseModel):
    distance_km: float
    fee_amount: Decimal
    rule: str
    source: str
    warning: str | None = None
    details: str | None = None
