"""Schémas Camion / Truck schemas."""

from pydantic import BaseModel, ConfigDict, Field

from treatment_dispatch.models.truck import TruckStatus
from treatment_dispatch.schemas.common import CamelInput


class TruckCreate(CamelInput):
    truck_number: str = Field(min_length=1, max_length=30)
    tmc_id: int
    capacity_tons: float | None = None


class TruckUpdate(CamelInput):
    status: TruckStatus | None = None
    capacity_tons: float | None = None


class TruckRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    truck_number: str
    tmc_id: int
    capacity_tons: float | None
    status: TruckStatus
