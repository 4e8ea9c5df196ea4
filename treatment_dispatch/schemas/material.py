"""Schémas Matériaux / Material schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from treatment_dispatch.models.material import MaterialType
from treatment_dispatch.schemas.common import CamelInput


class MaterialDelta(CamelInput):
    """Consommation ou réapprovisionnement / Usage or restock."""
    tmc_id: int
    material_type: MaterialType
    quantity_tons: float = Field(gt=0)


class MaterialSet(CamelInput):
    quantity_tons: float


class MaterialRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    tmc_id: int
    material_type: MaterialType
    quantity_tons: float
    last_updated: datetime | None


class TreatmentUsage(CamelInput):
    """Matériau appliqué sur un pont / Material applied on a bridge."""
    ticket_id: int
    bridge_id: str
    material_type: MaterialType
    quantity_tons: float = Field(gt=0)


class TreatmentResult(BaseModel):
    success: bool = True
