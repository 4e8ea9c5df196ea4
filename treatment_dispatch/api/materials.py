"""Routes Matériaux et traitements / Material and treatment API routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.api.deps import ensure_in_scope, require_permission, scope_tmc_id
from treatment_dispatch.database import get_db
from treatment_dispatch.models.user import User
from treatment_dispatch.schemas.material import (
    MaterialDelta,
    MaterialRead,
    MaterialSet,
    TreatmentResult,
    TreatmentUsage,
)
from treatment_dispatch.services import broadcaster as events
from treatment_dispatch.services import material_service, ticket_service
from treatment_dispatch.services.errors import ValidationError

router = APIRouter()
treatments_router = APIRouter()


@router.get("/inventory", response_model=list[MaterialRead])
async def get_inventory(
    tmc_id: int | None = Query(default=None, alias="tmcId"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("materials", "read")),
):
    """Stock d'un centre / Inventory of a center."""
    if tmc_id is None:
        raise ValidationError("tmcId is required")
    return await material_service.get_inventory(db, scope_tmc_id(user, tmc_id))


@router.post("/usage", response_model=MaterialRead)
async def apply_usage(
    data: MaterialDelta,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("materials", "update")),
):
    """Déclarer une consommation / Record usage."""
    ensure_in_scope(user, data.tmc_id, "Dispatch center")
    record = await material_service.apply_usage(db, data.tmc_id, data.material_type, data.quantity_tons, user)
    await events.broadcaster.publish(events.MATERIAL_UPDATED, MaterialRead.model_validate(record))
    return record


@router.post("/restock", response_model=MaterialRead)
async def apply_restock(
    data: MaterialDelta,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("materials", "update")),
):
    """Réapprovisionner / Restock."""
    ensure_in_scope(user, data.tmc_id, "Dispatch center")
    record = await material_service.apply_restock(db, data.tmc_id, data.material_type, data.quantity_tons, user)
    await events.broadcaster.publish(events.MATERIAL_UPDATED, MaterialRead.model_validate(record))
    return record


@router.put("/{record_id}", response_model=MaterialRead)
async def set_quantity(
    record_id: int,
    data: MaterialSet,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("materials", "update")),
):
    """Correction manuelle / Manual correction."""
    record = await material_service.set_quantity(db, record_id, data.quantity_tons, user)
    await events.broadcaster.publish(events.MATERIAL_UPDATED, MaterialRead.model_validate(record))
    return record


@treatments_router.post("", response_model=TreatmentResult)
async def record_treatment(
    data: TreatmentUsage,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("treatments", "create")),
):
    """Matériau appliqué sur un pont / Material applied on a bridge."""
    ensure_in_scope(user, await ticket_service.get_ticket_tmc_id(db, data.ticket_id))
    record = await material_service.record_treatment_usage(
        db, data.ticket_id, data.bridge_id, data.material_type, data.quantity_tons, user
    )
    await events.broadcaster.publish(events.MATERIAL_UPDATED, MaterialRead.model_validate(record))
    return TreatmentResult(success=True)
