"""Routes Camions / Truck API routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.api.deps import ensure_in_scope, require_permission, scope_tmc_id
from treatment_dispatch.database import get_db
from treatment_dispatch.models.user import User
from treatment_dispatch.schemas.common import DeleteResult
from treatment_dispatch.schemas.truck import TruckCreate, TruckRead, TruckUpdate
from treatment_dispatch.services import broadcaster as events
from treatment_dispatch.services import fleet_service

router = APIRouter()


@router.get("", response_model=list[TruckRead])
async def list_trucks(
    tmc_id: int | None = Query(default=None, alias="tmcId"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("trucks", "read")),
):
    """Lister les camions / List trucks."""
    return await fleet_service.list_trucks(db, scope_tmc_id(user, tmc_id))


@router.post("", response_model=TruckRead, status_code=201)
async def create_truck(
    data: TruckCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("trucks", "create")),
):
    """Créer un camion / Create truck."""
    ensure_in_scope(user, data.tmc_id, "Dispatch center")
    truck = await fleet_service.create_truck(db, data.truck_number, data.tmc_id, data.capacity_tons, user)
    await events.broadcaster.publish(events.TRUCK_CREATED, TruckRead.model_validate(truck))
    return truck


@router.put("/{truck_id}", response_model=TruckRead)
async def update_truck(
    truck_id: int,
    data: TruckUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("trucks", "update")),
):
    """Modifier statut/capacité / Update status and capacity."""
    ensure_in_scope(user, (await fleet_service.get_truck(db, truck_id)).tmc_id, "Truck")
    truck = await fleet_service.set_truck_status(db, truck_id, data.status, data.capacity_tons, user)
    await events.broadcaster.publish(events.TRUCK_UPDATED, TruckRead.model_validate(truck))
    return truck


@router.delete("/{truck_id}", response_model=DeleteResult)
async def delete_truck(
    truck_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("trucks", "delete")),
):
    """Supprimer un camion / Delete truck."""
    ensure_in_scope(user, (await fleet_service.get_truck(db, truck_id)).tmc_id, "Truck")
    result = await fleet_service.delete_truck(db, truck_id, user)
    await events.broadcaster.publish(events.TRUCK_DELETED, {"id": truck_id})
    return result
