"""
Registre de flotte / Fleet registry.
Camions par centre et protocole de réservation.
Trucks per dispatch center and the reservation protocol.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.database import atomic
from treatment_dispatch.models.ticket import TicketStatus, TreatmentTicket
from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.truck import Truck, TruckStatus
from treatment_dispatch.models.user import User
from treatment_dispatch.services.audit_service import log_audit
from treatment_dispatch.services.errors import DispatchError, NotFoundError, ReservationConflictError

logger = logging.getLogger(__name__)


async def get_truck(db: AsyncSession, truck_id: int) -> Truck:
    truck = await db.get(Truck, truck_id)
    if truck is None:
        raise NotFoundError(f"Truck {truck_id} not found")
    return truck


async def list_trucks(db: AsyncSession, tmc_id: int | None = None) -> list[Truck]:
    """Lister les camions par numéro / List trucks ordered by truck number."""
    query = select(Truck).order_by(Truck.truck_number)
    if tmc_id is not None:
        query = query.where(Truck.tmc_id == tmc_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def reserve_truck(db: AsyncSession, truck_id: int) -> None:
    """Réserver un camion (check-and-set) / Reserve a truck with a conditional update.

    Passe a 'assigned' seulement s'il est 'available'. Aucune ligne modifiee = conflit.
    Only flips to 'assigned' when currently 'available'; zero rows affected is a conflict.
    Doit s'executer dans la transaction de l'appelant / Must run inside the caller's transaction.
    """
    result = await db.execute(
        update(Truck)
        .where(Truck.id == truck_id, Truck.status == TruckStatus.AVAILABLE)
        .values(status=TruckStatus.ASSIGNED)
    )
    if result.rowcount == 0:
        truck = await get_truck(db, truck_id)
        raise ReservationConflictError(
            f"Truck {truck.truck_number} is not available (status: {truck.status.value})"
        )


async def release_truck(db: AsyncSession, truck_id: int) -> None:
    """Libérer un camion / Release a truck back to 'available'."""
    await db.execute(
        update(Truck).where(Truck.id == truck_id).values(status=TruckStatus.AVAILABLE)
    )


async def create_truck(
    db: AsyncSession,
    truck_number: str,
    tmc_id: int,
    capacity_tons: float | None,
    actor: User | None = None,
) -> Truck:
    """Créer un camion, toujours 'available' / Create a truck, always 'available'."""
    async with atomic(db):
        if await db.get(TmcCenter, tmc_id) is None:
            raise NotFoundError(f"Dispatch center {tmc_id} not found")
        truck = Truck(
            truck_number=truck_number,
            tmc_id=tmc_id,
            capacity_tons=capacity_tons,
            status=TruckStatus.AVAILABLE,
        )
        try:
            async with db.begin_nested():
                db.add(truck)
                await db.flush()
        except IntegrityError:
            raise DispatchError(f"Truck number {truck_number} already exists for this center") from None
        await log_audit(db, "truck", truck.id, "CREATE", actor, {
            "truck_number": truck_number, "tmc_id": tmc_id, "capacity_tons": capacity_tons,
        })
    logger.info("Truck %s created in center %s", truck_number, tmc_id)
    return truck


async def set_truck_status(
    db: AsyncSession,
    truck_id: int,
    status: TruckStatus | None = None,
    capacity_tons: float | None = None,
    actor: User | None = None,
) -> Truck:
    """Ecrasement opérateur du statut/capacité / Operator overwrite of status and capacity.

    Indépendant du cycle de vie des tickets / Independent of the ticket workflow.
    """
    async with atomic(db):
        truck = await get_truck(db, truck_id)
        changes = {}
        if status is not None:
            truck.status = status
            changes["status"] = status.value
        if capacity_tons is not None:
            truck.capacity_tons = capacity_tons
            changes["capacity_tons"] = capacity_tons
        await log_audit(db, "truck", truck.id, "UPDATE", actor, changes)
    return truck


async def delete_truck(db: AsyncSession, truck_id: int, actor: User | None = None) -> dict:
    """Supprimer un camion sans condition / Delete a truck unconditionally.

    Les tickets actifs qui le référencent perdent leur camion (truck_id NULL).
    Active tickets referencing it lose their truck (truck_id becomes NULL).
    """
    async with atomic(db):
        truck = await get_truck(db, truck_id)
        active = await db.scalar(
            select(func.count(TreatmentTicket.id)).where(
                TreatmentTicket.truck_id == truck_id,
                TreatmentTicket.status != TicketStatus.COMPLETED,
            )
        ) or 0
        if active:
            logger.warning(
                "Deleting truck %s still referenced by %d active ticket(s)", truck.truck_number, active
            )
        await db.execute(
            update(TreatmentTicket).where(TreatmentTicket.truck_id == truck_id).values(truck_id=None)
        )
        await db.delete(truck)
        await log_audit(db, "truck", truck_id, "DELETE", actor, {
            "truck_number": truck.truck_number, "active_tickets": active,
        })
    return {"success": True, "id": truck_id}
