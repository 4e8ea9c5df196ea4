"""
Machine à états des tickets / Ticket state machine.

assigned -> in_progress -> completed (terminal).

Chaque commande est une seule transaction couvrant ticket, ponts et statut camion.
Each command is a single transaction spanning ticket, bridge rows and truck status.
"""

import logging
import random
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.config import settings
from treatment_dispatch.database import atomic
from treatment_dispatch.models.ticket import BridgeTreatment, TicketPriority, TicketStatus, TreatmentTicket
from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.truck import Truck
from treatment_dispatch.models.user import User, UserRole
from treatment_dispatch.services.audit_service import log_audit
from treatment_dispatch.services.errors import (
    DispatchError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from treatment_dispatch.services.fleet_service import get_truck, release_truck, reserve_truck

logger = logging.getLogger(__name__)

# Cibles acceptées par Transition / Targets accepted by a status transition
TRANSITION_TARGETS = frozenset({TicketStatus.IN_PROGRESS, TicketStatus.COMPLETED})

EDITABLE_FIELDS = ("truck_id", "assigned_driver_id", "priority", "scheduled_time", "notes")


def generate_ticket_number(now: datetime | None = None) -> str:
    """TICKET-YYYYMMDD-NNNN (suffixe aléatoire / random suffix)."""
    now = now or datetime.now(timezone.utc)
    return f"TICKET-{now:%Y%m%d}-{random.randint(0, 9999):04d}"


def _ticket_view_query():
    """Ticket + nom chauffeur + numéro camion + nombre de ponts / Ticket joined for display."""
    bridge_count = (
        select(func.count(BridgeTreatment.id))
        .where(BridgeTreatment.ticket_id == TreatmentTicket.id)
        .correlate(TreatmentTicket)
        .scalar_subquery()
    )
    return (
        select(
            TreatmentTicket,
            User.name.label("driver_name"),
            Truck.truck_number.label("truck_number"),
            bridge_count.label("bridge_count"),
        )
        .outerjoin(User, TreatmentTicket.assigned_driver_id == User.id)
        .outerjoin(Truck, TreatmentTicket.truck_id == Truck.id)
        .execution_options(populate_existing=True)
    )


def _to_view(row) -> dict:
    ticket, driver_name, truck_number, bridge_count = row
    view = {column.key: getattr(ticket, column.key) for column in TreatmentTicket.__table__.columns}
    view["driver_name"] = driver_name
    view["truck_number"] = truck_number
    view["bridge_count"] = bridge_count or 0
    return view


async def get_ticket(db: AsyncSession, ticket_id: int) -> dict:
    """Vue complète d'un ticket / Fully joined ticket view."""
    result = await db.execute(_ticket_view_query().where(TreatmentTicket.id == ticket_id))
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(f"Ticket {ticket_id} not found")
    return _to_view(row)


async def list_tickets(
    db: AsyncSession, tmc_id: int | None = None, status: TicketStatus | None = None
) -> list[dict]:
    """Filtres optionnels (ET), plus récents d'abord / Optional AND filters, newest first."""
    query = _ticket_view_query()
    if tmc_id is not None:
        query = query.where(TreatmentTicket.tmc_id == tmc_id)
    if status is not None:
        query = query.where(TreatmentTicket.status == status)
    query = query.order_by(TreatmentTicket.created_at.desc(), TreatmentTicket.id.desc())
    result = await db.execute(query)
    return [_to_view(row) for row in result.all()]


async def list_ticket_bridges(db: AsyncSession, ticket_id: int) -> list[BridgeTreatment]:
    if await db.get(TreatmentTicket, ticket_id) is None:
        raise NotFoundError(f"Ticket {ticket_id} not found")
    result = await db.execute(
        select(BridgeTreatment).where(BridgeTreatment.ticket_id == ticket_id).order_by(BridgeTreatment.id)
    )
    return list(result.scalars().all())


async def _get_ticket_row(db: AsyncSession, ticket_id: int) -> TreatmentTicket:
    ticket = await db.get(TreatmentTicket, ticket_id)
    if ticket is None:
        raise NotFoundError(f"Ticket {ticket_id} not found")
    return ticket


async def get_ticket_tmc_id(db: AsyncSession, ticket_id: int) -> int:
    """Centre propriétaire d'un ticket / Dispatch center owning a ticket."""
    tmc_id = await db.scalar(select(TreatmentTicket.tmc_id).where(TreatmentTicket.id == ticket_id))
    if tmc_id is None:
        raise NotFoundError(f"Ticket {ticket_id} not found")
    return tmc_id


async def _require_driver(db: AsyncSession, driver_id: int, tmc_id: int) -> User:
    """Chauffeur existant du même centre / Existing driver from the same center."""
    driver = await db.get(User, driver_id)
    if driver is None:
        raise NotFoundError(f"Driver {driver_id} not found")
    if driver.role != UserRole.DRIVER:
        raise ValidationError(f"User {driver.email} is not a driver")
    if driver.tmc_id != tmc_id:
        raise ValidationError(f"Driver {driver.email} belongs to another dispatch center")
    return driver


async def _require_local_truck(db: AsyncSession, truck_id: int, tmc_id: int) -> None:
    truck = await get_truck(db, truck_id)
    if truck.tmc_id != tmc_id:
        raise ValidationError(f"Truck {truck.truck_number} belongs to another dispatch center")


async def _insert_ticket(db: AsyncSession, **fields) -> TreatmentTicket:
    """Insérer avec un numéro unique, réessai sur collision / Insert with a unique number, retry on collision."""
    for attempt in range(1, settings.TICKET_NUMBER_MAX_ATTEMPTS + 1):
        number = generate_ticket_number()
        ticket = TreatmentTicket(ticket_number=number, status=TicketStatus.ASSIGNED, **fields)
        try:
            async with db.begin_nested():
                db.add(ticket)
                await db.flush()
        except IntegrityError:
            taken = await db.scalar(
                select(func.count(TreatmentTicket.id)).where(TreatmentTicket.ticket_number == number)
            )
            if not taken:
                raise
            logger.warning("Ticket number %s already taken (attempt %d)", number, attempt)
            continue
        return ticket
    raise DispatchError(
        f"Could not allocate a unique ticket number after {settings.TICKET_NUMBER_MAX_ATTEMPTS} attempts"
    )


async def create_ticket(
    db: AsyncSession,
    *,
    tmc_id: int | None,
    creator: User,
    truck_id: int,
    driver_id: int,
    priority: TicketPriority = TicketPriority.MEDIUM,
    scheduled_time: datetime | None = None,
    notes: str | None = None,
    bridge_ids: list[str] | None = None,
) -> dict:
    """Créer un ticket et réserver son camion / Create a ticket and reserve its truck.

    Tout ou rien : numéro, ticket, lignes de ponts et réservation camion.
    All or nothing: number, ticket row, bridge rows and truck reservation.
    """
    if tmc_id is None:
        raise ValidationError("tmcId is required")
    bridge_ids = list(dict.fromkeys(bridge_ids or []))

    async with atomic(db):
        if await db.get(TmcCenter, tmc_id) is None:
            raise NotFoundError(f"Dispatch center {tmc_id} not found")
        await _require_driver(db, driver_id, tmc_id)
        await _require_local_truck(db, truck_id, tmc_id)
        await reserve_truck(db, truck_id)
        ticket = await _insert_ticket(
            db,
            tmc_id=tmc_id,
            created_by=creator.id,
            assigned_driver_id=driver_id,
            truck_id=truck_id,
            priority=priority,
            scheduled_time=scheduled_time,
            notes=notes,
        )
        db.add_all(BridgeTreatment(ticket_id=ticket.id, bridge_id=bridge_id) for bridge_id in bridge_ids)
        await log_audit(db, "ticket", ticket.id, "CREATE", creator, {
            "ticket_number": ticket.ticket_number,
            "truck_id": truck_id,
            "driver_id": driver_id,
            "bridge_ids": bridge_ids,
        })
    logger.info("Ticket %s created (truck %s, %d bridges)", ticket.ticket_number, truck_id, len(bridge_ids))
    return await get_ticket(db, ticket.id)


async def transition_ticket(
    db: AsyncSession, ticket_id: int, new_status: TicketStatus | str, actor: User | None = None
) -> dict:
    """Changer le statut / Move a ticket along its state machine.

    in_progress : horodate started_at (à chaque fois).
    completed : horodate completed_at et libère le camion, même transaction.
    """
    try:
        target = TicketStatus(new_status)
    except ValueError:
        raise ValidationError(f"Invalid status: {new_status}") from None
    if target not in TRANSITION_TARGETS:
        raise ValidationError(f"Status must be one of: {', '.join(sorted(s.value for s in TRANSITION_TARGETS))}")

    async with atomic(db):
        ticket = await _get_ticket_row(db, ticket_id)
        previous = ticket.status
        if previous == TicketStatus.COMPLETED:
            raise InvalidTransitionError(f"Ticket {ticket.ticket_number} is already completed")

        now = datetime.now(timezone.utc)
        ticket.status = target
        if target == TicketStatus.IN_PROGRESS:
            ticket.started_at = now
        else:
            ticket.completed_at = now
            if ticket.truck_id is not None:
                await release_truck(db, ticket.truck_id)
        await log_audit(db, "ticket", ticket.id, "STATUS", actor, {
            "old_status": previous.value, "new_status": target.value,
        })
    logger.info("Ticket %s: %s -> %s", ticket.ticket_number, previous.value, target.value)
    return await get_ticket(db, ticket_id)


async def edit_ticket(
    db: AsyncSession, ticket_id: int, changes: dict, actor: User | None = None
) -> dict:
    """Modifier les champs d'un ticket non terminé / Edit fields of a non-completed ticket.

    Changement de camion : ancien libéré, nouveau réservé, même transaction.
    Camion inchangé : aucune écriture sur les camions.
    """
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields not editable: {', '.join(sorted(unknown))}")

    async with atomic(db):
        ticket = await _get_ticket_row(db, ticket_id)
        if ticket.status == TicketStatus.COMPLETED:
            raise InvalidTransitionError(f"Ticket {ticket.ticket_number} is completed and can no longer be edited")

        if "truck_id" in changes:
            new_truck_id = changes["truck_id"]
            if new_truck_id is None:
                raise ValidationError("truckId is required")
            old_truck_id = ticket.truck_id
            if new_truck_id != old_truck_id:
                await _require_local_truck(db, new_truck_id, ticket.tmc_id)
                if old_truck_id is not None:
                    await release_truck(db, old_truck_id)
                await reserve_truck(db, new_truck_id)

        if "assigned_driver_id" in changes:
            if changes["assigned_driver_id"] is None:
                raise ValidationError("driverId is required")
            if changes["assigned_driver_id"] != ticket.assigned_driver_id:
                await _require_driver(db, changes["assigned_driver_id"], ticket.tmc_id)

        if "priority" in changes and changes["priority"] is None:
            raise ValidationError("priority is required")

        for key, value in changes.items():
            setattr(ticket, key, value)
        await log_audit(db, "ticket", ticket.id, "UPDATE", actor, changes)
    return await get_ticket(db, ticket_id)


async def delete_ticket(db: AsyncSession, ticket_id: int, actor: User | None = None) -> dict:
    """Supprimer un ticket / Delete a ticket.

    Lignes de ponts d'abord (clé étrangère), puis le ticket, puis libération du camion.
    Bridge rows first (foreign key), then the ticket, then the truck is released.
    """
    async with atomic(db):
        ticket = await _get_ticket_row(db, ticket_id)
        truck_id = ticket.truck_id
        # Un ticket terminé a déjà rendu son camion / A completed ticket already gave its truck back
        still_holds_truck = truck_id is not None and ticket.status != TicketStatus.COMPLETED
        number = ticket.ticket_number

        await db.execute(delete(BridgeTreatment).where(BridgeTreatment.ticket_id == ticket_id))
        await db.execute(delete(TreatmentTicket).where(TreatmentTicket.id == ticket_id))
        if still_holds_truck:
            await release_truck(db, truck_id)
        await log_audit(db, "ticket", ticket_id, "DELETE", actor, {"ticket_number": number})
    logger.info("Ticket %s deleted", number)
    return {"success": True, "id": ticket_id}
