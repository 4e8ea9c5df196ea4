"""Routes Tickets / Ticket API routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.api.deps import ensure_in_scope, require_permission, scope_tmc_id
from treatment_dispatch.database import get_db
from treatment_dispatch.models.ticket import TicketStatus
from treatment_dispatch.models.user import User
from treatment_dispatch.schemas.audit import AuditEntryRead
from treatment_dispatch.schemas.common import DeleteResult
from treatment_dispatch.schemas.ticket import (
    BridgeTreatmentRead,
    TicketCreate,
    TicketRead,
    TicketStatusUpdate,
    TicketUpdate,
)
from treatment_dispatch.services import broadcaster as events
from treatment_dispatch.services import ticket_service
from treatment_dispatch.services.audit_service import entity_history
from treatment_dispatch.services.errors import ValidationError

router = APIRouter()


@router.get("", response_model=list[TicketRead])
async def list_tickets(
    tmc_id: int | None = Query(default=None, alias="tmcId"),
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("tickets", "read")),
):
    """Lister les tickets, plus récents d'abord / List tickets, newest first."""
    ticket_status = None
    if status:
        try:
            ticket_status = TicketStatus(status)
        except ValueError:
            raise ValidationError(f"Invalid status: {status}") from None
    return await ticket_service.list_tickets(db, scope_tmc_id(user, tmc_id), ticket_status)


@router.post("", response_model=TicketRead, status_code=201)
async def create_ticket(
    data: TicketCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("tickets", "create")),
):
    """Créer un ticket et réserver le camion / Create a ticket and reserve the truck."""
    if data.tmc_id is not None:
        ensure_in_scope(user, data.tmc_id, "Dispatch center")
    ticket = await ticket_service.create_ticket(
        db,
        tmc_id=data.tmc_id,
        creator=user,
        truck_id=data.truck_id,
        driver_id=data.driver_id,
        priority=data.priority,
        scheduled_time=data.scheduled_time,
        notes=data.notes,
        bridge_ids=data.bridge_ids,
    )
    await events.broadcaster.publish(events.TICKET_CREATED, TicketRead.model_validate(ticket))
    return ticket


@router.get("/{ticket_id}", response_model=TicketRead)
async def get_ticket(
    ticket_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("tickets", "read")),
):
    ticket = await ticket_service.get_ticket(db, ticket_id)
    ensure_in_scope(user, ticket["tmc_id"])
    return ticket


@router.get("/{ticket_id}/bridges", response_model=list[BridgeTreatmentRead])
async def list_ticket_bridges(
    ticket_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("tickets", "read")),
):
    """Ponts du ticket et consommation / Ticket bridges and recorded usage."""
    ensure_in_scope(user, await ticket_service.get_ticket_tmc_id(db, ticket_id))
    return await ticket_service.list_ticket_bridges(db, ticket_id)


@router.patch("/{ticket_id}", response_model=TicketRead)
async def transition_ticket(
    ticket_id: int,
    data: TicketStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("tickets", "transition")),
):
    """Changer le statut / Change ticket status."""
    ensure_in_scope(user, await ticket_service.get_ticket_tmc_id(db, ticket_id))
    ticket = await ticket_service.transition_ticket(db, ticket_id, data.status, user)
    await events.broadcaster.publish(events.TICKET_UPDATED, TicketRead.model_validate(ticket))
    return ticket


@router.put("/{ticket_id}", response_model=TicketRead)
async def edit_ticket(
    ticket_id: int,
    data: TicketUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("tickets", "update")),
):
    """Modifier un ticket / Edit a ticket."""
    ensure_in_scope(user, await ticket_service.get_ticket_tmc_id(db, ticket_id))
    ticket = await ticket_service.edit_ticket(db, ticket_id, data.to_changes(), user)
    await events.broadcaster.publish(events.TICKET_UPDATED, TicketRead.model_validate(ticket))
    return ticket


@router.delete("/{ticket_id}", response_model=DeleteResult)
async def delete_ticket(
    ticket_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("tickets", "delete")),
):
    """Supprimer un ticket / Delete a ticket."""
    ensure_in_scope(user, await ticket_service.get_ticket_tmc_id(db, ticket_id))
    result = await ticket_service.delete_ticket(db, ticket_id, user)
    await events.broadcaster.publish(events.TICKET_DELETED, {"id": ticket_id})
    return result


@router.get("/{ticket_id}/history", response_model=list[AuditEntryRead])
async def ticket_history(
    ticket_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("tickets", "read")),
):
    """Historique du ticket (création, statuts, traitements) / Ticket history (creation, status, treatments)."""
    ensure_in_scope(user, await ticket_service.get_ticket_tmc_id(db, ticket_id))
    return await entity_history(db, "ticket", ticket_id)
