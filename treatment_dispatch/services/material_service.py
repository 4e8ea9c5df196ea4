"""
Registre des matériaux / Inventory ledger.
Deltas signés par (centre, matériau) et consommation par pont traité.
Signed deltas per (center, material) and per-bridge treatment usage.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.database import atomic
from treatment_dispatch.models.material import Material, MaterialType
from treatment_dispatch.models.ticket import BridgeTreatment, TreatmentTicket
from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.user import User
from treatment_dispatch.services.audit_service import log_audit
from treatment_dispatch.services.errors import InvalidTransitionError, NotFoundError

logger = logging.getLogger(__name__)


async def get_inventory(db: AsyncSession, tmc_id: int) -> list[Material]:
    """Stock complet d'un centre / Full material set of a center."""
    result = await db.execute(select(Material).where(Material.tmc_id == tmc_id))
    return list(result.scalars().all())


async def _get_record(db: AsyncSession, tmc_id: int, material_type: MaterialType) -> Material:
    result = await db.execute(
        select(Material)
        .where(Material.tmc_id == tmc_id, Material.material_type == material_type)
        .execution_options(populate_existing=True)
    )
    record = result.scalar_one_or_none()
    if record is None:
        raise NotFoundError(f"No {material_type.value} inventory for center {tmc_id}")
    return record


async def _apply_delta(
    db: AsyncSession, tmc_id: int, material_type: MaterialType, delta: float
) -> Material:
    """Appliquer un delta signé (sans plancher) / Apply a signed delta, no floor check.

    Doit s'exécuter dans la transaction de l'appelant / Must run inside the caller's transaction.
    """
    result = await db.execute(
        update(Material)
        .where(Material.tmc_id == tmc_id, Material.material_type == material_type)
        .values(
            quantity_tons=Material.quantity_tons + delta,
            last_updated=datetime.now(timezone.utc),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError(f"No {material_type.value} inventory for center {tmc_id}")
    return await _get_record(db, tmc_id, material_type)


async def apply_usage(
    db: AsyncSession,
    tmc_id: int,
    material_type: MaterialType,
    quantity_tons: float,
    actor: User | None = None,
) -> Material:
    """Consommation : soustrait du stock / Usage: subtract from stock. May go negative."""
    async with atomic(db):
        record = await _apply_delta(db, tmc_id, material_type, -quantity_tons)
        await log_audit(db, "material", record.id, "USAGE", actor, {"quantity_tons": quantity_tons})
    if record.quantity_tons < 0:
        logger.warning("Center %s %s stock is negative (%.2f t)", tmc_id, material_type.value, record.quantity_tons)
    return record


async def apply_restock(
    db: AsyncSession,
    tmc_id: int,
    material_type: MaterialType,
    quantity_tons: float,
    actor: User | None = None,
) -> Material:
    """Réapprovisionnement : ajoute au stock / Restock: add to stock."""
    async with atomic(db):
        record = await _apply_delta(db, tmc_id, material_type, quantity_tons)
        await log_audit(db, "material", record.id, "RESTOCK", actor, {"quantity_tons": quantity_tons})
    return record


async def set_quantity(
    db: AsyncSession, record_id: int, quantity_tons: float, actor: User | None = None
) -> Material:
    """Correction manuelle, écrasement absolu / Manual correction, absolute overwrite."""
    async with atomic(db):
        record = await db.get(Material, record_id)
        if record is None:
            raise NotFoundError(f"Material record {record_id} not found")
        previous = record.quantity_tons
        record.quantity_tons = quantity_tons
        record.last_updated = datetime.now(timezone.utc)
        await log_audit(db, "material", record.id, "SET", actor, {
            "old_quantity_tons": previous, "quantity_tons": quantity_tons,
        })
    return record


async def record_treatment_usage(
    db: AsyncSession,
    ticket_id: int,
    bridge_id: str,
    material_type: MaterialType,
    quantity_tons: float,
    actor: User | None = None,
) -> Material:
    """Consommation sur un pont, atomique / Per-bridge usage, atomic.

    Marque la ligne du pont puis débite le stock du centre du ticket.
    Un échec à n'importe quelle étape annule les deux.
    Stamps the bridge row, then debits the ticket's center stock.
    A failure at any step rolls both back.
    """
    async with atomic(db):
        ticket = await db.get(TreatmentTicket, ticket_id)
        if ticket is None:
            raise NotFoundError(f"Ticket {ticket_id} not found")

        result = await db.execute(
            select(BridgeTreatment).where(
                BridgeTreatment.ticket_id == ticket_id,
                BridgeTreatment.bridge_id == bridge_id,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(f"Bridge {bridge_id} is not part of ticket {ticket.ticket_number}")
        if row.treated_at is not None:
            raise InvalidTransitionError(
                f"Usage already recorded for bridge {bridge_id} on ticket {ticket.ticket_number}"
            )

        row.treatment_type = material_type
        row.material_used_tons = quantity_tons
        row.treated_at = datetime.now(timezone.utc)
        await db.flush()

        record = await _apply_delta(db, ticket.tmc_id, material_type, -quantity_tons)
        await log_audit(db, "ticket", ticket.id, "TREATMENT", actor, {
            "bridge_id": bridge_id, "material_type": material_type.value, "quantity_tons": quantity_tons,
        })
    logger.info(
        "Ticket %s: %.2f t of %s on bridge %s", ticket.ticket_number, quantity_tons, material_type.value, bridge_id
    )
    return record


async def seed_inventory(db: AsyncSession) -> int:
    """Une ligne par (centre, matériau) / Ensure one row per (center, material)."""
    centers = (await db.execute(select(TmcCenter.id))).scalars().all()
    existing = {
        (tmc_id, material_type)
        for tmc_id, material_type in (await db.execute(select(Material.tmc_id, Material.material_type))).all()
    }
    created = 0
    for tmc_id in centers:
        for material_type in MaterialType:
            if (tmc_id, material_type) not in existing:
                db.add(Material(tmc_id=tmc_id, material_type=material_type, quantity_tons=0))
                created += 1
    await db.commit()
    return created
