"""
Service tableaux de bord / Dashboard aggregation service.
Décomptes camions, tickets et stocks par centre.
Truck, ticket and stock tallies per dispatch center.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.models.material import Material
from treatment_dispatch.models.ticket import TicketStatus, TreatmentTicket
from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.truck import Truck, TruckStatus
from treatment_dispatch.models.user import User, UserTmcPreference
from treatment_dispatch.services.errors import NotFoundError
from treatment_dispatch.services.ticket_service import list_tickets

RECENT_ACTIVITY_LIMIT = 10

ACTIVE_TICKET_STATUSES = (TicketStatus.ASSIGNED, TicketStatus.IN_PROGRESS)


async def _truck_counts(db: AsyncSession, tmc_id: int) -> dict[str, int]:
    counts = {status.value: 0 for status in TruckStatus}
    result = await db.execute(
        select(Truck.status, func.count(Truck.id)).where(Truck.tmc_id == tmc_id).group_by(Truck.status)
    )
    for status, count in result.all():
        counts[status.value] = count
    return counts


async def _ticket_counts(db: AsyncSession, tmc_id: int) -> dict[str, int]:
    counts = {status.value: 0 for status in TicketStatus}
    result = await db.execute(
        select(TreatmentTicket.status, func.count(TreatmentTicket.id))
        .where(TreatmentTicket.tmc_id == tmc_id)
        .group_by(TreatmentTicket.status)
    )
    for status, count in result.all():
        counts[status.value] = count
    return counts


async def _material_levels(db: AsyncSession, tmc_id: int) -> dict[str, float]:
    result = await db.execute(
        select(Material.material_type, Material.quantity_tons).where(Material.tmc_id == tmc_id)
    )
    return {material_type.value: float(quantity) for material_type, quantity in result.all()}


async def _center_stats(db: AsyncSession, center: TmcCenter) -> dict:
    return {
        "id": center.id,
        "name": center.name,
        "region": center.region,
        "trucks": await _truck_counts(db, center.id),
        "tickets": await _ticket_counts(db, center.id),
        "materials": await _material_levels(db, center.id),
    }


async def statewide(db: AsyncSession, user: User) -> dict:
    """Vue état : centres suivis par l'utilisateur / Statewide view of the centers the user monitors."""
    result = await db.execute(
        select(TmcCenter)
        .join(UserTmcPreference, UserTmcPreference.tmc_id == TmcCenter.id)
        .where(UserTmcPreference.user_id == user.id, UserTmcPreference.is_monitoring.is_(True))
        .order_by(TmcCenter.id)
    )
    tmc_stats = [await _center_stats(db, center) for center in result.scalars().all()]

    totals = {"trucks": 0, "tickets": 0}
    for stats in tmc_stats:
        totals["trucks"] += sum(stats["trucks"].values())
        totals["tickets"] += sum(stats["tickets"][s.value] for s in ACTIVE_TICKET_STATUSES)
    return {"totals": totals, "tmcStats": tmc_stats}


async def tmc_detail(db: AsyncSession, tmc_id: int) -> dict:
    """Détail d'un centre avec activité récente / Center detail with recent activity."""
    center = await db.get(TmcCenter, tmc_id)
    if center is None:
        raise NotFoundError(f"Dispatch center {tmc_id} not found")
    stats = await _center_stats(db, center)
    stats["latitude"] = center.latitude
    stats["longitude"] = center.longitude
    stats["recentActivity"] = (await list_tickets(db, tmc_id=tmc_id))[:RECENT_ACTIVITY_LIMIT]
    return stats
