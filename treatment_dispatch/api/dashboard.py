"""Routes tableaux de bord / Dashboard routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.api.deps import require_permission, scope_tmc_id
from treatment_dispatch.database import get_db
from treatment_dispatch.models.user import User
from treatment_dispatch.services import dashboard_service

router = APIRouter()


@router.get("/statewide")
async def statewide_dashboard(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("dashboard", "statewide")),
):
    """Vue état des centres suivis / Statewide view of monitored centers."""
    return await dashboard_service.statewide(db, user)


@router.get("/tmc/{tmc_id}")
async def tmc_dashboard(
    tmc_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("dashboard", "tmc")),
):
    """Détail d'un centre / Dispatch center detail."""
    return await dashboard_service.tmc_detail(db, scope_tmc_id(user, tmc_id))
