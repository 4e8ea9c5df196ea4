"""Routes publiques (sans authentification) / Public routes (no authentication)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.database import get_db
from treatment_dispatch.schemas.bridge import PublicBridgeStatus
from treatment_dispatch.services import bridge_service

router = APIRouter()


@router.get("/public/bridges", response_model=list[PublicBridgeStatus])
async def public_bridge_status(db: AsyncSession = Depends(get_db)):
    """Statut de traitement par pont / Treatment status per bridge."""
    return await bridge_service.get_public_bridge_status(db)


@router.get("/bridges")
async def bridge_inventory():
    """Inventaire brut des ponts / Raw bridge inventory."""
    return bridge_service.load_bridges()
