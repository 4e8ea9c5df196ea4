"""Routes Centres et préférences / Dispatch center and preference routes."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.api.deps import get_current_user
from treatment_dispatch.database import get_db
from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.user import User, UserTmcPreference
from treatment_dispatch.schemas.tmc_center import PreferenceRead, PreferenceUpdate, TmcCenterRead

router = APIRouter()
preferences_router = APIRouter()


@router.get("", response_model=list[TmcCenterRead])
async def list_tmc_centers(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Lister les centres / List dispatch centers."""
    result = await db.execute(select(TmcCenter).order_by(TmcCenter.id))
    return result.scalars().all()


@preferences_router.get("/tmc", response_model=list[PreferenceRead])
async def list_preferences(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Centres suivis par l'utilisateur / Centers monitored by the current user."""
    result = await db.execute(
        select(UserTmcPreference, TmcCenter)
        .join(TmcCenter, UserTmcPreference.tmc_id == TmcCenter.id)
        .where(UserTmcPreference.user_id == user.id)
        .order_by(TmcCenter.id)
    )
    return [
        PreferenceRead(tmc_id=center.id, is_monitoring=pref.is_monitoring, name=center.name, region=center.region)
        for pref, center in result.all()
    ]


@preferences_router.put("/tmc/{tmc_id}")
async def set_preference(
    tmc_id: int,
    data: PreferenceUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Créer ou mettre à jour une préférence / Upsert a preference."""
    if await db.get(TmcCenter, tmc_id) is None:
        raise HTTPException(status_code=404, detail="Dispatch center not found")
    result = await db.execute(
        select(UserTmcPreference).where(
            UserTmcPreference.user_id == user.id, UserTmcPreference.tmc_id == tmc_id
        )
    )
    pref = result.scalar_one_or_none()
    if pref is None:
        db.add(UserTmcPreference(user_id=user.id, tmc_id=tmc_id, is_monitoring=data.is_monitoring))
    else:
        pref.is_monitoring = data.is_monitoring
        pref.updated_at = datetime.now(timezone.utc)
    await db.commit()
    return {"success": True}
