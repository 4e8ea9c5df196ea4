"""
CRUD Utilisateurs / User CRUD routes.
Réservé aux administrateurs / Admin only.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.api.deps import require_permission
from treatment_dispatch.database import atomic, get_db
from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.user import User
from treatment_dispatch.schemas.common import DeleteResult
from treatment_dispatch.schemas.user import UserCreate, UserRead, UserUpdate
from treatment_dispatch.services import broadcaster as events
from treatment_dispatch.services.audit_service import log_audit
from treatment_dispatch.utils.auth import hash_password

router = APIRouter()


async def _check_tmc(db: AsyncSession, tmc_id: int | None) -> None:
    if tmc_id is not None and await db.get(TmcCenter, tmc_id) is None:
        raise HTTPException(status_code=404, detail="Dispatch center not found")


@router.get("", response_model=list[UserRead])
async def list_users(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("users", "read")),
):
    """Lister tous les utilisateurs / List all users."""
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return result.scalars().all()


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("users", "create")),
):
    """Créer un utilisateur / Create a user."""
    async with atomic(db):
        # Vérifier unicité / Check uniqueness
        existing = await db.execute(select(User).where(User.email == data.email))
        if existing.scalar_one_or_none():
            raise HTTPException(status_code=400, detail="Email already exists")
        await _check_tmc(db, data.tmc_id)

        new_user = User(
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
            tmc_id=data.tmc_id,
            name=data.name,
            phone=data.phone,
        )
        db.add(new_user)
        await db.flush()
        await db.refresh(new_user, ["tmc"])
        await log_audit(db, "user", new_user.id, "CREATE", user, {"email": data.email, "role": data.role.value})

    payload = UserRead.model_validate(new_user)
    await events.broadcaster.publish(events.USER_CREATED, payload)
    return payload


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("users", "update")),
):
    """Modifier un utilisateur / Update a user."""
    async with atomic(db):
        target = await db.get(User, user_id)
        if not target:
            raise HTTPException(status_code=404, detail="User not found")

        updates = data.model_dump(exclude_unset=True)
        if "email" in updates and updates["email"] != target.email:
            clash = await db.execute(select(User).where(User.email == updates["email"]))
            if clash.scalar_one_or_none():
                raise HTTPException(status_code=400, detail="Email already exists")
        if "tmc_id" in updates:
            await _check_tmc(db, updates["tmc_id"])
        password = updates.pop("password", None)
        if password:
            target.password_hash = hash_password(password)

        for key, value in updates.items():
            setattr(target, key, value)
        await db.flush()
        await db.refresh(target, ["tmc"])
        await log_audit(db, "user", target.id, "UPDATE", user, updates)

    payload = UserRead.model_validate(target)
    await events.broadcaster.publish(events.USER_UPDATED, payload)
    return payload


@router.delete("/{user_id}", response_model=DeleteResult)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("users", "delete")),
):
    """Supprimer un utilisateur / Delete a user."""
    async with atomic(db):
        target = await db.get(User, user_id)
        if not target:
            raise HTTPException(status_code=404, detail="User not found")
        if target.id == user.id:
            raise HTTPException(status_code=400, detail="Cannot delete your own account")
        await db.delete(target)
        await log_audit(db, "user", user_id, "DELETE", user, {"email": target.email})

    await events.broadcaster.publish(events.USER_DELETED, {"id": user_id})
    return DeleteResult(id=user_id)
