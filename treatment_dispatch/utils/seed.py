"""
Seed initial / Initial seeding.
Crée le centre par défaut, le compte admin et les lignes de stock au premier démarrage.
Creates the default center, the admin account and inventory rows on first startup.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.config import settings
from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.user import User, UserRole, UserTmcPreference
from treatment_dispatch.services.material_service import seed_inventory
from treatment_dispatch.utils.auth import hash_password


async def seed_default_center(session: AsyncSession) -> TmcCenter:
    """Créer le centre par défaut si aucun n'existe / Create the default center if none exists."""
    center = await session.scalar(select(TmcCenter).order_by(TmcCenter.id).limit(1))
    if center is None:
        center = TmcCenter(name=settings.DEFAULT_TMC_NAME)
        session.add(center)
        await session.commit()
        print(f"[OK] Centre créé / Center created: {center.name}")
    return center


async def seed_admin(session: AsyncSession, center: TmcCenter) -> None:
    """Créer l'admin si aucun utilisateur n'existe / Create admin if no users exist."""
    count = await session.scalar(select(func.count(User.id)))

    if count == 0:
        admin = User(
            email=settings.SEED_ADMIN_EMAIL,
            password_hash=hash_password(settings.SEED_ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            tmc_id=center.id,
            name="Administrator",
        )
        session.add(admin)
        await session.flush()
        # L'admin suit tous les centres / Admin monitors every center
        center_ids = (await session.execute(select(TmcCenter.id))).scalars().all()
        session.add_all(
            UserTmcPreference(user_id=admin.id, tmc_id=tmc_id, is_monitoring=True) for tmc_id in center_ids
        )
        await session.commit()
        print(f"[OK] Admin créé / Admin created: {settings.SEED_ADMIN_EMAIL}")
    else:
        print(f"[OK] {count} utilisateur(s) existant(s), seed ignoré / {count} existing user(s), seed skipped")


async def seed_all(session: AsyncSession) -> None:
    center = await seed_default_center(session)
    await seed_admin(session, center)
    created = await seed_inventory(session)
    if created:
        print(f"[OK] {created} ligne(s) de stock créée(s) / {created} inventory row(s) created")
