"""Fixtures partagées / Shared test fixtures."""

import os

# Avant tout import du paquet / Before any package import
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from treatment_dispatch.database import Base, configure_sqlite, get_db
from treatment_dispatch.main import app
from treatment_dispatch.models.material import Material, MaterialType
from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.truck import Truck, TruckStatus
from treatment_dispatch.models.user import User, UserRole, UserTmcPreference
from treatment_dispatch.services.broadcaster import broadcaster
from treatment_dispatch.utils.auth import create_access_token, hash_password

PASSWORD = "secret123"


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://", poolclass=StaticPool
    )
    configure_sqlite(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def ids(session_factory):
    """Jeu de données de base / Baseline data set.

    Centre 1 (north) : admin, dispatcher, driver, camions N-101 et N-102.
    Centre 2 (south) : dispatcher, driver, camion S-201. 100 t de chaque matériau partout.
    """
    async with session_factory() as s:
        north = TmcCenter(name="North TMC", region="North", latitude=34.7, longitude=-86.6)
        south = TmcCenter(name="South TMC", region="South", latitude=30.7, longitude=-88.0)
        s.add_all([north, south])
        await s.flush()

        users = {
            "admin": User(email="admin@test.io", role=UserRole.ADMIN, tmc_id=north.id, name="Ada Admin"),
            "dispatcher": User(email="dispatch@test.io", role=UserRole.DISPATCHER, tmc_id=north.id, name="Dee Dispatch"),
            "driver": User(email="driver@test.io", role=UserRole.DRIVER, tmc_id=north.id, name="Dan Driver"),
            "south_driver": User(email="south@test.io", role=UserRole.DRIVER, tmc_id=south.id, name="Sam South"),
            "south_dispatcher": User(
                email="south.dispatch@test.io", role=UserRole.DISPATCHER, tmc_id=south.id, name="Sue South"
            ),
        }
        hashed = hash_password(PASSWORD)
        for user in users.values():
            user.password_hash = hashed
        s.add_all(users.values())

        trucks = {
            "n101": Truck(truck_number="N-101", tmc_id=north.id, capacity_tons=10, status=TruckStatus.AVAILABLE),
            "n102": Truck(truck_number="N-102", tmc_id=north.id, capacity_tons=12, status=TruckStatus.AVAILABLE),
            "s201": Truck(truck_number="S-201", tmc_id=south.id, capacity_tons=8, status=TruckStatus.AVAILABLE),
        }
        s.add_all(trucks.values())

        for center in (north, south):
            for material_type in MaterialType:
                s.add(Material(tmc_id=center.id, material_type=material_type, quantity_tons=100))
        await s.flush()

        s.add_all(
            UserTmcPreference(user_id=users["admin"].id, tmc_id=center.id, is_monitoring=True)
            for center in (north, south)
        )
        await s.commit()

        data = {"north": north.id, "south": south.id}
        data.update({key: user.id for key, user in users.items()})
        data.update({key: truck.id for key, truck in trucks.items()})
    return data


@pytest.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    broadcaster.active_connections.clear()


@pytest.fixture
def auth_headers(session_factory, ids):
    """Headers Bearer par clé d'utilisateur / Bearer headers per user key."""

    async def _headers(key: str) -> dict:
        async with session_factory() as s:
            user = await s.get(User, ids[key])
            return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers
