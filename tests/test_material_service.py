"""Tests du registre des matériaux / Inventory ledger tests."""

import pytest
from sqlalchemy import select

from treatment_dispatch.models.material import Material, MaterialType
from treatment_dispatch.models.ticket import BridgeTreatment
from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.user import User
from treatment_dispatch.services import material_service, ticket_service
from treatment_dispatch.services.errors import InvalidTransitionError, NotFoundError


async def stock(session, tmc_id, material_type):
    return await session.scalar(
        select(Material.quantity_tons).where(Material.tmc_id == tmc_id, Material.material_type == material_type)
    )


async def north_ticket(session, ids):
    creator = await session.get(User, ids["dispatcher"])
    return await ticket_service.create_ticket(
        session,
        tmc_id=ids["north"],
        creator=creator,
        truck_id=ids["n101"],
        driver_id=ids["driver"],
        bridge_ids=["B-001", "B-002"],
    )


@pytest.mark.asyncio
async def test_inventory_per_center(session, ids):
    inventory = await material_service.get_inventory(session, ids["north"])
    assert {m.material_type for m in inventory} == set(MaterialType)
    assert all(m.tmc_id == ids["north"] for m in inventory)


@pytest.mark.asyncio
async def test_usage_can_go_negative_then_restock(session, ids):
    record = await material_service.apply_usage(session, ids["north"], MaterialType.SALT, 30)
    assert record.quantity_tons == 70

    record = await material_service.apply_usage(session, ids["north"], MaterialType.SALT, 100)
    assert record.quantity_tons == -30

    record = await material_service.apply_restock(session, ids["north"], MaterialType.SALT, 50)
    assert record.quantity_tons == 20
    assert record.last_updated is not None
    # Autres centres et matériaux intacts / Other centers and materials untouched
    assert await stock(session, ids["south"], MaterialType.SALT) == 100
    assert await stock(session, ids["north"], MaterialType.SAND) == 100


@pytest.mark.asyncio
async def test_usage_unknown_center(session, ids):
    with pytest.raises(NotFoundError):
        await material_service.apply_usage(session, 4242, MaterialType.SALT, 1)


@pytest.mark.asyncio
async def test_set_quantity_overwrites(session, ids):
    inventory = await material_service.get_inventory(session, ids["north"])
    brine = next(m for m in inventory if m.material_type == MaterialType.BRINE)

    record = await material_service.set_quantity(session, brine.id, 42.5)

    assert record.quantity_tons == 42.5
    assert await stock(session, ids["north"], MaterialType.BRINE) == 42.5
    with pytest.raises(NotFoundError):
        await material_service.set_quantity(session, 4242, 1)


@pytest.mark.asyncio
async def test_treatment_usage_stamps_bridge_and_debits_stock(session, ids):
    ticket = await north_ticket(session, ids)

    record = await material_service.record_treatment_usage(session, ticket["id"], "B-001", MaterialType.SAND, 2.5)

    assert record.quantity_tons == 97.5
    row = await session.scalar(
        select(BridgeTreatment)
        .where(BridgeTreatment.ticket_id == ticket["id"], BridgeTreatment.bridge_id == "B-001")
        .execution_options(populate_existing=True)
    )
    assert row.treatment_type == MaterialType.SAND
    assert row.material_used_tons == 2.5
    assert row.treated_at is not None


@pytest.mark.asyncio
async def test_treatment_usage_missing_ticket_leaves_stock(session, ids):
    with pytest.raises(NotFoundError):
        await material_service.record_treatment_usage(session, 4242, "B-001", MaterialType.SALT, 5)
    assert await stock(session, ids["north"], MaterialType.SALT) == 100


@pytest.mark.asyncio
async def test_treatment_usage_bridge_not_on_ticket(session, ids):
    ticket = await north_ticket(session, ids)
    with pytest.raises(NotFoundError):
        await material_service.record_treatment_usage(session, ticket["id"], "B-999", MaterialType.SALT, 5)
    assert await stock(session, ids["north"], MaterialType.SALT) == 100


@pytest.mark.asyncio
async def test_treatment_usage_recorded_once(session, ids):
    ticket = await north_ticket(session, ids)
    await material_service.record_treatment_usage(session, ticket["id"], "B-002", MaterialType.SALT, 4)

    with pytest.raises(InvalidTransitionError):
        await material_service.record_treatment_usage(session, ticket["id"], "B-002", MaterialType.SALT, 4)

    assert await stock(session, ids["north"], MaterialType.SALT) == 96


@pytest.mark.asyncio
async def test_treatment_usage_missing_inventory_rolls_back_stamp(session, ids):
    ticket = await north_ticket(session, ids)
    await session.execute(
        Material.__table__.delete().where(
            Material.tmc_id == ids["north"], Material.material_type == MaterialType.BRINE
        )
    )
    await session.commit()

    with pytest.raises(NotFoundError):
        await material_service.record_treatment_usage(session, ticket["id"], "B-001", MaterialType.BRINE, 1)

    treated_at = await session.scalar(
        select(BridgeTreatment.treated_at).where(
            BridgeTreatment.ticket_id == ticket["id"], BridgeTreatment.bridge_id == "B-001"
        )
    )
    assert treated_at is None


@pytest.mark.asyncio
async def test_seed_inventory_fills_gaps(session, ids):
    session.add(TmcCenter(name="East TMC"))
    await session.commit()

    assert await material_service.seed_inventory(session) == len(MaterialType)
    assert await material_service.seed_inventory(session) == 0
