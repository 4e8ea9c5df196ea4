"""Tests du registre de flotte / Fleet registry tests."""

import pytest
from sqlalchemy import select

from treatment_dispatch.models.ticket import TreatmentTicket
from treatment_dispatch.models.truck import Truck, TruckStatus
from treatment_dispatch.models.user import User
from treatment_dispatch.services import fleet_service, ticket_service
from treatment_dispatch.services.errors import DispatchError, NotFoundError, ReservationConflictError


async def truck_status(session, truck_id):
    return await session.scalar(select(Truck.status).where(Truck.id == truck_id))


@pytest.mark.asyncio
async def test_list_trucks_ordered(session, ids):
    trucks = await fleet_service.list_trucks(session)
    assert [t.truck_number for t in trucks] == ["N-101", "N-102", "S-201"]

    south = await fleet_service.list_trucks(session, tmc_id=ids["south"])
    assert [t.truck_number for t in south] == ["S-201"]


@pytest.mark.asyncio
async def test_create_truck_is_available(session, ids):
    truck = await fleet_service.create_truck(session, "N-103", ids["north"], 9.5)
    assert truck.status == TruckStatus.AVAILABLE
    assert truck.capacity_tons == 9.5


@pytest.mark.asyncio
async def test_truck_number_unique_per_center(session, ids):
    with pytest.raises(DispatchError):
        await fleet_service.create_truck(session, "N-101", ids["north"], None)

    # Même numéro dans un autre centre / Same number in another center
    truck = await fleet_service.create_truck(session, "N-101", ids["south"], None)
    assert truck.tmc_id == ids["south"]


@pytest.mark.asyncio
async def test_create_truck_unknown_center(session, ids):
    with pytest.raises(NotFoundError):
        await fleet_service.create_truck(session, "X-1", 4242, None)


@pytest.mark.asyncio
async def test_reserve_is_check_and_set(session, ids):
    await fleet_service.reserve_truck(session, ids["n101"])
    await session.commit()
    assert await truck_status(session, ids["n101"]) == TruckStatus.ASSIGNED

    with pytest.raises(ReservationConflictError):
        await fleet_service.reserve_truck(session, ids["n101"])

    with pytest.raises(NotFoundError):
        await fleet_service.reserve_truck(session, 4242)


@pytest.mark.asyncio
async def test_maintenance_truck_cannot_be_reserved(session, ids):
    truck = await fleet_service.set_truck_status(session, ids["n102"], status=TruckStatus.MAINTENANCE)
    assert truck.status == TruckStatus.MAINTENANCE

    with pytest.raises(ReservationConflictError):
        await fleet_service.reserve_truck(session, ids["n102"])


@pytest.mark.asyncio
async def test_release_truck(session, ids):
    await fleet_service.reserve_truck(session, ids["n101"])
    await fleet_service.release_truck(session, ids["n101"])
    await session.commit()
    assert await truck_status(session, ids["n101"]) == TruckStatus.AVAILABLE


@pytest.mark.asyncio
async def test_update_capacity_only(session, ids):
    truck = await fleet_service.set_truck_status(session, ids["s201"], capacity_tons=11)
    assert truck.capacity_tons == 11
    assert truck.status == TruckStatus.AVAILABLE


@pytest.mark.asyncio
async def test_delete_truck_detaches_tickets(session, ids):
    creator = await session.get(User, ids["dispatcher"])
    ticket = await ticket_service.create_ticket(
        session, tmc_id=ids["north"], creator=creator, truck_id=ids["n101"], driver_id=ids["driver"]
    )

    result = await fleet_service.delete_truck(session, ids["n101"])

    assert result == {"success": True, "id": ids["n101"]}
    truck_id = await session.scalar(select(TreatmentTicket.truck_id).where(TreatmentTicket.id == ticket["id"]))
    assert truck_id is None
    with pytest.raises(NotFoundError):
        await fleet_service.get_truck(session, ids["n101"])
