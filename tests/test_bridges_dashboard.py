"""Tests ponts et tableaux de bord / Bridge and dashboard tests."""

import pytest

from treatment_dispatch.models.material import MaterialType
from treatment_dispatch.models.user import User
from treatment_dispatch.services import bridge_service, dashboard_service, material_service, ticket_service
from treatment_dispatch.services.errors import NotFoundError

CSV = (
    "id,lat,long,name,condition,yearBuilt\n"
    "B-001,34.73,-86.58,I-565 over Pratt Ave,Good,1991\n"
    "B-002,34.70,bad,US-231 over Flint River,,\n"
    ",34.0,-86.0,No id,Fair,\n"
)


@pytest.fixture(autouse=True)
def fresh_bridge_cache():
    bridge_service.clear_cache()
    yield
    bridge_service.clear_cache()


def test_load_bridges(tmp_path):
    path = tmp_path / "bridges.csv"
    path.write_text(CSV, encoding="utf-8")

    bridges = bridge_service.load_bridges(path)

    assert [b["id"] for b in bridges] == ["B-001", "B-002"]
    assert bridges[0]["lat"] == 34.73
    assert bridges[0]["yearBuilt"] == "1991"
    assert bridges[1]["long"] == 0.0
    assert bridges[1]["condition"] == "Unknown"
    assert "yearBuilt" not in bridges[1]


def test_load_bridges_missing_file(tmp_path):
    assert bridge_service.load_bridges(tmp_path / "nope.csv") == []


async def _ticket(session, ids, truck, bridges):
    creator = await session.get(User, ids["dispatcher"])
    return await ticket_service.create_ticket(
        session, tmc_id=ids["north"], creator=creator, truck_id=ids[truck], driver_id=ids["driver"],
        bridge_ids=bridges,
    )


@pytest.mark.asyncio
async def test_public_status_prefers_pending_treatment(session, ids):
    done = await _ticket(session, ids, "n101", ["B-001", "B-002"])
    await material_service.record_treatment_usage(session, done["id"], "B-001", MaterialType.SALT, 1)
    await material_service.record_treatment_usage(session, done["id"], "B-002", MaterialType.BRINE, 1)
    await ticket_service.transition_ticket(session, done["id"], "completed")
    pending = await _ticket(session, ids, "n102", ["B-001"])

    status = {row["bridge_id"]: row for row in await bridge_service.get_public_bridge_status(session)}

    assert set(status) == {"B-001", "B-002"}
    assert status["B-001"]["treated_at"] is None
    assert status["B-001"]["ticket_status"] == "assigned"
    assert status["B-002"]["treatment_type"] == "brine"
    assert status["B-002"]["ticket_status"] == "completed"
    assert pending["bridge_count"] == 1


@pytest.mark.asyncio
async def test_statewide_counts_monitored_centers(session, ids):
    await _ticket(session, ids, "n101", ["B-001"])
    admin = await session.get(User, ids["admin"])

    data = await dashboard_service.statewide(session, admin)

    assert data["totals"] == {"trucks": 3, "tickets": 1}
    north = next(c for c in data["tmcStats"] if c["id"] == ids["north"])
    assert north["trucks"] == {"available": 1, "assigned": 1, "maintenance": 0}
    assert north["tickets"]["assigned"] == 1
    assert north["materials"]["salt"] == 100


@pytest.mark.asyncio
async def test_statewide_without_preferences_is_empty(session, ids):
    driver = await session.get(User, ids["driver"])
    data = await dashboard_service.statewide(session, driver)
    assert data == {"totals": {"trucks": 0, "tickets": 0}, "tmcStats": []}


@pytest.mark.asyncio
async def test_tmc_detail(session, ids):
    ticket = await _ticket(session, ids, "n101", ["B-001"])

    detail = await dashboard_service.tmc_detail(session, ids["north"])

    assert detail["name"] == "North TMC"
    assert detail["latitude"] == 34.7
    assert [t["id"] for t in detail["recentActivity"]] == [ticket["id"]]

    with pytest.raises(NotFoundError):
        await dashboard_service.tmc_detail(session, 4242)
