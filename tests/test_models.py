"""Tests des modèles / Model tests."""

from treatment_dispatch.models.material import Material, MaterialType
from treatment_dispatch.models.ticket import TicketPriority, TicketStatus, TreatmentTicket
from treatment_dispatch.models.tmc_center import TmcCenter
from treatment_dispatch.models.truck import Truck, TruckStatus
from treatment_dispatch.models.user import User, UserRole


def test_enums():
    assert TicketStatus.IN_PROGRESS.value == "in_progress"
    assert TicketPriority.URGENT.value == "urgent"
    assert TruckStatus.MAINTENANCE.value == "maintenance"
    assert MaterialType.BRINE.value == "brine"
    assert UserRole.DISPATCHER.value == "dispatcher"


def test_status_values_are_strings():
    assert TicketStatus("completed") is TicketStatus.COMPLETED
    assert TruckStatus.AVAILABLE == "available"


def test_repr():
    assert "N-101" in repr(Truck(truck_number="N-101", status=TruckStatus.AVAILABLE))
    assert "TICKET-20260115-0042" in repr(
        TreatmentTicket(ticket_number="TICKET-20260115-0042", status=TicketStatus.ASSIGNED)
    )
    assert "salt" in repr(Material(tmc_id=1, material_type=MaterialType.SALT, quantity_tons=4.5))
    assert "North" in repr(TmcCenter(name="North TMC"))
    assert "driver" in repr(User(email="d@test.io", role=UserRole.DRIVER))
