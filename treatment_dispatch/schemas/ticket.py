"""Schémas Ticket / Ticket schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from treatment_dispatch.models.material import MaterialType
from treatment_dispatch.models.ticket import TicketPriority, TicketStatus
from treatment_dispatch.schemas.common import CamelInput


class TicketCreate(CamelInput):
    tmc_id: int | None = None
    truck_id: int
    driver_id: int
    priority: TicketPriority = TicketPriority.MEDIUM
    scheduled_time: datetime | None = None
    notes: str | None = None
    bridge_ids: list[str] = Field(default_factory=list)


class TicketStatusUpdate(BaseModel):
    status: str


class TicketUpdate(CamelInput):
    truck_id: int | None = None
    driver_id: int | None = None
    priority: TicketPriority | None = None
    scheduled_time: datetime | None = None
    notes: str | None = None

    def to_changes(self) -> dict:
        """Champs fournis, noms de colonnes / Supplied fields keyed by column name."""
        changes = self.model_dump(exclude_unset=True)
        if "driver_id" in changes:
            changes["assigned_driver_id"] = changes.pop("driver_id")
        return changes


class TicketRead(BaseModel):
    """Ticket joint pour affichage / Joined ticket for display."""
    model_config = ConfigDict(from_attributes=True)
    id: int
    ticket_number: str
    tmc_id: int
    created_by: int | None
    assigned_driver_id: int | None
    truck_id: int | None
    priority: TicketPriority
    status: TicketStatus
    scheduled_time: datetime | None
    notes: str | None
    created_at: datetime
    started_at: datetime | None
    completed_at: datetime | None
    driver_name: str | None = None
    truck_number: str | None = None
    bridge_count: int = 0


class BridgeTreatmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    ticket_id: int
    bridge_id: str
    treatment_type: MaterialType | None
    material_used_tons: float | None
    treated_at: datetime | None
