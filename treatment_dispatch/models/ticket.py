"""Modèles Ticket de traitement / Treatment ticket models.

Un ticket réserve un camion et un chauffeur pour traiter un ensemble de ponts.
A ticket reserves a truck and a driver to treat a set of bridges.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from treatment_dispatch.database import Base
from treatment_dispatch.models.enums import enum_values
from treatment_dispatch.models.material import MaterialType


class TicketStatus(str, enum.Enum):
    """Statut du ticket / Ticket status."""
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TicketPriority(str, enum.Enum):
    """Priorité du ticket / Ticket priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TreatmentTicket(Base):
    """Ticket de traitement / Treatment ticket."""
    __tablename__ = "treatment_tickets"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    ticket_number: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    tmc_id: Mapped[int] = mapped_column(ForeignKey("tmc_centers.id"), nullable=False)
    created_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    assigned_driver_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    # NULL uniquement si le camion a ete supprime / NULL only once the truck was deleted
    truck_id: Mapped[int | None] = mapped_column(ForeignKey("trucks.id", ondelete="SET NULL"))
    priority: Mapped[TicketPriority] = mapped_column(
        Enum(TicketPriority, values_callable=enum_values, native_enum=False, length=20),
        default=TicketPriority.MEDIUM,
        nullable=False,
    )
    status: Mapped[TicketStatus] = mapped_column(
        Enum(TicketStatus, values_callable=enum_values, native_enum=False, length=20),
        default=TicketStatus.ASSIGNED,
        nullable=False,
    )
    scheduled_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Relations
    driver: Mapped["User | None"] = relationship(foreign_keys=[assigned_driver_id])
    truck: Mapped["Truck | None"] = relationship()
    bridges: Mapped[list["BridgeTreatment"]] = relationship(
        back_populates="ticket", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<TreatmentTicket {self.ticket_number} ({self.status.value})>"


class BridgeTreatment(Base):
    """Pont à traiter sous un ticket / Bridge to treat under a ticket.

    Les champs d'usage sont renseignés une seule fois.
    Usage fields are written exactly once.
    """
    __tablename__ = "bridge_treatments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    ticket_id: Mapped[int] = mapped_column(
        ForeignKey("treatment_tickets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    bridge_id: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    treatment_type: Mapped[MaterialType | None] = mapped_column(
        Enum(MaterialType, values_callable=enum_values, native_enum=False, length=20)
    )
    material_used_tons: Mapped[float | None] = mapped_column(Float)
    treated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Relations
    ticket: Mapped["TreatmentTicket"] = relationship(back_populates="bridges")

    def __repr__(self) -> str:
        return f"<BridgeTreatment ticket={self.ticket_id} bridge={self.bridge_id}>"
