"""Modele Camion / Truck model.

Le statut est la seule source de verite pour la reservation.
Status is the single source of truth for reservation.
"""

import enum

from sqlalchemy import Enum, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from treatment_dispatch.database import Base
from treatment_dispatch.models.enums import enum_values


class TruckStatus(str, enum.Enum):
    """Statut du camion / Truck status."""
    AVAILABLE = "available"
    ASSIGNED = "assigned"
    MAINTENANCE = "maintenance"


class Truck(Base):
    """Camion d'epandage / Treatment truck."""
    __tablename__ = "trucks"
    __table_args__ = (UniqueConstraint("tmc_id", "truck_number", name="uq_truck_number_per_tmc"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    truck_number: Mapped[str] = mapped_column(String(30), nullable=False)
    tmc_id: Mapped[int] = mapped_column(ForeignKey("tmc_centers.id"), nullable=False)
    capacity_tons: Mapped[float | None] = mapped_column(Float)
    status: Mapped[TruckStatus] = mapped_column(
        Enum(TruckStatus, values_callable=enum_values, native_enum=False, length=20),
        default=TruckStatus.AVAILABLE,
        nullable=False,
    )

    # Relations
    tmc: Mapped["TmcCenter"] = relationship(back_populates="trucks")

    def __repr__(self) -> str:
        return f"<Truck {self.truck_number} ({self.status.value})>"
