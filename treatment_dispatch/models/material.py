"""Modèle Stock de matériaux / Material inventory model."""

import enum
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from treatment_dispatch.database import Base
from treatment_dispatch.models.enums import enum_values


class MaterialType(str, enum.Enum):
    """Type de matériau de traitement / Treatment material type."""
    SALT = "salt"
    SAND = "sand"
    BRINE = "brine"


class Material(Base):
    """Stock par centre et par matériau / Stock per center and material.

    La quantité peut devenir négative : aucun plancher n'est appliqué.
    Quantity may go negative: no floor is enforced.
    """
    __tablename__ = "materials"
    __table_args__ = (UniqueConstraint("tmc_id", "material_type", name="uq_tmc_material_type"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tmc_id: Mapped[int] = mapped_column(ForeignKey("tmc_centers.id"), nullable=False)
    material_type: Mapped[MaterialType] = mapped_column(
        Enum(MaterialType, values_callable=enum_values, native_enum=False, length=20), nullable=False
    )
    quantity_tons: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # Relations
    tmc: Mapped["TmcCenter"] = relationship(back_populates="materials")

    def __repr__(self) -> str:
        return f"<Material tmc={self.tmc_id} {self.material_type.value}={self.quantity_tons}>"
