"""Modèle Centre de dispatch (TMC) / Dispatch center (TMC) model."""

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from treatment_dispatch.database import Base


class TmcCenter(Base):
    __tablename__ = "tmc_centers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    region: Mapped[str | None] = mapped_column(String(100))
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)

    # Relations
    trucks: Mapped[list["Truck"]] = relationship(back_populates="tmc")
    materials: Mapped[list["Material"]] = relationship(back_populates="tmc")

    def __repr__(self) -> str:
        return f"<TmcCenter {self.name}>"
