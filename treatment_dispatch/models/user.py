"""
Modèles Utilisateur et préférences / User and preference models.
Un utilisateur porte un rôle unique et un centre de rattachement.
A user carries a single role and a home dispatch center.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from treatment_dispatch.database import Base
from treatment_dispatch.models.enums import enum_values


class UserRole(str, enum.Enum):
    """Rôle applicatif / Application role."""
    ADMIN = "admin"
    DISPATCHER = "dispatcher"
    DRIVER = "driver"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Utilisateur de l'application / Application user."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, values_callable=enum_values, native_enum=False, length=20), nullable=False
    )
    tmc_id: Mapped[int | None] = mapped_column(ForeignKey("tmc_centers.id", ondelete="SET NULL"))
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    # Relations
    tmc: Mapped["TmcCenter | None"] = relationship(lazy="selectin")
    preferences: Mapped[list["UserTmcPreference"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def tmc_name(self) -> str | None:
        return self.tmc.name if self.tmc else None

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value})>"


class UserTmcPreference(Base):
    """Centres suivis par un utilisateur / Dispatch centers monitored by a user."""

    __tablename__ = "user_tmc_preferences"
    __table_args__ = (UniqueConstraint("user_id", "tmc_id", name="uq_user_tmc_preference"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    tmc_id: Mapped[int] = mapped_column(ForeignKey("tmc_centers.id", ondelete="CASCADE"), nullable=False)
    is_monitoring: Mapped[bool] = mapped_column(Boolean, default=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)

    # Relations
    user: Mapped["User"] = relationship(back_populates="preferences")
    tmc: Mapped["TmcCenter"] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<UserTmcPreference user={self.user_id} tmc={self.tmc_id} {self.is_monitoring}>"
