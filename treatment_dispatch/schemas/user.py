"""
Schémas Utilisateur / User schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr

from treatment_dispatch.models.user import UserRole
from treatment_dispatch.schemas.common import CamelInput


class UserCreate(CamelInput):
    email: EmailStr
    password: str
    role: UserRole
    tmc_id: int | None = None
    name: str
    phone: str | None = None


class UserUpdate(CamelInput):
    email: EmailStr | None = None
    password: str | None = None
    role: UserRole | None = None
    tmc_id: int | None = None
    name: str | None = None
    phone: str | None = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    email: str
    role: UserRole
    tmc_id: int | None
    tmc_name: str | None = None
    name: str
    phone: str | None
    created_at: datetime
