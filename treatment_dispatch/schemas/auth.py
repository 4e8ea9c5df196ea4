"""
Schémas d'authentification / Authentication schemas.
"""

from pydantic import BaseModel, Field

from treatment_dispatch.models.user import UserRole


class LoginRequest(BaseModel):
    """Requête de connexion / Login request."""
    email: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=1, max_length=200)


class Actor(BaseModel):
    """Identité portée par le token / Identity carried by the token."""
    id: int
    email: str
    role: UserRole
    tmc_id: int | None
    name: str


class LoginResponse(BaseModel):
    token: str
    user: Actor
