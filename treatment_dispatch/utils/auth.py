"""
Utilitaires d'authentification / Authentication utilities.
Hashing de mots de passe, tokens JWT et table des politiques de rôles.
Password hashing, JWT tokens and the role policy table.
"""

from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from treatment_dispatch.config import settings
from treatment_dispatch.models.user import User, UserRole

ADMIN = UserRole.ADMIN
DISPATCHER = UserRole.DISPATCHER
DRIVER = UserRole.DRIVER

# Table unique {(ressource, action) -> rôles autorisés} / Single {(resource, action) -> allowed roles} table
ROLE_POLICY: dict[tuple[str, str], frozenset[UserRole]] = {
    ("tickets", "read"): frozenset({ADMIN, DISPATCHER, DRIVER}),
    ("tickets", "create"): frozenset({ADMIN, DISPATCHER}),
    ("tickets", "update"): frozenset({ADMIN, DISPATCHER}),
    ("tickets", "transition"): frozenset({ADMIN, DISPATCHER, DRIVER}),
    ("tickets", "delete"): frozenset({ADMIN, DISPATCHER}),
    ("treatments", "create"): frozenset({ADMIN, DISPATCHER, DRIVER}),
    ("materials", "read"): frozenset({ADMIN, DISPATCHER, DRIVER}),
    ("materials", "update"): frozenset({ADMIN, DISPATCHER}),
    ("trucks", "read"): frozenset({ADMIN, DISPATCHER, DRIVER}),
    ("trucks", "create"): frozenset({ADMIN, DISPATCHER}),
    ("trucks", "update"): frozenset({ADMIN, DISPATCHER}),
    ("trucks", "delete"): frozenset({ADMIN, DISPATCHER}),
    ("users", "read"): frozenset({ADMIN}),
    ("users", "create"): frozenset({ADMIN}),
    ("users", "update"): frozenset({ADMIN}),
    ("users", "delete"): frozenset({ADMIN}),
    ("dashboard", "statewide"): frozenset({ADMIN}),
    ("dashboard", "tmc"): frozenset({ADMIN, DISPATCHER, DRIVER}),
    ("weather", "read"): frozenset({ADMIN, DISPATCHER, DRIVER}),
    ("audit", "read"): frozenset({ADMIN}),
}


def is_allowed(role: UserRole, resource: str, action: str) -> bool:
    """Vérifier la table des politiques / Check the policy table. Unknown operations are denied."""
    return role in ROLE_POLICY.get((resource, action), frozenset())


def hash_password(password: str) -> str:
    """Hasher un mot de passe / Hash a password."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Vérifier un mot de passe / Verify a password."""
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def token_claims(user: User) -> dict:
    """Identité exposée dans le token et la réponse de login / Identity carried by the token and login reply."""
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role.value,
        "tmc_id": user.tmc_id,
        "name": user.name,
    }


def create_access_token(user: User) -> str:
    """Créer un access token JWT (24h) / Create a JWT access token (24h)."""
    expire = datetime.now(timezone.utc) + timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    payload = {"sub": str(user.id), "type": "access", "exp": expire, **token_claims(user)}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict | None:
    """Décoder un token JWT / Decode a JWT token. Returns None if invalid."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
