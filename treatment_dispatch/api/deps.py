"""
Dépendances d'authentification et d'autorisation / Authentication and authorization dependencies.
Injectées dans les routes via Depends().
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.database import get_db
from treatment_dispatch.models.user import User, UserRole
from treatment_dispatch.utils.auth import decode_token, is_allowed

security = HTTPBearer(auto_error=False)


async def user_from_token(db: AsyncSession, token: str | None) -> User | None:
    """Utilisateur existant porté par un access token / Existing user behind an access token."""
    payload = decode_token(token) if token else None
    if payload is None or payload.get("type") != "access":
        return None
    return await db.get(User, int(payload["sub"]))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extraire et valider l'utilisateur depuis le JWT / Extract and validate user from JWT."""
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required")
    user = await user_from_token(db, credentials.credentials)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    return user


def require_permission(resource: str, action: str):
    """Factory de dépendance consultant la table des rôles / Dependency factory backed by the role policy table."""

    async def _check(user: User = Depends(get_current_user)) -> User:
        if not is_allowed(user.role, resource, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{user.role.value}' may not {action} {resource}",
            )
        return user

    return _check


def scope_tmc_id(user: User, requested: int | None) -> int | None:
    """Centre effectif d'une requête de lecture / Effective dispatch center for a read.

    Admin : filtre libre (None = tous). Autres rôles : toujours leur propre centre.
    Admin: free filter (None = all). Other roles: always their own center.
    """
    if user.role == UserRole.ADMIN:
        return requested
    if user.tmc_id is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No dispatch center assigned")
    return user.tmc_id


def ensure_in_scope(user: User, tmc_id: int, what: str = "Ticket") -> None:
    """Ressource d'un autre centre : 404 pour les non-admins / Other center's resource: 404 for non-admins."""
    if user.role == UserRole.ADMIN:
        return
    if user.tmc_id is None or user.tmc_id != tmc_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")
