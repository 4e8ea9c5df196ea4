"""
Routes d'authentification / Authentication routes.
Login et profil utilisateur / Login and current profile.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.api.deps import get_current_user
from treatment_dispatch.config import settings
from treatment_dispatch.database import get_db
from treatment_dispatch.models.audit import AuditLog
from treatment_dispatch.models.user import User
from treatment_dispatch.rate_limit import limiter
from treatment_dispatch.schemas.auth import Actor, LoginRequest, LoginResponse
from treatment_dispatch.utils.auth import create_access_token, token_claims, verify_password

router = APIRouter()


def _client_ip(request: Request) -> str:
    """Extraire l'IP client / Extract client IP (supports X-Forwarded-For behind proxy)."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def login(request: Request, data: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Connexion par email / Login with email and password."""
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()
    ip = _client_ip(request)
    now = datetime.now(timezone.utc).isoformat(timespec="seconds")

    if user is None or not verify_password(data.password, user.password_hash):
        # Journal de tentative échouée / Log failed login attempt
        db.add(AuditLog(
            entity_type="auth", entity_id=user.id if user else 0, action="LOGIN_FAILED",
            changes=f'{{"ip":"{ip}"}}', user=data.email, timestamp=now,
        ))
        await db.commit()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    # Journal de connexion réussie / Log successful login
    db.add(AuditLog(
        entity_type="auth", entity_id=user.id, action="LOGIN",
        changes=f'{{"ip":"{ip}"}}', user=user.email, timestamp=now,
    ))
    return LoginResponse(token=create_access_token(user), user=Actor(**token_claims(user)))


@router.get("/me", response_model=Actor)
async def me(user: User = Depends(get_current_user)):
    """Profil de l'utilisateur connecté / Current user profile."""
    return Actor(**token_claims(user))
