"""Routes Historique / Audit history routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.api.deps import require_permission
from treatment_dispatch.database import get_db
from treatment_dispatch.models.user import User
from treatment_dispatch.schemas.audit import AuditEntity, AuditEntryRead
from treatment_dispatch.services.audit_service import entity_history

router = APIRouter()


@router.get("", response_model=list[AuditEntryRead])
async def list_history(
    entity_type: AuditEntity | None = Query(default=None, alias="entityType"),
    entity_id: int | None = Query(default=None, alias="entityId"),
    limit: int = Query(default=100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_permission("audit", "read")),
):
    """Historique filtré par type et entité / History filtered by type and entity."""
    return await entity_history(db, entity_type, entity_id, limit)
