"""Journal d'audit / Audit trail.

Les entrées sont ajoutées dans la transaction de la commande qu'elles décrivent.
Entries are added inside the transaction of the command they describe.
"""

import json
from datetime import datetime, timezone

from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.models.audit import AuditLog
from treatment_dispatch.models.user import User


async def log_audit(
    db: AsyncSession,
    entity_type: str,
    entity_id: int,
    action: str,
    actor: User | None,
    changes: dict | None = None,
) -> None:
    """Enregistrer une action dans l'historique / Log an action to audit_logs."""
    db.add(AuditLog(
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        changes=json.dumps(jsonable_encoder(changes), ensure_ascii=False) if changes else None,
        user=actor.email if actor else "system",
        timestamp=datetime.now(timezone.utc).isoformat(timespec="seconds"),
    ))


async def entity_history(
    db: AsyncSession,
    entity_type: str | None = None,
    entity_id: int | None = None,
    limit: int = 100,
) -> list[AuditLog]:
    """Entrées d'un type ou d'une entité, plus récentes d'abord / Entries for a type or entity, newest first."""
    query = select(AuditLog).order_by(AuditLog.id.desc()).limit(limit)
    if entity_type is not None:
        query = query.where(AuditLog.entity_type == entity_type)
    if entity_id is not None:
        query = query.where(AuditLog.entity_id == entity_id)
    result = await db.execute(query)
    return list(result.scalars().all())
