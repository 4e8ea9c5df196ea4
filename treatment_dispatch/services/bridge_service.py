"""Ponts : inventaire brut et statut public / Bridges: raw inventory and public status.

L'inventaire provient d'un fichier CSV prétraité (colonnes id, lat, long, name, condition).
The inventory comes from a pre-processed CSV file (id, lat, long, name, condition columns).
"""

import csv
import logging
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.config import settings
from treatment_dispatch.models.ticket import BridgeTreatment, TreatmentTicket

logger = logging.getLogger(__name__)

OPTIONAL_COLUMNS = ("yearBuilt", "facilityCarried", "featuresDesc", "location", "owner")

_cache: dict[str, list[dict]] = {}


def _to_float(value: str | None) -> float:
    try:
        return float(value) if value else 0.0
    except ValueError:
        return 0.0


def load_bridges(path: str | Path | None = None) -> list[dict]:
    """Charger l'inventaire (mis en cache par chemin) / Load the inventory, cached per path."""
    path = Path(path or settings.BRIDGE_DATA_PATH)
    key = str(path)
    if key in _cache:
        return _cache[key]
    if not path.is_file():
        logger.warning("Bridge inventory not found at %s", path)
        return []

    bridges = []
    with path.open(newline="", encoding="utf-8-sig") as f:
        for record in csv.DictReader(f):
            bridge_id = (record.get("id") or "").strip()
            if not bridge_id:
                continue
            bridge = {
                "id": bridge_id,
                "lat": _to_float(record.get("lat")),
                "long": _to_float(record.get("long")),
                "name": (record.get("name") or "").strip(),
                "condition": (record.get("condition") or "Unknown").strip(),
            }
            for column in OPTIONAL_COLUMNS:
                if record.get(column):
                    bridge[column] = record[column].strip()
            bridges.append(bridge)
    _cache[key] = bridges
    logger.info("Loaded %d bridges from %s", len(bridges), path)
    return bridges


def clear_cache() -> None:
    _cache.clear()


async def get_public_bridge_status(db: AsyncSession) -> list[dict]:
    """Dernier traitement par pont / Latest treatment row per bridge.

    Une ligne planifiée non traitée passe devant les traitements passés,
    sinon le traitement le plus récent l'emporte.
    A scheduled, untreated row ranks first; otherwise the most recent treatment wins.
    """
    result = await db.execute(
        select(
            BridgeTreatment.bridge_id,
            BridgeTreatment.treated_at,
            BridgeTreatment.treatment_type,
            TreatmentTicket.status,
            TreatmentTicket.scheduled_time,
        )
        .outerjoin(TreatmentTicket, BridgeTreatment.ticket_id == TreatmentTicket.id)
        .order_by(BridgeTreatment.bridge_id, BridgeTreatment.id)
    )

    latest: dict[str, dict] = {}
    for bridge_id, treated_at, treatment_type, ticket_status, scheduled_time in result.all():
        current = latest.get(bridge_id)
        if current is not None:
            if current["treated_at"] is None:
                continue
            if treated_at is not None and treated_at <= current["treated_at"]:
                continue
        latest[bridge_id] = {
            "bridge_id": bridge_id,
            "treated_at": treated_at,
            "treatment_type": treatment_type.value if treatment_type else None,
            "ticket_status": ticket_status.value if ticket_status else None,
            "scheduled_time": scheduled_time,
        }
    return list(latest.values())
