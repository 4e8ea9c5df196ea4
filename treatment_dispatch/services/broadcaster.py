"""Diffusion temps reel des mutations / Real-time broadcast of mutations.

Publication/abonnement en memoire sur WebSocket. Appele uniquement apres commit :
un echec d'envoi ne peut jamais annuler un etat deja valide.
In-memory publish/subscribe over WebSockets. Only called after commit, so a
failed push can never undo committed state.
"""

import json
import logging
from typing import Any

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)

TICKET_CREATED = "ticket_created"
TICKET_UPDATED = "ticket_updated"
TICKET_DELETED = "ticket_deleted"
TRUCK_CREATED = "truck_created"
TRUCK_UPDATED = "truck_updated"
TRUCK_DELETED = "truck_deleted"
MATERIAL_UPDATED = "material_updated"
USER_CREATED = "user_created"
USER_UPDATED = "user_updated"
USER_DELETED = "user_deleted"

EVENTS = frozenset({
    TICKET_CREATED, TICKET_UPDATED, TICKET_DELETED,
    TRUCK_CREATED, TRUCK_UPDATED, TRUCK_DELETED,
    MATERIAL_UPDATED,
    USER_CREATED, USER_UPDATED, USER_DELETED,
})


class EventBroadcaster:
    """Gestionnaire de connexions WebSocket / WebSocket connection manager."""

    def __init__(self):
        self.active_connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info("Observer connected (%d active)", len(self.active_connections))

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
            logger.info("Observer disconnected (%d active)", len(self.active_connections))

    async def publish(self, event: str, payload: Any) -> int:
        """Envoyer a tous les clients connectes / Push to every connected client.

        Best-effort, au plus une fois. Retourne le nombre d'observateurs atteints.
        Best-effort, at-most-once. Returns how many observers were reached.
        """
        if event not in EVENTS:
            raise ValueError(f"Unknown event: {event}")
        try:
            data = json.dumps({"event": event, "data": jsonable_encoder(payload)}, ensure_ascii=False)
        except (TypeError, ValueError):
            logger.exception("Could not serialise %s payload, event dropped", event)
            return 0

        delivered = 0
        disconnected = []
        for connection in list(self.active_connections):
            try:
                await connection.send_text(data)
                delivered += 1
            except Exception:
                logger.warning("Dropping observer after failed %s push", event)
                disconnected.append(connection)
        for conn in disconnected:
            self.disconnect(conn)
        return delivered


# Singleton global / Global singleton
broadcaster = EventBroadcaster()
