"""WebSocket temps reel des mutations / Real-time WebSocket for mutation events."""

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession

from treatment_dispatch.api.deps import user_from_token
from treatment_dispatch.database import get_db
from treatment_dispatch.services.broadcaster import broadcaster

router = APIRouter()


@router.websocket("/ws/events")
async def websocket_events(
    websocket: WebSocket,
    token: str = Query(default=""),
    db: AsyncSession = Depends(get_db),
):
    """Connexion WebSocket authentifiee / Authenticated WebSocket connection.

    Messages : {"event": ..., "data": ...}. Filtrage par centre cote client.
    Messages: {"event": ..., "data": ...}. Clients filter by center themselves.
    """
    # Authentification JWT + utilisateur existant / JWT plus an existing user
    user = await user_from_token(db, token)
    # Liberer la connexion DB pour la duree du socket / Release the DB connection for the socket's lifetime
    await db.close()
    if user is None:
        await websocket.close(code=4001, reason="Invalid token")
        return

    await broadcaster.connect(websocket)
    try:
        while True:
            # Garder la connexion ouverte, recevoir pings / Keep connection alive
            await websocket.receive_text()
    except WebSocketDisconnect:
        broadcaster.disconnect(websocket)
