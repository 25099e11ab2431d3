"""Collaboration WebSocket endpoint."""

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from ..core.collab import CollaborationHub, WebSocketConnection, get_collab_hub
from ..core.logging import get_logger
from ..middleware.auth import InvalidSocketToken, get_websocket_identity

router = APIRouter(tags=["collaboration"])

logger = get_logger("api.collab")


@router.websocket("/ws/collab")
async def collaboration_socket(
    websocket: WebSocket,
    hub: CollaborationHub = Depends(get_collab_hub),
):
    """Live presence and edit relay.

    Pass ``?token=<jwt>`` to join notes and edit; without it the socket is
    anonymous and only receives online/offline announcements.
    """
    try:
        identity = await get_websocket_identity(websocket)
    except InvalidSocketToken:
        logger.warning("Rejected collaboration socket with invalid token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Invalid token")
        return

    await websocket.accept()
    connection = WebSocketConnection(websocket, identity)
    connection.start()
    hub.register(connection)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            await hub.dispatch(connection, raw)
    except WebSocketDisconnect:
        pass
    finally:
        hub.handle_disconnect(connection)
        await connection.close()
