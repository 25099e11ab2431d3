"""WebSocket adapter for the collaboration hub."""

import asyncio
import uuid
from typing import Any, Dict, Optional

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from ...config import get_settings
from ...security import Identity
from ..logging import get_logger

logger = get_logger("collab.connection")


class WebSocketConnection:
    """A live socket with its own outbox.

    ``deliver`` only enqueues; a pump task writes frames to the socket in
    order, so a slow peer delays nobody but itself. When the outbox is full
    new frames for that peer are dropped.
    """

    def __init__(
        self,
        websocket: WebSocket,
        identity: Optional[Identity],
        max_queue: Optional[int] = None,
    ):
        self.websocket = websocket
        self.identity = identity
        self.connection_id = uuid.uuid4().hex
        self._outbox: asyncio.Queue = asyncio.Queue(
            maxsize=max_queue or get_settings().collab_outbox_size
        )
        self._pump_task: Optional[asyncio.Task] = None
        self._closed = False

    def start(self) -> None:
        self._pump_task = asyncio.create_task(
            self._pump(), name=f"collab-pump-{self.connection_id}"
        )

    def deliver(self, payload: Dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            self._outbox.put_nowait(payload)
        except asyncio.QueueFull:
            logger.warning(
                "Outbox full, dropping frame",
                extra={"connection_id": self.connection_id, "type": payload.get("type")},
            )

    async def _pump(self) -> None:
        while True:
            payload = await self._outbox.get()
            if payload is None:
                return
            try:
                await self.websocket.send_json(payload)
            except (WebSocketDisconnect, RuntimeError, OSError) as exc:
                # peer went away; the receive loop will notice and clean up
                logger.debug(
                    "Send failed",
                    extra={"connection_id": self.connection_id, "error": str(exc)},
                )
                self._closed = True
                return

    async def close(self) -> None:
        """Stop accepting frames and flush what is already queued."""
        if self._pump_task is None:
            self._closed = True
            return
        if not self._closed:
            self._closed = True
            try:
                self._outbox.put_nowait(None)
            except asyncio.QueueFull:
                self._pump_task.cancel()
        try:
            await self._pump_task
        except asyncio.CancelledError:
            pass
