"""
PhoLight - WebSocket Relay Manager
====================================
The transport boundary. Accepts WebSocket connections, feeds every inbound
frame to the BroadcastRouter, and delivers the sends it returns.

Delivery is best-effort: a target that is not open is skipped, and a send
that raises is logged and skipped without stopping the rest of the fan-out.
There is no queueing or retry.

Usage:
    @app.websocket("/")
    async def ws_endpoint(websocket: WebSocket):
        await relay.serve(websocket)
"""

import json
import logging
from typing import Any, Iterable

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from pholight.counter import Send
from pholight.password import PasswordAuthority
from pholight.registry import ConnectionRegistry
from pholight.router import BroadcastRouter


logger = logging.getLogger("pholight.websocket")


class RelayManager:
    """
    Owns the relay state for one running server and moves bytes in and out.

    All handlers run on the event loop and never await between reading
    state and mutating it, so registry and password updates are linear.

    Attributes:
        registry:  Live connections and their roles.
        authority: Host password owner.
        router:    Dispatch core operating on the two above.
    """

    def __init__(
        self,
        authority: PasswordAuthority | None = None,
        registry: ConnectionRegistry | None = None,
        exclusive_host: bool = False,
    ):
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.authority = authority if authority is not None else PasswordAuthority()
        self.router = BroadcastRouter(self.registry, self.authority, exclusive_host=exclusive_host)

    async def connect(self, websocket: WebSocket) -> None:
        """Accept the socket, register it as audience and publish the count."""
        await websocket.accept()
        await self.deliver(self.router.connected(websocket))

    async def disconnect(self, websocket: WebSocket) -> None:
        """Unregister a closed socket and re-publish the count to the rest."""
        await self.deliver(self.router.disconnected(websocket))

    async def handle(self, websocket: WebSocket, raw: str | bytes) -> int:
        """Dispatch one inbound frame. Returns the number of messages delivered."""
        return await self.deliver(self.router.dispatch(websocket, raw))

    async def serve(self, websocket: WebSocket) -> None:
        """
        Run one connection from accept to close.

        Text and binary frames are both accepted; binary frames are treated
        as UTF-8 JSON like text frames.
        """
        await self.connect(websocket)
        try:
            while True:
                event = await websocket.receive()
                if event["type"] == "websocket.disconnect":
                    break
                raw = event.get("text")
                if raw is None:
                    raw = event.get("bytes")
                if raw is not None:
                    await self.handle(websocket, raw)
        finally:
            await self.disconnect(websocket)

    async def deliver(self, sends: Iterable[Send]) -> int:
        """
        Perform a list of sends.

        Returns:
            Number of sends that reached an open socket without error.
        """
        delivered = 0
        for target, payload in sends:
            if await self.send(target, payload):
                delivered += 1
        return delivered

    async def send(self, websocket: Any, payload: dict) -> bool:
        """
        Send one JSON message to one socket, swallowing transport errors.

        Returns:
            True if the message was handed to the socket.
        """
        if not self.is_open(websocket):
            logger.debug(f"Skipped {payload.get('type')} to a socket that is not open")
            return False
        try:
            await websocket.send_text(json.dumps(payload, ensure_ascii=False))
        except Exception as e:
            # Half-closed socket; the close event will unregister it.
            logger.warning(f"Failed to send {payload.get('type')}: {type(e).__name__}: {e}")
            return False
        logger.debug(f"Delivered {payload.get('type')}")
        return True

    @staticmethod
    def is_open(websocket: Any) -> bool:
        return (
            getattr(websocket, "client_state", None) == WebSocketState.CONNECTED
            and getattr(websocket, "application_state", None) == WebSocketState.CONNECTED
        )

    @property
    def participant_count(self) -> int:
        return self.router.counter.count

    @property
    def client_count(self) -> int:
        """Return the number of currently connected clients."""
        return len(self.registry)
