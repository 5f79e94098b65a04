"""Transport boundary between the relay core and the WebSocket layer."""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from .logging_config import get_logger

logger = get_logger(__name__)


class Channel(Protocol):
    """What the relay core needs from a connection: an open flag and a text send."""

    @property
    def is_open(self) -> bool: ...

    async def send(self, text: str) -> None: ...


class WebSocketChannel:
    """Adapts a FastAPI ``WebSocket`` to :class:`Channel`.

    Instances are hashable by identity, so they can key the channel registry.
    A send that takes longer than *send_timeout* seconds gives up and marks
    the channel closed; the router holds its lock while sending.
    """

    def __init__(self, ws: WebSocket, send_timeout: Optional[float] = None):
        self.ws = ws
        self.send_timeout = send_timeout
        self._closed = False

    @property
    def is_open(self) -> bool:
        return (
            not self._closed
            and self.ws.client_state == WebSocketState.CONNECTED
            and self.ws.application_state == WebSocketState.CONNECTED
        )

    def mark_closed(self) -> None:
        self._closed = True

    async def send(self, text: str) -> None:
        """Send *text*; does nothing if the socket is closed or closes mid-send."""
        if not self.is_open:
            return
        try:
            await asyncio.wait_for(self.ws.send_text(text), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            # before OSError: TimeoutError subclasses it
            logger.warning("Send timed out, treating websocket as closed", timeout=self.send_timeout)
            self._closed = True
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            logger.debug("Send on closed websocket skipped", error=str(exc))
            self._closed = True

    def __repr__(self) -> str:
        client = self.ws.client
        peer = f"{client.host}:{client.port}" if client else "unknown"
        return f"WebSocketChannel({peer}, open={self.is_open})"


__all__ = ["Channel", "WebSocketChannel"]
