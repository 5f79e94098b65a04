from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, WebSocket

from ..channel import WebSocketChannel
from ..logging_config import get_logger
from ..session_router import SessionRouter

logger = get_logger(__name__)

router = APIRouter(prefix="", tags=["ws"])


@router.websocket("/")
async def relay_endpoint(ws: WebSocket):
    await ws.accept()
    session_router: SessionRouter = ws.app.state.session_router
    channel = WebSocketChannel(ws, send_timeout=ws.app.state.settings.send_timeout)
    await session_router.connect(channel)

    code: Optional[int] = None
    reason: Optional[str] = None
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                code = message.get("code")
                reason = message.get("reason")
                break
            text = message.get("text")
            if text is None and message.get("bytes") is not None:
                text = message["bytes"].decode("utf-8", errors="replace")
            if text is not None:
                await session_router.handle_frame(channel, text)
    except Exception:
        logger.exception("WebSocket error")
    finally:
        channel.mark_closed()
        await session_router.disconnect(channel, code, reason)
