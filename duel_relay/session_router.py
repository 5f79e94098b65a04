"""Message dispatch for the relay.

The router owns the channel registry and the room table. It is
framework-agnostic: the WebSocket endpoint feeds it frames and close
notifications through :class:`~duel_relay.channel.Channel` objects.

Every client error (bad JSON, missing fields, duplicate join, messages sent
outside a room) ends in a log line and nothing else. No error reply is sent
and the connection is never closed by the router.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from .channel import Channel
from .logging_config import get_logger
from .registry import ChannelRegistry, ClientInfo
from .room import Room, RoomTable
from .schemas import (
    ActionCompleteEvent,
    ActionCompleteRequest,
    ChatEvent,
    ChatRequest,
    DisconnectEvent,
    GameOverEvent,
    GameOverRequest,
    InboundMessage,
    JoinRoomRequest,
    MessageDecodeError,
    decode_message,
)

logger = get_logger(__name__)


class SessionRouter:
    def __init__(self) -> None:
        self.clients = ChannelRegistry()
        self.rooms = RoomTable()
        # Broadcasts await socket writes; the lock keeps each handler atomic.
        self._lock = asyncio.Lock()

    # ---------------------------------------------------------------------
    # Connection lifecycle
    # ---------------------------------------------------------------------

    async def connect(self, channel: Channel) -> str:
        async with self._lock:
            client_id = self.clients.register(channel)
        logger.info("New client connected", client_id=client_id)
        return client_id

    async def disconnect(self, channel: Channel, code: Optional[int] = None, reason: Optional[str] = None) -> None:
        """Forget *channel* and tell the rest of its room the player is gone."""
        async with self._lock:
            info = self.clients.unregister(channel)
            if info is None:
                return
            logger.info(
                "Client disconnected",
                client_id=info.identity,
                player_id=info.player_id,
                code=code,
                reason=reason,
            )
            if info.room_id and info.player_id:
                await self._handle_player_disconnect(info.room_id, info.player_id)

    async def _handle_player_disconnect(self, room_id: str, player_id: str) -> None:
        room = self.rooms.get(room_id)
        if room is None:
            logger.info("Room not found during disconnect", room_id=room_id, player_id=player_id)
            return

        # The leaving player's channel is already closed, so the open check in
        # broadcast skips it. Removal has to come after the broadcast.
        await room.broadcast(DisconnectEvent(player_id=player_id))
        room.remove_member(player_id)
        logger.info("Player removed from room due to disconnect", room_id=room_id, player_id=player_id)

        if room.member_count() == 0:
            self.rooms.delete(room_id)

    # ---------------------------------------------------------------------
    # Inbound messages
    # ---------------------------------------------------------------------

    async def handle_frame(self, channel: Channel, frame: str) -> None:
        """Decode one text frame from *channel* and dispatch it."""
        try:
            message = decode_message(frame)
        except MessageDecodeError as exc:
            info = self.clients.lookup(channel)
            logger.warning(
                "Dropping undecodable message",
                client_id=info.identity if info else None,
                error=str(exc),
            )
            return
        await self.dispatch(channel, message)

    async def dispatch(self, channel: Channel, message: InboundMessage) -> None:
        async with self._lock:
            info = self.clients.lookup(channel)
            if info is None:
                return

            logger.debug("Received message", client_id=info.identity, type=message.type)

            if isinstance(message, JoinRoomRequest):
                await self._handle_join_room(channel, info, message)
            elif isinstance(message, ChatRequest):
                await self._handle_chat(info, message)
            elif isinstance(message, ActionCompleteRequest):
                await self._handle_action_complete(info)
            elif isinstance(message, GameOverRequest):
                await self._handle_game_over(info)
            else:
                logger.info("Unknown message type", client_id=info.identity, type=message.type)

    def _current_room(self, info: ClientInfo, action: str) -> Optional[Room]:
        """The room *info* has joined, or ``None`` (logged) if there is none."""
        if not info.room_id:
            logger.info("Not in any room", client_id=info.identity, action=action)
            return None
        room = self.rooms.get(info.room_id)
        if room is None:
            logger.info("Room not found", client_id=info.identity, room_id=info.room_id, action=action)
        return room

    async def _handle_join_room(self, channel: Channel, info: ClientInfo, message: JoinRoomRequest) -> None:
        room_id, player_id = message.room_id, message.player_id
        if not room_id or not player_id:
            logger.info("roomId and playerId are required", client_id=info.identity)
            return
        if info.room_id is not None:
            # Players leave a room only by disconnecting
            logger.info(
                "Client already in a room, ignoring join",
                client_id=info.identity,
                current_room_id=info.room_id,
                room_id=room_id,
            )
            return

        room = self.rooms.get_or_create(room_id)
        if room.has_member(player_id):
            logger.info("Player already in room, ignoring join", room_id=room_id, player_id=player_id)
            return
        if room.is_full():
            logger.info("Room is full, ignoring join", room_id=room_id, player_id=player_id)
            return

        await room.add_member(player_id, channel, info.identity)
        info.room_id = room_id
        info.player_id = player_id
        logger.info("Player joined room", room_id=room_id, player_id=player_id, client_id=info.identity)

    async def _handle_chat(self, info: ClientInfo, message: ChatRequest) -> None:
        room = self._current_room(info, "chat")
        if room is None:
            return
        logger.info(
            "Chat message",
            room_id=room.room_id,
            player_id=info.player_id,
            display_name=message.display_name,
        )
        # Sender included
        await room.broadcast(
            ChatEvent(
                player_id=info.player_id,
                display_name=message.display_name,
                message=message.message,
            )
        )

    async def _handle_action_complete(self, info: ClientInfo) -> None:
        room = self._current_room(info, "action_complete")
        if room is None:
            return
        logger.info("Player completed action", room_id=room.room_id, player_id=info.player_id)
        await room.broadcast(ActionCompleteEvent(player_id=info.player_id))

    async def _handle_game_over(self, info: ClientInfo) -> None:
        room = self._current_room(info, "game_over")
        if room is None:
            return
        logger.info("Player reported game over", room_id=room.room_id, player_id=info.player_id)
        await room.broadcast(GameOverEvent(player_id=info.player_id))


__all__ = ["SessionRouter"]
