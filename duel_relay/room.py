from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .channel import Channel
from .constants import ROOM_CAPACITY
from .logging_config import get_logger
from .schemas import GameStartedEvent, OutboundEvent, encode_message

logger = get_logger(__name__)


@dataclass(frozen=True)
class Member:
    channel: Channel
    identity: str


class Room:
    """Runtime state and member channels for one two-player session."""

    def __init__(self, room_id: str):
        self.room_id = room_id
        # player_id -> member, in join order
        self.members: Dict[str, Member] = {}

    # -------------------- Player management -------------------- #

    def has_member(self, player_id: str) -> bool:
        return player_id in self.members

    async def add_member(self, player_id: str, channel: Channel, identity: str) -> None:
        """Add a player. The caller must have checked :meth:`has_member` first.

        Reaching exactly ``ROOM_CAPACITY`` members announces the game start to
        everyone in the room.
        """
        self.members[player_id] = Member(channel=channel, identity=identity)
        if len(self.members) == ROOM_CAPACITY:
            logger.info("Room full, starting game", room_id=self.room_id, players=self.player_ids())
            await self.broadcast(GameStartedEvent())

    def remove_member(self, player_id: str) -> None:
        self.members.pop(player_id, None)

    def member_count(self) -> int:
        return len(self.members)

    def is_full(self) -> bool:
        return len(self.members) >= ROOM_CAPACITY

    def player_ids(self) -> List[str]:
        return list(self.members)

    # -------------------- Broadcasting helpers -------------------- #

    async def broadcast(self, event: OutboundEvent, exclude: Optional[Channel] = None) -> None:
        """Send *event* to every open member channel except *exclude*.

        Closed channels are skipped; removing their members is the router's job.
        """
        text = encode_message(event)
        for member in list(self.members.values()):
            if member.channel is exclude or not member.channel.is_open:
                continue
            await member.channel.send(text)


class RoomTable:
    """All active rooms keyed by session id."""

    def __init__(self) -> None:
        self._rooms: Dict[str, Room] = {}

    def get_or_create(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            room = self._rooms[room_id] = Room(room_id)
            logger.info("Room created", room_id=room_id)
        return room

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def delete(self, room_id: str) -> None:
        if self._rooms.pop(room_id, None) is not None:
            logger.info("Room deleted", room_id=room_id)

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms


__all__ = ["Member", "Room", "RoomTable"]
