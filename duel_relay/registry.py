"""Per-connection bookkeeping: which channel is which client, and where it joined."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Dict, Optional, Set

from .channel import Channel


@dataclass
class ClientInfo:
    """Runtime record for one live channel."""

    identity: str
    room_id: Optional[str] = None
    player_id: Optional[str] = None  # set together with room_id on join

    @property
    def in_room(self) -> bool:
        return self.room_id is not None


class ChannelRegistry:
    """Maps live channels to their :class:`ClientInfo`."""

    def __init__(self) -> None:
        self._clients: Dict[Channel, ClientInfo] = {}
        self._identities: Set[str] = set()

    def register(self, channel: Channel) -> str:
        """Create a fresh entry for *channel* and return its generated identity."""
        identity = str(uuid.uuid4())
        while identity in self._identities:
            identity = str(uuid.uuid4())
        self._clients[channel] = ClientInfo(identity=identity)
        self._identities.add(identity)
        return identity

    def lookup(self, channel: Channel) -> Optional[ClientInfo]:
        return self._clients.get(channel)

    def unregister(self, channel: Channel) -> Optional[ClientInfo]:
        info = self._clients.pop(channel, None)
        if info is not None:
            self._identities.discard(info.identity)
        return info

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, channel: object) -> bool:
        return channel in self._clients


__all__ = ["ClientInfo", "ChannelRegistry"]
