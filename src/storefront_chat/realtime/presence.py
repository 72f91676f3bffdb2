"""
Presence registry.

'PresenceRegistry' is the process-wide record of which users currently hold a
live real-time connection, and on which one. It is created once by the
application factory, handed to the 'DeliveryService', and cleared when the
application shuts down. Nothing is persisted: a restart starts empty.

Each user id maps to at most one connection. What happens when a user that is
already present registers again is governed by 'PresencePolicy':

    FIRST_WINS - keep the existing connection, ignore the new one (default,
                 matches the behaviour clients were built against).
    LAST_WINS  - replace the existing connection with the new one, so a user
                 who reconnects without the old socket closing stays reachable.

The registry is only touched from the asyncio event loop, so none of its
operations need a lock.
"""

from enum import StrEnum
from typing import NamedTuple

from loguru import logger

from storefront_chat.realtime.connection import Connection


class PresencePolicy(StrEnum):
    FIRST_WINS = "first_wins"
    LAST_WINS = "last_wins"


class PresenceEntry(NamedTuple):
    user_id: str
    connection: Connection


class PresenceRegistry:
    def __init__(self, policy: PresencePolicy = PresencePolicy.FIRST_WINS) -> None:
        self.policy = policy
        self._entries: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._entries

    def register(self, user_id: str, connection: Connection) -> bool:
        """Bind 'user_id' to 'connection'. Return True if the registry changed."""
        current = self._entries.get(user_id)
        if current is connection:
            return False
        if current is not None and self.policy == PresencePolicy.FIRST_WINS:
            logger.debug(f"User {user_id!r} already present on connection {current.id}, ignoring {connection.id}")
            return False
        if current is not None:
            logger.debug(f"User {user_id!r} moved from connection {current.id} to {connection.id}")
        self._entries[user_id] = connection
        return True

    def unregister(self, connection: Connection) -> list[str]:
        """Drop every entry bound to 'connection' and return the affected user ids."""
        removed = [user_id for user_id, bound in self._entries.items() if bound is connection]
        for user_id in removed:
            del self._entries[user_id]
        return removed

    def lookup(self, user_id: str) -> Connection | None:
        return self._entries.get(user_id)

    def snapshot(self) -> list[PresenceEntry]:
        return [PresenceEntry(user_id, connection) for user_id, connection in self._entries.items()]

    def clear(self) -> None:
        self._entries.clear()
