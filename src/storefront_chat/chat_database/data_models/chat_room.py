"""
Chat room data model and storage interface.

A chat room pairs exactly one end user with one admin. The room owns the
ordered list of its message ids; the messages themselves live in the
'MessageDatabase'. At most one room exists per (user, admin) pair, which the
controller enforces at creation time via 'get_chat_room_by_pair'.

'append_message' is a single repository operation rather than a
read-modify-write in the controller, so concurrent appends to the same room
cannot drop each other's ids.

Concrete implementation: 'InMemoryChatRoomDatabase'.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field


class ChatRoom(BaseModel):
    """A support conversation between one user and one admin."""

    id: str
    user_id: str
    admin_id: str
    messages: list[str] = Field(default_factory=list)
    create_timestamp: int
    update_timestamp: int


class ChatRoomDatabase(ABC):
    """Abstract repository for 'ChatRoom' records."""

    @abstractmethod
    async def create_chat_room(self, chat_room: ChatRoom) -> ChatRoom:
        pass

    @abstractmethod
    async def get_chat_room_by_id(self, chat_room_id: str) -> ChatRoom | None:
        pass

    @abstractmethod
    async def get_chat_room_by_pair(self, user_id: str, admin_id: str) -> ChatRoom | None:
        pass

    @abstractmethod
    async def get_chat_rooms(self) -> list[ChatRoom]:
        pass

    @abstractmethod
    async def get_chat_rooms_by_user_id(self, user_id: str) -> list[ChatRoom]:
        pass

    @abstractmethod
    async def append_message(self, chat_room_id: str, message_id: str, timestamp: int) -> ChatRoom:
        """Append 'message_id' to the room's message list and bump its update timestamp.

        Raise 'NotFoundError' if the room does not exist.
        """
        pass
