"""
In-memory repository implementations.

Records are kept in insertion-ordered dicts so list queries return rows in
creation order. Stored models are copied on the way in and on the way out;
callers never hold a reference into the store.
"""

import asyncio

from storefront_chat.chat_database.data_models.chat_room import ChatRoom, ChatRoomDatabase
from storefront_chat.chat_database.data_models.message import Message, MessageDatabase
from storefront_chat.chat_database.data_models.user import User, UserDatabase
from storefront_chat.errors import NotFoundError


class InMemoryChatRoomDatabase(ChatRoomDatabase):
    def __init__(self) -> None:
        self._chat_rooms: dict[str, ChatRoom] = {}
        self._lock = asyncio.Lock()

    async def create_chat_room(self, chat_room: ChatRoom) -> ChatRoom:
        self._chat_rooms[chat_room.id] = chat_room.model_copy(deep=True)
        return chat_room.model_copy(deep=True)

    async def get_chat_room_by_id(self, chat_room_id: str) -> ChatRoom | None:
        chat_room = self._chat_rooms.get(chat_room_id)
        return chat_room.model_copy(deep=True) if chat_room else None

    async def get_chat_room_by_pair(self, user_id: str, admin_id: str) -> ChatRoom | None:
        for chat_room in self._chat_rooms.values():
            if chat_room.user_id == user_id and chat_room.admin_id == admin_id:
                return chat_room.model_copy(deep=True)
        return None

    async def get_chat_rooms(self) -> list[ChatRoom]:
        return [chat_room.model_copy(deep=True) for chat_room in self._chat_rooms.values()]

    async def get_chat_rooms_by_user_id(self, user_id: str) -> list[ChatRoom]:
        return [
            chat_room.model_copy(deep=True) for chat_room in self._chat_rooms.values() if chat_room.user_id == user_id
        ]

    async def append_message(self, chat_room_id: str, message_id: str, timestamp: int) -> ChatRoom:
        async with self._lock:
            chat_room = self._chat_rooms.get(chat_room_id)
            if chat_room is None:
                raise NotFoundError(f"Chat room with id {chat_room_id} not found", "ChatRoom")
            chat_room.messages.append(message_id)
            chat_room.update_timestamp = timestamp
            return chat_room.model_copy(deep=True)


class InMemoryMessageDatabase(MessageDatabase):
    def __init__(self) -> None:
        self._messages: dict[str, Message] = {}

    async def create_message(self, message: Message) -> Message:
        self._messages[message.id] = message.model_copy()
        return message.model_copy()

    async def get_message_by_id(self, message_id: str) -> Message | None:
        message = self._messages.get(message_id)
        return message.model_copy() if message else None

    async def get_messages_by_chat_room_id(self, chat_room_id: str) -> list[Message]:
        return [message.model_copy() for message in self._messages.values() if message.chat_room_id == chat_room_id]

    async def delete_message(self, message_id: str) -> bool:
        return self._messages.pop(message_id, None) is not None


class InMemoryUserDatabase(UserDatabase):
    def __init__(self, users: list[User] | None = None) -> None:
        self._users: dict[str, User] = {user.id: user for user in users or []}

    async def create_user(self, user: User) -> User:
        self._users[user.id] = user.model_copy()
        return user.model_copy()

    async def get_user_by_id(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy() if user else None
