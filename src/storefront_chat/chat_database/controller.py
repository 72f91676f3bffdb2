"""
Chat controller (Facade).

'ChatController' is the single entry point for durable chat operations. It
coordinates the room, message and user repositories to create support rooms,
append messages to them and read them back with the participants' public
profiles resolved.

The controller is independent of the real-time layer: the WebSocket delivery
service only calls into it when persist-on-send is enabled.

'ClientChatRoom' and 'ClientMessage' extend the stored models with the
resolved profile fields the frontend needs but that are not stored on the
records themselves.
"""

from loguru import logger
from pydantic import BaseModel

from storefront_chat.chat_database.data_models.chat_room import ChatRoom, ChatRoomDatabase
from storefront_chat.chat_database.data_models.message import Message, MessageDatabase
from storefront_chat.chat_database.data_models.user import UserDatabase, UserProfile
from storefront_chat.errors import NotFoundError, ValidationError
from storefront_chat.utils.database import generate_uid
from storefront_chat.utils.time import get_current_timestamp


class ChatRoomInput(BaseModel):
    user: str | None = None
    admin: str | None = None


class MessageInput(BaseModel):
    message: str | None = None
    sender: str | None = None
    receiver: str | None = None


class ClientChatRoom(ChatRoom):
    user: UserProfile | None


class ClientMessage(Message):
    sender: UserProfile | None


class ChatController:
    def __init__(
        self,
        chat_room_db: ChatRoomDatabase,
        message_db: MessageDatabase,
        user_db: UserDatabase,
    ):
        self.chat_room_db = chat_room_db
        self.message_db = message_db
        self.user_db = user_db

    async def _get_profile(self, user_id: str) -> UserProfile | None:
        user = await self.user_db.get_user_by_id(user_id)
        return user.profile() if user else None

    async def create_room(self, user_id: str | None, admin_id: str | None) -> tuple[ChatRoom, bool]:
        """Return the room for the (user, admin) pair, creating it if needed.

        The boolean is True when a new room was created. Calling this twice with
        the same pair yields the same room.
        """
        if not user_id or not admin_id:
            raise ValidationError("Sender and Receiver Id are Required")

        existing = await self.chat_room_db.get_chat_room_by_pair(user_id, admin_id)
        if existing:
            logger.debug(f"Chat room {existing.id} already exists for user={user_id!r} admin={admin_id!r}")
            return existing, False

        create_time = get_current_timestamp()
        chat_room = await self.chat_room_db.create_chat_room(
            ChatRoom(
                id=generate_uid(),
                user_id=user_id,
                admin_id=admin_id,
                messages=[],
                create_timestamp=create_time,
                update_timestamp=create_time,
            )
        )
        logger.info(f"Created chat room {chat_room.id} for user={user_id!r} admin={admin_id!r}")
        return chat_room, True

    async def list_rooms(self) -> list[ClientChatRoom]:
        chat_rooms = await self.chat_room_db.get_chat_rooms()
        return [
            ClientChatRoom(**chat_room.model_dump(), user=await self._get_profile(chat_room.user_id))
            for chat_room in sorted(chat_rooms, key=lambda r: r.update_timestamp, reverse=True)
        ]

    async def get_rooms_for_user(self, user_id: str | None) -> list[ChatRoom]:
        if not user_id:
            raise NotFoundError("Chat Room not found!", "ChatRoom")
        return await self.chat_room_db.get_chat_rooms_by_user_id(user_id)

    async def add_message(
        self,
        chat_room_id: str | None,
        sender_id: str | None,
        receiver_id: str | None,
        message: str | None,
    ) -> Message:
        """Persist a message and append it to its room.

        No write happens when validation fails or the room is unknown. If the
        room append fails after the message was written, the message is
        deleted again before the error propagates.
        """
        body = message.strip() if message else ""
        if not body or not chat_room_id or not sender_id or not receiver_id:
            raise ValidationError("All the fields are mandatory", "message")

        if await self.chat_room_db.get_chat_room_by_id(chat_room_id) is None:
            raise NotFoundError(f"Chat room with id {chat_room_id} not found", "ChatRoom")

        create_time = get_current_timestamp()
        new_message = await self.message_db.create_message(
            Message(
                id=generate_uid(),
                sender_id=sender_id,
                receiver_id=receiver_id,
                chat_room_id=chat_room_id,
                message=body,
                create_timestamp=create_time,
                update_timestamp=create_time,
            )
        )
        try:
            await self.chat_room_db.append_message(chat_room_id, new_message.id, create_time)
        except Exception:
            logger.warning(f"Appending message {new_message.id} to chat room {chat_room_id} failed, rolling back")
            await self.message_db.delete_message(new_message.id)
            raise
        return new_message

    async def list_messages(self, chat_room_id: str) -> list[ClientMessage]:
        messages = await self.message_db.get_messages_by_chat_room_id(chat_room_id)
        profiles: dict[str, UserProfile | None] = {}
        api_messages = []
        for message in sorted(messages, key=lambda m: m.create_timestamp):
            if message.sender_id not in profiles:
                profiles[message.sender_id] = await self._get_profile(message.sender_id)
            api_messages.append(ClientMessage(**message.model_dump(), sender=profiles[message.sender_id]))
        return api_messages
