"""
Message data model and storage interface.

Messages are immutable once written. They are stored independently of their
room so history can be queried by room id; the room only keeps the ordered
list of ids. 'delete_message' is not exposed through the API: the controller
uses it to undo a message whose room append failed.

Concrete implementation: 'InMemoryMessageDatabase'.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class Message(BaseModel):
    """A single chat message between two users inside a room."""

    id: str
    sender_id: str
    receiver_id: str
    chat_room_id: str
    message: str
    create_timestamp: int
    update_timestamp: int


class MessageDatabase(ABC):
    """Abstract repository for 'Message' records."""

    @abstractmethod
    async def create_message(self, message: Message) -> Message:
        pass

    @abstractmethod
    async def get_message_by_id(self, message_id: str) -> Message | None:
        pass

    @abstractmethod
    async def get_messages_by_chat_room_id(self, chat_room_id: str) -> list[Message]:
        pass

    @abstractmethod
    async def delete_message(self, message_id: str) -> bool:
        pass
