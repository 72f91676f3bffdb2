import itertools

import pytest
from fastapi.testclient import TestClient

from storefront_chat.api.app import create_app
from storefront_chat.api.auth.bearer import BearerTokenProvider
from storefront_chat.chat_database.controller import ChatController
from storefront_chat.chat_database.data_models.user import User, UserRole
from storefront_chat.chat_database.in_memory import (
    InMemoryChatRoomDatabase,
    InMemoryMessageDatabase,
    InMemoryUserDatabase,
)
from storefront_chat.config import Settings
from storefront_chat.realtime.connection import Connection, ConnectionClosedError
from storefront_chat.realtime.events import ServerEvent

JWT_SECRET = "test-secret-that-is-long-enough-for-hs256"


class RecordingConnection(Connection):
    """In-memory connection that records every event sent to it."""

    def __init__(self, connection_id: str | None = None, gone: bool = False) -> None:
        super().__init__(connection_id)
        self.sent: list[ServerEvent] = []
        self.gone = gone

    async def send(self, event: ServerEvent) -> None:
        if self.gone:
            raise ConnectionClosedError(f"Connection {self.id} is closed")
        self.sent.append(event)


@pytest.fixture
def users() -> list[User]:
    return [
        User(id="u1", name="Alice", email="alice@example.com", image="https://img.example.com/alice.png"),
        User(id="u2", name="Bob", email="bob@example.com"),
        User(id="a1", name="Support", email="support@example.com", role=UserRole.ADMIN),
    ]


@pytest.fixture
def user_db(users) -> InMemoryUserDatabase:
    return InMemoryUserDatabase(users)


@pytest.fixture
def chat_room_db() -> InMemoryChatRoomDatabase:
    return InMemoryChatRoomDatabase()


@pytest.fixture
def message_db() -> InMemoryMessageDatabase:
    return InMemoryMessageDatabase()


@pytest.fixture
def controller(chat_room_db, message_db, user_db) -> ChatController:
    return ChatController(chat_room_db=chat_room_db, message_db=message_db, user_db=user_db)


@pytest.fixture
def clock(monkeypatch):
    """Strictly increasing timestamps so ordering assertions are deterministic."""
    ticks = itertools.count(1_700_000_000_000)
    monkeypatch.setattr("storefront_chat.chat_database.controller.get_current_timestamp", lambda: next(ticks))
    return ticks


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret=JWT_SECRET)


@pytest.fixture
def app(settings, chat_room_db, message_db, user_db):
    return create_app(settings, chat_room_db=chat_room_db, message_db=message_db, user_db=user_db)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(user_db) -> dict[str, str]:
    token = BearerTokenProvider(JWT_SECRET, user_db).create_token("u1")
    return {"Authorization": f"Bearer {token}"}
