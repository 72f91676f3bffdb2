"""
Application factory.

'create_app' wires one process worth of chat service: the repositories, the
'ChatController', the 'PresenceRegistry' and 'DeliveryService', the auth
provider, the HTTP and WebSocket routers and the error envelope handlers.
Collaborators can be injected (tests pass pre-seeded in-memory stores); any
left out are built from 'Settings'.

The presence registry lives exactly as long as the application: it is
created here and cleared by the lifespan hook on shutdown.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from storefront_chat.api.auth.base import AuthProvider
from storefront_chat.api.auth.bearer import BearerTokenProvider
from storefront_chat.api.errors import register_error_handlers
from storefront_chat.api.routes import build_router
from storefront_chat.api.websocket import build_websocket_router
from storefront_chat.chat_database.controller import ChatController
from storefront_chat.chat_database.data_models.chat_room import ChatRoomDatabase
from storefront_chat.chat_database.data_models.message import MessageDatabase
from storefront_chat.chat_database.data_models.user import UserDatabase
from storefront_chat.chat_database.in_memory import (
    InMemoryChatRoomDatabase,
    InMemoryMessageDatabase,
    InMemoryUserDatabase,
)
from storefront_chat.config import Settings
from storefront_chat.realtime.delivery import DeliveryService
from storefront_chat.realtime.presence import PresenceRegistry


def create_app(
    settings: Settings | None = None,
    chat_room_db: ChatRoomDatabase | None = None,
    message_db: MessageDatabase | None = None,
    user_db: UserDatabase | None = None,
    auth_provider: AuthProvider | None = None,
) -> FastAPI:
    settings = settings or Settings()
    user_db = user_db or InMemoryUserDatabase()
    controller = ChatController(
        chat_room_db=chat_room_db or InMemoryChatRoomDatabase(),
        message_db=message_db or InMemoryMessageDatabase(),
        user_db=user_db,
    )
    registry = PresenceRegistry(policy=settings.presence_policy)
    delivery = DeliveryService(
        registry,
        controller=controller,
        persist_messages=settings.persist_realtime_messages,
    )
    auth_provider = auth_provider or BearerTokenProvider(
        secret=settings.jwt_secret, user_db=user_db, algorithm=settings.jwt_algorithm
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            f"Chat service starting: presence_policy={settings.presence_policy.value!r} "
            f"persist_realtime_messages={settings.persist_realtime_messages}"
        )
        yield
        await delivery.close()
        logger.info("Chat service stopped")

    app = FastAPI(title="storefront-chat", lifespan=lifespan)
    app.state.settings = settings
    app.state.controller = controller
    app.state.registry = registry
    app.state.delivery = delivery
    app.state.auth_provider = auth_provider

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(build_router(controller, auth_provider), prefix=settings.api_prefix)
    app.include_router(build_websocket_router(delivery, settings.websocket_path))
    return app
