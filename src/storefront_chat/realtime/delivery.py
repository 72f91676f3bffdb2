"""
Real-time delivery service.

'DeliveryService' bridges connection lifecycle events to the
'PresenceRegistry' and routes point-to-point chat messages. It owns the table
of live connections and drives each connection through

    CONNECTED  --addUser-->  IDENTIFIED  --close-->  CLOSED
        |                                              ^
        +-------------------close----------------------+

Routing is best-effort and at-most-once: a receiver that is not in the
registry is an expected branch (offline), not an error, and the message is
dropped without telling the sender. Peers that disappear mid-send are logged
and skipped. There is no queue, retry or acknowledgement.

By default the service has no persistence side effect; clients store messages
through the HTTP API themselves. With 'persist_messages' enabled, each
'sendMessage' that names a room is first written through 'ChatController'
and only then delivered, and a failed write does not prevent delivery.
"""

import asyncio

from loguru import logger

from storefront_chat.chat_database.controller import ChatController
from storefront_chat.errors import ChatError
from storefront_chat.realtime.connection import Connection, ConnectionClosedError, ConnectionState
from storefront_chat.realtime.events import (
    AddUserEvent,
    DeliveredMessage,
    GetMessageEvent,
    GetUsersEvent,
    MalformedEventError,
    PresenceItem,
    SendMessageEvent,
    SendMessagePayload,
    ServerEvent,
    parse_client_event,
)
from storefront_chat.realtime.presence import PresenceRegistry
from storefront_chat.utils.time import get_current_timestamp


class DeliveryService:
    def __init__(
        self,
        registry: PresenceRegistry,
        controller: ChatController | None = None,
        persist_messages: bool = False,
    ) -> None:
        if persist_messages and controller is None:
            raise ValueError("persist_messages requires a ChatController")
        self.registry = registry
        self.controller = controller
        self.persist_messages = persist_messages
        self._connections: dict[str, Connection] = {}

    @property
    def connections(self) -> list[Connection]:
        return list(self._connections.values())

    async def connect(self, connection: Connection) -> None:
        connection.state = ConnectionState.CONNECTED
        self._connections[connection.id] = connection
        logger.info(f"Connection {connection.id} opened ({len(self._connections)} live)")

    async def handle(self, connection: Connection, raw: str | bytes) -> None:
        """Decode one client frame and dispatch it. Malformed frames are dropped."""
        try:
            event = parse_client_event(raw)
        except MalformedEventError as exc:
            logger.warning(f"Dropping frame from connection {connection.id}: {exc}")
            return

        match event:
            case AddUserEvent(data=user_id):
                await self.identify(connection, user_id)
            case SendMessageEvent(data=payload):
                await self.send_message(connection, payload)

    async def identify(self, connection: Connection, user_id: str) -> None:
        if connection.state == ConnectionState.CLOSED:
            logger.debug(f"Ignoring addUser on closed connection {connection.id}")
            return
        connection.user_id = user_id
        connection.state = ConnectionState.IDENTIFIED
        if self.registry.register(user_id, connection):
            logger.info(f"User {user_id!r} is online on connection {connection.id}")
        await self.broadcast_presence()

    async def send_message(self, connection: Connection | None, payload: SendMessagePayload) -> bool:
        """Route 'payload' to the receiver's live connection.

        Returns True if a 'getMessage' event was handed to the receiver's
        transport, False if the receiver is offline or went away mid-send.
        """
        if connection is not None and connection.state == ConnectionState.CLOSED:
            logger.debug(f"Ignoring sendMessage on closed connection {connection.id}")
            return False

        if self.persist_messages and self.controller is not None and payload.room_id:
            await self._persist(self.controller, payload)

        target = self.registry.lookup(payload.receiver)
        if target is None:
            logger.debug(f"Receiver {payload.receiver!r} is offline, message from {payload.sender!r} dropped")
            return False

        event = GetMessageEvent(
            data=DeliveredMessage(
                sender=payload.sender,
                message=payload.message,
                receiver=payload.receiver,
                chat_room=payload.room_id,
                created_at=get_current_timestamp(),
            )
        )
        return await self._send(target, event)

    async def disconnect(self, connection: Connection) -> None:
        if connection.state == ConnectionState.CLOSED:
            return
        connection.state = ConnectionState.CLOSED
        self._connections.pop(connection.id, None)
        removed = self.registry.unregister(connection)
        logger.info(f"Connection {connection.id} closed ({len(self._connections)} live)")
        if removed:
            logger.info(f"User(s) {removed} went offline")
            await self.broadcast_presence()

    async def broadcast_presence(self) -> None:
        event = GetUsersEvent(
            data=[
                PresenceItem(user_id=entry.user_id, connection_id=entry.connection.id)
                for entry in self.registry.snapshot()
            ]
        )
        await self.broadcast(event)

    async def broadcast(self, event: ServerEvent) -> None:
        await asyncio.gather(*(self._send(connection, event) for connection in self.connections))

    async def close(self) -> None:
        """Forget every connection and presence entry. Called at shutdown."""
        for connection in self.connections:
            connection.state = ConnectionState.CLOSED
        self._connections.clear()
        self.registry.clear()

    async def _send(self, connection: Connection, event: ServerEvent) -> bool:
        try:
            await connection.send(event)
        except ConnectionClosedError as exc:
            logger.warning(f"Could not deliver {event.event} to connection {connection.id}: {exc}")
            return False
        return True

    async def _persist(self, controller: ChatController, payload: SendMessagePayload) -> None:
        try:
            message = await controller.add_message(
                chat_room_id=payload.room_id,
                sender_id=payload.sender,
                receiver_id=payload.receiver,
                message=payload.message,
            )
        except ChatError as exc:
            logger.warning(f"Message from {payload.sender!r} to room {payload.room_id!r} not stored: {exc.message}")
            return
        except Exception:
            logger.exception(f"Storing message from {payload.sender!r} to room {payload.room_id!r} failed")
            return
        logger.debug(f"Stored message {message.id} in chat room {payload.room_id}")
