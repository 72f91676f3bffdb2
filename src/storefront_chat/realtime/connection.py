"""
Connection handles for the real-time channel.

The delivery service never talks to a transport directly. It holds
'Connection' objects, each with a stable 'id' and an async 'send' that
serialises one server event. 'WebSocketConnection' adapts a FastAPI
'WebSocket'; tests substitute an in-memory recorder.

A send to a peer that has gone away raises 'ConnectionClosedError' so the
delivery service can drop it without knowing which transport errors mean
"peer gone".
"""

from abc import ABC, abstractmethod
from enum import StrEnum

from fastapi import WebSocket, WebSocketDisconnect

from storefront_chat.realtime.events import ServerEvent
from storefront_chat.utils.database import generate_uid


class ConnectionState(StrEnum):
    CONNECTED = "connected"
    IDENTIFIED = "identified"
    CLOSED = "closed"


class ConnectionClosedError(Exception):
    """The peer behind a connection is no longer reachable."""


class Connection(ABC):
    """One live real-time session."""

    def __init__(self, connection_id: str | None = None) -> None:
        self.id = connection_id or generate_uid()
        self.state = ConnectionState.CONNECTED
        self.user_id: str | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, state={self.state.value!r}, user_id={self.user_id!r})"

    @abstractmethod
    async def send(self, event: ServerEvent) -> None:
        """Deliver one event to the peer. Raise 'ConnectionClosedError' if it is gone."""
        pass


class WebSocketConnection(Connection):
    def __init__(self, websocket: WebSocket, connection_id: str | None = None) -> None:
        super().__init__(connection_id)
        self.websocket = websocket

    async def send(self, event: ServerEvent) -> None:
        try:
            await self.websocket.send_text(event.model_dump_json(by_alias=True))
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            raise ConnectionClosedError(f"Connection {self.id} is closed") from exc
