"""
Real-time presence and delivery.

    from storefront_chat.realtime import DeliveryService, PresenceRegistry, PresencePolicy
"""

from storefront_chat.realtime.connection import Connection, ConnectionClosedError, ConnectionState, WebSocketConnection
from storefront_chat.realtime.delivery import DeliveryService
from storefront_chat.realtime.events import (
    AddUserEvent,
    GetMessageEvent,
    GetUsersEvent,
    MalformedEventError,
    SendMessageEvent,
    SendMessagePayload,
    parse_client_event,
)
from storefront_chat.realtime.presence import PresenceEntry, PresencePolicy, PresenceRegistry

__all__ = [
    "AddUserEvent",
    "Connection",
    "ConnectionClosedError",
    "ConnectionState",
    "DeliveryService",
    "GetMessageEvent",
    "GetUsersEvent",
    "MalformedEventError",
    "PresenceEntry",
    "PresencePolicy",
    "PresenceRegistry",
    "SendMessageEvent",
    "SendMessagePayload",
    "WebSocketConnection",
    "parse_client_event",
]
