"""
WebSocket endpoint for the real-time channel.

One coroutine per connection: accept, register the connection with the
delivery service, feed every frame to 'DeliveryService.handle' in arrival
order, and hand the connection back on close. Text and binary frames are
decoded the same way; a binary frame that is not a valid event is dropped
like any other malformed frame. A close from either side is the only teardown
signal.
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger

from storefront_chat.realtime.connection import WebSocketConnection
from storefront_chat.realtime.delivery import DeliveryService


def build_websocket_router(delivery: DeliveryService, path: str = "/ws") -> APIRouter:
    router = APIRouter()

    @router.websocket(path)
    async def realtime(websocket: WebSocket) -> None:
        await websocket.accept()
        connection = WebSocketConnection(websocket)
        await delivery.connect(connection)
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                frame = message.get("text")
                if frame is None:
                    frame = message.get("bytes") or b""
                await delivery.handle(connection, frame)
        except WebSocketDisconnect as exc:
            logger.debug(f"Connection {connection.id} disconnected with code {exc.code}")
        finally:
            await delivery.disconnect(connection)

    return router
