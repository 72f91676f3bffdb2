"""
HTTP routes for chat rooms and messages.

Thin mapping from requests onto 'ChatController'; validation and error
signalling live in the controller and the envelope handlers. Every route
except room creation requires an authenticated caller.

Envelope keys are camelCase ('chatRoom', 'chatRooms', 'newMessage'), as the
storefront frontend expects. The records inside them are the stored models
dumped under their field names, so they keep snake_case ('user_id',
'chat_room_id', 'create_timestamp'). Real-time events are a separate wire
format with their own camelCase aliases (see 'realtime.events').
"""

from typing import Any

from fastapi import APIRouter, Depends, Response, status

from storefront_chat.api.auth.base import AuthProvider
from storefront_chat.chat_database.controller import ChatController, ChatRoomInput, MessageInput

ROOM_EXISTS_MESSAGE = "ChatRoom already exists!"


def build_router(controller: ChatController, auth_provider: AuthProvider) -> APIRouter:
    router = APIRouter()
    authenticated = [Depends(auth_provider.get_current_user_id)]

    @router.post("/create/chat-room", status_code=status.HTTP_201_CREATED)
    async def create_chat_room(room_input: ChatRoomInput, response: Response) -> dict[str, Any]:
        chat_room, created = await controller.create_room(room_input.user, room_input.admin)
        if not created:
            response.status_code = status.HTTP_200_OK
            return {"success": True, "message": ROOM_EXISTS_MESSAGE, "chatRoom": chat_room}
        return {"success": True, "chatRoom": chat_room}

    @router.get("/chat-rooms/all", dependencies=authenticated)
    async def get_chat_rooms() -> dict[str, Any]:
        return {"success": True, "chatRooms": await controller.list_rooms()}

    @router.get("/chat-room/{user_id}", dependencies=authenticated)
    async def get_chat_room_by_user_id(user_id: str) -> dict[str, Any]:
        return {"success": True, "chatRooms": await controller.get_rooms_for_user(user_id)}

    @router.post("/new/message/{chat_room_id}", status_code=status.HTTP_201_CREATED, dependencies=authenticated)
    async def add_message(chat_room_id: str, message_input: MessageInput) -> dict[str, Any]:
        new_message = await controller.add_message(
            chat_room_id=chat_room_id,
            sender_id=message_input.sender,
            receiver_id=message_input.receiver,
            message=message_input.message,
        )
        return {"success": True, "newMessage": new_message}

    @router.get("/messages/{chat_room_id}", dependencies=authenticated)
    async def get_messages(chat_room_id: str) -> dict[str, Any]:
        return {"success": True, "messages": await controller.list_messages(chat_room_id)}

    return router
