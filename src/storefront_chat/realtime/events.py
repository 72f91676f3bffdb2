"""
Real-time wire events.

Every frame on the WebSocket is a JSON object '{"event": <name>, "data": ...}'.
Each event kind is a separate model with a fixed payload shape, and the client
kinds are combined into a discriminated union on 'event', so the delivery
service handles a closed set of cases and anything else is rejected by
'parse_client_event'.

Client -> server: 'addUser', 'sendMessage'.
Server -> client: 'getUsers' (to everyone), 'getMessage' (to the receiver).

Payload field names are camelCase on the wire; the models use snake_case
attributes with aliases.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class AddUserEvent(WireModel):
    event: Literal["addUser"] = "addUser"
    data: Annotated[str, Field(min_length=1)]


class SendMessagePayload(WireModel):
    sender: str
    receiver: str
    message: str
    room_id: str | None = Field(default=None, alias="roomId")


class SendMessageEvent(WireModel):
    event: Literal["sendMessage"] = "sendMessage"
    data: SendMessagePayload


ClientEvent = Annotated[AddUserEvent | SendMessageEvent, Field(discriminator="event")]

_client_event_adapter: TypeAdapter[AddUserEvent | SendMessageEvent] = TypeAdapter(ClientEvent)


class PresenceItem(WireModel):
    user_id: str = Field(alias="userId")
    connection_id: str = Field(alias="connectionHandleId")


class GetUsersEvent(WireModel):
    event: Literal["getUsers"] = "getUsers"
    data: list[PresenceItem]


class DeliveredMessage(WireModel):
    sender: str
    message: str
    receiver: str
    chat_room: str | None = Field(default=None, alias="chatRoom")
    created_at: int = Field(alias="createdAt")


class GetMessageEvent(WireModel):
    event: Literal["getMessage"] = "getMessage"
    data: DeliveredMessage


ServerEvent = GetUsersEvent | GetMessageEvent


class MalformedEventError(ValueError):
    """A client frame is not valid JSON or does not match any known event."""


def parse_client_event(raw: str | bytes) -> AddUserEvent | SendMessageEvent:
    try:
        return _client_event_adapter.validate_json(raw)
    except PydanticValidationError as exc:
        raise MalformedEventError(f"Malformed client event: {exc.error_count()} error(s)") from exc
