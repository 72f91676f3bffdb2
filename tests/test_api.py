import jwt
from fastapi.testclient import TestClient

from storefront_chat.api.app import create_app
from storefront_chat.chat_database.in_memory import InMemoryChatRoomDatabase

from conftest import JWT_SECRET

API = "/api/v1"


def create_room(client, user="u1", admin="a1"):
    return client.post(f"{API}/create/chat-room", json={"user": user, "admin": admin})


def test_create_room_then_existing_room(client):
    created = create_room(client)
    again = create_room(client)

    assert created.status_code == 201
    assert created.json()["success"] is True
    assert again.status_code == 200
    assert again.json()["message"] == "ChatRoom already exists!"
    assert again.json()["chatRoom"]["id"] == created.json()["chatRoom"]["id"]


def test_create_room_needs_no_token(client):
    assert create_room(client, user="u2").status_code == 201


def test_create_room_missing_admin(client):
    response = client.post(f"{API}/create/chat-room", json={"user": "u1"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Sender and Receiver Id are Required"
    assert body["name"] == "ValidationError"


def test_malformed_body_uses_error_envelope(client):
    response = client.post(
        f"{API}/create/chat-room", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_authenticated_routes_reject_missing_token(client):
    response = client.get(f"{API}/chat-rooms/all")

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "You are not authorized",
        "name": "AuthenticationError",
    }


def test_authenticated_routes_reject_bad_token(client):
    response = client.get(f"{API}/chat-rooms/all", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 403
    assert response.json()["message"] == "Unauthorized"


def test_authenticated_routes_reject_token_for_unknown_user(client):
    token = jwt.encode({"_id": "ghost"}, JWT_SECRET, algorithm="HS256")

    response = client.get(f"{API}/chat-rooms/all", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_cookie_is_accepted(client):
    token = jwt.encode({"_id": "u1"}, JWT_SECRET, algorithm="HS256")
    client.cookies.set("token", token)

    response = client.get(f"{API}/chat-rooms/all")

    assert response.status_code == 200


def test_list_rooms_populates_user(client, auth_headers):
    create_room(client)

    response = client.get(f"{API}/chat-rooms/all", headers=auth_headers)

    assert response.status_code == 200
    [room] = response.json()["chatRooms"]
    assert room["user"] == {
        "id": "u1",
        "name": "Alice",
        "email": "alice@example.com",
        "image": "https://img.example.com/alice.png",
    }


def test_room_by_user(client, auth_headers):
    room_id = create_room(client).json()["chatRoom"]["id"]
    create_room(client, user="u2")

    response = client.get(f"{API}/chat-room/u1", headers=auth_headers)

    assert response.status_code == 200
    assert [room["id"] for room in response.json()["chatRooms"]] == [room_id]


def test_message_round_trip(client, auth_headers):
    room_id = create_room(client).json()["chatRoom"]["id"]

    created = client.post(
        f"{API}/new/message/{room_id}",
        json={"message": "hello", "sender": "u1", "receiver": "a1"},
        headers=auth_headers,
    )

    assert created.status_code == 201
    new_message = created.json()["newMessage"]
    assert new_message["message"] == "hello"
    assert new_message["chat_room_id"] == room_id

    messages = client.get(f"{API}/messages/{room_id}", headers=auth_headers).json()["messages"]
    assert [m["message"] for m in messages] == ["hello"]
    assert messages[0]["sender"]["name"] == "Alice"

    [room] = client.get(f"{API}/chat-room/u1", headers=auth_headers).json()["chatRooms"]
    assert room["messages"] == [new_message["id"]]


def test_records_keep_field_names_inside_camel_case_envelope(client, auth_headers):
    room = create_room(client).json()["chatRoom"]

    new_message = client.post(
        f"{API}/new/message/{room['id']}",
        json={"message": "hello", "sender": "u1", "receiver": "a1"},
        headers=auth_headers,
    ).json()["newMessage"]

    assert {"user_id", "admin_id", "messages", "create_timestamp", "update_timestamp"} <= room.keys()
    assert {"sender_id", "receiver_id", "chat_room_id", "create_timestamp"} <= new_message.keys()


def test_empty_message_is_rejected(client, auth_headers):
    room_id = create_room(client).json()["chatRoom"]["id"]

    response = client.post(
        f"{API}/new/message/{room_id}",
        json={"message": "", "sender": "u1", "receiver": "a1"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["name"] == "message"
    assert client.get(f"{API}/messages/{room_id}", headers=auth_headers).json()["messages"] == []


def test_message_to_unknown_room(client, auth_headers):
    response = client.post(
        f"{API}/new/message/missing",
        json={"message": "hello", "sender": "u1", "receiver": "a1"},
        headers=auth_headers,
    )

    assert response.status_code == 404
    assert response.json()["success"] is False


class UnreachableChatRoomDatabase(InMemoryChatRoomDatabase):
    async def get_chat_rooms(self):
        raise ConnectionError("database unreachable")


def test_unexpected_failure_becomes_500_envelope(settings, user_db, auth_headers):
    app = create_app(settings, chat_room_db=UnreachableChatRoomDatabase(), user_db=user_db)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get(f"{API}/chat-rooms/all", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Something went wrong", "name": "ConnectionError"}
