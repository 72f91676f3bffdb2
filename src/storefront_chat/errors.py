"""
Error taxonomy for the chat API.

Every error raised by the controller or the auth layer derives from
'ChatError', which carries the HTTP status code and a 'name' hint. The API
layer converts these into the uniform envelope
'{"success": false, "message": ..., "name": ...}'.

Delivery misses on the real-time channel (receiver offline) are not errors and
have no class here.
"""


class ChatError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.name = name or type(self).__name__


class ValidationError(ChatError):
    """Client input is missing or malformed. 'name' holds the field hint."""

    status_code = 400


class NotFoundError(ChatError):
    status_code = 404


class AuthenticationError(ChatError):
    status_code = 401


class AuthorizationError(ChatError):
    status_code = 403
