"""
JWT bearer-token authentication.

Tokens are HS256 JWTs whose '_id' claim is the user id, as issued by the auth
subsystem. The token is taken from 'Authorization: Bearer <token>' first and
from the 'token' cookie otherwise. A token that verifies but names an unknown
user is rejected just like a missing one.
"""

from typing import Any

import jwt
from fastapi import Request
from loguru import logger

from storefront_chat.api.auth.base import AuthProvider
from storefront_chat.chat_database.data_models.user import UserDatabase
from storefront_chat.errors import AuthenticationError, AuthorizationError

USER_ID_CLAIM = "_id"


class BearerTokenProvider(AuthProvider):
    def __init__(self, secret: str, user_db: UserDatabase, algorithm: str = "HS256") -> None:
        self.secret = secret
        self.user_db = user_db
        self.algorithm = algorithm

    def create_token(self, user_id: str, **claims: Any) -> str:
        """Sign a token for 'user_id'. Used by development tooling and tests."""
        return jwt.encode({USER_ID_CLAIM: user_id, **claims}, self.secret, algorithm=self.algorithm)

    @staticmethod
    def _extract_token(request: Request) -> str | None:
        authorization = request.headers.get("authorization", "")
        if authorization.startswith("Bearer"):
            parts = authorization.split(" ")
            return parts[1] if len(parts) > 1 and parts[1] else None
        return request.cookies.get("token")

    async def get_current_user_id(self, request: Request) -> str:
        token = self._extract_token(request)
        if not token:
            raise AuthenticationError("You are not authorized")

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as exc:
            logger.debug(f"Rejected token: {exc}")
            raise AuthorizationError("Unauthorized") from exc

        user_id = payload.get(USER_ID_CLAIM)
        user = await self.user_db.get_user_by_id(user_id) if isinstance(user_id, str) else None
        if user is None:
            raise AuthenticationError("You are not authorized")
        return user.id
