"""
Authentication provider abstraction.

An 'AuthProvider' plugs into the FastAPI router as a dependency that resolves
the calling user's id on every authenticated request. Token issuance belongs
to the auth subsystem; providers here only verify.

Shipped implementation: 'BearerTokenProvider' (JWT in an Authorization header
or a 'token' cookie).
"""

from abc import ABC, abstractmethod

from fastapi import Request


class AuthProvider(ABC):
    """
    Abstract base class for authentication backends.

    Implementors supply an async FastAPI dependency, 'get_current_user_id',
    which returns the authenticated user's id or raises 'AuthenticationError'
    / 'AuthorizationError' so the error envelope handler can answer with 401
    or 403.
    """

    @abstractmethod
    async def get_current_user_id(self, request: Request) -> str:
        pass
