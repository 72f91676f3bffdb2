"""
User data model and storage interface.

Users are owned by the authentication subsystem; the chat layer only reads
them, to resolve public profiles for rooms and messages and to check that a
bearer token belongs to a known account. 'create_user' exists so that the
in-memory backend can be seeded.

Concrete implementation: 'InMemoryUserDatabase'.
"""

from abc import ABC, abstractmethod
from enum import StrEnum

from pydantic import BaseModel


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


class UserProfile(BaseModel):
    """Public projection of a user, safe to embed in API responses."""

    id: str
    name: str
    email: str
    image: str | None = None


class User(UserProfile):
    role: UserRole = UserRole.USER

    def profile(self) -> UserProfile:
        return UserProfile(id=self.id, name=self.name, email=self.email, image=self.image)


class UserDatabase(ABC):
    """Abstract repository for 'User' records."""

    @abstractmethod
    async def create_user(self, user: User) -> User:
        pass

    @abstractmethod
    async def get_user_by_id(self, user_id: str) -> User | None:
        pass
