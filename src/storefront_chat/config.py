"""
Runtime configuration.

Settings are read from the environment (prefix 'STOREFRONT_CHAT_') and from an
optional '.env' file in the working directory, e.g.

    STOREFRONT_CHAT_PORT=9000
    STOREFRONT_CHAT_JWT_SECRET=change-me
    STOREFRONT_CHAT_PRESENCE_POLICY=last_wins
    STOREFRONT_CHAT_PERSIST_REALTIME_MESSAGES=1
    STOREFRONT_CHAT_LOG_LEVEL=DEBUG
"""

import sys

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront_chat.realtime.presence import PresencePolicy


class Settings(BaseSettings):
    """Server, auth and real-time settings for the chat service."""

    host: str = "0.0.0.0"
    port: int = 8000

    api_prefix: str = "/api/v1"
    websocket_path: str = "/ws"
    cors_origins: list[str] = ["*"]

    jwt_secret: str = "storefront-chat-development-secret-change-me"
    jwt_algorithm: str = "HS256"

    presence_policy: PresencePolicy = PresencePolicy.FIRST_WINS
    persist_realtime_messages: bool = False

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="STOREFRONT_CHAT_", env_file=".env", extra="ignore")


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a stderr sink at 'level'."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}",
    )
