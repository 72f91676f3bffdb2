"""
Run the chat service with uvicorn.

Usage
-----
    python -m storefront_chat.server

or, once installed, the 'storefront-chat' console script. All settings come
from 'STOREFRONT_CHAT_*' environment variables or a '.env' file, see
'storefront_chat.config'. Storage is in-memory: rooms and messages are lost on
restart.
"""

import uvicorn
from loguru import logger

from storefront_chat.api.app import create_app
from storefront_chat.config import Settings, configure_logging


def main() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    logger.info(f"Listening on {settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
