"""
Error envelope handlers.

Every failure of the HTTP API reaches the client as

    {"success": false, "message": <text>, "name": <hint>}

with the status code carried by the error. 'ChatError' subclasses map
directly; FastAPI request validation failures (e.g. a body that is not JSON)
become a 400; anything else is logged with its traceback and answered with a
500.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from storefront_chat.errors import ChatError


def error_envelope(status_code: int, message: str, name: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, "name": name})


async def handle_chat_error(request: Request, exc: ChatError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.name}: {exc.message}")
    return error_envelope(exc.status_code, exc.message, exc.name)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    field = str(errors[0]["loc"][-1]) if errors and errors[0].get("loc") else "body"
    logger.info(f"{request.method} {request.url.path} -> 400 invalid request ({len(errors)} error(s))")
    return error_envelope(400, "Invalid request", field)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"ERROR FROM {request.method} {request.url.path}")
    return error_envelope(500, "Something went wrong", type(exc).__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ChatError, handle_chat_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
