"""Error taxonomy and the handlers that turn it into plain-text responses.

Every error is an ``HTTPException`` so services can raise them directly and
FastAPI routes them through the same handler.
"""
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.services.id_generator import GenerationExhausted

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An internal server error occurred. Please try again later."


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, headers: Optional[dict] = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class MethodNotAllowedError(AppError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED

    def __init__(self, detail: str = "Method Not Allowed", headers: Optional[dict] = None):
        super().__init__(detail, headers=headers)


class DatabaseError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ServerError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _plain(status_code: int, detail: str, headers: Optional[dict] = None) -> PlainTextResponse:
    return PlainTextResponse(detail, status_code=status_code, headers=headers)


async def http_exception_handler(request: Request, exc: HTTPException) -> PlainTextResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed with %d: %s",
            request.method, request.url.path, exc.status_code, exc.detail,
        )
        return _plain(exc.status_code, GENERIC_SERVER_ERROR)
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _plain(exc.status_code, detail, getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _plain(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the taxonomy handlers to ``app``."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, unhandled_exception_handler)
    app.add_exception_handler(GenerationExhausted, unhandled_exception_handler)
