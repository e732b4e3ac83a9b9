"""
Application error taxonomy and global exception handlers.

Every expected failure is one of a small closed set of ``AppError``
subclasses.  The GraphQL boundary renders them with ``extensions.code``;
anything else is logged and masked so stack traces never reach clients.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_CODE = "INTERNAL_SERVER_ERROR"
INTERNAL_ERROR_MESSAGE = "Internal server error"


# ── Taxonomy ────────────────────────────────────────────────────────
class AppError(Exception):
    """Base class for errors that are safe to show to API callers."""

    code = INTERNAL_ERROR_CODE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def extensions(self) -> dict[str, object]:
        return {"code": self.code}


class ValidationError(AppError):
    """Bad input shape or range.  Carries every violation, not just the first."""

    code = "BAD_USER_INPUT"

    def __init__(self, messages: str | Iterable[str]) -> None:
        self.messages = [messages] if isinstance(messages, str) else list(messages)
        super().__init__(", ".join(self.messages))

    @property
    def extensions(self) -> dict[str, object]:
        return {"code": self.code, "messages": self.messages}


class AuthError(AppError):
    code = "UNAUTHENTICATED"


class ConflictError(AppError):
    code = "CONFLICT"


class NotFoundError(AppError):
    code = "NOT_FOUND"


class MediaError(AppError):
    code = "MEDIA_ERROR"


# ── REST handler ────────────────────────────────────────────────────
async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": INTERNAL_ERROR_MESSAGE, "success": False},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Mask unhandled errors on REST routes."""
    app.add_exception_handler(Exception, _generic_exception_handler)
