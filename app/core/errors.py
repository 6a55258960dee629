# app/core/errors.py

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger


class NotFoundError(ValueError):
    """Requested row does not exist (routers map this to 404)."""


class PermissionDeniedError(ValueError):
    """Caller is authenticated but may not touch this row (routers map this to 403)."""


class WebhookDeliveryError(RuntimeError):
    """Discord rejected or never received the intake notification."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def register_exception_handlers(app: FastAPI) -> None:
    """
    Unhandled backend failures are logged and answered with a generic
    message. Nothing is retried.
    """

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Something went wrong. Please try again."},
        )
