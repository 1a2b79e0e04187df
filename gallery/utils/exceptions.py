import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from gallery.utils.response import error_response

logger = logging.getLogger(__name__)


class AppException(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationFailed(AppException):
    """Input rejected before any storage or database call."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotAuthenticated(AppException):
    def __init__(self, message: str = "Sign in required"):
        super().__init__(message, status_code=401)


class PhotoNotFound(AppException):
    def __init__(self, photo_id: str):
        super().__init__("Photo not found", status_code=404)
        self.photo_id = photo_id


class PersistenceError(AppException):
    """A storage or database call failed; the message carries the cause."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message),
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Internal server error"),
        )
