from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.platform.logger import get_logger
from app.platform.response import api_response, message_response

logger = get_logger(__name__)

UPSTREAM_FAILURE_MESSAGE = "Failed to check website performance. Please try again later."


class AppError(Exception):
    """Base error. `message` is always safe to show to the end user."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"
    retryable: bool = False

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInputError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid URL format"


class ConfigurationError(AppError):
    message = "PageSpeed API key is not configured."


class UpstreamError(AppError):
    """The audit API failed or returned something we could not parse.

    `upstream_status` and `detail` are for server logs only.
    """

    message = UPSTREAM_FAILURE_MESSAGE
    retryable = True

    def __init__(self, detail: str = "", upstream_status: Optional[int] = None):
        super().__init__()
        self.detail = detail
        self.upstream_status = upstream_status

    def __str__(self) -> str:
        if self.upstream_status is not None:
            return f"PageSpeed API error: {self.upstream_status} {self.detail}".rstrip()
        return f"PageSpeed API error: {self.detail}".rstrip()


class UpstreamTimeoutError(UpstreamError):
    pass


class RequestCancelledError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Request was superseded by a newer check."
    retryable = True


def add_exception_handlers(app):
    @app.exception_handler(RequestCancelledError)
    async def cancelled_handler(request: Request, exc: RequestCancelledError):
        logger.info(f"Request cancelled: {request.url.path}")
        return message_response(exc.message, exc.status_code)

    @app.exception_handler(UpstreamError)
    async def upstream_handler(request: Request, exc: UpstreamError):
        logger.error(f"{exc} (path={request.url.path})")
        return message_response(exc.message, exc.status_code)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc.message}")
        return message_response(exc.message, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return api_response(message=str(exc.detail) or "Error", status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return api_response(
            message="Validation failed",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            data={"errors": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return api_response(
            message="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
