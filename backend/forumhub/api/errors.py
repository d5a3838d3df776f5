"""
Exception handlers.

Render every error as ``{"success": false, "message": ..., "status": ...}``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from loguru import logger

from forumhub.core.exceptions import ForumHubError


def _error(message: str, status_code: int) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "status": status_code},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register handlers on the application."""

    @app.exception_handler(ForumHubError)
    async def forumhub_error_handler(
        request: Request,
        exc: ForumHubError,
    ) -> ORJSONResponse:
        logger.warning(
            f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}"
        )
        return ORJSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> ORJSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ())[1:])
        message = first.get("msg", "Invalid request")
        if field:
            message = f"{field}: {message}"
        logger.warning(f"{request.method} {request.url.path} -> 400: {message}")
        return _error(message, 400)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(
        request: Request,
        exc: Exception,
    ) -> ORJSONResponse:
        logger.opt(exception=exc).error(
            f"Unhandled error on {request.method} {request.url.path}"
        )
        return _error("An unexpected error occurred", 500)
