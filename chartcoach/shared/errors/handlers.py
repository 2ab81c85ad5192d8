"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chartcoach.domain.coaching.errors import (
    CoachingDomainError,
    GenerationFailedError,
    InvalidModelOutputError,
    MissingFieldError,
    ModelNotFoundError,
    ProjectNotFoundError,
    ProviderNotConfiguredError,
    StorageError,
    VideoNotFoundError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_500 = 500

_REQUEST_PARTS = {"body", "query", "path"}
_MISSING_TYPES = {"missing", "string_too_short"}


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Turn the first validation error into "<field> is required|invalid"."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON body"
    parts = [str(p) for p in first.get("loc", ()) if p not in _REQUEST_PARTS]
    field = ".".join(parts) or "body"
    if first.get("type") in _MISSING_TYPES:
        return f"{field} is required"
    return f"{field} is invalid"


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request body and query validation failures."""
        message = _describe_validation_error(exc)
        logger.info("Rejected request: %s", message)
        return _error_response(HTTP_400, message)

    @app.exception_handler(MissingFieldError)
    async def handle_missing_field(
        _request: Request, exc: MissingFieldError
    ) -> JSONResponse:
        """Handle requests lacking a required field."""
        logger.info("Missing field: %s", exc.message)
        return _error_response(HTTP_400, exc.message)

    @app.exception_handler(ProjectNotFoundError)
    async def handle_project_not_found(
        _request: Request, exc: ProjectNotFoundError
    ) -> JSONResponse:
        """Handle missing workspace project errors."""
        logger.warning("Project not found: %s", exc.project_id)
        return _error_response(HTTP_404, "Project not found")

    @app.exception_handler(ModelNotFoundError)
    async def handle_model_not_found(
        _request: Request, exc: ModelNotFoundError
    ) -> JSONResponse:
        """Handle missing workspace model errors."""
        logger.warning("Model not found: %s", exc.model_id)
        return _error_response(HTTP_404, "Model not found")

    @app.exception_handler(VideoNotFoundError)
    async def handle_video_not_found(
        _request: Request, exc: VideoNotFoundError
    ) -> JSONResponse:
        """Handle missing workspace video errors."""
        logger.warning("Video not found: %s", exc.video_id)
        return _error_response(HTTP_404, "Video not found")

    @app.exception_handler(ProviderNotConfiguredError)
    async def handle_provider_not_configured(
        _request: Request, exc: ProviderNotConfiguredError
    ) -> JSONResponse:
        """Handle a missing LLM API key."""
        logger.error("LLM provider is not configured.")
        return _error_response(HTTP_500, exc.message)

    @app.exception_handler(GenerationFailedError)
    async def handle_generation_failed(
        _request: Request, exc: GenerationFailedError
    ) -> JSONResponse:
        """Handle provider round trips that failed."""
        logger.error("Generation failed (%s): %s", exc.action, exc.reason)
        return _error_response(HTTP_500, f"Failed to {exc.action}.")

    @app.exception_handler(InvalidModelOutputError)
    async def handle_invalid_model_output(
        _request: Request, exc: InvalidModelOutputError
    ) -> JSONResponse:
        """Handle replies that had to be JSON and were not."""
        logger.error("Invalid model output for %s.", exc.subject)
        return _error_response(HTTP_500, exc.message)

    @app.exception_handler(StorageError)
    async def handle_storage(
        _request: Request, exc: StorageError
    ) -> JSONResponse:
        """Handle failing database calls."""
        logger.error("Storage error while trying to %s.", exc.action)
        return _error_response(HTTP_500, f"Failed to {exc.action}.")

    @app.exception_handler(CoachingDomainError)
    async def handle_coaching_domain(
        _request: Request, exc: CoachingDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled coaching domain errors."""
        logger.error("Unhandled coaching domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
