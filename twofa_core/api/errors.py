"""
User-Facing Error Responses
===========================
Exception handlers that return friendly messages while logging technical
details for debugging.

Never expose internal error details to end users.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from twofa_core.auth import messages
from twofa_core.logging_config import log_error, request_id_var

logger = structlog.get_logger(__name__)


def create_error_response(
    internal_code: str,
    message: str,
    log_message: str = None,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> JSONResponse:
    """
    Create a user-friendly JSONResponse.

    Args:
        internal_code: Internal code for debugging (returned, safe to show)
        message: Message shown to the user
        log_message: Technical message for logs
        status_code: HTTP status code
    """
    if log_message:
        logger.warning(log_message, code=internal_code)

    return JSONResponse(
        status_code=status_code,
        content={
            "message": message,
            "code": internal_code,
            "request_id": request_id_var.get() or None,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the validation and catch-all handlers on app."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
        return create_error_response(
            "INVALID_REQUEST",
            messages.INVALID_JSON,
            log_message=f"Rejected request body on {request.url.path}: {fields}",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        log_error(exc, context=f"{request.method} {request.url.path}")
        return create_error_response(
            "INTERNAL_ERROR",
            messages.INTERNAL_ERROR,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
