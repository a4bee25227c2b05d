"""Error taxonomy and FastAPI exception handlers.

Every failure reaching a client is rendered as
``{"error": <message>, "code": <code>, "request_id": <id>}``.
"""

import logging
from typing import Optional
from uuid import uuid4

from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.requests import Request

from adsflow.core.logging import get_request_id


class AppError(Exception):
    code = "app_error"
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None, request_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code
        self.request_id = request_id


class ValidationError(AppError, ValueError):
    code = "validation_error"
    status_code = 400


class MissingPromptError(ValidationError):
    """Raised before any external call when the prompt is empty."""
    code = "missing_prompt"


class UnauthenticatedError(AppError):
    code = "unauthenticated"
    status_code = 401


class ProfileUnavailableError(AppError):
    """Profile missing or the profile store is unreachable."""
    code = "profile_unavailable"
    status_code = 500


class QuotaExceededError(AppError):
    code = "quota_exceeded"
    status_code = 429


class GenerationFailedError(AppError):
    """Transport failure, timeout, empty body or schema violation upstream."""
    code = "generation_failed"
    status_code = 502


class PersistenceFailedError(AppError):
    """Usage write failed. Never rendered for a successful generation."""
    code = "persistence_failed"
    status_code = 500


def _extract_request_id(request: Request, fallback: Optional[str] = None) -> str:
    return (
        getattr(request.state, "request_id", None)
        or get_request_id()
        or fallback
        or str(uuid4())
    )


def error_payload(code: str, message: str, request_id: str) -> dict:
    return {"error": message, "code": code, "request_id": request_id}


def _respond(status_code: int, code: str, message: str, rid: str) -> JSONResponse:
    response = JSONResponse(status_code=status_code, content=error_payload(code, message, rid))
    response.headers["x-request-id"] = rid
    return response


async def app_error_handler(request: Request, exc: AppError):
    rid = exc.request_id or _extract_request_id(request)
    logger = logging.getLogger("adsflow")
    log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        log_level,
        "app.error",
        extra={"request_id": rid, "error_code": exc.code, "error_message": exc.message, "status": exc.status_code},
    )
    return _respond(exc.status_code, exc.code, exc.message, rid)


async def http_error_handler(request: Request, exc: HTTPException):
    rid = _extract_request_id(request)
    code = "not_found" if exc.status_code == 404 else "http_error"
    message = exc.detail if isinstance(exc.detail, str) and exc.detail else "HTTP error"
    logger = logging.getLogger("adsflow")
    logger.warning("http.error", extra={"request_id": rid, "error_code": code, "status": exc.status_code})
    return _respond(exc.status_code, code, message, rid)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    rid = _extract_request_id(request)
    logger = logging.getLogger("adsflow")
    logger.warning("request.invalid", extra={"request_id": rid, "error_code": "validation_error", "status": 400})
    return _respond(400, "validation_error", "The request body is not valid JSON for this endpoint.", rid)


async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = _extract_request_id(request)
    logger = logging.getLogger("adsflow")
    logger.error("unhandled.exception", exc_info=exc, extra={"request_id": rid, "error_code": "internal_error"})
    return _respond(500, "internal_error", "Something went wrong. Please try again.", rid)
