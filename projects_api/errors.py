"""
projects_api/errors.py

Error taxonomy and the response envelope.

Every response body is either
    {"success": true, "data": ...}
or
    {"success": false, "error": {"code", "message", "details"?}}

Business failures raise ApiError; everything else is mapped here at the
outermost boundary so no internal detail reaches the caller.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from projects_api.store import RecordNotFoundError

log = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.RATE_LIMIT_EXCEEDED: 429,
    ErrorCode.INTERNAL_ERROR: 500,
}

CODE_BY_STATUS: Dict[int, ErrorCode] = {status: code for code, status in STATUS_BY_CODE.items()}

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred."


class ApiError(Exception):
    """A request failure with a stable code, safe to show to the caller."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[List[Dict[str, str]]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details
        self.headers = dict(headers) if headers else None

    @property
    def status_code(self) -> int:
        return STATUS_BY_CODE[self.code]


# ---------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------
def success(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data}


def error_body(code: ErrorCode, message: str, details: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code.value, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


def error_response(
    code: ErrorCode,
    message: str,
    details: Optional[List[Dict[str, str]]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_CODE[code],
        content=error_body(code, message, details),
        headers=dict(headers) if headers else None,
    )


def validation_details(errors: Sequence[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten pydantic/FastAPI errors into {field, message} pairs.

    The leading location segment (body/query/path) is dropped so callers see
    "title", not "body.title".
    """
    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        message = err.get("msg", "Invalid value")
        # Strip "Value error, " prefix that Pydantic adds
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        details.append({"field": ".".join(loc), "message": message})
    return details


def validation_error(errors: Sequence[Mapping[str, Any]]) -> ApiError:
    return ApiError(ErrorCode.VALIDATION_ERROR, "Validation failed", validation_details(errors))


# ---------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------
def _rate_limit_headers(request: Request) -> Dict[str, str]:
    # Set by the auth rate-limit dependency; the request was counted either way
    return dict(getattr(request.state, "rate_limit_headers", None) or {})


def _is_unique_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "pgcode", None) == "23505":
        return True
    return "UNIQUE constraint failed" in str(exc.orig)


async def _handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    if exc.code == ErrorCode.INTERNAL_ERROR:
        log.error("[ERROR] %s %s: %s", request.method, request.url.path, exc.message)
    headers = _rate_limit_headers(request)
    headers.update(exc.headers or {})
    return error_response(exc.code, exc.message, exc.details, headers)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = validation_details(exc.errors())
    log.info("[VALIDATION] %s %s rejected: %d field(s)", request.method, request.url.path, len(details))
    return error_response(ErrorCode.VALIDATION_ERROR, "Validation failed", details, _rate_limit_headers(request))


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unmatched path or method: both are an unknown resource
    if exc.status_code in (404, 405):
        return error_response(ErrorCode.NOT_FOUND, "The requested resource was not found.")
    code = CODE_BY_STATUS.get(exc.status_code)
    if code is None:
        code = ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.VALIDATION_ERROR
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, message),
        headers=getattr(exc, "headers", None),
    )


async def _handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    headers = _rate_limit_headers(request)
    if _is_unique_violation(exc):
        # Uniqueness violations that slipped past a service pre-check
        log.warning("[DB] Unique violation on %s %s: %s", request.method, request.url.path, exc.orig)
        return error_response(ErrorCode.CONFLICT, "A record with this value already exists.", headers=headers)
    log.error("[DB] Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return error_response(ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE, headers=headers)


async def _handle_record_not_found(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return error_response(ErrorCode.NOT_FOUND, "Record not found.")


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    log.exception("[ERROR] Unhandled error on %s %s", request.method, request.url.path)
    return error_response(ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _handle_api_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(IntegrityError, _handle_integrity_error)
    app.add_exception_handler(RecordNotFoundError, _handle_record_not_found)
    app.add_exception_handler(Exception, _handle_unexpected)
