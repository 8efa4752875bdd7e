"""
Error Responses
===============
Maps identity errors to JSON responses with fixed user-facing messages.

Technical details are logged, never returned.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from identity_core.errors import ErrorCode, IdentityError, ValidationError

logger = structlog.get_logger(__name__)


def error_payload(code: ErrorCode, message: str) -> dict:
    return {"error": code.value, "message": message}


async def identity_error_handler(request: Request, exc: IdentityError) -> JSONResponse:
    logger.warning(
        "Request failed",
        code=exc.code.value,
        detail=exc.detail,
        path=request.url.path,
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc.code, exc.public_message),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [".".join(str(part) for part in err.get("loc", ())[1:]) for err in exc.errors()]
    logger.info("Request validation failed", path=request.url.path, fields=fields)
    content = error_payload(ErrorCode.VALIDATION_ERROR, ValidationError.public_message)
    content["fields"] = fields
    return JSONResponse(status_code=400, content=content)


def register_error_handlers(app: FastAPI) -> None:
    """Install the identity error handlers on an application."""
    app.add_exception_handler(IdentityError, identity_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
