import logging

from fastapi import Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from field_service.core.domain_exceptions import DomainException
from field_service.core.error_codes import ErrorCode
from field_service.schemas.common import APIError, APIResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: APIError, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse(success=False, error=error).model_dump(mode="json"),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    code = ErrorCode.AUTH_REQUIRED if exc.status_code == 401 else ErrorCode.VALIDATION_ERROR
    return _error_response(
        exc.status_code,
        APIError(code=code, message=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields: dict[str, str] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        fields[".".join(location) or "body"] = error.get("msg", "Invalid value")

    return _error_response(
        422,
        APIError(
            code=ErrorCode.VALIDATION_ERROR,
            message="Please correct the highlighted fields.",
            fields=fields,
        ),
    )


async def domain_exception_handler(request: Request, exc: DomainException):
    return _error_response(
        exc.status_code,
        APIError(code=exc.code, message=exc.message),
    )


async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(
        "Store error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _error_response(
        500,
        APIError(
            code=ErrorCode.STORE_ERROR,
            message="Something went wrong while saving your changes. Please try again.",
        ),
    )
