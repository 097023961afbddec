"""Exception to JSON response mapping.

Error bodies are {"error": CODE, "message": str} plus "details" where there are
any. Hierarchy rejections carry the ids involved in details so a client can
act without refetching.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import (
    HierarchyException,
    RelationshipConflictException,
    StructuralRejectionException,
)

logger = logging.getLogger(__name__)

# error_code -> status; codes not listed fall back to 400.
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "TENANT_NOT_FOUND": 404,
    "TENANT_INACTIVE": 403,
    "TENANT_ALREADY_EXISTS": 409,
    "VALIDATION_ERROR": 400,
    "DUPLICATE_NAME": 409,
    "READ_ONLY_TEMPLATE": 403,
    "DUPLICATE_RELATIONSHIP": 409,
    "SELF_REFERENCE": 422,
    "CYCLE_DETECTED": 422,
    "LAST_PARENT_RELATIONSHIP": 422,
    "HAS_CHILDREN": 422,
    "RELATIONSHIP_CONFLICT": 409,
}


def _hierarchy_exception_handler(
    request: Request, exc: HierarchyException
) -> JSONResponse:
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if isinstance(exc, RelationshipConflictException):
        logger.warning("Relationship conflict: %s %s", exc.message, exc.details)
    elif isinstance(exc, StructuralRejectionException):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.error_code)
    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": _jsonable_errors(exc),
        },
    )


def _jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Validation errors without the raw 'ctx' objects (exceptions are not JSON)."""
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Database and transport failures end up here. The message is hidden unless debug."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HierarchyException, _hierarchy_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
