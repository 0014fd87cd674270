"""
Standardized response utilities and exception handlers
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ticketing.core.errors import DomainError, ErrorCode
from ticketing.schemas.common import ErrorResponse, StandardResponse

logger = logging.getLogger(__name__)

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=data
    )
    return JSONResponse(
        content=jsonable_encoder(response),
        status_code=status_code
    )

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=jsonable_encoder(response),
        status_code=status_code
    )

async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map a domain error to its HTTP status"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return error_response(
        message=exc.message,
        error_code=exc.code.value,
        details=exc.details,
        status_code=exc.status_code
    )

async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors like any other bad request"""
    return error_response(
        message="Invalid request",
        error_code=ErrorCode.BAD_REQUEST.value,
        details=exc.errors(),
        status_code=400
    )

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
