"""
API Error Handling

Maps the core exception taxonomy onto HTTP status codes and the standard
error envelope.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes, PackVaultException


logger = logging.getLogger(__name__)


STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.NOT_FOUND: 404,
    ErrorCodes.INVALID_STATE: 400,
    ErrorCodes.VALIDATION_FAILURE: 400,
    ErrorCodes.LEDGER_INCONSISTENCY: 400,
    ErrorCodes.ROOT_MISMATCH: 500,
    ErrorCodes.LEDGER_CONFIG_ERROR: 500,
    ErrorCodes.LEDGER_UNAVAILABLE: 503,
}


async def packvault_error_handler(request: Request, exc: PackVaultException) -> JSONResponse:
    """Handle exceptions raised by the campaign core."""
    error = exc.to_error_model()
    status_code = STATUS_BY_CODE.get(error.code, 500)
    if error.retryable:
        logger.warning(f"{error.code} on {request.url.path}: {error.message}")
    elif status_code >= 500:
        logger.error(f"{error.code} on {request.url.path}: {error.message}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=error.code,
                message=error.message,
                details=error.details,
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
