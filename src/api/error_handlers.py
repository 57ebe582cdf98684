"""Translate ledger failures into HTTP responses."""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.errors.ledger_errors import (
    AlreadySoldError,
    InsufficientPaymentError,
    InvalidInputError,
    LedgerError,
    ListingNotFoundError,
    SelfPurchaseError,
    TransferFailedError,
)

logger = structlog.get_logger(__name__)

_STATUS_BY_ERROR: dict[type[LedgerError], int] = {
    InvalidInputError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ListingNotFoundError: status.HTTP_404_NOT_FOUND,
    InsufficientPaymentError: status.HTTP_402_PAYMENT_REQUIRED,
    SelfPurchaseError: status.HTTP_403_FORBIDDEN,
    AlreadySoldError: status.HTTP_409_CONFLICT,
    TransferFailedError: status.HTTP_502_BAD_GATEWAY,
}


def _error_body(code: str, message: str) -> dict:  # type: ignore[type-arg]
    return {"error": {"code": code, "message": message}}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
        log = logger.error if status_code >= 500 else logger.info
        log("ledger_request_rejected", code=exc.code, path=request.url.path, error=exc.message)
        return JSONResponse(status_code=status_code, content=_error_body(exc.code, exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Missing caller header, malformed body or path parameters."""
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        logger.info("request_validation_failed", path=request.url.path, errors=problems)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body("VALIDATION_ERROR", problems),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # Never leak internal details to the caller
        logger.exception("unhandled_request_error", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred"),
        )
