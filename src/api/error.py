"""HTTP error mapping

Use cases report failures as libs.result.Error values; routes raise
ClientError and the handler installed by create_app renders
{"error": {"code": ..., "message": ...}}.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.result import Error

NOT_FOUND_CODES = {
    "ORDER_NOT_FOUND",
    "MILESTONE_NOT_FOUND",
    "SUBSCRIPTION_NOT_FOUND",
    "PLAN_NOT_FOUND",
}

INVALID_STATE_CODES = {
    "INVALID_STATUS_TRANSITION",
    "ORDER_NOT_PAID",
    "ORDER_ALREADY_PAID",
    "ORDER_CANCELLED",
    "SUBSCRIPTION_NOT_ACTIVE",
}

PROVIDER_ERROR_CODES = {
    "PAYMENT_FAILED",
    "REFUND_FAILED",
    "RECURRING_PAYMENT_FAILED",
    "CANCEL_RECURRING_PAYMENT_FAILED",
}


def status_code_for(error: Error) -> int:
    if error.code in NOT_FOUND_CODES:
        return status.HTTP_404_NOT_FOUND
    if error.code in INVALID_STATE_CODES:
        return status.HTTP_409_CONFLICT
    if error.code in PROVIDER_ERROR_CODES:
        return status.HTTP_402_PAYMENT_REQUIRED
    return status.HTTP_400_BAD_REQUEST


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_code_for(error)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.error.code, "message": exc.error.message}},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first.get('msg')}" if location else "Invalid request parameters"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": {"code": "VALIDATION_ERROR", "message": message}},
    )
