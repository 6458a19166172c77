"""
Custom exception classes and FastAPI exception handlers.

The service and store layers raise domain-specific errors without importing
HTTP concepts; the handlers registered here translate them into responses.

Exception hierarchy:
    BackOfficeError (base)
    ├── AccountNotFoundError     : requested account doesn't exist
    ├── HolderNotFoundError      : account holder row is missing
    ├── InsufficientFundsError   : withdrawal larger than the balance
    ├── InvalidAmountError       : negative or non-positive amount
    ├── InvalidMovementKindError : movement kind outside deposito/retiro
    ├── InvalidParametersError   : missing/malformed request input
    └── StoreError               : underlying query failure, with context

Response contract:
  Every error is answered with HTTP 400 and {"error": "<message>"}. The
  ERROR_TYPES table still gives each class its own label so that a missing
  account and an overdrawn one are told apart in the logs.
"""

from decimal import Decimal

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backoffice.logging_config import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class BackOfficeError(Exception):
    """Base exception for all back-office domain errors."""

    def __init__(self, detail: str = "Ocurrió un error"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class AccountNotFoundError(BackOfficeError):
    """Raised when a requested account does not exist."""

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__("Cuenta no encontrada")


class HolderNotFoundError(BackOfficeError):
    """Raised when the holder behind an account cannot be resolved."""

    def __init__(self, holder_id: int | None = None):
        self.holder_id = holder_id
        super().__init__("Titular no encontrado")


class InsufficientFundsError(BackOfficeError):
    """
    Raised when a withdrawal exceeds the current balance.

    Attributes:
        account_id: The account that lacks sufficient funds.
        requested: The amount the caller tried to withdraw.
        available: The balance at check time.
    """

    def __init__(self, account_id: int, requested: Decimal, available: Decimal):
        self.account_id = account_id
        self.requested = requested
        self.available = available
        super().__init__("Saldo insuficiente")


class InvalidAmountError(BackOfficeError):
    """Raised when a movement amount is out of range."""

    def __init__(self, detail: str = "El valor del movimiento no puede ser negativo"):
        super().__init__(detail)


class InvalidMovementKindError(BackOfficeError):
    """Raised when a movement kind is neither deposito nor retiro."""

    def __init__(self, kind: object = None, detail: str = "Tipo de movimiento no válido"):
        self.kind = kind
        super().__init__(detail)


class InvalidParametersError(BackOfficeError):
    """Raised when request parameters are missing or malformed."""

    def __init__(self, detail: str = "Parámetros no válidos"):
        super().__init__(detail)


class StoreError(BackOfficeError):
    """
    Wraps a failure from the ledger database.

    The context names the operation that failed, e.g. "Error al consultar saldo".
    """

    def __init__(self, context: str, cause: Exception):
        self.context = context
        self.cause = cause
        super().__init__(f"{context}: {cause}")


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

# Label per exception class, used in logs
ERROR_TYPES: dict[type[BackOfficeError], str] = {
    AccountNotFoundError: "not_found",
    HolderNotFoundError: "not_found",
    InsufficientFundsError: "insufficient_funds",
    InvalidAmountError: "invalid_amount",
    InvalidMovementKindError: "invalid_movement_kind",
    InvalidParametersError: "invalid_parameters",
    StoreError: "store_error",
}

# Wire status per label; the public contract is a uniform 400
ERROR_STATUS_CODES: dict[str, int] = {
    "not_found": 400,
    "insufficient_funds": 400,
    "invalid_amount": 400,
    "invalid_movement_kind": 400,
    "invalid_parameters": 400,
    "store_error": 400,
}

DEFAULT_ERROR_TYPE = "error"
DEFAULT_STATUS_CODE = 400

# Messages for request body fields that fail validation
BODY_FIELD_MESSAGES: dict[str, str] = {
    "tipo": "Tipo de transacción no válido",
    "valor": "El valor de la transacción debe ser positivo",
}


def error_type_for(exc: BackOfficeError) -> str:
    """Resolve the label for an exception, walking up its class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in ERROR_TYPES:
            return ERROR_TYPES[cls]
    return DEFAULT_ERROR_TYPE


def status_code_for(error_type: str) -> int:
    return ERROR_STATUS_CODES.get(error_type, DEFAULT_STATUS_CODE)


def validation_error_to_domain(exc: RequestValidationError) -> BackOfficeError:
    """
    Turn a FastAPI validation failure into the matching domain error.

    Body fields get their own message (first failing field wins, in
    declaration order); anything in the path or query string is reported
    as invalid parameters.
    """
    for error in exc.errors():
        loc = error.get("loc", ())
        if len(loc) >= 2 and loc[0] == "body":
            message = BODY_FIELD_MESSAGES.get(str(loc[-1]))
            if loc[-1] == "tipo":
                return InvalidMovementKindError(error.get("input"), message)
            if loc[-1] == "valor":
                return InvalidAmountError(message)
    return InvalidParametersError()


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Responses always have the shape {"error": "message"}. This is called
    once during app creation in main.py.
    """

    @app.exception_handler(BackOfficeError)
    async def back_office_error_handler(
        request: Request, exc: BackOfficeError
    ) -> JSONResponse:
        error_type = error_type_for(exc)
        logger.warning(
            "%s %s failed [%s]: %s",
            request.method,
            request.url.path,
            error_type,
            exc.detail,
            extra={"error_type": error_type},
        )
        return JSONResponse(
            status_code=status_code_for(error_type),
            content={"error": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        domain_error = validation_error_to_domain(exc)
        return await back_office_error_handler(request, domain_error)
