"""
Custom exception classes and the FastAPI exception handler.

Why custom exceptions?
  The service layer raises domain-specific errors (like InsufficientFundsError)
  without importing HTTP concepts. The handler registered here translates
  them into HTTP responses.

  Every error carries a stable `error_type` code so a presentation layer can
  show a specific message (insufficient funds vs. generic failure) without
  parsing free text.

Exception hierarchy:
    LedgerError (base)
    ├── LedgerValidationError (422) — rejected before any state is read or written
    │   ├── InvalidAmountError
    │   ├── ProductInactiveError
    │   └── InvalidInterestTermsError
    ├── NotFoundError (404)
    │   ├── AccountNotFoundError
    │   └── ProductNotFoundError
    ├── ConflictError (409) — the request is well-formed but current state forbids it
    │   ├── InsufficientFundsError
    │   ├── AccountNotActiveError
    │   ├── BalanceLimitExceededError
    │   ├── InvalidStatusTransitionError
    │   ├── ConcurrentUpdateError   — optimistic retries exhausted
    │   ├── VersionConflictError    — a single lost update, retried internally
    │   └── DuplicateKeyError
    ├── UnauthorizedAccessError (403)
    └── StorageError (503)
"""

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base exceptions
# ---------------------------------------------------------------------------

class LedgerError(Exception):
    """Base exception for all ledger domain errors."""

    status_code: int = 400
    error_type: str = "ledger_error"

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)

    def extra(self) -> dict:
        """Additional machine-readable fields for the error response."""
        return {}


class LedgerValidationError(LedgerError):
    status_code = 422
    error_type = "validation_error"


class NotFoundError(LedgerError):
    status_code = 404
    error_type = "not_found"


class ConflictError(LedgerError):
    status_code = 409
    error_type = "conflict"


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------

class InvalidAmountError(LedgerValidationError):
    """Raised when a deposit or withdrawal amount is not positive or exceeds the balance limit."""

    error_type = "invalid_amount"

    def __init__(self, amount: int):
        self.amount = amount
        super().__init__(
            f"Amount must be a positive integer no larger than the balance limit, got {amount}"
        )


class ProductInactiveError(LedgerValidationError):
    """Raised when opening an account against a product that is no longer sold."""

    error_type = "product_inactive"

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not open for new accounts")


class InvalidInterestTermsError(LedgerValidationError):
    error_type = "invalid_interest_terms"


# ---------------------------------------------------------------------------
# Not-found errors
# ---------------------------------------------------------------------------

class AccountNotFoundError(NotFoundError):
    """Raised when a requested account does not exist."""

    error_type = "account_not_found"

    def __init__(self, account_ref: str | uuid.UUID):
        self.account_ref = account_ref
        super().__init__(f"Account {account_ref} not found")


class ProductNotFoundError(NotFoundError):
    """Raised when a requested product does not exist."""

    error_type = "product_not_found"

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


# ---------------------------------------------------------------------------
# Conflict errors
# ---------------------------------------------------------------------------

class InsufficientFundsError(ConflictError):
    """
    Raised when a withdrawal would cause a negative balance.

    Attributes:
        account_number: The account that lacks sufficient funds.
        requested: The amount the caller tried to withdraw.
        available: The balance the withdrawal was validated against.
    """

    error_type = "insufficient_funds"

    def __init__(self, account_number: str, requested: int, available: int):
        self.account_number = account_number
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient funds: requested {requested}, available {available}"
        )

    def extra(self) -> dict:
        return {"requested": self.requested, "available": self.available}


class AccountNotActiveError(ConflictError):
    """Raised when a balance change targets an INACTIVE or CLOSED account."""

    error_type = "account_not_active"

    def __init__(self, account_number: str, status: str):
        self.account_number = account_number
        self.status = status
        super().__init__(f"Account {account_number} is {status}")

    def extra(self) -> dict:
        return {"status": self.status}


class BalanceLimitExceededError(ConflictError):
    """Raised when a deposit would push the balance past what an account can hold."""

    error_type = "balance_limit_exceeded"

    def __init__(self, account_number: str, requested: int, balance: int):
        self.account_number = account_number
        self.requested = requested
        self.balance = balance
        super().__init__(
            f"Deposit of {requested} would exceed the balance limit of account {account_number}"
        )

    def extra(self) -> dict:
        return {"requested": self.requested, "balance": self.balance}


class InvalidStatusTransitionError(ConflictError):
    error_type = "invalid_status_transition"


class VersionConflictError(ConflictError):
    """
    Raised by the ledger store when a conditional write finds that the
    account changed since it was read. The account authority retries these.
    """

    error_type = "version_conflict"

    def __init__(self, account_number: str, expected_version: int):
        self.account_number = account_number
        self.expected_version = expected_version
        super().__init__(
            f"Account {account_number} changed since version {expected_version}"
        )


class ConcurrentUpdateError(ConflictError):
    """Raised when an operation keeps losing the race for the same account."""

    error_type = "concurrent_update"

    def __init__(self, account_number: str, attempts: int):
        self.account_number = account_number
        self.attempts = attempts
        super().__init__(
            f"Account {account_number} is being updated concurrently; "
            f"gave up after {attempts} attempts"
        )


class DuplicateKeyError(ConflictError):
    error_type = "duplicate_key"


# ---------------------------------------------------------------------------
# Access and storage errors
# ---------------------------------------------------------------------------

class UnauthorizedAccessError(LedgerError):
    """Raised when a caller attempts to access an account they don't own."""

    status_code = 403
    error_type = "unauthorized_access"

    def __init__(self, detail: str = "You do not have access to this resource"):
        super().__init__(detail)


class StorageError(LedgerError):
    """Raised when the database cannot be reached or fails mid-operation."""

    status_code = 503
    error_type = "storage_unavailable"

    def __init__(self, detail: str = "Ledger storage is unavailable"):
        super().__init__(detail)


# ---------------------------------------------------------------------------
# FastAPI exception handler
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the ledger exception handler with the FastAPI application.

    Every domain error becomes {"detail": ..., "error_type": ..., **extra}
    with the status code declared on its class.
    """

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        if isinstance(exc, StorageError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        else:
            logger.warning(
                "%s %s rejected (%s): %s",
                request.method, request.url.path, exc.error_type, exc.detail,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "error_type": exc.error_type, **exc.extra()},
        )
