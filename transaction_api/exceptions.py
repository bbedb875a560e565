"""
Exceptions raised by transaction services.

Every error carries a ``kind`` tag. HTTP handlers match on the tag rather
than on the exception class, so a backend only has to set the right kind
for its errors to be mapped correctly.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Classification of transaction service errors."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


class TransactionServiceException(Exception):
    """Base exception for all transaction service errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        kind: Optional[ErrorKind] = None,
    ):
        self.message = message
        self.details = details or {}
        if kind is not None:
            self.kind = kind
        super().__init__(self.message)


class TransactionNotFoundException(TransactionServiceException):
    """Raised when a transaction id does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, transaction_id: Any):
        self.transaction_id = transaction_id
        super().__init__(
            message=f"Transaction {transaction_id} not found",
            details={"transaction_id": transaction_id},
        )


class TransactionValidationException(TransactionServiceException):
    """Raised when a request field cannot be coerced."""

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            message=f"Validation failed for {field}: {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class TransactionServiceUnavailableException(TransactionServiceException):
    """Raised when the transaction backend cannot be reached."""

    kind = ErrorKind.UNAVAILABLE

    def __init__(self, service: str, reason: Optional[str] = None):
        message = f"Transaction backend '{service}' unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message, details={"service": service, "reason": reason}
        )


def error_kind(error: BaseException) -> ErrorKind:
    """Return the kind tag of an error; untagged errors are internal."""
    if isinstance(error, TransactionServiceException):
        return error.kind
    return ErrorKind.INTERNAL
