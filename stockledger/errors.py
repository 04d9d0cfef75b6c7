"""Error kinds raised by the ledger core.

Every failure the ledger reports is a ``LedgerError`` tagged with an
``ErrorKind``. Callers branch on ``error.kind`` rather than on exception
types.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Classification of ledger failures."""

    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INSUFFICIENT_SHARES = "insufficient_shares"
    STORAGE_FAILURE = "storage_failure"


CLIENT_ERROR_KINDS = frozenset({
    ErrorKind.VALIDATION,
    ErrorKind.RESOURCE_NOT_FOUND,
    ErrorKind.INSUFFICIENT_SHARES,
})


class LedgerError(Exception):
    """A tagged ledger failure.

    Attributes:
        kind: The error kind.
        message: Human readable description.
        details: Extra context (e.g. ``requested``/``available`` for
            insufficient shares).
    """

    def __init__(self, kind: ErrorKind, message: str, **details: Any):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details: dict[str, Any] = details

    def __repr__(self) -> str:
        return f"LedgerError(kind={self.kind.value!r}, message={self.message!r}, details={self.details!r})"

    @property
    def is_client_error(self) -> bool:
        """True when the caller's input caused the failure."""
        return self.kind in CLIENT_ERROR_KINDS

    @property
    def retry_safe(self) -> bool:
        """Whether the failed operation may be blindly retried.

        Always False. Client errors fail again on retry, and a storage
        failure is ambiguous: a retried buy may double count.
        """
        return False

    @classmethod
    def validation(cls, message: str, **details: Any) -> "LedgerError":
        return cls(ErrorKind.VALIDATION, message, **details)

    @classmethod
    def not_found(cls, symbol: str) -> "LedgerError":
        return cls(
            ErrorKind.RESOURCE_NOT_FOUND,
            f"Stock symbol not found in portfolio: {symbol}",
            symbol=symbol,
        )

    @classmethod
    def insufficient_shares(
        cls, symbol: str, requested: int, available: int
    ) -> "LedgerError":
        return cls(
            ErrorKind.INSUFFICIENT_SHARES,
            f"Insufficient shares of {symbol}. "
            f"You have {available} shares but are trying to sell {requested}",
            symbol=symbol,
            requested=requested,
            available=available,
        )

    @classmethod
    def storage(
        cls, message: str, cause: Optional[BaseException] = None, **details: Any
    ) -> "LedgerError":
        if cause is not None:
            details.setdefault("cause", str(cause))
        return cls(ErrorKind.STORAGE_FAILURE, message, **details)
