"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Session
  2xxx: Validation (client-side, never sent over the network)
  3xxx: Ponder / orchestration guards
  5xxx: Ledger boundary
  9xxx: System
"""

from src.fp_common.enums import AuthFailure, LedgerErrorKind


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Session ---

_AUTH_CODES: dict[AuthFailure, tuple[int, str, int]] = {
    AuthFailure.USER_REJECTED: (1001, "Wallet approval was rejected", 401),
    AuthFailure.TIMEOUT: (1002, "Wallet approval timed out", 504),
    AuthFailure.NOT_SIGNED_IN: (1003, "No wallet is signed in", 401),
}


class AuthError(AppError):
    def __init__(self, reason: AuthFailure, detail: str | None = None) -> None:
        code, message, status = _AUTH_CODES[reason]
        self.reason = reason
        super().__init__(code, f"{message}: {detail}" if detail else message, status)


# --- 2xxx: Validation ---

class ValidationError(AppError):
    """Client-detected input problem; always fixable by correcting the input."""

    def __init__(self, field: str, message: str, code: int = 2001) -> None:
        self.field = field
        super().__init__(code, f"{field}: {message}", 422)


class PonderEndedError(ValidationError):
    def __init__(self, ponder_id: int) -> None:
        super().__init__("ponder_id", f"Ponder {ponder_id} has ended", code=2002)


class PonderNotResolvedError(ValidationError):
    def __init__(self, ponder_id: int) -> None:
        super().__init__("ponder_id", f"Ponder {ponder_id} is not resolved yet", code=2003)


# --- 3xxx: Ponder / orchestration ---

class PonderNotFoundError(AppError):
    def __init__(self, ponder_id: int) -> None:
        super().__init__(3001, f"Ponder not found: {ponder_id}", 404)


class ConcurrentOperationError(AppError):
    def __init__(self, operation: str) -> None:
        super().__init__(
            3002,
            f"Another {operation} is still pending; wait for it to settle",
            409,
        )


# --- 5xxx: Ledger ---

_LEDGER_CODES: dict[LedgerErrorKind, tuple[int, str, int]] = {
    LedgerErrorKind.SUBMISSION_REJECTED: (5001, "Transaction rejected", 422),
    LedgerErrorKind.NETWORK_UNAVAILABLE: (5002, "Ledger network unavailable", 503),
    LedgerErrorKind.AUTHORIZATION_MISSING: (5003, "No signer authorization", 401),
    LedgerErrorKind.TIMEOUT: (5004, "Timed out waiting for the transaction to seal", 504),
    LedgerErrorKind.EXECUTION_REVERTED: (5005, "Transaction reverted", 422),
    LedgerErrorKind.QUERY_FAILED: (5006, "Ledger query failed", 502),
}


class LedgerError(AppError):
    """Error raised at the ledger boundary; `kind` tells callers how to react."""

    def __init__(self, kind: LedgerErrorKind, detail: str | None = None) -> None:
        code, message, status = _LEDGER_CODES[kind]
        self.kind = kind
        self.detail = detail
        super().__init__(code, f"{message}: {detail}" if detail else message, status)

    @property
    def retryable(self) -> bool:
        return self.kind in (LedgerErrorKind.NETWORK_UNAVAILABLE, LedgerErrorKind.TIMEOUT)


class SubmissionRejectedError(LedgerError):
    def __init__(self, detail: str) -> None:
        super().__init__(LedgerErrorKind.SUBMISSION_REJECTED, detail)


class NetworkUnavailableError(LedgerError):
    def __init__(self, detail: str) -> None:
        super().__init__(LedgerErrorKind.NETWORK_UNAVAILABLE, detail)


class AuthorizationMissingError(LedgerError):
    def __init__(self, detail: str | None = None) -> None:
        super().__init__(LedgerErrorKind.AUTHORIZATION_MISSING, detail)


class FinalityTimeoutError(LedgerError):
    """The wait ended, not the transaction: it may still seal later."""

    def __init__(self, transaction_id: str, waited_seconds: float) -> None:
        self.transaction_id = transaction_id
        super().__init__(
            LedgerErrorKind.TIMEOUT,
            f"{transaction_id} not sealed after {waited_seconds:g}s",
        )


class ExecutionRevertedError(LedgerError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(LedgerErrorKind.EXECUTION_REVERTED, reason)


class QueryFailedError(LedgerError):
    def __init__(self, detail: str) -> None:
        super().__init__(LedgerErrorKind.QUERY_FAILED, detail)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
