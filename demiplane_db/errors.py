"""Database error codes and the exception hierarchy raised by the package."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric database error codes, grouped like HTTP statuses."""

    SUCCESS = 200

    INVALID_QUERY = 400
    RECORD_NOT_FOUND = 404
    DUPLICATE_RECORD = 409
    CONSTRAINT_VIOLATION = 422
    PERMISSION_DENIED = 403
    DATA_CONVERSION_ERROR = 412
    INVALID_DATA = 413

    CONNECTION_FAILED = 500
    DISCONNECTION_FAILED = 501
    QUERY_EXECUTION_FAILED = 502
    PREPARED_STATEMENT_FAILED = 503
    TRANSACTION_START_FAILED = 504
    TRANSACTION_COMMIT_FAILED = 505
    TRANSACTION_ROLLBACK_FAILED = 506
    CONNECTION_TIMEOUT = 507
    CONNECTION_POOL_EXHAUSTED = 508
    DEADLOCK_DETECTED = 509
    SYSTEM_ROLLBACK = 510

    NULL_POINTER_EXCEPTION = 600
    UNKNOWN_ERROR = 601


_DESCRIPTIONS = {
    ErrorCode.SUCCESS: "200: Operation succeeded.",
    ErrorCode.INVALID_QUERY: "400: Invalid query syntax.",
    ErrorCode.RECORD_NOT_FOUND: "404: No records found.",
    ErrorCode.DUPLICATE_RECORD: "409: Duplicate record exists.",
    ErrorCode.CONSTRAINT_VIOLATION: "422: Constraint violation occurred.",
    ErrorCode.PERMISSION_DENIED: "403: Permission denied.",
    ErrorCode.DATA_CONVERSION_ERROR: "412: Data conversion error.",
    ErrorCode.CONNECTION_FAILED: "500: Failed to connect to the database.",
    ErrorCode.DISCONNECTION_FAILED: "501: Failed to disconnect from the database.",
    ErrorCode.QUERY_EXECUTION_FAILED: "502: Failed to execute the query.",
    ErrorCode.PREPARED_STATEMENT_FAILED: "503: Failed to prepare the statement.",
    ErrorCode.TRANSACTION_START_FAILED: "504: Failed to start the transaction.",
    ErrorCode.TRANSACTION_COMMIT_FAILED: "505: Failed to commit the transaction.",
    ErrorCode.TRANSACTION_ROLLBACK_FAILED: "506: Failed to rollback the transaction.",
    ErrorCode.CONNECTION_TIMEOUT: "507: Connection to the database timed out.",
    ErrorCode.CONNECTION_POOL_EXHAUSTED: "508: Connection pool exhausted.",
    ErrorCode.DEADLOCK_DETECTED: "509: Deadlock detected.",
    ErrorCode.NULL_POINTER_EXCEPTION: "600: Null pointer exception.",
    ErrorCode.UNKNOWN_ERROR: "601: Unknown database error.",
}

_UNRECOGNIZED = "Unrecognized error code."


def decode_error(code: ErrorCode | int) -> str:
    """Return a human-readable description of an error code."""
    try:
        code = ErrorCode(code)
    except ValueError:
        return _UNRECOGNIZED
    return _DESCRIPTIONS.get(code, _UNRECOGNIZED)


class DatabaseError(RuntimeError):
    """Base class for database failures; carries an ErrorCode."""

    _prefix = ""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN_ERROR) -> None:
        super().__init__(self._prefix + message)
        self.code = code


class DatabaseConnectionError(DatabaseError):
    """Connecting to or disconnecting from the database failed."""

    _prefix = "ConnectionException: "


class QueryError(DatabaseError):
    """A query could not be built or executed."""

    _prefix = "QueryException: "


class TransactionError(DatabaseError):
    """A transaction could not be started, committed or rolled back."""

    _prefix = "TransactionException: "


class InvalidIdentifierError(DatabaseError):
    """An SQL identifier was rejected."""

    _prefix = "InvalidIdentifierException: "