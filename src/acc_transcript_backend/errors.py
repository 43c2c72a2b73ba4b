"""
Error taxonomy shared by access control, the query engine and the transports.
"""

from enum import Enum
from typing import Dict


class ErrorKind(str, Enum):
    """Kinds of structured failure an operation can produce."""
    UNAUTHENTICATED = "Unauthenticated"
    ACCESS_DENIED = "AccessDenied"
    NOT_FOUND = "NotFound"
    UNKNOWN_OPERATION = "UnknownOperation"
    INVALID_ARGUMENT = "InvalidArgument"


HTTP_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNKNOWN_OPERATION: 404,
    ErrorKind.INVALID_ARGUMENT: 400,
}


class QueryError(Exception):
    """Base class for failures that are reported to the caller as structured results."""

    kind: ErrorKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]


class Unauthenticated(QueryError):
    """No credential, a malformed one, or one that matches no identity."""
    kind = ErrorKind.UNAUTHENTICATED


class AccessDenied(QueryError):
    """Valid credential but the requested client or record is outside the caller's scope."""
    kind = ErrorKind.ACCESS_DENIED


class NotFound(QueryError):
    kind = ErrorKind.NOT_FOUND


class UnknownOperation(QueryError):
    kind = ErrorKind.UNKNOWN_OPERATION


class InvalidArgument(QueryError):
    kind = ErrorKind.INVALID_ARGUMENT
