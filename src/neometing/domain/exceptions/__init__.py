"""Domain exceptions shared by every provider operation."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of a failed provider operation.

    Hey future me - the front-end maps these to HTTP status codes
    (see api/exception_handlers.py). REMOTE and SERVER describe the same
    failure class today (upstream could not be reached); they stay separate
    because callers already see them as different statuses.
    """

    REMOTE = "remote"
    SERVER = "server"
    ENCODE = "encode"
    NO_FIELD = "no_field"
    TYPE_MISMATCH = "type_mismatch"
    NONE = "none"
    UNIMPLEMENTED = "unimplemented"


class MetingError(Exception):
    """Base exception for all provider operation failures."""

    kind: ErrorKind

    # Hey future me, message is stored as an attribute so handlers can log it without
    # parsing str(exception). Don't raise this directly - use a subclass!
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class RemoteError(MetingError):
    """The upstream service could not be contacted or answered garbage."""

    kind = ErrorKind.REMOTE


class ServerError(MetingError):
    """Upstream contact failure, reported with server-side classification.

    Currently synonymous with RemoteError; search uses this one.
    """

    kind = ErrorKind.SERVER


class EncodeError(MetingError):
    """The request envelope could not be built locally."""

    kind = ErrorKind.ENCODE

    def __init__(self, engine: str, msg: str) -> None:
        super().__init__(f"[{engine}] failed to encode request: {msg}")
        self.engine = engine
        self.msg = msg


class NoFieldError(MetingError):
    """An expected field is missing from the upstream JSON."""

    kind = ErrorKind.NO_FIELD

    def __init__(self, path: str) -> None:
        super().__init__(f"missing field: {path}")
        self.path = path


class TypeMismatchError(MetingError):
    """A field is present but has the wrong shape."""

    kind = ErrorKind.TYPE_MISMATCH

    def __init__(self, field: str, expected: str) -> None:
        super().__init__(f"field {field} is not {expected}")
        self.field = field
        self.expected = expected


class NotFoundError(MetingError):
    """Logically empty result: nothing playable, non-200 upstream code, empty list."""

    kind = ErrorKind.NONE

    def __init__(self, message: str = "nothing found") -> None:
        super().__init__(message)


class UnimplementedError(MetingError):
    """The provider does not support this operation."""

    kind = ErrorKind.UNIMPLEMENTED

    def __init__(self, operation: str, provider: str) -> None:
        super().__init__(f"{provider} does not implement {operation}")
        self.operation = operation
        self.provider = provider


__all__ = [
    "EncodeError",
    "ErrorKind",
    "MetingError",
    "NoFieldError",
    "NotFoundError",
    "RemoteError",
    "ServerError",
    "TypeMismatchError",
    "UnimplementedError",
]
