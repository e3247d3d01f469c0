from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    CONFLICT_OR_IO = "conflict_or_io"
    IO_ERROR = "io_error"


class SubscriptionError(Exception):
    """Failure raised by the subscription core, tagged with an ErrorKind.

    Callers branch on ``kind``; ``message`` is safe to show to clients only for
    INVALID_INPUT and NOT_FOUND.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @classmethod
    def invalid_input(cls, message: str) -> SubscriptionError:
        return cls(ErrorKind.INVALID_INPUT, message)

    @classmethod
    def not_found(cls, message: str = "subscription not found") -> SubscriptionError:
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def conflict_or_io(cls, message: str) -> SubscriptionError:
        return cls(ErrorKind.CONFLICT_OR_IO, message)

    @classmethod
    def io_error(cls, message: str) -> SubscriptionError:
        return cls(ErrorKind.IO_ERROR, message)

    def __repr__(self) -> str:
        return f"SubscriptionError(kind={self.kind.value!r}, message={self.message!r})"
