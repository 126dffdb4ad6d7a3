# app/domain/errors.py
from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "NotFound"
    UNAVAILABLE = "Unavailable"
    INVALID_INPUT = "InvalidInput"
    INVALID_STATE = "InvalidState"
    INVALID_TRANSITION = "InvalidTransition"
    UNAUTHORIZED = "Unauthorized"


class DomainError(Exception):
    """
    Business rule violation returned to the caller.
    Every subclass carries its ErrorKind so the API layer can map it in one place.
    """

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind.value, "detail": self.message}


class NotFound(DomainError):
    """Entity absent or not visible to the requester (deliberately the same thing)."""

    kind = ErrorKind.NOT_FOUND


class Unavailable(DomainError):
    kind = ErrorKind.UNAVAILABLE


class InvalidInput(DomainError):
    kind = ErrorKind.INVALID_INPUT


class InvalidState(DomainError):
    kind = ErrorKind.INVALID_STATE


class PaymentFailed(InvalidState):
    """Raised after the FAILED payment state has already been persisted on the order."""


class InvalidTransition(DomainError):
    kind = ErrorKind.INVALID_TRANSITION

    def __init__(self, current: str, new: str):
        super().__init__(f"Invalid status transition from {current} to {new}")
        self.current = current
        self.new = new


class Unauthorized(DomainError):
    kind = ErrorKind.UNAUTHORIZED


class CollaboratorUnavailable(Unavailable):
    """Catalog/user service could not be reached within the request timeout."""
