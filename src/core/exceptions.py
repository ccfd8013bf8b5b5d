"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes surfaced to callers."""

    # Not found errors (404)
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"

    # Validation errors (400)
    INVALID_INPUT = "INVALID_INPUT"

    # Conflict errors (409)
    ENTITY_ALREADY_EXISTS = "ENTITY_ALREADY_EXISTS"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class EntityNotFoundError(AppException):
    """Profile or preferences record not found."""

    def __init__(self, entity: str, identifier: str | None = None) -> None:
        message = f"{entity} not found"
        if identifier:
            message = f"{message}: {identifier}"
        super().__init__(
            error_code=ErrorCode.ENTITY_NOT_FOUND,
            message=message,
            status_code=404,
            details={"entity": entity, "id": identifier} if identifier else {"entity": entity},
        )


class EntityAlreadyExistsError(AppException):
    """A record already exists for the owning user."""

    def __init__(self, entity: str, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ENTITY_ALREADY_EXISTS,
            message=f"{entity} already exists for this user",
            status_code=409,
            details={"entity": entity, "user_id": user_id},
        )


class InvalidInputError(AppException):
    """Invariant or policy violation."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_INPUT,
            message=message,
            status_code=400,
            details=details,
        )


class DomainValidationError(ValueError):
    """Raised by aggregates when a mutation would break an invariant.

    Never crosses the service layer; services re-raise it as InvalidInputError.
    """


class InvalidRangeError(DomainValidationError):
    """A numeric value falls outside its allowed range."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class InvalidChoiceError(DomainValidationError):
    """A value is not one of the allowed enum members."""

    def __init__(self, field: str, value: object, allowed: list[str]) -> None:
        self.field = field
        self.allowed = allowed
        super().__init__(f"Invalid {field}: {value!r}. Allowed: {', '.join(allowed)}")
