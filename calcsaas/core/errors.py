"""Service error taxonomy; each error knows the HTTP status it maps to."""

from fastapi import status


class ServiceError(Exception):
    """Base class for failures that are reported to the client as {"error": message}."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: str | None = None, cause: Exception | None = None) -> None:
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Missing or malformed input (empty fields, short password, empty expression)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidExpression(ServiceError):
    """Expression sanitized to nothing, failed to parse, or produced a non-finite value."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid mathematical expression"


class DuplicateIdentity(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Username or email already exists"


class InvalidCredentials(ServiceError):
    """Unknown identifier or wrong password; the two cases are indistinguishable."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class MissingToken(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access token required"


class InvalidToken(ServiceError):
    """Bad signature, malformed payload, or expired token."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid token"


class PersistenceFailure(ServiceError):
    """Database failure. The message stays generic; the cause is only logged."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"
