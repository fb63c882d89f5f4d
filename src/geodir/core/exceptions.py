"""Domain errors raised by the directory services.

The HTTP layer maps each class to a status code; nothing below this module
knows about HTTP.
"""

from enum import Enum


class GeoDirectoryError(Exception):
    """Base class for every error the service raises on purpose."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailure(str, Enum):
    MISSING_BOTH = "missing_both"
    MISSING_NAME = "missing_name"
    MISSING_ZIPCODE = "missing_zipcode"
    INVALID_ZIPCODE_FORMAT = "invalid_zipcode_format"


VALIDATION_MESSAGES: dict[ValidationFailure, str] = {
    ValidationFailure.MISSING_BOTH: "Name and zipcode are required.",
    ValidationFailure.MISSING_NAME: "Name is required.",
    ValidationFailure.MISSING_ZIPCODE: "Zipcode is required.",
    ValidationFailure.INVALID_ZIPCODE_FORMAT: "Zipcode format is not valid.",
}


class InputValidationError(GeoDirectoryError):
    """User-supplied fields failed the presence or format checks."""

    def __init__(self, failure: ValidationFailure) -> None:
        super().__init__(VALIDATION_MESSAGES[failure])
        self.failure = failure


class UserNotFoundError(GeoDirectoryError):
    def __init__(self, user_id: str) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class ConcurrentUpdateError(GeoDirectoryError):
    """The record changed between the read and the conditional write."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            "User was modified by another request; fetch it again and retry"
        )
        self.user_id = user_id


class ResolutionFailedError(GeoDirectoryError):
    """A postal code could not be turned into coordinates and a timezone."""

    def __init__(self, zipcode: str, reason: str) -> None:
        super().__init__(f"Could not resolve location for zipcode {zipcode}: {reason}")
        self.zipcode = zipcode
        self.reason = reason


class LocationNotFoundError(ResolutionFailedError):
    def __init__(self, zipcode: str) -> None:
        super().__init__(zipcode, "no coordinates found")


class TimezoneNotFoundError(ResolutionFailedError):
    def __init__(self, zipcode: str) -> None:
        super().__init__(zipcode, "no timezone found")


class ProviderUnavailableError(ResolutionFailedError):
    """Transport failure, timeout or unexpected response from a provider."""


class StoreFailureError(GeoDirectoryError):
    def __init__(self, operation: str, cause: Exception) -> None:
        # DBAPI wrappers render the statement and its parameters; report only
        # the driver message
        detail = getattr(cause, "orig", None) or cause
        super().__init__(f"Error during {operation}: {type(cause).__name__}: {detail}")
        self.operation = operation
        self.cause = cause
