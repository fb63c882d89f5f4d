"""Presence and format checks applied to user input before any side effect."""

import re

from src.geodir.core.exceptions import InputValidationError, ValidationFailure

# ASCII digits only; \d would also accept other Unicode digits
ZIPCODE_PATTERN = re.compile(r"[0-9]{5}(-[0-9]{4})?")


def is_valid_zipcode(zipcode: str) -> bool:
    return ZIPCODE_PATTERN.fullmatch(zipcode) is not None


def check_user_input(name: str | None, zipcode: str | None) -> ValidationFailure | None:
    """Return the first violation found, or None when the input is valid.

    Checks run in a fixed order: both missing, name missing, zipcode
    missing, zipcode format.
    """
    name_missing = name is None or not name.strip()
    zipcode_missing = zipcode is None or zipcode == ""

    if name_missing and zipcode_missing:
        return ValidationFailure.MISSING_BOTH
    if name_missing:
        return ValidationFailure.MISSING_NAME
    if zipcode_missing:
        return ValidationFailure.MISSING_ZIPCODE
    if not is_valid_zipcode(zipcode):
        return ValidationFailure.INVALID_ZIPCODE_FORMAT
    return None


def validate_user_input(name: str | None, zipcode: str | None) -> None:
    """Raise InputValidationError if check_user_input reports a violation."""
    failure = check_user_input(name, zipcode)
    if failure is not None:
        raise InputValidationError(failure)
