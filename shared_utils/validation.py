"""
Input validation utilities.
Checks CLI-supplied values before any request is sent.
"""

import re

from shared_utils.error_handler import ValidationError


_URN_PATTERN = re.compile(r'^urn:[A-Za-z0-9][A-Za-z0-9-]*:[A-Za-z0-9_.-]+:.+$')


class InputValidator:
    """Utility class for input validation."""

    @staticmethod
    def validate_non_empty_string(value: str, field_name: str) -> str:
        """Validate non-empty string.

        Args:
            value: String to validate
            field_name: Name of field for error messages

        Returns:
            Validated string

        Raises:
            ValidationError: If validation fails
        """
        if not isinstance(value, str):
            raise ValidationError(f"{field_name} must be a string")

        if not value or not value.strip():
            raise ValidationError(f"{field_name} cannot be empty")

        return value.strip()

    @staticmethod
    def validate_positive_int(value: int, field_name: str, allow_zero: bool = False) -> int:
        """Validate positive integer.

        Args:
            value: Integer to validate
            field_name: Name of field for error messages
            allow_zero: Whether zero is valid

        Returns:
            Validated integer

        Raises:
            ValidationError: If validation fails
        """
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValidationError(f"{field_name} must be an integer")

        min_val = 0 if allow_zero else 1
        if value < min_val:
            raise ValidationError(f"{field_name} must be >= {min_val}")

        return value

    @staticmethod
    def validate_urn(value: str, field_name: str) -> str:
        """Validate a LinkedIn URN such as ``urn:li:organization:123``.

        Raises:
            ValidationError: If the value is not URN-shaped
        """
        value = InputValidator.validate_non_empty_string(value, field_name)
        if not _URN_PATTERN.match(value):
            raise ValidationError(
                f"{field_name} must be a URN (urn:li:<type>:<id>)",
                context={"field": field_name, "value": value},
            )
        return value
