"""
Per-field validation rules for Universal Form.

A ValidationRule is built once per field descriptor and maps a candidate
value to either Valid or Invalid(message). Rules are pure and never raise
for bad user input; only an unusable descriptor raises, at build time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .config import MAX_FIELD_LENGTH, MIN_PASSWORD_LENGTH
from .descriptors import FieldDescriptor, FieldType
from .errors import ErrorCode

EMPTY_FIELD_MESSAGE = "Empty field"
TOO_LONG_MESSAGE = "Too long"
INVALID_EMAIL_MESSAGE = "Invalid email"
PASSWORD_TOO_SHORT_MESSAGE = "Must be at least {min_length} characters"

# local@domain.tld; no leading dot or ".." in the local part, TLD of 2+ letters
EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)[A-Z0-9_'+\-.]*[A-Z0-9_+\-]@(?:[A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Valid:
    """The value passed every check."""

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return ""


@dataclass(frozen=True)
class Invalid:
    """
    The value failed a check; message is shown to the user.

    code classifies the failure for logging and does not take part in
    equality, so results compare by message alone.
    """

    message: str
    code: ErrorCode = field(default=ErrorCode.INVALID_INPUT, compare=False)

    @property
    def is_valid(self) -> bool:
        return False


ValidationResult = Valid | Invalid

VALID = Valid()


class ValidationRule:
    """
    Validation rule for a single field.

    Checks run in a fixed order and the first failure wins: emptiness
    (required fields only), maximum length, then the type-specific check.
    Empty values of optional fields are always valid.
    """

    def __init__(
        self,
        field_type: FieldType,
        required: bool = False,
        max_length: int = MAX_FIELD_LENGTH,
        min_password_length: int = MIN_PASSWORD_LENGTH,
    ):
        self.field_type = field_type
        self.required = required
        self.max_length = max_length
        self.min_password_length = min_password_length

    def __call__(self, value: str) -> ValidationResult:
        if not value:
            return Invalid(EMPTY_FIELD_MESSAGE, ErrorCode.REQUIRED_FIELD_MISSING) if self.required else VALID

        if len(value) > self.max_length:
            return Invalid(TOO_LONG_MESSAGE, ErrorCode.VALUE_OUT_OF_RANGE)

        if self.field_type is FieldType.EMAIL:
            if not EMAIL_PATTERN.match(value):
                return Invalid(INVALID_EMAIL_MESSAGE, ErrorCode.INVALID_FORMAT)
        elif self.field_type is FieldType.PASSWORD:
            if len(value) < self.min_password_length:
                message = PASSWORD_TOO_SHORT_MESSAGE.format(min_length=self.min_password_length)
                return Invalid(message, ErrorCode.VALUE_OUT_OF_RANGE)

        return VALID

    def __repr__(self) -> str:
        return f"ValidationRule(type={self.field_type.name}, required={self.required})"


def build_rule(
    descriptor: FieldDescriptor,
    max_length: int = MAX_FIELD_LENGTH,
    min_password_length: int = MIN_PASSWORD_LENGTH,
) -> ValidationRule:
    """
    Build the validation rule for a descriptor.

    Args:
        descriptor: Field descriptor
        max_length: Maximum accepted value length
        min_password_length: Minimum length for password fields

    Returns:
        ValidationRule for the descriptor's type and required flag

    Raises:
        ConfigurationError: If the descriptor's type is not a known field type
    """
    return ValidationRule(
        FieldType.parse(descriptor.type),
        required=descriptor.required,
        max_length=max_length,
        min_password_length=min_password_length,
    )


def validate_value(descriptor: FieldDescriptor, value: str) -> ValidationResult:
    """Validate a single value against a descriptor's rule."""
    return build_rule(descriptor)(value)
