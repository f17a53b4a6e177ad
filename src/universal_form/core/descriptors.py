"""
Field descriptors for Universal Form.

A form is described by an ordered list of FieldDescriptor records. This
module defines the closed set of field types, the descriptor record itself
and helpers to load descriptor lists from JSON data.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import jsonschema

from .config import DESCRIPTOR_LIST_JSON_SCHEMA
from .errors import ConfigurationError, ErrorCode

logger = logging.getLogger(__name__)


class FieldType(Enum):
    """Supported field types, valued by their wire names."""

    TEXT = "inputText"
    EMAIL = "inputEmail"
    PASSWORD = "inputPassword"

    @property
    def input_type(self) -> str:
        """HTML-style input kind used by renderers ("text", "email", "password")."""
        return self.value.removeprefix("input").lower()

    @classmethod
    def parse(cls, value: FieldType | str) -> FieldType:
        """
        Resolve a field type from a member, wire value or member name.

        Args:
            value: FieldType, "inputEmail", "Email" or "email"

        Returns:
            The matching FieldType

        Raises:
            ConfigurationError: If the value names no known field type
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            for member in cls:
                if value == member.value or value.upper() == member.name:
                    return member

        raise ConfigurationError(
            code=ErrorCode.UNKNOWN_FIELD_TYPE,
            user_message=f"Invalid field type: {value!r}",
            technical_message=f"Expected one of {[member.value for member in cls]}, got {value!r}",
            context={"field_type": value},
        )


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Immutable description of one form field.

    The type is kept as supplied; it is resolved when the field's
    validation rule is built, so an unknown type surfaces as a
    ConfigurationError at form construction.
    """

    id: str
    type: FieldType | str
    label: str
    default_value: str | None = None
    required: bool = False

    @property
    def field_type(self) -> FieldType:
        return FieldType.parse(self.type)

    @property
    def input_type(self) -> str:
        return self.field_type.input_type

    @property
    def display_label(self) -> str:
        """Label with a trailing asterisk for required fields."""
        return self.label + ("*" if self.required else "")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FieldDescriptor:
        """Build a descriptor from a camelCase mapping (``defaultValue``)."""
        return cls(
            id=data["id"],
            type=data["type"],
            label=data["label"],
            default_value=data.get("defaultValue"),
            required=bool(data.get("required", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase mapping suitable for JSON."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value if isinstance(self.type, FieldType) else self.type,
            "label": self.label,
            "required": self.required,
        }
        if self.default_value is not None:
            data["defaultValue"] = self.default_value
        return data


def check_unique_ids(descriptors: Iterable[FieldDescriptor]) -> None:
    """
    Ensure no two descriptors share an id.

    Raises:
        ConfigurationError: On the first duplicated id
    """
    seen: set[str] = set()
    for descriptor in descriptors:
        if descriptor.id in seen:
            raise ConfigurationError(
                code=ErrorCode.DUPLICATE_FIELD_ID,
                user_message=f"Duplicate field id: {descriptor.id!r}",
                context={"field_id": descriptor.id},
            )
        seen.add(descriptor.id)


def descriptors_from_data(data: Any) -> tuple[FieldDescriptor, ...]:
    """
    Validate JSON-like data and convert it to descriptors.

    Args:
        data: A list of mappings with id, type, label, defaultValue, required

    Returns:
        Descriptors in their original order

    Raises:
        ConfigurationError: If the data does not match the descriptor schema,
            uses an unknown field type or repeats an id
    """
    try:
        jsonschema.validate(data, DESCRIPTOR_LIST_JSON_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ConfigurationError(
            code=ErrorCode.CONFIG_INVALID,
            user_message=f"Descriptor list validation failed: {e.message}",
            technical_message=str(e),
        ) from e

    descriptors = tuple(FieldDescriptor.from_dict(item) for item in data)

    for descriptor in descriptors:
        FieldType.parse(descriptor.type)
    check_unique_ids(descriptors)

    return descriptors


def load_descriptors(path: str | Path) -> tuple[FieldDescriptor, ...]:
    """
    Load a descriptor list from a UTF-8 JSON file.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or its
            content is not a valid descriptor list
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            user_message=f"Descriptor file '{path.name}' is not valid JSON",
            technical_message=str(e),
            context={"path": str(path)},
        ) from e
    except OSError as e:
        raise ConfigurationError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            user_message=f"Cannot read descriptor file '{path.name}'",
            technical_message=str(e),
            context={"path": str(path)},
        ) from e

    descriptors = descriptors_from_data(data)
    logger.debug(f"Loaded {len(descriptors)} field descriptors from {path}")
    return descriptors


def as_descriptor_tuple(descriptors: Iterable[FieldDescriptor]) -> tuple[FieldDescriptor, ...]:
    """Freeze descriptors (any iterable, read once), checking ids are unique."""
    frozen = tuple(descriptors)
    check_unique_ids(frozen)
    return frozen
