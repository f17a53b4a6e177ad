"""
Configuration constants for Universal Form.

This module provides validation limits, application defaults and the JSON
schema used to validate descriptor lists loaded from data.
"""

from pathlib import Path
from typing import Any

from PySide6.QtCore import QCoreApplication, QStandardPaths

# Application identifiers for QSettings
APP_ORGANIZATION = "UniversalForm"
APP_NAME = "UniversalForm"

# Validation limits shared by every field type
MAX_FIELD_LENGTH = 100
MIN_PASSWORD_LENGTH = 8

# Time a field stays "in edit" after its last change, in milliseconds
DEFAULT_DEBOUNCE_DELAY_MS = 500

# Default application settings with JSON-serializable types
DEFAULT_CONFIG: dict[str, Any] = {
    "debounce_delay": DEFAULT_DEBOUNCE_DELAY_MS,
    "log_level": "INFO",  # Options: "DEBUG", "INFO", "WARNING", "ERROR"
    "last_descriptor_file": "",
}

# JSON Schema for descriptor lists (draft-07)
DESCRIPTOR_LIST_JSON_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Universal Form field descriptors",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["id", "type", "label"],
        "additionalProperties": False,
        "properties": {
            "id": {"type": "string", "minLength": 1},
            "type": {"type": "string", "minLength": 1},
            "label": {"type": "string"},
            "defaultValue": {"type": "string"},
            "required": {"type": "boolean"},
        },
    },
}


def get_app_config_dir() -> Path:
    """
    Get the application configuration directory using QStandardPaths.

    Returns:
        Path to the writable configuration directory for this application
    """
    config_location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.ConfigLocation)
    return Path(config_location) / APP_ORGANIZATION / APP_NAME


def setup_qsettings() -> None:
    """
    Configure QSettings with application identifiers.

    This should be called early in application startup to ensure
    QSettings uses the correct organization and application names.
    """
    QCoreApplication.setOrganizationName(APP_ORGANIZATION)
    QCoreApplication.setApplicationName(APP_NAME)


def get_app_log_dir() -> Path:
    """
    Get the directory for the rotating error log.

    Uses the application data location, falling back to the configuration
    directory when the platform reports none.
    """
    data_location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
    base_dir = Path(data_location) if data_location else get_app_config_dir()
    return base_dir / "logs"
