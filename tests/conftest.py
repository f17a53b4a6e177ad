"""
Shared fixtures for Universal Form tests.
"""

import os

# Set offscreen platform to prevent display errors on headless systems
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402
from PySide6.QtCore import QStandardPaths  # noqa: E402

from universal_form.core.descriptors import FieldDescriptor, FieldType  # noqa: E402

# Keep logs and settings written during tests out of the user's directories
QStandardPaths.setTestModeEnabled(True)


@pytest.fixture(autouse=True)
def _qapp(qapp):
    """Ensure a QApplication exists for every test."""
    yield qapp


@pytest.fixture
def name_email_descriptors():
    """Required name and email fields."""
    return [
        FieldDescriptor("name", FieldType.TEXT, "Name", required=True),
        FieldDescriptor("email", FieldType.EMAIL, "Email", required=True),
    ]


@pytest.fixture
def mixed_descriptors():
    """Optional and required fields of every type, one with a default."""
    return [
        FieldDescriptor("first_name", FieldType.TEXT, "First Name", default_value="Some first name"),
        FieldDescriptor("last_name", FieldType.TEXT, "Last Name"),
        FieldDescriptor("email", FieldType.EMAIL, "Email", required=True),
        FieldDescriptor("password", FieldType.PASSWORD, "Password", required=True),
    ]


class CallbackRecorder:
    """Records every (values, is_ready) readiness report."""

    def __init__(self):
        self.calls = []

    def __call__(self, values, is_ready):
        self.calls.append((values, is_ready))

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def recorder():
    return CallbackRecorder()
