"""
Form state and validation for Universal Form.

This package provides the form state controller that validates field edits,
debounces error display and reports form readiness.
"""

from .form_controller import FieldState, FieldsChangeCallback, FormStateController

__all__ = [
    "FieldState",
    "FieldsChangeCallback",
    "FormStateController",
]
