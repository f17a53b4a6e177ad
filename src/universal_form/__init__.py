"""
Universal Form: a declarative field-validation and form-state engine.

Describe a form as a list of FieldDescriptor records and drive it through
FormStateController, which validates every edit, debounces error display
and reports whether the form is ready to submit.
"""

from universal_form.core.descriptors import FieldDescriptor, FieldType, descriptors_from_data, load_descriptors
from universal_form.core.errors import ConfigurationError
from universal_form.core.validation import Invalid, Valid, ValidationResult, ValidationRule, build_rule
from universal_form.gui.validation import FieldState, FormStateController

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "FieldDescriptor",
    "FieldState",
    "FieldType",
    "FormStateController",
    "Invalid",
    "Valid",
    "ValidationResult",
    "ValidationRule",
    "build_rule",
    "descriptors_from_data",
    "load_descriptors",
]
