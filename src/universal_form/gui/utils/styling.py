"""
Shared styling utilities for the Universal Form demo view.

Colors meet WCAG AA contrast against the default light background.
"""

from typing import Any, Protocol


class StyleableWidget(Protocol):
    """Protocol for widgets that can be styled."""

    def setStyleSheet(self, styleSheet: str) -> None: ...
    def setProperty(self, name: str, value: Any) -> bool: ...
    def style(self) -> Any: ...


class FormPalette:
    """Colors used by form fields."""

    BORDER_DEFAULT = "#dee2e6"  # Light border
    BORDER_FOCUS = "#0d6efd"  # Blue focus indicator
    BORDER_ERROR = "#dc3545"  # Error state border

    ERROR_TEXT = "#721c24"  # Dark red for high contrast
    TEXT_PRIMARY = "#212529"
    BACKGROUND_DEFAULT = "#ffffff"

    READY_TEXT = "#198754"  # Green (WCAG compliant)
    NOT_READY_TEXT = "#6c757d"  # Neutral gray


def get_field_stylesheet() -> str:
    """
    Get the stylesheet for a form's line edits.

    Error styling is keyed on the dynamic ``hasError`` property.
    """
    return f"""
        QLineEdit {{
            border: 1px solid {FormPalette.BORDER_DEFAULT};
            background-color: {FormPalette.BACKGROUND_DEFAULT};
            color: {FormPalette.TEXT_PRIMARY};
            padding: 4px;
        }}
        QLineEdit:focus {{
            border: 2px solid {FormPalette.BORDER_FOCUS};
        }}
        QLineEdit[hasError="true"] {{
            border: 2px solid {FormPalette.BORDER_ERROR};
        }}
        QLabel#fieldError {{
            color: {FormPalette.ERROR_TEXT};
        }}
    """


def get_readiness_style(is_ready: bool) -> str:
    """Get the stylesheet for the readiness label."""
    color = FormPalette.READY_TEXT if is_ready else FormPalette.NOT_READY_TEXT
    return f"QLabel {{ color: {color}; font-weight: bold; }}"


def apply_error_state(widget: StyleableWidget, has_error: bool) -> None:
    """
    Set the ``hasError`` property on a widget and refresh its style.

    Args:
        widget: The input widget to style
        has_error: Whether an error is currently displayed for it
    """
    widget.setProperty("hasError", has_error)

    # Force style refresh
    widget.style().unpolish(widget)
    widget.style().polish(widget)
