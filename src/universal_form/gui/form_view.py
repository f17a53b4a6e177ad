"""
Widgets rendering a FormStateController.

FormView draws one row per field descriptor (label, line edit, error
text) and forwards every raw edit to the controller. All debouncing and
validation stay inside the controller.
"""

import logging

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QLabel, QLineEdit, QVBoxLayout, QWidget

from universal_form.core.descriptors import FieldDescriptor, FieldType
from universal_form.gui.utils.styling import apply_error_state, get_field_stylesheet
from universal_form.gui.validation import FieldState, FormStateController

logger = logging.getLogger(__name__)


class FieldRow(QWidget):
    """A single labelled input with its error text."""

    valueEdited = Signal(str, str)  # field_id, value

    def __init__(self, descriptor: FieldDescriptor, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.descriptor = descriptor
        self._setup_ui()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self.label = QLabel(self.descriptor.display_label)
        layout.addWidget(self.label)

        self.line_edit = QLineEdit()
        self.line_edit.setObjectName(self.descriptor.id)
        self.line_edit.setPlaceholderText("Enter value")
        self.line_edit.setAccessibleName(self.descriptor.label)
        if self.descriptor.field_type is FieldType.PASSWORD:
            self.line_edit.setEchoMode(QLineEdit.EchoMode.Password)
        self.label.setBuddy(self.line_edit)
        layout.addWidget(self.line_edit)

        self.error_label = QLabel()
        self.error_label.setObjectName("fieldError")
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        # textEdited only fires for user input, not for render()
        self.line_edit.textEdited.connect(lambda text: self.valueEdited.emit(self.descriptor.id, text))

    def render(self, state: FieldState) -> None:
        """Show a field state produced by the controller."""
        if self.line_edit.text() != state.value:
            self.line_edit.setText(state.value)

        self.error_label.setText(state.display_error)
        self.error_label.setVisible(bool(state.display_error))
        apply_error_state(self.line_edit, bool(state.display_error))


class FormView(QWidget):
    """
    Renders every field of a FormStateController.

    Rows are rebuilt when the controller's descriptor list changes and
    refreshed whenever a field's displayed state changes.
    """

    readinessChanged = Signal(bool)

    def __init__(self, controller: FormStateController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self._rows: dict[str, FieldRow] = {}
        self._is_ready = controller.is_ready

        self._layout = QVBoxLayout(self)
        self._layout.setSpacing(12)
        self.setStyleSheet(get_field_stylesheet())

        self.controller.fieldsChanged.connect(self._on_fields_changed)
        self.controller.fieldDisplayChanged.connect(self.refresh_field)
        self.controller.descriptorsChanged.connect(self.rebuild)

        self.rebuild()

    @property
    def is_ready(self) -> bool:
        return self._is_ready

    def row(self, field_id: str) -> FieldRow:
        return self._rows[field_id]

    def rebuild(self) -> None:
        """Recreate one row per descriptor, in descriptor order."""
        for row in self._rows.values():
            self._layout.removeWidget(row)
            row.deleteLater()
        self._rows.clear()

        for descriptor, state in self.controller.field_states():
            row = FieldRow(descriptor, self)
            row.valueEdited.connect(self.controller.on_field_edit)
            row.render(state)
            self._layout.addWidget(row)
            self._rows[descriptor.id] = row

        logger.debug(f"Rendered {len(self._rows)} form fields")

    def refresh_field(self, field_id: str) -> None:
        row = self._rows.get(field_id)
        if row is not None:
            row.render(self.controller.field_state(field_id))

    def _on_fields_changed(self, values: dict, is_ready: bool) -> None:
        if is_ready != self._is_ready:
            self._is_ready = is_ready
            self.readinessChanged.emit(is_ready)
