"""
Main window for the Universal Form demo application.

This module contains the MainWindow class which renders a form built
from field descriptors and shows whether it is ready to submit.
"""

import logging
from collections.abc import Sequence

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QLabel, QMainWindow, QVBoxLayout, QWidget

from universal_form.core.config import DEFAULT_DEBOUNCE_DELAY_MS
from universal_form.core.descriptors import FieldDescriptor, FieldType
from universal_form.gui.form_view import FormView
from universal_form.gui.utils.styling import get_readiness_style
from universal_form.gui.validation import FormStateController

logger = logging.getLogger(__name__)

DEMO_DESCRIPTORS: tuple[FieldDescriptor, ...] = (
    FieldDescriptor("first_name", FieldType.TEXT, "First Name", default_value="Some first name"),
    FieldDescriptor("last_name", FieldType.TEXT, "Last Name"),
    FieldDescriptor("email", FieldType.EMAIL, "Email", required=True),
    FieldDescriptor("password", FieldType.PASSWORD, "Password", required=True),
)

READY_TEXT = "Ready to submit"
NOT_READY_TEXT = "Fill in all required fields"


class MainWindow(QMainWindow):
    """
    Main application window.

    Hosts a FormView and a label reflecting the form's readiness.
    """

    def __init__(
        self,
        descriptors: Sequence[FieldDescriptor] = DEMO_DESCRIPTORS,
        debounce_delay: int = DEFAULT_DEBOUNCE_DELAY_MS,
    ) -> None:
        """
        Initialize the main window.

        Raises:
            ConfigurationError: If the descriptors cannot form a valid form
        """
        super().__init__()
        self.setWindowTitle("Universal Form")

        self._last_ready: bool | None = None
        self.controller = FormStateController(
            descriptors,
            on_fields_change=self._on_fields_change,
            debounce_delay=debounce_delay,
            parent=self,
        )

        central = QWidget()
        layout = QVBoxLayout(central)

        self.form_view = FormView(self.controller)
        layout.addWidget(self.form_view)

        self.readiness_label = QLabel()
        self.readiness_label.setAccessibleName("Form readiness")
        layout.addWidget(self.readiness_label)
        layout.addStretch()

        self.setCentralWidget(central)
        self.resize(420, 360)

        self.form_view.readinessChanged.connect(self._update_readiness_label)
        self._update_readiness_label(self.controller.is_ready)

    def _on_fields_change(self, values: dict[str, str], is_ready: bool) -> None:
        # Values may hold passwords; log only which fields are filled
        if is_ready != self._last_ready:
            filled = sorted(field_id for field_id, value in values.items() if value)
            logger.info(f"Form ready={is_ready}, filled fields: {filled}")
            self._last_ready = is_ready

    def _update_readiness_label(self, is_ready: bool) -> None:
        self.readiness_label.setText(READY_TEXT if is_ready else NOT_READY_TEXT)
        self.readiness_label.setStyleSheet(get_readiness_style(is_ready))

    def closeEvent(self, event: QCloseEvent) -> None:
        """Stop pending form timers before the window goes away."""
        self.controller.cleanup()
        super().closeEvent(event)
