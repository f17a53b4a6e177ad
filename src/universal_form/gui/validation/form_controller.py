"""
Form state controller for Universal Form.

This module owns the values and errors of a form built from field
descriptors, validates every edit, debounces error display while a field
is being typed into and reports whether the form is ready to submit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, NamedTuple

from PySide6.QtCore import QObject, QTimer, Signal

from universal_form.core.config import DEFAULT_DEBOUNCE_DELAY_MS
from universal_form.core.descriptors import FieldDescriptor, FieldType, as_descriptor_tuple
from universal_form.core.error_handler import get_error_handler
from universal_form.core.errors import create_validation_error
from universal_form.core.validation import ValidationRule, build_rule

FieldsChangeCallback = Callable[[dict[str, str], bool], None]


class FieldState(NamedTuple):
    """Everything a renderer needs to draw one field."""

    value: str
    display_error: str
    is_editing: bool


class FormStateController(QObject):
    """
    Owns the state of one form and validates it on every edit.

    Each field gets its own single-shot debounce timer. While a field's
    timer is pending the field is "editing" and its error is hidden from
    display, though it still counts against readiness.
    """

    # Signals
    fieldsChanged = Signal(dict, bool)  # values, is_ready
    fieldDisplayChanged = Signal(str)  # field_id
    fieldSettled = Signal(str)  # field_id
    descriptorsChanged = Signal()

    def __init__(
        self,
        descriptors: Iterable[FieldDescriptor],
        on_fields_change: FieldsChangeCallback | None = None,
        debounce_delay: int = DEFAULT_DEBOUNCE_DELAY_MS,
        parent: QObject | None = None,
    ):
        """
        Create the controller and report the initial readiness.

        Args:
            descriptors: Ordered field descriptors with unique ids
            on_fields_change: Called with (values, is_ready) after every edit
                and once during construction
            debounce_delay: Milliseconds a field stays "editing" after a change
            parent: Optional parent QObject

        Raises:
            ConfigurationError: If a descriptor has an unknown type or an id
                is repeated
        """
        super().__init__(parent)
        self._logger = logging.getLogger(__name__)
        self._error_handler = get_error_handler()
        self._on_fields_change = on_fields_change
        self._debounce_delay = debounce_delay
        self._disposed = False

        self._descriptors: tuple[FieldDescriptor, ...] = ()
        self._by_id: dict[str, FieldDescriptor] = {}
        self._rules: dict[str, ValidationRule] = {}
        self._values: dict[str, str] = {}
        self._errors: dict[str, str] = {}
        self._touched: set[str] = set()
        self._editing: set[str] = set()
        self._timers: dict[str, QTimer] = {}

        self._apply_descriptors(descriptors)
        self._notify()

    # Read access

    @property
    def descriptors(self) -> tuple[FieldDescriptor, ...]:
        return self._descriptors

    @property
    def values(self) -> dict[str, str]:
        return dict(self._values)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def editing_fields(self) -> frozenset[str]:
        return frozenset(self._editing)

    @property
    def debounce_delay(self) -> int:
        return self._debounce_delay

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def is_ready(self) -> bool:
        """
        Whether the form can be submitted.

        True when every required field has a non-empty value and no error.
        Optional fields never block readiness.
        """
        return all(
            self._values.get(descriptor.id) and not self._errors.get(descriptor.id)
            for descriptor in self._descriptors
            if descriptor.required
        )

    def is_field_valid(self, field_id: str) -> bool:
        self._descriptor(field_id)
        return not self._errors.get(field_id)

    def get_field_error(self, field_id: str) -> str:
        """Get the stored error for a field, shown or not."""
        self._descriptor(field_id)
        return self._errors.get(field_id, "")

    def display_error(self, field_id: str) -> str:
        """
        Get the error a renderer should show for a field.

        Empty while the field is being edited.
        """
        self._descriptor(field_id)
        if field_id in self._editing:
            return ""
        return self._errors.get(field_id, "")

    def field_state(self, field_id: str) -> FieldState:
        self._descriptor(field_id)
        return FieldState(
            value=self._values.get(field_id, ""),
            display_error=self.display_error(field_id),
            is_editing=field_id in self._editing,
        )

    def field_states(self) -> list[tuple[FieldDescriptor, FieldState]]:
        """Get every field's descriptor and state in descriptor order."""
        return [(descriptor, self.field_state(descriptor.id)) for descriptor in self._descriptors]

    # Mutation

    def on_field_edit(self, field_id: str, new_value: str) -> None:
        """
        Handle a raw input change for a field.

        Restarts the field's debounce timer, validates the new value,
        stores value and error, then reports readiness.

        Args:
            field_id: Id of the edited field
            new_value: The field's full new value

        Raises:
            KeyError: If no descriptor has this id
        """
        if self._disposed:
            self._logger.warning(f"Ignoring edit of '{field_id}' on a disposed form")
            return

        descriptor = self._descriptor(field_id)

        self._start_editing(field_id)

        result = self._rule_for(descriptor)(new_value)
        self._errors[field_id] = result.message
        self._values[field_id] = new_value
        self._touched.add(field_id)

        self.fieldDisplayChanged.emit(field_id)
        self._notify()

    def set_descriptors(self, descriptors: Iterable[FieldDescriptor]) -> None:
        """
        Replace the form's descriptor list.

        Removed fields are dropped, fields never edited are re-seeded from
        their (possibly new) defaults and edited values are re-validated
        under their new rules. Equal lists are ignored.

        Raises:
            ConfigurationError: If the new list is invalid; state is unchanged
        """
        if self._disposed:
            self._logger.warning("Ignoring descriptor change on a disposed form")
            return

        frozen = as_descriptor_tuple(descriptors)
        if frozen == self._descriptors:
            return

        self._apply_descriptors(frozen)
        self.descriptorsChanged.emit()
        self._notify()

    def validate_all(self) -> bool:
        """
        Validate every field immediately and show all errors.

        Pending debounce timers are cancelled so no error stays hidden.

        Returns:
            True if the form is ready to submit
        """
        for timer in self._timers.values():
            timer.stop()
        self._editing.clear()

        for descriptor in self._descriptors:
            value = self._values.get(descriptor.id, "")
            self._errors[descriptor.id] = self._rule_for(descriptor)(value).message
            self.fieldDisplayChanged.emit(descriptor.id)

        self._notify()
        return self.is_ready

    def cleanup(self) -> None:
        """Stop all timers; the controller ignores further edits."""
        if self._disposed:
            return

        for timer in self._timers.values():
            self._release_timer(timer)

        self._timers.clear()
        self._editing.clear()
        self._disposed = True
        self._logger.debug("Form controller disposed")

    def __enter__(self) -> FormStateController:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.cleanup()

    # Internals

    def _descriptor(self, field_id: str) -> FieldDescriptor:
        try:
            return self._by_id[field_id]
        except KeyError:
            raise KeyError(f"Unknown field id: {field_id!r}") from None

    def _rule_for(self, descriptor: FieldDescriptor) -> ValidationRule:
        rule = self._rules.get(descriptor.id)
        if rule is None:
            rule = self._rules[descriptor.id] = build_rule(descriptor)
        return rule

    def _apply_descriptors(self, descriptors: Iterable[FieldDescriptor]) -> None:
        frozen = as_descriptor_tuple(descriptors)
        # Build every rule before touching state so a bad list fails fast
        rules = {descriptor.id: build_rule(descriptor) for descriptor in frozen}

        removed = set(self._by_id) - set(rules)
        for field_id in removed:
            self._values.pop(field_id, None)
            self._errors.pop(field_id, None)
            self._touched.discard(field_id)
            self._editing.discard(field_id)
            timer = self._timers.pop(field_id, None)
            if timer is not None:
                self._release_timer(timer)

        self._descriptors = frozen
        self._by_id = {descriptor.id: descriptor for descriptor in frozen}
        self._rules = rules
        self._error_handler.register_sensitive_fields(
            field_id for field_id, rule in rules.items() if rule.field_type is FieldType.PASSWORD
        )

        for descriptor in frozen:
            if descriptor.id in self._touched:
                value = self._values.get(descriptor.id, "")
                self._errors[descriptor.id] = self._rules[descriptor.id](value).message
                continue

            self._errors.pop(descriptor.id, None)
            if descriptor.default_value:
                self._values[descriptor.id] = descriptor.default_value
            else:
                self._values.pop(descriptor.id, None)

        if removed:
            self._logger.debug(f"Dropped state for removed fields: {sorted(removed)}")

    def _start_editing(self, field_id: str) -> None:
        timer = self._timers.get(field_id)
        if timer is None:
            timer = QTimer(self)
            timer.setSingleShot(True)
            timer.timeout.connect(lambda: self._settle(field_id))
            self._timers[field_id] = timer

        self._editing.add(field_id)
        timer.start(self._debounce_delay)

    def _release_timer(self, timer: QTimer) -> None:
        # Timers are children of the controller and are freed with it
        timer.stop()
        timer.timeout.disconnect()

    def _settle(self, field_id: str) -> None:
        """Finish the edit of a field once its debounce delay has elapsed."""
        if field_id not in self._editing:
            return

        self._editing.discard(field_id)

        result = self._rules[field_id](self._values.get(field_id, ""))
        if not result.is_valid:
            self._error_handler.report_validation(create_validation_error(field_id, result.message, code=result.code))

        self.fieldSettled.emit(field_id)
        self.fieldDisplayChanged.emit(field_id)

    def _notify(self) -> None:
        values = dict(self._values)
        is_ready = self.is_ready

        self.fieldsChanged.emit(values, is_ready)
        if self._on_fields_change is not None:
            self._on_fields_change(values, is_ready)
