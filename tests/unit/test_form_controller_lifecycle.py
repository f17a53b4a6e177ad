"""
Tests for FormStateController descriptor changes, full validation and teardown.
"""

import gc

import pytest

from universal_form.core.descriptors import FieldDescriptor, FieldType
from universal_form.core.errors import ConfigurationError
from universal_form.gui.validation import FormStateController

DELAY = 50


class TestSetDescriptors:
    """Test replacing the descriptor list."""

    def setup_method(self):
        """Set up test fixtures."""
        self.descriptors = [
            FieldDescriptor("name", FieldType.TEXT, "Name", required=True),
            FieldDescriptor("email", FieldType.EMAIL, "Email", required=True),
            FieldDescriptor("city", FieldType.TEXT, "City", default_value="Oslo"),
        ]

    def test_equal_list_is_ignored(self, recorder):
        """Test an equal descriptor list triggers nothing."""
        controller = FormStateController(self.descriptors, on_fields_change=recorder, debounce_delay=DELAY)

        controller.set_descriptors(list(self.descriptors))

        assert len(recorder.calls) == 1

    def test_accepts_generator(self, recorder):
        """Test a one-shot iterable is read once and fully applied."""
        controller = FormStateController(self.descriptors[:2], on_fields_change=recorder, debounce_delay=DELAY)
        controller.on_field_edit("name", "Ann")

        controller.set_descriptors(descriptor for descriptor in self.descriptors)

        assert [d.id for d in controller.descriptors] == ["name", "email", "city"]
        assert controller.values == {"name": "Ann", "city": "Oslo"}
        assert recorder.last == ({"name": "Ann", "city": "Oslo"}, False)

    def test_controller_released_after_field_removal(self, qtbot):
        """Test dropping a controller whose removed field had a pending timer."""
        controller = FormStateController(self.descriptors, debounce_delay=DELAY)
        controller.on_field_edit("email", "bad")
        controller.set_descriptors(self.descriptors[:1])

        del controller
        gc.collect()
        qtbot.wait(DELAY * 2)

    def test_removed_fields_are_dropped(self, recorder):
        """Test state for removed ids disappears."""
        controller = FormStateController(self.descriptors, on_fields_change=recorder, debounce_delay=DELAY)
        controller.on_field_edit("email", "bad")

        controller.set_descriptors(self.descriptors[:1])

        assert controller.values == {}
        assert controller.errors == {}
        assert controller.editing_fields == frozenset()
        assert recorder.last == ({}, False)
        with pytest.raises(KeyError):
            controller.on_field_edit("email", "ann@x.com")

    def test_removed_field_timer_does_not_fire(self, qtbot):
        """Test a removed field never settles."""
        controller = FormStateController(self.descriptors, debounce_delay=DELAY)
        settled = []
        controller.fieldSettled.connect(settled.append)

        controller.on_field_edit("email", "bad")
        controller.set_descriptors(self.descriptors[:1])
        qtbot.wait(DELAY * 4)

        assert settled == []

    def test_new_defaults_seeded(self):
        """Test added fields and untouched fields take their new defaults."""
        controller = FormStateController(self.descriptors, debounce_delay=DELAY)
        controller.on_field_edit("name", "Ann")

        controller.set_descriptors(
            [
                FieldDescriptor("name", FieldType.TEXT, "Name", default_value="Bob", required=True),
                FieldDescriptor("email", FieldType.EMAIL, "Email", default_value="a@b.co", required=True),
                FieldDescriptor("city", FieldType.TEXT, "City", default_value="Bergen"),
            ]
        )

        # Edited values win over defaults
        assert controller.values == {"name": "Ann", "email": "a@b.co", "city": "Bergen"}
        assert controller.is_ready is True

    def test_edited_values_revalidated(self):
        """Test retained edited values are checked against their new rules."""
        controller = FormStateController(self.descriptors, debounce_delay=DELAY)
        controller.on_field_edit("city", "not-an-email")
        assert controller.get_field_error("city") == ""

        controller.set_descriptors(
            [
                self.descriptors[0],
                self.descriptors[1],
                FieldDescriptor("city", FieldType.EMAIL, "City email"),
            ]
        )

        assert controller.get_field_error("city") == "Invalid email"

    def test_descriptors_changed_signal(self, qtbot):
        """Test a real change emits descriptorsChanged."""
        controller = FormStateController(self.descriptors, debounce_delay=DELAY)

        with qtbot.waitSignal(controller.descriptorsChanged, timeout=1000):
            controller.set_descriptors(self.descriptors[1:])

        assert [d.id for d in controller.descriptors] == ["email", "city"]

    def test_invalid_list_leaves_state_unchanged(self):
        """Test a bad replacement list raises and keeps the old form."""
        controller = FormStateController(self.descriptors, debounce_delay=DELAY)
        controller.on_field_edit("name", "Ann")

        with pytest.raises(ConfigurationError):
            controller.set_descriptors([FieldDescriptor("name", "inputDate", "Name")])

        assert controller.descriptors == tuple(self.descriptors)
        assert controller.values == {"name": "Ann", "city": "Oslo"}


class TestValidateAll:
    """Test immediate validation of every field."""

    def test_shows_every_error(self, mixed_descriptors):
        """Test untouched required fields report errors and suppression ends."""
        controller = FormStateController(mixed_descriptors, debounce_delay=DELAY)
        controller.on_field_edit("email", "bad")

        assert controller.validate_all() is False

        assert controller.editing_fields == frozenset()
        assert controller.display_error("email") == "Invalid email"
        assert controller.display_error("password") == "Empty field"
        assert controller.display_error("last_name") == ""

    def test_ready_form(self, mixed_descriptors):
        """Test a complete form validates as ready."""
        controller = FormStateController(mixed_descriptors, debounce_delay=DELAY)
        controller.on_field_edit("email", "ann@x.com")
        controller.on_field_edit("password", "12345678")

        assert controller.validate_all() is True


class TestCleanup:
    """Test controller teardown."""

    def test_cleanup_stops_timers(self, qtbot, name_email_descriptors):
        """Test no field settles after cleanup."""
        controller = FormStateController(name_email_descriptors, debounce_delay=DELAY)
        settled = []
        controller.fieldSettled.connect(settled.append)

        controller.on_field_edit("email", "bad")
        controller.cleanup()
        qtbot.wait(DELAY * 4)

        assert settled == []
        assert controller.is_disposed is True
        assert controller.editing_fields == frozenset()

    def test_edits_after_cleanup_ignored(self, name_email_descriptors, recorder):
        """Test a disposed controller does not report edits."""
        controller = FormStateController(name_email_descriptors, on_fields_change=recorder, debounce_delay=DELAY)
        controller.cleanup()

        controller.on_field_edit("name", "Ann")
        controller.set_descriptors(name_email_descriptors[:1])

        assert len(recorder.calls) == 1
        assert controller.values == {}

    def test_cleanup_twice(self, name_email_descriptors):
        """Test cleanup can be called more than once."""
        controller = FormStateController(name_email_descriptors)
        controller.cleanup()
        controller.cleanup()
        assert controller.is_disposed is True

    def test_context_manager(self, name_email_descriptors):
        """Test leaving a with block disposes the controller."""
        with FormStateController(name_email_descriptors, debounce_delay=DELAY) as controller:
            controller.on_field_edit("name", "Ann")
            assert not controller.is_disposed

        assert controller.is_disposed is True

    def test_controller_released_after_with_block(self, qtbot, name_email_descriptors):
        """Test a disposed controller can be garbage collected while the event loop runs."""
        with FormStateController(name_email_descriptors, debounce_delay=20) as controller:
            controller.on_field_edit("email", "a@b.co")
            controller.on_field_edit("name", "Ann")

        del controller
        gc.collect()
        qtbot.wait(100)

    def test_cleanup_from_settle_handler(self, qtbot, name_email_descriptors):
        """Test cleanup can run inside a fieldSettled handler."""
        controller = FormStateController(name_email_descriptors, debounce_delay=DELAY)
        controller.fieldSettled.connect(lambda field_id: controller.cleanup())

        controller.on_field_edit("email", "bad")
        qtbot.waitUntil(lambda: controller.is_disposed, timeout=1000)
        qtbot.wait(DELAY)
