"""
Tests for the ConfigManager class.
"""

from typing import Any
from unittest.mock import Mock, patch

from universal_form.core.config import DEFAULT_DEBOUNCE_DELAY_MS
from universal_form.core.config_manager import ConfigManager


class TestConfigManager:
    """Test cases for ConfigManager."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        # Mock QSettings so tests never touch real settings
        self.settings_patcher = patch("universal_form.core.config_manager.QSettings")
        self.mock_qsettings_class = self.settings_patcher.start()
        self.mock_qsettings = Mock()
        self.mock_qsettings_class.return_value = self.mock_qsettings

        self.setup_patcher = patch("universal_form.core.config_manager.setup_qsettings")
        self.mock_setup = self.setup_patcher.start()

    def teardown_method(self) -> None:
        """Clean up test fixtures."""
        self.settings_patcher.stop()
        self.setup_patcher.stop()

    def test_init(self) -> None:
        """Test ConfigManager initialization."""
        ConfigManager()

        self.mock_setup.assert_called_once()
        self.mock_qsettings_class.assert_called_once()

    def test_get_with_default(self) -> None:
        """Test getting a value with default fallback."""
        config_manager = ConfigManager()
        self.mock_qsettings.value.return_value = DEFAULT_DEBOUNCE_DELAY_MS

        assert config_manager.get("debounce_delay") == 500
        self.mock_qsettings.value.assert_called_with("debounce_delay", 500)

    def test_get_coerces_stored_string(self) -> None:
        """Test QSettings strings are coerced to the default's type."""
        config_manager = ConfigManager()
        self.mock_qsettings.value.return_value = "250"

        assert config_manager.get("debounce_delay") == 250

    def test_get_falls_back_on_bad_value(self) -> None:
        """Test values that cannot be coerced fall back to the default."""
        config_manager = ConfigManager()
        self.mock_qsettings.value.return_value = "soon"

        assert config_manager.get("debounce_delay") == 500

    def test_get_boolean_coercion(self) -> None:
        """Test boolean coercion with an explicit boolean default."""
        config_manager = ConfigManager()

        self.mock_qsettings.value.return_value = "true"
        assert config_manager.get("flag", False) is True

        self.mock_qsettings.value.return_value = "0"
        assert config_manager.get("flag", False) is False

    def test_get_debounce_delay(self) -> None:
        """Test negative delays are replaced by the default."""
        config_manager = ConfigManager()

        self.mock_qsettings.value.return_value = "120"
        assert config_manager.get_debounce_delay() == 120

        self.mock_qsettings.value.return_value = "-5"
        assert config_manager.get_debounce_delay() == 500

    def test_set(self) -> None:
        """Test setting a value."""
        config_manager = ConfigManager()

        config_manager.set("log_level", "DEBUG")

        self.mock_qsettings.setValue.assert_called_with("log_level", "DEBUG")
        self.mock_qsettings.sync.assert_called_once()

    def test_load_all(self) -> None:
        """Test loading all configuration values."""
        config_manager = ConfigManager()

        def mock_value(key: str, default: Any) -> Any:
            stored_values = {"debounce_delay": "300", "log_level": "WARNING"}
            return stored_values.get(key, default)

        self.mock_qsettings.value.side_effect = mock_value

        result = config_manager.load_all()

        assert result["debounce_delay"] == 300
        assert result["log_level"] == "WARNING"
        assert result["last_descriptor_file"] == ""

    def test_reset_to_defaults(self) -> None:
        """Test resetting configuration to defaults."""
        config_manager = ConfigManager()

        config_manager.reset_to_defaults()

        self.mock_qsettings.clear.assert_called_once()
        self.mock_qsettings.sync.assert_called_once()

    def test_import_config(self) -> None:
        """Test importing configuration."""
        config_manager = ConfigManager()

        config_manager.import_config({"debounce_delay": "200", "log_level": "ERROR", "unknown_key": "ignored"})

        self.mock_qsettings.setValue.assert_any_call("debounce_delay", 200)
        self.mock_qsettings.setValue.assert_any_call("log_level", "ERROR")
        unknown_key_calls = [c for c in self.mock_qsettings.setValue.call_args_list if c[0][0] == "unknown_key"]
        assert unknown_key_calls == []

    def test_import_config_skips_bad_values(self) -> None:
        """Test values that cannot be coerced are skipped."""
        config_manager = ConfigManager()

        config_manager.import_config({"debounce_delay": "later"})

        self.mock_qsettings.setValue.assert_not_called()

    def test_has_key_and_remove_key(self) -> None:
        """Test checking and removing stored keys."""
        config_manager = ConfigManager()

        self.mock_qsettings.contains.return_value = True
        assert config_manager.has_key("log_level") is True
        self.mock_qsettings.contains.assert_called_with("log_level")

        config_manager.remove_key("log_level")
        self.mock_qsettings.remove.assert_called_with("log_level")
        self.mock_qsettings.sync.assert_called_once()
