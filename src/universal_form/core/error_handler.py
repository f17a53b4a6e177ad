"""
Error reporting and logging for Universal Form.

ErrorHandler is a process-wide QObject that turns exceptions into
BaseAppError instances, writes them to a rotating log in the application
data directory and emits errorOccurred so a window can show them. Settled
field validation failures go to the same log at debug level.

Field values never reach the log: context entries whose key looks like a
secret, or names a registered password field, are redacted.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
import traceback
from collections.abc import Iterable
from typing import Any, ClassVar

from PySide6.QtCore import QObject, Signal

from .config import get_app_log_dir
from .errors import BaseAppError, ErrorSeverity, ValidationError, from_exception

SENSITIVE_KEYS = ("password", "token", "key", "secret")

# Context keys that identify rather than carry data
PASSTHROUGH_KEYS = ("traceback", "field")

MAX_CONTEXT_ITEMS = 20
MAX_CONTEXT_VALUE_LENGTH = 200

LOG_FILE_NAME = "universal_form.log"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(app_code)s] %(message)s"
LOG_MAX_BYTES = 1_048_576
LOG_BACKUP_COUNT = 3

_SEVERITY_LEVELS = {
    ErrorSeverity.LOW: logging.WARNING,
    ErrorSeverity.MEDIUM: logging.ERROR,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class ErrorHandler(QObject):
    """
    Process-wide error reporter.

    Handled exceptions are logged at a level matching their severity and
    emitted through errorOccurred. Validation failures are only logged.
    """

    errorOccurred = Signal(object)  # BaseAppError

    _instance: ClassVar[ErrorHandler | None] = None
    _logger: ClassVar[logging.Logger | None] = None

    def __new__(cls) -> ErrorHandler:
        """Ensure singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize the error handler (called only once due to singleton)."""
        if hasattr(self, "_initialized"):
            return

        super().__init__()
        self._initialized = True
        self._original_excepthook = sys.excepthook
        self._sensitive_fields: set[str] = set()

        self._setup_logging()

    @property
    def sensitive_fields(self) -> frozenset[str]:
        return frozenset(self._sensitive_fields)

    def register_sensitive_fields(self, field_ids: Iterable[str]) -> None:
        """Redact context entries keyed by these field ids from now on."""
        self._sensitive_fields.update(field_ids)

    def capture(self, exception: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
        """
        Normalize an exception into a BaseAppError.

        An application error keeps its identity; the given context is merged
        into its own. The merged context is sanitized and a traceback added.
        """
        app_error = from_exception(exception)
        app_error.context = self._sanitize_context({**app_error.context, **(context or {})})

        if not app_error.technical_message:
            app_error.technical_message = f"{type(exception).__name__}: {exception}"

        if "traceback" not in app_error.context:
            app_error.context["traceback"] = "".join(traceback.format_exception(exception))

        return app_error

    def handle(self, exception: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
        """
        Capture, log and emit an exception.

        Returns:
            The normalized BaseAppError
        """
        if isinstance(exception, SystemExit | KeyboardInterrupt):
            raise exception

        app_error = self.capture(exception, context)
        self._log(_SEVERITY_LEVELS[app_error.severity], app_error, app_error.user_message, exc_info=exception)
        self.errorOccurred.emit(app_error)

        return app_error

    def report_validation(self, error: ValidationError) -> None:
        """Log a settled field validation failure without emitting errorOccurred."""
        if error.field in self._sensitive_fields and "value" in error.context:
            error.context["value"] = "[REDACTED]"

        self._log(logging.DEBUG, error, error.technical_message or error.user_message)

    def to_user_message(self, app_error: BaseAppError) -> str:
        """Build the message shown to the user for an error."""
        message = app_error.user_message

        if isinstance(app_error, ValidationError) and app_error.field:
            message = f"{app_error.field}: {message}"

        if app_error.retriable:
            message += " You can try again."

        return message

    def _log(self, level: int, app_error: BaseAppError, message: str, exc_info: Exception | None = None) -> None:
        if not self._logger:
            return

        self._logger.log(
            level,
            message,
            extra={
                "app_code": app_error.code.value,
                "error_type": app_error.type.value,
                "severity": app_error.severity.value,
                "retriable": app_error.retriable,
            },
            exc_info=exc_info,
        )

    def _setup_logging(self) -> None:
        """Attach a rotating file log and a console log for warnings."""
        logger = logging.getLogger("universal_form.errors")
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        ErrorHandler._logger = logger

        if logger.handlers:
            return

        formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging.WARNING)
        logger.addHandler(console_handler)

        try:
            log_dir = get_app_log_dir()
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_dir / LOG_FILE_NAME,
                maxBytes=LOG_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError as e:
            logging.getLogger(__name__).warning(f"Error log file unavailable, logging to console only: {e}")
            return

        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    def _is_sensitive(self, key: str) -> bool:
        lowered = key.lower()
        return key in self._sensitive_fields or any(sensitive in lowered for sensitive in SENSITIVE_KEYS)

    def _sanitize_value(self, key: str, value: Any) -> Any:
        if key in PASSTHROUGH_KEYS:
            return value
        if self._is_sensitive(key):
            return "[REDACTED]"
        if isinstance(value, str) and len(value) > MAX_CONTEXT_VALUE_LENGTH:
            return value[:MAX_CONTEXT_VALUE_LENGTH] + "..."

        try:
            return repr(value)[:MAX_CONTEXT_VALUE_LENGTH]
        except Exception:
            return "[REPR_FAILED]"

    def _sanitize_context(self, context: dict[str, Any]) -> dict[str, Any]:
        """Redact secrets, shorten long values and cap the number of entries."""
        items = list(context.items())
        safe_context = {str(key): self._sanitize_value(str(key), value) for key, value in items[:MAX_CONTEXT_ITEMS]}

        if len(items) > MAX_CONTEXT_ITEMS:
            safe_context["..."] = f"({len(items) - MAX_CONTEXT_ITEMS} more items truncated)"

        return safe_context

    def install_hooks(self) -> None:
        """
        Route unhandled exceptions through this handler.

        PySide6 reports exceptions raised inside slots (such as a renderer's
        edit handler) via sys.excepthook, so they are logged here too.
        """

        def exception_hook(exc_type: type[BaseException], exc_value: BaseException, exc_traceback: Any) -> None:
            if not isinstance(exc_value, Exception):
                self._original_excepthook(exc_type, exc_value, exc_traceback)
                return

            try:
                self.handle(exc_value, {"source": "sys.excepthook"})
            except Exception:
                self._original_excepthook(exc_type, exc_value, exc_traceback)

        sys.excepthook = exception_hook

    def restore_hooks(self) -> None:
        """Restore the original exception hook."""
        sys.excepthook = self._original_excepthook


def get_error_handler() -> ErrorHandler:
    """Get the process-wide ErrorHandler."""
    return ErrorHandler()


def setup_error_handling() -> ErrorHandler:
    """
    Set up global error handling for the application.

    This should be called once during application startup.
    """
    handler = get_error_handler()
    handler.install_hooks()
    return handler


def init_logging(level: str = "INFO") -> None:
    """
    Initialize logging configuration.

    Sets up the error log and basic console logging for other modules;
    call early in application startup.
    """
    get_error_handler()

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
