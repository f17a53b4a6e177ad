"""
Main entry point for the Universal Form demo application.
"""

import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from universal_form.core.config_manager import ConfigManager
from universal_form.core.descriptors import load_descriptors
from universal_form.core.error_handler import init_logging, setup_error_handling
from universal_form.core.errors import ConfigurationError
from universal_form.gui.main_window import DEMO_DESCRIPTORS, MainWindow

logger = logging.getLogger(__name__)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="universal-form", description="Render a form from field descriptors")
    parser.add_argument(
        "descriptors",
        nargs="?",
        help="JSON file with a list of field descriptors (default: built-in demo form)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    if argv is None:
        argv = sys.argv[1:]
    args = parse_args(argv)

    app = QApplication.instance() or QApplication(sys.argv[:1])

    config = ConfigManager()
    init_logging(config.get("log_level"))
    error_handler = setup_error_handling()

    try:
        if args.descriptors:
            descriptors = load_descriptors(args.descriptors)
            config.set("last_descriptor_file", args.descriptors)
        else:
            descriptors = DEMO_DESCRIPTORS
        window = MainWindow(descriptors, debounce_delay=config.get_debounce_delay())
    except ConfigurationError as e:
        app_error = error_handler.handle(e, {"descriptors": args.descriptors})
        print(error_handler.to_user_message(app_error), file=sys.stderr)
        return 1

    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
