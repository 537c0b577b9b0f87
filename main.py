# main.py
# Version: 1.0.2
# Main entry point for Disaster Drive: loads configuration, starts logging, and launches the
# main window directly. Takes no command-line flags; exits with the Qt event loop's return code.

import sys
import logging
import traceback
from typing import Optional, Tuple

from app_config import ConfigManager, AppConfig
from app_logging import LoggingManager

logger = logging.getLogger(__name__)

def setup_logging():
    """Set up basic logging before config is loaded."""
    # Only set level; LoggingManager attaches the handlers
    logging.getLogger().setLevel(logging.INFO)

def initialize_application() -> Tuple[Optional[AppConfig], Optional[LoggingManager]]:
    """Load config and start logging. Returns (None, None) on failure."""
    try:
        config_manager = ConfigManager()
        config = config_manager.load_config()

        logging_manager = LoggingManager(config_manager.get_log_dir(), config)
        logging_manager.log_system_event("INIT", "Application initialized successfully",
                                         {"config": config_manager.config_path})
        return config, logging_manager

    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        return None, None

def main() -> int:
    """Main application entry point."""
    setup_logging()
    logging_manager = None

    try:
        config, logging_manager = initialize_application()
        if config is None:
            logger.error("Failed to initialize application")
            return 1

        logger.info("Starting GUI...")
        try:
            from PySide6.QtWidgets import QApplication
        except Exception:
            logger.exception("Failed to import PySide6.QtWidgets (Qt not installed?)")
            print("ERROR: Failed to import PySide6. Try: pip install -e .")
            raise

        from app_gui import MainWindow

        app = QApplication(sys.argv)
        app.setApplicationName("Disaster Drive")
        app.setApplicationVersion("1.0.0")
        app.setOrganizationName("Disaster Drive")
        app.setStyle('Fusion')

        window = MainWindow(config=config, logging_manager=logging_manager)
        window.show()

        return app.exec()

    except Exception as e:
        if logging_manager:
            logging_manager.log_system_event("ERROR", f"Unexpected error in main: {e}")
        logger.exception("Unexpected error in main")
        print("\nFull traceback:\n" + traceback.format_exc())
        return 1

    finally:
        if logging_manager:
            logging_manager.shutdown()

if __name__ == "__main__":
    sys.exit(main())
