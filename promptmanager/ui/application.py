# promptmanager/ui/application.py
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication, QMessageBox
from loguru import logger

from .windows.main_window import MainWindow
from ..config.loader import get_config
from ..core.session import PromptSession
from ..services.workspace import WorkspaceController

def create_main_window() -> MainWindow:
    """Session, controller and window from the loaded configuration. Requires a QApplication."""
    config = get_config()
    session = PromptSession.from_config(config)
    controller = WorkspaceController(session, interval_ms=config.debounce_interval_ms)
    window = MainWindow(controller)
    controller.setParent(window) # Controller lives as long as the window
    controller.start()
    return window

def run(argv: Optional[List[str]] = None) -> int:
    """Runs the desktop app until the main window closes. Nothing is saved on exit."""
    app = QApplication(sys.argv if argv is None else argv)
    app.setApplicationName("PromptManager")

    try:
        window = create_main_window()
    except Exception as e:
        logger.exception("Could not start the main window.")
        QMessageBox.critical(None, "PromptManager", f"Startup failed:\n{e}")
        return 1
    window.show()

    exit_code = app.exec()
    logger.info(f"PromptManager exited with code {exit_code}.")
    return exit_code
