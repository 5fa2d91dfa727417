"""Application entry point."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from pretty_ts_errors.logging_utils import configure_logging
from pretty_ts_errors.settings_manager import DEFAULT_SETTINGS_FILENAME, SettingsManager
from pretty_ts_errors.ui.main_window import PrettyTsErrorsWindow

DEBUG_ARG = "--debug"
SETTINGS_ARG_PREFIX = "--settings="


def _split_startup_args(argv: list[str]) -> tuple[list[str], bool, str | None]:
    filtered: list[str] = []
    debug = False
    settings_path: str | None = None
    for arg in argv:
        if arg == DEBUG_ARG:
            debug = True
            continue
        if arg.startswith(SETTINGS_ARG_PREFIX):
            settings_path = arg[len(SETTINGS_ARG_PREFIX):] or None
            continue
        filtered.append(arg)
    return filtered, debug, settings_path


def _project_root_for(file_arg: str | None) -> Path:
    if file_arg:
        candidate = Path(file_arg).expanduser()
        if candidate.is_dir():
            return candidate.resolve()
        if candidate.is_file():
            return candidate.resolve().parent
    return Path.cwd()


def main(argv: list[str] | None = None) -> int:
    cli_args, debug, settings_arg = _split_startup_args(sys.argv[1:] if argv is None else argv)
    file_arg = cli_args[0] if cli_args else None
    project_root = _project_root_for(file_arg)

    logger = configure_logging(logging.DEBUG if debug else logging.INFO)
    settings_path = Path(settings_arg).expanduser() if settings_arg else project_root / DEFAULT_SETTINGS_FILENAME
    manager = SettingsManager(settings_path)
    config = manager.load()
    if manager.last_error:
        logger.warning("Using default settings: %s", manager.last_error)

    app = QApplication([sys.argv[0], *cli_args])
    app.setStyle("Fusion")
    app.setApplicationName(PrettyTsErrorsWindow.APP_NAME)
    window = PrettyTsErrorsWindow(config, project_root=str(project_root))
    if file_arg and os.path.isfile(file_arg):
        window.open_file(file_arg)
    window.show()
    return int(app.exec())
