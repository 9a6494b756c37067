"""
Main entry point for the Ouroboros documentation tool.

This module handles:
- Command line argument parsing
- Logging configuration
- Headless highlighting to tokens or HTML
- Application and theme setup
- Documentation window creation
- Exception handling
"""

from __future__ import annotations

import argparse
import faulthandler
import logging
import os
import signal
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import List, Optional, TextIO

from ourodocs import GUIDE_PATH, __version__
from ourodocs.core.document import Document, parse_document
from ourodocs.core.grammar import Grammar
from ourodocs.core.registry import GrammarRegistry, UnknownLanguageError, create_default_registry
from ourodocs.core.tokenizer import tokenize, walk_leaves
from ourodocs.services.file_io import SourceReader
from ourodocs.services.html_export import render_code_block
from ourodocs.services.settings import SettingsManager, Theme


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "OuroDocs"
APP_DISPLAY_NAME = "Ouroboros Docs"
APP_VERSION = __version__
APP_ORGANIZATION = "Ouroboros"

# Paths
LOGS_DIR = SettingsManager.config_dir() / "logs"


# =============================================================================
# Enums
# =============================================================================

class StartupMode(Enum):
    """Application startup mode."""
    VIEWER = auto()
    HIGHLIGHT = auto()


class OutputFormat(Enum):
    """Output format of headless highlighting."""
    TOKENS = "tokens"
    HTML = "html"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    document_path: Optional[str] = None
    highlight_path: Optional[str] = None
    language: Optional[str] = None
    output_format: OutputFormat = OutputFormat.TOKENS
    output_path: Optional[str] = None
    mode: StartupMode = StartupMode.VIEWER
    theme: Optional[Theme] = None
    config_file: Optional[str] = None
    log_level: str = "INFO"
    reset_settings: bool = False
    debug: bool = False


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        stream = stream or sys.stderr
        self.use_colors = use_colors and hasattr(stream, 'isatty') and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so highlighted output on stdout stays clean.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True, stream=sys.stderr))
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            root_logger.warning(f"Logging to console only, cannot open {log_file}: {e}")
        else:
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(LogFormatter(use_colors=False))
            root_logger.addHandler(file_handler)

    return root_logger


# =============================================================================
# Exception Handling
# =============================================================================

class ExceptionHandler:
    """
    Global exception handler for unhandled exceptions.

    Logs the exception and, once the Qt application runs, shows an error
    dialog.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._app = None

    def set_application(self, app) -> None:
        """Set the application instance for error dialogs."""
        self._app = app

    def handle_exception(self, exc_type: type, exc_value: BaseException, exc_tb) -> None:
        """Handle an unhandled exception."""
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return

        self.logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))

        if self._app is not None:
            tb_text = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
            self._show_error_dialog(exc_type, exc_value, tb_text)

    def _show_error_dialog(self, exc_type: type, exc_value: BaseException, traceback_text: str) -> None:
        """Show error dialog to user."""
        from PyQt6.QtWidgets import QApplication, QMessageBox

        if QApplication.instance() is None:
            return

        dialog = QMessageBox()
        dialog.setIcon(QMessageBox.Icon.Critical)
        dialog.setWindowTitle("Application Error")
        dialog.setText(f"An unexpected error occurred:\n\n{exc_type.__name__}: {exc_value}")
        dialog.setDetailedText(traceback_text)
        dialog.setStandardButtons(QMessageBox.StandardButton.Ok | QMessageBox.StandardButton.Close)
        dialog.setDefaultButton(QMessageBox.StandardButton.Ok)

        copy_btn = dialog.addButton("Copy to Clipboard", QMessageBox.ButtonRole.ActionRole)

        result = dialog.exec()

        if dialog.clickedButton() == copy_btn:
            QApplication.clipboard().setText(traceback_text)

        if result == QMessageBox.StandardButton.Close:
            QApplication.quit()


# =============================================================================
# Command Line Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME.lower(),
        description="Ouroboros documentation viewer and syntax highlighter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                 Open the bundled language guide
  %(prog)s docs/tutorial.md                Open a documentation page
  %(prog)s --highlight demo.ouro           Print the tokens of a source file
  %(prog)s --highlight demo.ouro --format html -o demo.html
                                           Write highlighted HTML
  %(prog)s --theme dark                    Start with dark theme
        """
    )

    parser.add_argument(
        'document',
        nargs='?',
        help='Documentation page to open (Markdown)'
    )

    # Headless highlighting
    parser.add_argument(
        '--highlight',
        metavar='FILE',
        help='Highlight a source file and print the result instead of opening the viewer'
    )
    parser.add_argument(
        '-l', '--language',
        help='Language of the highlighted file (default: from the file extension)'
    )
    parser.add_argument(
        '-f', '--format',
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.TOKENS.value,
        help='Output format for --highlight'
    )
    parser.add_argument(
        '-o', '--output',
        help='Write --highlight output to a file instead of stdout'
    )

    # Display options
    parser.add_argument(
        '--theme',
        choices=[theme.value for theme in Theme],
        default=None,
        help='Application theme'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Settings file path'
    )
    parser.add_argument(
        '--reset-settings',
        action='store_true',
        help='Reset all settings to defaults'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode (also writes a log file)'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='INFO',
        help='Log level'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )

    parsed = parser.parse_args(args)

    result = CommandLineArgs()
    result.document_path = parsed.document
    result.highlight_path = parsed.highlight
    result.language = parsed.language
    result.output_format = OutputFormat(parsed.format)
    result.output_path = parsed.output
    result.config_file = parsed.config
    result.reset_settings = parsed.reset_settings
    result.debug = parsed.debug
    result.mode = StartupMode.HIGHLIGHT if parsed.highlight else StartupMode.VIEWER

    if parsed.theme:
        result.theme = Theme.from_string(parsed.theme)

    if parsed.debug or parsed.verbose:
        result.log_level = 'DEBUG'
    else:
        result.log_level = parsed.log_level

    return result


# =============================================================================
# Headless Highlighting
# =============================================================================

def format_tokens(code: str, grammar: Grammar) -> str:
    """One line per leaf span: offset, category and the quoted text."""
    lines = [
        f"{leaf.start}\t{leaf.category.value}\t{leaf.text!r}"
        for leaf, _ in walk_leaves(tokenize(code, grammar))
    ]
    return '\n'.join(lines) + '\n' if lines else ''


def run_highlight(args: CommandLineArgs, registry: Optional[GrammarRegistry] = None) -> int:
    """
    Highlight a source file without starting the UI.

    Returns:
        Exit code (0 for success)
    """
    registry = registry or create_default_registry()
    path = Path(args.highlight_path)

    try:
        if args.language:
            handle = registry.require(args.language)
        else:
            handle = registry.get_for_file(path.name)
            if handle is None:
                logging.error(f"Cannot determine the language of {path}; use --language")
                return 1
    except UnknownLanguageError as e:
        logging.error(str(e))
        return 1

    result = SourceReader().read(path)
    if not result.success:
        logging.error(f"Cannot read {path}: {result.error}")
        return 1

    code = result.text
    if args.output_format == OutputFormat.HTML:
        output = render_code_block(code, handle.name, registry) + '\n'
    else:
        output = format_tokens(code, handle.grammar)

    if args.output_path:
        try:
            Path(args.output_path).write_text(output, encoding='utf-8')
        except OSError as e:
            logging.error(f"Cannot write {args.output_path}: {e}")
            return 1
        logging.info(f"Wrote {args.output_format.value} output to {args.output_path}")
    else:
        sys.stdout.write(output)

    return 0


# =============================================================================
# Settings and Documents
# =============================================================================

def setup_settings(args: CommandLineArgs) -> SettingsManager:
    """
    Set up application settings.

    The command line theme is not stored here; see session_theme().
    """
    manager = SettingsManager(Path(args.config_file) if args.config_file else None)

    if args.reset_settings:
        logging.info("Resetting settings to defaults")
        manager.reset()

    return manager


def session_theme(args: CommandLineArgs, manager: SettingsManager) -> Theme:
    """Theme for this run: the command line choice, else the saved one."""
    return args.theme or manager.settings.ui.theme


def load_document(path: Path) -> Optional[Document]:
    """Read and parse a documentation page."""
    result = SourceReader().read(path)
    if not result.success:
        logging.error(f"Cannot open {path}: {result.error}")
        return None
    return parse_document(result.text)


# =============================================================================
# Application Setup
# =============================================================================

def setup_application(args: CommandLineArgs):
    """
    Create and configure the QApplication.

    Args:
        args: Parsed command line arguments

    Returns:
        Configured QApplication instance
    """
    from PyQt6.QtWidgets import QApplication

    app = QApplication(sys.argv)

    app.setApplicationName(APP_NAME)
    app.setApplicationDisplayName(APP_DISPLAY_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setOrganizationName(APP_ORGANIZATION)

    app.setQuitOnLastWindowClosed(True)

    return app


def setup_signal_handlers() -> None:
    """Set up Unix signal handlers."""
    if sys.platform != 'win32':
        signal.signal(signal.SIGINT, _signal_handler)
        signal.signal(signal.SIGTERM, _signal_handler)


def _signal_handler(signum, frame) -> None:
    """Handle Unix signals."""
    from PyQt6.QtWidgets import QApplication

    logging.info(f"Received signal {signum}, shutting down...")
    QApplication.quit()


def run_viewer(args: CommandLineArgs, logger: logging.Logger, exception_handler: ExceptionHandler) -> int:
    """
    Open the documentation viewer.

    Returns:
        Exit code (0 for success)
    """
    from PyQt6.QtCore import QTimer
    from PyQt6.QtWidgets import QApplication, QMessageBox

    from ourodocs.ui.docs_window import DocsWindow
    from ourodocs.ui.theme import apply_theme

    # Dump tracebacks if Qt crashes the interpreter
    faulthandler.enable()

    settings_manager = setup_settings(args)

    document_path = Path(args.document_path) if args.document_path else GUIDE_PATH
    document = load_document(document_path)
    if document is None:
        return 1

    try:
        app = setup_application(args)
        exception_handler.set_application(app)

        theme = session_theme(args, settings_manager)
        apply_theme(app, theme)
        setup_signal_handlers()

        # Let the interpreter run periodically so signals are delivered
        timer = QTimer()
        timer.timeout.connect(lambda: None)
        timer.start(500)

        window = DocsWindow(document, settings_manager, create_default_registry(), theme=theme)
        window.show()

        logger.info("Viewer started successfully")

        exit_code = app.exec()
        logger.info(f"Application exiting with code {exit_code}")
        return exit_code

    except Exception as e:
        logger.critical(f"Fatal error during startup: {e}", exc_info=True)

        if QApplication.instance():
            QMessageBox.critical(
                None,
                "Fatal Error",
                f"The application failed to start:\n\n{e}\n\n"
                "Please check the logs for more information."
            )
        return 1


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code (0 for success)
    """
    # Redirect stdout/stderr if None (common in frozen apps)
    if sys.stdout is None:
        sys.stdout = open(os.devnull, 'w')
    if sys.stderr is None:
        sys.stderr = open(os.devnull, 'w')

    args = parse_arguments(argv)

    log_file = LOGS_DIR / f"{APP_NAME}_{datetime.now():%Y%m%d}.log" if args.debug else None
    logger = setup_logging(args.log_level, log_file)
    logger.debug(f"Starting {APP_NAME} v{APP_VERSION}")

    if args.mode == StartupMode.HIGHLIGHT:
        return run_highlight(args)

    exception_handler = ExceptionHandler(logger)
    sys.excepthook = exception_handler.handle_exception

    return run_viewer(args, logger, exception_handler)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == '__main__':
    sys.exit(main())
