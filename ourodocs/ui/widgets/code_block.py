"""
Code block widget with a copy-to-clipboard button.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QEnterEvent, QFont, QResizeEvent
from PyQt6.QtWidgets import QApplication, QFrame, QPlainTextEdit, QToolButton, QVBoxLayout, QWidget

from ourodocs.core.navigation import COPY_FEEDBACK_MS
from ourodocs.core.registry import GrammarRegistry
from ourodocs.ui.widgets.syntax_highlighter import ColorScheme, SyntaxHighlighter


COPY_ICON = "⧉"
CHECK_ICON = "✓"


class ClipboardError(RuntimeError):
    """Raised when text could not be placed on the clipboard."""


class CodeBlock(QFrame):
    """
    Read-only highlighted code with a copy button.

    The copy button shows while the pointer is over the block. A successful
    copy swaps its icon to a check mark for a short while; a failed copy is
    logged and leaves the button as it was.
    """

    # Emitted after a copy attempt with whether it succeeded
    copied = pyqtSignal(bool)

    def __init__(
        self,
        code: str,
        language: str = "",
        registry: Optional[GrammarRegistry] = None,
        color_scheme: Optional[ColorScheme] = None,
        feedback_ms: int = COPY_FEEDBACK_MS,
        font: Optional[QFont] = None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self._code = code
        self._language = language
        self._feedback_ms = feedback_ms

        self._setup_ui(font)

        self.highlighter = SyntaxHighlighter(
            self.editor.document(),
            language=language or None,
            color_scheme=color_scheme,
            registry=registry,
        )
        self._apply_background()

    def _setup_ui(self, font: Optional[QFont]) -> None:
        """Setup the block UI."""
        self.setObjectName("codeBlock")
        self.setFrameShape(QFrame.Shape.StyledPanel)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.editor = QPlainTextEdit()
        self.editor.setReadOnly(True)
        self.editor.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.editor.setFrameShape(QFrame.Shape.NoFrame)
        self.editor.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.editor.setFont(font or QFont("Consolas", 10))
        self.editor.setPlainText(self._code)
        layout.addWidget(self.editor)

        self.copy_button = QToolButton(self)
        self.copy_button.setText(COPY_ICON)
        self.copy_button.setToolTip("Copy code")
        self.copy_button.setAutoRaise(True)
        self.copy_button.setFixedSize(28, 28)
        self.copy_button.setCursor(Qt.CursorShape.PointingHandCursor)
        self.copy_button.clicked.connect(self.copy_code)
        self.copy_button.hide()

        self._fit_height()

    def _fit_height(self) -> None:
        """Size the editor to show every line."""
        metrics = self.editor.fontMetrics()
        line_count = max(1, self._code.count('\n') + 1)
        margins = self.editor.contentsMargins()
        height = (
            line_count * metrics.lineSpacing()
            + 2 * int(self.editor.document().documentMargin())
            + margins.top() + margins.bottom()
            + self.editor.horizontalScrollBar().sizeHint().height()
        )
        self.editor.setFixedHeight(height)

    def _apply_background(self) -> None:
        scheme = self.highlighter.color_scheme()
        self.editor.setStyleSheet(
            f"QPlainTextEdit {{ background-color: {scheme.background.name()}; "
            f"color: {scheme.foreground.name()}; }}"
        )

    def code(self) -> str:
        """Get the code text."""
        return self._code

    def language(self) -> str:
        return self._language

    def set_color_scheme(self, scheme: ColorScheme) -> None:
        """Switch the highlighting colors."""
        self.highlighter.set_color_scheme(scheme)
        self._apply_background()

    def copy_code(self) -> bool:
        """
        Copy the code to the clipboard.

        Returns:
            True if the clipboard accepted the text
        """
        try:
            self._write_clipboard(self._code)
        except ClipboardError as e:
            logging.error(f"CodeBlock - Failed to copy code: {e}")
            self.copied.emit(False)
            return False

        self.copy_button.setText(CHECK_ICON)
        QTimer.singleShot(self._feedback_ms, self._reset_copy_icon)
        self.copied.emit(True)
        return True

    def _write_clipboard(self, text: str) -> None:
        clipboard = QApplication.clipboard()
        if clipboard is None:
            raise ClipboardError("no clipboard available")

        clipboard.setText(text)
        if clipboard.text() != text:
            raise ClipboardError("clipboard did not accept the text")

    def _reset_copy_icon(self) -> None:
        self.copy_button.setText(COPY_ICON)

    def _place_copy_button(self) -> None:
        self.copy_button.move(self.width() - self.copy_button.width() - 8, 8)
        self.copy_button.raise_()

    def enterEvent(self, event: QEnterEvent) -> None:
        """Show the copy button on hover."""
        self._place_copy_button()
        self.copy_button.show()
        super().enterEvent(event)

    def leaveEvent(self, event) -> None:
        """Hide the copy button when the pointer leaves."""
        self.copy_button.hide()
        super().leaveEvent(event)

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._place_copy_button()
