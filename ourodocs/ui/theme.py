"""
Application-wide light and dark palettes.

The window chrome takes its colors from the code color scheme of the same
theme, so code blocks sit on the palette's base color.
"""

from __future__ import annotations

import logging

from PyQt6.QtGui import QColor, QPalette
from PyQt6.QtWidgets import QApplication, QStyleFactory

from ourodocs.services.settings import Theme
from ourodocs.ui.widgets.syntax_highlighter import ColorScheme, ColorSchemes


def apply_theme(app: QApplication, theme: Theme) -> None:
    """
    Apply a theme to the application.

    Args:
        app: QApplication instance
        theme: Theme to apply
    """
    logging.info(f"Applying theme: {theme.value}")

    scheme = ColorSchemes.for_theme(theme)
    app.setStyle(QStyleFactory.create("Fusion"))
    app.setPalette(build_palette(scheme, theme))
    app.setStyleSheet(build_stylesheet(scheme, theme))


def _window_color(scheme: ColorScheme, theme: Theme) -> QColor:
    """Chrome color one step away from the code background."""
    if theme is Theme.DARK:
        return scheme.background.lighter(125)
    return scheme.background.darker(104)


def _blend(first: QColor, second: QColor) -> QColor:
    return QColor(
        (first.red() + second.red()) // 2,
        (first.green() + second.green()) // 2,
        (first.blue() + second.blue()) // 2,
    )


def build_palette(scheme: ColorScheme, theme: Theme) -> QPalette:
    """Palette built from a code color scheme."""
    palette = QPalette()

    window = _window_color(scheme, theme)
    text = scheme.foreground
    accent = scheme.accent
    disabled = _blend(window, text)
    on_accent = QColor(255, 255, 255) if accent.lightness() < 140 else QColor(0, 0, 0)

    for role in (QPalette.ColorRole.Window, QPalette.ColorRole.Button,
                 QPalette.ColorRole.AlternateBase, QPalette.ColorRole.ToolTipBase):
        palette.setColor(role, window)
    for role in (QPalette.ColorRole.WindowText, QPalette.ColorRole.Text,
                 QPalette.ColorRole.ButtonText, QPalette.ColorRole.ToolTipText):
        palette.setColor(role, text)

    palette.setColor(QPalette.ColorRole.Base, scheme.background)
    palette.setColor(QPalette.ColorRole.Link, accent)
    palette.setColor(QPalette.ColorRole.Highlight, accent)
    palette.setColor(QPalette.ColorRole.HighlightedText, on_accent)

    for role in (QPalette.ColorRole.WindowText, QPalette.ColorRole.Text,
                 QPalette.ColorRole.ButtonText):
        palette.setColor(QPalette.ColorGroup.Disabled, role, disabled)

    return palette


def build_stylesheet(scheme: ColorScheme, theme: Theme) -> str:
    """Stylesheet for the sidebar and code frames of the docs window."""
    window = _window_color(scheme, theme)
    border = _blend(window, scheme.foreground).name()
    return f"""
        QListWidget#sidebar {{
            background-color: {window.name()};
            border: none;
            border-right: 1px solid {border};
        }}

        QListWidget#sidebar::item {{
            padding: 6px 12px;
        }}

        QListWidget#sidebar::item:selected {{
            background-color: {scheme.accent.name()};
            color: {scheme.background.name()};
        }}

        QFrame#codeBlock {{
            background-color: {scheme.background.name()};
            border: 1px solid {border};
            border-radius: 6px;
        }}
    """
