"""
Documentation viewer window.

Provides:
- Sidebar navigation with smooth scrolling and scroll spy
- Light/dark theme toggle persisted in settings
- Collapsible sidebar for narrow windows
- Highlighted code blocks with copy buttons
- Fade-in and slide-up of content blocks as they scroll into view
- Window size remembered between sessions
- Keyboard shortcuts (Ctrl+K search placeholder, Ctrl+/ theme toggle)
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PyQt6.QtCore import (
    QEasingCurve, QParallelAnimationGroup, QPoint, QPropertyAnimation, Qt, QTimer, pyqtProperty
)
from PyQt6.QtGui import QCloseEvent, QFont, QKeySequence, QResizeEvent, QShortcut, QShowEvent
from PyQt6.QtWidgets import (
    QApplication, QFrame, QGraphicsOpacityEffect, QHBoxLayout, QLabel,
    QListWidget, QListWidgetItem, QMainWindow, QMessageBox, QScrollArea,
    QSizePolicy, QToolBar, QToolButton, QVBoxLayout, QWidget
)

from ourodocs.core import navigation
from ourodocs.core.document import CodeSample, Document, Paragraph, Section
from ourodocs.core.registry import GrammarRegistry, create_default_registry
from ourodocs.services.settings import SettingsManager, Theme
from ourodocs.ui.theme import apply_theme
from ourodocs.ui.widgets.code_block import CodeBlock
from ourodocs.ui.widgets.syntax_highlighter import ColorSchemes


THEME_ICONS = {
    Theme.LIGHT: "☾",  # moon: offers the dark theme
    Theme.DARK: "☀",   # sun: offers the light theme
}
SIDEBAR_ICON = "☰"
SEARCH_PLACEHOLDER = "Search functionality coming soon!"


class ContentCard(QFrame):
    """A content block that fades in and slides up the first time it becomes visible."""

    def __init__(self, content: QWidget, reveal_offset: int = 20, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.content = content
        self._revealed = False
        self._reveal_offset = reveal_offset
        self._animation: Optional[QParallelAnimationGroup] = None

        self._layout = QVBoxLayout(self)
        self._layout.addWidget(content)
        self._set_slide(reveal_offset)

        self._opacity = QGraphicsOpacityEffect(self)
        self._opacity.setOpacity(0.0)
        self.setGraphicsEffect(self._opacity)

    def _get_slide(self) -> int:
        return self._layout.contentsMargins().top()

    def _set_slide(self, offset: int) -> None:
        # Top and bottom margins always add up so the card keeps its height
        self._layout.setContentsMargins(0, offset, 0, self._reveal_offset - offset)

    slide = pyqtProperty(int, fget=_get_slide, fset=_set_slide)

    def is_revealed(self) -> bool:
        return self._revealed

    def reveal(self, duration_ms: int) -> None:
        """Fade the card in while sliding it into place; later calls do nothing."""
        if self._revealed:
            return
        self._revealed = True

        fade = QPropertyAnimation(self._opacity, b"opacity")
        fade.setDuration(duration_ms)
        fade.setStartValue(0.0)
        fade.setEndValue(1.0)
        fade.setEasingCurve(QEasingCurve.Type.OutCubic)

        rise = QPropertyAnimation(self, b"slide")
        rise.setDuration(duration_ms)
        rise.setStartValue(self._reveal_offset)
        rise.setEndValue(0)
        rise.setEasingCurve(QEasingCurve.Type.OutCubic)

        self._animation = QParallelAnimationGroup(self)
        self._animation.addAnimation(fade)
        self._animation.addAnimation(rise)
        self._animation.start()

    def finish_reveal(self) -> None:
        """Jump a running reveal to its end state."""
        if self._animation is not None:
            self._animation.setCurrentTime(self._animation.duration())


class SectionView(QWidget):
    """A titled section made of content cards."""

    def __init__(self, section: Section, reveal_offset: int = 20, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.section = section
        self._reveal_offset = reveal_offset
        self.cards: List[ContentCard] = []

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 16, 0, 16)
        self._layout.setSpacing(12)

        title = QLabel(section.title)
        title_font = title.font()
        title_font.setPointSize(title_font.pointSize() + 6)
        title_font.setBold(True)
        title.setFont(title_font)
        self._layout.addWidget(title)

    def add_card(self, content: QWidget) -> ContentCard:
        card = ContentCard(content, self._reveal_offset, self)
        self.cards.append(card)
        self._layout.addWidget(card)
        return card


class DocsWindow(QMainWindow):
    """Main window of the documentation viewer."""

    def __init__(
        self,
        document: Document,
        settings_manager: Optional[SettingsManager] = None,
        registry: Optional[GrammarRegistry] = None,
        theme: Optional[Theme] = None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self._settings_manager = settings_manager or SettingsManager()
        self._registry = registry or create_default_registry()
        self._document = document
        # A theme passed in applies to this window only until the user toggles it
        self._theme = theme or self._settings_manager.settings.ui.theme

        self._section_views: Dict[str, SectionView] = {}
        self._code_blocks: List[CodeBlock] = []
        self._sidebar_open = False
        self._scroll_animation: Optional[QPropertyAnimation] = None

        self._setup_ui()
        self._setup_shortcuts()
        self.load_document(document)

        ui = self._settings_manager.settings.ui
        self.resize(ui.window_width, ui.window_height)
        if ui.window_maximized:
            self.setWindowState(Qt.WindowState.WindowMaximized)
        self._update_theme_icon()

    # =========================================================================
    # Setup
    # =========================================================================

    def _setup_ui(self) -> None:
        """Setup the window UI."""
        toolbar = QToolBar("Main", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.sidebar_toggle = QToolButton()
        self.sidebar_toggle.setText(SIDEBAR_ICON)
        self.sidebar_toggle.setToolTip("Toggle navigation")
        self.sidebar_toggle.clicked.connect(self.toggle_sidebar)
        self.sidebar_toggle.hide()
        self._sidebar_toggle_action = toolbar.addWidget(self.sidebar_toggle)

        self.title_label = QLabel()
        title_font = self.title_label.font()
        title_font.setBold(True)
        self.title_label.setFont(title_font)
        toolbar.addWidget(self.title_label)

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        toolbar.addWidget(spacer)

        self.theme_button = QToolButton()
        self.theme_button.setToolTip("Toggle theme (Ctrl+/)")
        self.theme_button.clicked.connect(self.toggle_theme)
        toolbar.addWidget(self.theme_button)

        central = QWidget()
        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.sidebar = QListWidget()
        self.sidebar.setObjectName("sidebar")
        self.sidebar.setFixedWidth(self._settings_manager.settings.ui.sidebar_width)
        self.sidebar.itemClicked.connect(self._on_nav_item_clicked)
        layout.addWidget(self.sidebar)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setFrameShape(QFrame.Shape.NoFrame)
        self.scroll_area.verticalScrollBar().valueChanged.connect(self._on_scroll)
        layout.addWidget(self.scroll_area, 1)

        self.setCentralWidget(central)

    def _setup_shortcuts(self) -> None:
        """Setup keyboard shortcuts."""
        # Qt maps Ctrl to Cmd on macOS
        QShortcut(QKeySequence("Ctrl+K"), self).activated.connect(self.show_search_placeholder)
        QShortcut(QKeySequence("Ctrl+/"), self).activated.connect(self.toggle_theme)

    # =========================================================================
    # Document
    # =========================================================================

    def load_document(self, document: Document) -> None:
        """Show a document, replacing the current one."""
        self._document = document
        self._section_views.clear()
        self._code_blocks.clear()
        self.sidebar.clear()

        self.title_label.setText(document.title)
        self.setWindowTitle(document.title or "Ouroboros Docs")

        content = QWidget()
        content_layout = QVBoxLayout(content)
        content_layout.setContentsMargins(32, 16, 32, 16)

        scheme = ColorSchemes.for_theme(self._theme)
        settings = self._settings_manager.settings
        code_font = QFont(settings.ui.font_family, settings.ui.font_size)

        for section in document.sections:
            view = SectionView(section, settings.effects.reveal_offset)
            for block in section.blocks:
                if isinstance(block, CodeSample):
                    code_block = CodeBlock(
                        block.code,
                        language=block.language,
                        registry=self._registry,
                        color_scheme=scheme,
                        feedback_ms=settings.effects.copy_feedback_ms,
                        font=code_font,
                    )
                    self._code_blocks.append(code_block)
                    view.add_card(code_block)
                elif isinstance(block, Paragraph):
                    label = QLabel(block.text)
                    label.setWordWrap(True)
                    label.setTextFormat(Qt.TextFormat.PlainText)
                    label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
                    view.add_card(label)

            self._section_views[section.id] = view
            content_layout.addWidget(view)

            item = QListWidgetItem(section.title)
            item.setData(Qt.ItemDataRole.UserRole, section.id)
            self.sidebar.addItem(item)

        content_layout.addStretch()
        self.scroll_area.setWidget(content)

        logging.info(
            f"DocsWindow - Loaded '{document.title}' with {len(document.sections)} sections "
            f"and {len(self._code_blocks)} code blocks"
        )
        QTimer.singleShot(0, self._check_reveals)

    def code_blocks(self) -> List[CodeBlock]:
        return list(self._code_blocks)

    def section_view(self, section_id: str) -> Optional[SectionView]:
        return self._section_views.get(section_id)

    # =========================================================================
    # Navigation
    # =========================================================================

    def _on_nav_item_clicked(self, item: QListWidgetItem) -> None:
        self.navigate_to(item.data(Qt.ItemDataRole.UserRole))

    def navigate_to(self, section_id: str) -> bool:
        """Smoothly scroll to a section and mark its nav item active."""
        view = self._section_views.get(section_id)
        if view is not None:
            nav = self._settings_manager.settings.navigation
            target = navigation.scroll_target(view.y(), nav.nav_offset)
            scrollbar = self.scroll_area.verticalScrollBar()

            if self._scroll_animation is not None:
                self._scroll_animation.stop()
            self._scroll_animation = QPropertyAnimation(scrollbar, b"value", self)
            self._scroll_animation.setDuration(nav.scroll_duration_ms)
            self._scroll_animation.setStartValue(scrollbar.value())
            self._scroll_animation.setEndValue(min(target, scrollbar.maximum()))
            self._scroll_animation.setEasingCurve(QEasingCurve.Type.InOutCubic)
            self._scroll_animation.start()

        self._set_active_item(section_id)
        return view is not None

    def _section_geometries(self) -> List[navigation.SectionGeometry]:
        return [
            navigation.SectionGeometry(section_id, view.y(), view.height())
            for section_id, view in self._section_views.items()
        ]

    def _on_scroll(self, value: int) -> None:
        """Update the active nav item and reveal newly visible cards."""
        offset = self._settings_manager.settings.navigation.scroll_spy_offset
        current = navigation.active_section(value, self._section_geometries(), offset)
        self._set_active_item(current)
        self._check_reveals()

    def _set_active_item(self, section_id: Optional[str]) -> None:
        self.sidebar.blockSignals(True)
        try:
            self.sidebar.clearSelection()
            for row in range(self.sidebar.count()):
                item = self.sidebar.item(row)
                if item.data(Qt.ItemDataRole.UserRole) == section_id:
                    self.sidebar.setCurrentRow(row)
                    break
        finally:
            self.sidebar.blockSignals(False)

    def active_section_id(self) -> Optional[str]:
        """Id of the highlighted nav item."""
        items = self.sidebar.selectedItems()
        if not items:
            return None
        return items[0].data(Qt.ItemDataRole.UserRole)

    # =========================================================================
    # Reveal
    # =========================================================================

    def _check_reveals(self) -> None:
        """Start the fade-in of cards that scrolled into view."""
        content = self.scroll_area.widget()
        if content is None:
            return

        effects = self._settings_manager.settings.effects
        viewport_top = self.scroll_area.verticalScrollBar().value()
        viewport_height = self.scroll_area.viewport().height()

        for view in self._section_views.values():
            for card in view.cards:
                if card.is_revealed():
                    continue
                top = card.mapTo(content, QPoint(0, 0)).y()
                if navigation.should_reveal(
                    top, card.height(), viewport_top, viewport_height,
                    effects.reveal_threshold, effects.reveal_bottom_margin
                ):
                    card.reveal(effects.fade_duration_ms)

    # =========================================================================
    # Theme
    # =========================================================================

    def current_theme(self) -> Theme:
        return self._theme

    def toggle_theme(self) -> Theme:
        """Switch between light and dark and remember the choice."""
        self.set_theme(self._theme.toggled())
        return self._theme

    def set_theme(self, theme: Theme) -> None:
        """Apply a theme to the application and the code blocks."""
        self._theme = theme
        if not self._settings_manager.set_theme(theme):
            logging.warning("DocsWindow - Theme preference could not be saved")

        app = QApplication.instance()
        if app is not None:
            apply_theme(app, theme)

        scheme = ColorSchemes.for_theme(theme)
        for code_block in self._code_blocks:
            code_block.set_color_scheme(scheme)

        self._update_theme_icon()

    def _update_theme_icon(self) -> None:
        self.theme_button.setText(THEME_ICONS[self._theme])

    # =========================================================================
    # Sidebar
    # =========================================================================

    def is_compact(self) -> bool:
        breakpoint = self._settings_manager.settings.navigation.compact_breakpoint
        return navigation.is_compact(self.width(), breakpoint)

    def toggle_sidebar(self) -> None:
        """Open or close the sidebar in compact mode."""
        self._sidebar_open = not self._sidebar_open
        self._apply_layout_mode()

    def _apply_layout_mode(self) -> None:
        if self.is_compact():
            self._sidebar_toggle_action.setVisible(True)
            self.sidebar_toggle.show()
            self.sidebar.setVisible(self._sidebar_open)
        else:
            self._sidebar_toggle_action.setVisible(False)
            self._sidebar_open = False
            self.sidebar.setVisible(True)

    # =========================================================================
    # Misc
    # =========================================================================

    def show_search_placeholder(self) -> None:
        QMessageBox.information(self, "Search", SEARCH_PLACEHOLDER)

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._apply_layout_mode()
        self._check_reveals()

    def showEvent(self, event: QShowEvent) -> None:
        super().showEvent(event)
        self._apply_layout_mode()
        QTimer.singleShot(0, self._check_reveals)

    def save_window_state(self) -> bool:
        """Remember the window size and maximized state."""
        ui = self._settings_manager.settings.ui
        ui.window_maximized = self.isMaximized()
        if not ui.window_maximized:
            ui.window_width = self.width()
            ui.window_height = self.height()
        return self._settings_manager.save()

    def closeEvent(self, event: QCloseEvent) -> None:
        if not self.save_window_state():
            logging.warning("DocsWindow - Window size could not be saved")
        super().closeEvent(event)
