"""
Tests for the Qt highlighter, code blocks and the documentation window.
"""

import pytest

pytest.importorskip("PyQt6.QtWidgets")

from PyQt6.QtGui import QPalette, QTextCursor, QTextDocument
from PyQt6.QtWidgets import QLabel

from ourodocs import GUIDE_PATH
from ourodocs.core.document import parse_document
from ourodocs.core.grammar import Category
from ourodocs.services.settings import SettingsManager, Theme
from ourodocs.ui import docs_window
from ourodocs.ui.docs_window import SEARCH_PLACEHOLDER, THEME_ICONS, ContentCard, DocsWindow
from ourodocs.ui.theme import apply_theme, build_palette
from ourodocs.ui.widgets.code_block import CHECK_ICON, COPY_ICON, ClipboardError, CodeBlock
from ourodocs.ui.widgets.syntax_highlighter import (
    STATE_IN_COMMENT,
    STATE_IN_STRING,
    STATE_NORMAL,
    ColorSchemes,
    SyntaxHighlighter,
    utf16_offsets,
)


def block_states(document):
    states = []
    block = document.firstBlock()
    while block.isValid():
        states.append(block.userState())
        block = block.next()
    return states


def format_ranges(block):
    """(start, length, color) of each format Qt laid out on a block."""
    return [
        (fmt_range.start, fmt_range.length, fmt_range.format.foreground().color())
        for fmt_range in block.layout().formats()
    ]


# =============================================================================
# Syntax highlighter
# =============================================================================

def test_block_comment_state_carries_across_lines(qapp, registry):
    document = QTextDocument()
    document.setPlainText("let a = 1; /* start\nmiddle\nend */ let b;")

    highlighter = SyntaxHighlighter(document, language="ouro", registry=registry)

    assert highlighter.get_language_name() == "Ouroboros"
    assert block_states(document) == [STATE_IN_COMMENT, STATE_IN_COMMENT, STATE_NORMAL]


def test_closed_block_comment_does_not_carry(qapp, registry):
    document = QTextDocument()
    document.setPlainText("/* one line */\nlet a;")

    SyntaxHighlighter(document, language="ouro", registry=registry)

    assert block_states(document) == [STATE_NORMAL, STATE_NORMAL]


def test_formats_are_applied(qapp, registry):
    document = QTextDocument()
    document.setPlainText("let a = 1;")

    SyntaxHighlighter(document, language="ouro", registry=registry)

    assert document.firstBlock().layout().formats()


def test_multi_line_string_is_styled_on_both_lines(qapp, registry):
    document = QTextDocument()
    document.setPlainText('let s = "one\ntwo";')

    SyntaxHighlighter(document, language="ouro", registry=registry)

    string_color = ColorSchemes.light().colors[Category.STRING]
    assert block_states(document) == [STATE_IN_STRING, STATE_NORMAL]
    assert (8, 4, string_color) in format_ranges(document.firstBlock())
    assert (0, 4, string_color) in format_ranges(document.lastBlock())


def test_string_state_carries_over_blank_lines(qapp, registry):
    document = QTextDocument()
    document.setPlainText('"open\n\nclose" let')

    SyntaxHighlighter(document, language="ouro", registry=registry)

    keyword_color = ColorSchemes.light().colors[Category.KEYWORD]
    assert block_states(document) == [STATE_IN_STRING, STATE_IN_STRING, STATE_NORMAL]
    assert (7, 3, keyword_color) in format_ranges(document.lastBlock())


def test_formats_use_utf16_offsets(qapp, registry):
    document = QTextDocument()
    document.setPlainText('"😀" let x')

    SyntaxHighlighter(document, language="ouro", registry=registry)

    scheme = ColorSchemes.light()
    ranges = format_ranges(document.firstBlock())
    assert (0, 4, scheme.colors[Category.STRING]) in ranges
    assert (5, 3, scheme.colors[Category.KEYWORD]) in ranges


def test_utf16_offsets():
    assert utf16_offsets("ab") == [0, 1, 2]
    assert utf16_offsets("a😀b") == [0, 1, 3, 4]
    assert utf16_offsets("") == [0]


def test_edited_document_is_rehighlighted(qapp, registry):
    document = QTextDocument()
    document.setPlainText("let a;\nlet b;")
    SyntaxHighlighter(document, language="ouro", registry=registry)
    assert block_states(document) == [STATE_NORMAL, STATE_NORMAL]

    QTextCursor(document.firstBlock()).insertText("/* ")

    assert block_states(document) == [STATE_IN_COMMENT, STATE_NORMAL]
    comment_color = ColorSchemes.light().colors[Category.COMMENT]
    assert (0, 6, comment_color) in format_ranges(document.lastBlock())


def test_unknown_language_disables_highlighting(qapp, registry):
    document = QTextDocument()
    document.setPlainText("let a = 1;")
    highlighter = SyntaxHighlighter(document, registry=registry)

    assert not highlighter.set_language("cobol")
    assert highlighter.get_language_name() is None
    assert not document.firstBlock().layout().formats()


def test_language_from_file_name(qapp, registry):
    highlighter = SyntaxHighlighter(QTextDocument(), registry=registry)
    assert highlighter.set_language_for_file("main.ouro")
    assert not highlighter.set_language_for_file("main.rs")


def test_color_scheme_for_theme():
    assert ColorSchemes.for_theme(Theme.DARK).name == "Dark"
    assert ColorSchemes.for_theme(Theme.LIGHT).name == "Light"


# =============================================================================
# Code block
# =============================================================================

def test_copy_button_starts_hidden(qapp, registry):
    block = CodeBlock("let x = 1;", language="ouro", registry=registry)
    assert block.copy_button.text() == COPY_ICON
    assert block.copy_button.isHidden()
    assert block.code() == "let x = 1;"
    assert block.language() == "ouro"


def test_successful_copy_shows_check_mark(qapp, registry, monkeypatch):
    block = CodeBlock("let x = 1;", language="ouro", registry=registry)
    copied = []
    block.copied.connect(copied.append)
    monkeypatch.setattr(block, "_write_clipboard", lambda text: copied.append(text))

    assert block.copy_code()

    assert block.copy_button.text() == CHECK_ICON
    assert copied == ["let x = 1;", True]

    block._reset_copy_icon()
    assert block.copy_button.text() == COPY_ICON


def test_failed_copy_keeps_default_icon(qapp, registry, monkeypatch, caplog):
    block = CodeBlock("let x = 1;", language="ouro", registry=registry)
    results = []
    block.copied.connect(results.append)

    def refuse(text):
        raise ClipboardError("clipboard locked")

    monkeypatch.setattr(block, "_write_clipboard", refuse)

    assert not block.copy_code()

    assert block.copy_button.text() == COPY_ICON
    assert results == [False]
    assert "Failed to copy code" in caplog.text


def test_code_block_scheme_switch(qapp, registry):
    block = CodeBlock("PI", language="ouro", registry=registry)
    block.set_color_scheme(ColorSchemes.dark())
    assert block.highlighter.color_scheme().name == "Dark"


# =============================================================================
# Documentation window
# =============================================================================

@pytest.fixture
def window(qapp, registry, tmp_path):
    document = parse_document(GUIDE_PATH.read_text(encoding="utf-8"))
    manager = SettingsManager(tmp_path / "settings.json")
    widget = DocsWindow(document, manager, registry)
    yield widget
    widget.close()
    widget.deleteLater()


def test_sidebar_lists_sections(window):
    document = parse_document(GUIDE_PATH.read_text(encoding="utf-8"))
    assert window.sidebar.count() == len(document.sections)
    assert window.sidebar.objectName() == "sidebar"
    assert window.windowTitle() == "Ouroboros Language Guide"
    assert window.code_blocks()


def test_navigate_marks_section_active(window):
    assert window.navigate_to("strings")
    assert window.active_section_id() == "strings"


def test_navigate_to_missing_section(window):
    assert not window.navigate_to("nowhere")
    assert window.active_section_id() is None


def test_theme_toggle_persists_and_swaps_icon(window, tmp_path):
    assert window.current_theme() is Theme.LIGHT
    assert window.theme_button.text() == THEME_ICONS[Theme.LIGHT]

    assert window.toggle_theme() is Theme.DARK

    assert window.theme_button.text() == THEME_ICONS[Theme.DARK]
    assert all(block.highlighter.color_scheme().name == "Dark" for block in window.code_blocks())
    assert SettingsManager(tmp_path / "settings.json").settings.ui.theme is Theme.DARK

    window.toggle_theme()
    assert window.current_theme() is Theme.LIGHT


def test_compact_sidebar_toggle(window):
    window.resize(600, 700)
    assert window.is_compact()

    window.toggle_sidebar()
    assert not window.sidebar.isHidden()
    window.toggle_sidebar()
    assert window.sidebar.isHidden()


def test_wide_window_always_shows_sidebar(window):
    window.resize(1200, 800)
    assert not window.is_compact()

    window.toggle_sidebar()
    assert not window.sidebar.isHidden()


def test_search_shortcut_placeholder(window, monkeypatch):
    shown = []
    monkeypatch.setattr(docs_window.QMessageBox, "information", lambda *args: shown.append(args))

    window.show_search_placeholder()

    assert shown and SEARCH_PLACEHOLDER in shown[0]


def test_content_card_reveals_once(qapp):
    card = ContentCard(QLabel("text"))
    assert not card.is_revealed()
    card.reveal(10)
    assert card.is_revealed()
    card.reveal(10)
    assert card.is_revealed()


def test_content_card_slides_up_while_fading_in(qapp):
    card = ContentCard(QLabel("text"), reveal_offset=20)
    assert card.slide == 20
    assert card.graphicsEffect().opacity() == 0.0

    card.reveal(50)
    card.finish_reveal()

    assert card.slide == 0
    assert card.graphicsEffect().opacity() == 1.0
    margins = card.layout().contentsMargins()
    assert margins.top() + margins.bottom() == 20


def test_cards_use_configured_reveal_offset(qapp, registry, tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    manager.settings.effects.reveal_offset = 35
    widget = DocsWindow(parse_document(GUIDE_PATH.read_text(encoding="utf-8")), manager, registry)

    card = widget.section_view("getting-started").cards[0]
    assert card.slide == 35
    widget.deleteLater()


def test_session_theme_is_not_saved(qapp, registry, tmp_path):
    path = tmp_path / "settings.json"
    document = parse_document(GUIDE_PATH.read_text(encoding="utf-8"))
    widget = DocsWindow(document, SettingsManager(path), registry, theme=Theme.DARK)

    assert widget.current_theme() is Theme.DARK
    assert all(block.highlighter.color_scheme().name == "Dark" for block in widget.code_blocks())

    assert widget.save_window_state()
    assert SettingsManager(path).settings.ui.theme is Theme.LIGHT
    widget.deleteLater()


def test_window_size_is_remembered(window, qapp, registry, tmp_path):
    window.resize(900, 650)
    assert window.save_window_state()

    saved = SettingsManager(tmp_path / "settings.json").settings.ui
    assert (saved.window_width, saved.window_height, saved.window_maximized) == (900, 650, False)

    document = parse_document(GUIDE_PATH.read_text(encoding="utf-8"))
    reopened = DocsWindow(document, SettingsManager(tmp_path / "settings.json"), registry)
    assert (reopened.width(), reopened.height()) == (900, 650)
    reopened.deleteLater()


# =============================================================================
# Application theme
# =============================================================================

@pytest.mark.parametrize("theme", [Theme.LIGHT, Theme.DARK])
def test_palette_follows_code_colors(qapp, theme):
    scheme = ColorSchemes.for_theme(theme)
    palette = build_palette(scheme, theme)

    assert palette.color(QPalette.ColorRole.Base) == scheme.background
    assert palette.color(QPalette.ColorRole.Text) == scheme.foreground
    assert palette.color(QPalette.ColorRole.Highlight) == scheme.accent
    assert palette.color(QPalette.ColorRole.Window) != scheme.background


def test_apply_theme_sets_application_palette(qapp):
    apply_theme(qapp, Theme.DARK)
    assert qapp.palette().color(QPalette.ColorRole.Base) == ColorSchemes.dark().background
    assert "QListWidget#sidebar" in qapp.styleSheet()

    apply_theme(qapp, Theme.LIGHT)
    assert qapp.palette().color(QPalette.ColorRole.Base) == ColorSchemes.light().background
