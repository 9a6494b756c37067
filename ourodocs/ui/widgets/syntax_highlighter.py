"""
Syntax highlighter for code views.

Provides:
- Light and dark color schemes keyed by token category
- A QSyntaxHighlighter driven by the span tokenizer
- Comments and strings that continue across lines
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from PyQt6.QtGui import QColor, QFont, QSyntaxHighlighter, QTextCharFormat, QTextDocument

from ourodocs.core.grammar import Category, Grammar
from ourodocs.core.registry import GrammarRegistry, create_default_registry
from ourodocs.core.tokenizer import Span, effective_style, tokenize, walk_leaves
from ourodocs.services.settings import Theme


# Block states
STATE_NORMAL = 0
STATE_IN_COMMENT = 1
STATE_IN_STRING = 2

CARRIED_STATES = {
    Category.COMMENT: STATE_IN_COMMENT,
    Category.STRING: STATE_IN_STRING,
}


@dataclass
class ColorScheme:
    """Color scheme for syntax highlighting."""
    name: str
    background: QColor
    foreground: QColor
    accent: QColor

    # Token colors
    colors: Dict[Category, QColor] = field(default_factory=dict)

    # Token styles (bold, italic)
    bold: set[Category] = field(default_factory=set)
    italic: set[Category] = field(default_factory=set)

    def get_format(self, category: Category) -> QTextCharFormat:
        """Get QTextCharFormat for a category."""
        fmt = QTextCharFormat()

        if category in self.colors:
            fmt.setForeground(self.colors[category])
        else:
            fmt.setForeground(self.foreground)

        if category in self.bold:
            fmt.setFontWeight(QFont.Weight.Bold)

        if category in self.italic:
            fmt.setFontItalic(True)

        return fmt


class ColorSchemes:
    """Predefined color schemes."""

    @staticmethod
    def light() -> ColorScheme:
        """Light color scheme."""
        return ColorScheme(
            name="Light",
            background=QColor(246, 248, 250),
            foreground=QColor(36, 41, 46),
            accent=QColor(3, 102, 214),
            colors={
                Category.COMMENT: QColor(106, 115, 125),
                Category.STRING: QColor(3, 47, 98),
                Category.KEYWORD: QColor(215, 58, 73),
                Category.BOOLEAN: QColor(0, 92, 197),
                Category.NUMBER: QColor(0, 92, 197),
                Category.OPERATOR: QColor(215, 58, 73),
                Category.PUNCTUATION: QColor(36, 41, 46),
                Category.CLASS_NAME: QColor(111, 66, 193),
                Category.FUNCTION: QColor(111, 66, 193),
                Category.BUILTIN: QColor(227, 98, 9),
                Category.CONSTANT: QColor(0, 92, 197),
                Category.PROPERTY: QColor(0, 92, 197),
                Category.INTERPOLATION: QColor(36, 41, 46),
            },
            bold={Category.KEYWORD},
            italic={Category.COMMENT},
        )

    @staticmethod
    def dark() -> ColorScheme:
        """Dark color scheme."""
        return ColorScheme(
            name="Dark",
            background=QColor(30, 30, 30),
            foreground=QColor(212, 212, 212),
            accent=QColor(86, 156, 214),
            colors={
                Category.COMMENT: QColor(106, 153, 85),
                Category.STRING: QColor(206, 145, 120),
                Category.KEYWORD: QColor(86, 156, 214),
                Category.BOOLEAN: QColor(86, 156, 214),
                Category.NUMBER: QColor(181, 206, 168),
                Category.OPERATOR: QColor(212, 212, 212),
                Category.PUNCTUATION: QColor(212, 212, 212),
                Category.CLASS_NAME: QColor(78, 201, 176),
                Category.FUNCTION: QColor(220, 220, 170),
                Category.BUILTIN: QColor(200, 200, 150),
                Category.CONSTANT: QColor(100, 200, 200),
                Category.PROPERTY: QColor(156, 220, 254),
                Category.INTERPOLATION: QColor(212, 212, 212),
            },
            bold={Category.KEYWORD},
            italic={Category.COMMENT},
        )

    @staticmethod
    def for_theme(theme: Theme) -> ColorScheme:
        """Scheme matching an application theme."""
        return ColorSchemes.dark() if theme is Theme.DARK else ColorSchemes.light()


def utf16_offsets(text: str) -> List[int]:
    """UTF-16 offset of each code point index in text, plus the end offset."""
    offsets = [0]
    position = 0
    for char in text:
        position += 2 if ord(char) > 0xFFFF else 1
        offsets.append(position)
    return offsets


@dataclass
class DocumentSpans:
    """Styled leaf ranges of a whole document, in code point offsets."""
    grammar: Grammar
    text: str
    block_starts: List[int]
    leaves: List[Tuple[int, int, Category]]
    top_level: List[Span]

    def __post_init__(self):
        self._leaf_ends = [end for _, end, _ in self.leaves]
        self._top_ends = [span.end for span in self.top_level]

    @classmethod
    def build(cls, blocks: List[str], grammar: Grammar) -> DocumentSpans:
        text = '\n'.join(blocks)
        block_starts = []
        position = 0
        for block in blocks:
            block_starts.append(position)
            position += len(block) + 1

        top_level = list(tokenize(text, grammar))
        leaves = [
            (leaf.start, leaf.end, effective_style(leaf, lineage))
            for leaf, lineage in walk_leaves(top_level)
        ]
        return cls(grammar, text, block_starts, leaves, top_level)

    def matches(self, block_number: int, block_text: str, block_count: int) -> bool:
        """Whether this snapshot still describes the given block."""
        if len(self.block_starts) != block_count:
            return False
        start = self.block_starts[block_number]
        return self.text[start:start + len(block_text)] == block_text

    def leaves_between(self, start: int, end: int) -> Iterator[Tuple[int, int, Category]]:
        """Leaf ranges overlapping [start, end)."""
        index = bisect_right(self._leaf_ends, start)
        while index < len(self.leaves):
            leaf = self.leaves[index]
            if leaf[0] >= end:
                break
            yield leaf
            index += 1

    def state_at(self, position: int) -> int:
        """Block state for a line break at position."""
        index = bisect_right(self._top_ends, position)
        if index < len(self.top_level):
            span = self.top_level[index]
            if span.start < position:
                return CARRIED_STATES.get(span.category, STATE_NORMAL)
        return STATE_NORMAL


class SyntaxHighlighter(QSyntaxHighlighter):
    """
    Syntax highlighter for source code.

    The whole document is tokenized once and each block takes its slice of
    the spans, so comments and strings running over several lines are styled
    the same way as in the HTML output. A block's state records the construct
    still open at its line break.
    """

    def __init__(
        self,
        document: QTextDocument,
        language: Optional[str] = None,
        color_scheme: Optional[ColorScheme] = None,
        registry: Optional[GrammarRegistry] = None
    ):
        super().__init__(document)

        self._registry = registry or create_default_registry()
        self._grammar: Optional[Grammar] = None
        self._language_name: Optional[str] = None
        self._color_scheme = color_scheme or ColorSchemes.light()
        self._formats: Dict[Category, QTextCharFormat] = {}
        self._spans: Optional[DocumentSpans] = None
        self._enabled = True

        self._build_formats()

        if language:
            self.set_language(language)

    def _build_formats(self) -> None:
        """Build text formats from color scheme."""
        self._formats.clear()

        for category in Category:
            if category == Category.PLAIN:
                continue
            self._formats[category] = self._color_scheme.get_format(category)

    def set_language(self, language: str) -> bool:
        """Set the language for highlighting; returns False if unknown."""
        handle = self._registry.get(language)
        self._grammar = handle.grammar if handle else None
        self._language_name = handle.display_name if handle else None
        self._spans = None
        self.rehighlight()
        return handle is not None

    def set_language_for_file(self, filename: str) -> bool:
        """Set language based on file extension."""
        handle = self._registry.get_for_file(filename)
        if handle:
            return self.set_language(handle.name)

        self._grammar = None
        self._language_name = None
        self._spans = None
        self.rehighlight()
        return False

    def set_color_scheme(self, scheme: ColorScheme) -> None:
        """Set the color scheme."""
        self._color_scheme = scheme
        self._build_formats()
        self.rehighlight()

    def color_scheme(self) -> ColorScheme:
        return self._color_scheme

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable highlighting."""
        self._enabled = enabled
        self.rehighlight()

    def get_language_name(self) -> Optional[str]:
        """Get the current language name."""
        return self._language_name

    def highlightBlock(self, text: str) -> None:
        """Highlight a block of text."""
        self.setCurrentBlockState(STATE_NORMAL)

        if not self._enabled or self._grammar is None:
            return

        block_number = self.currentBlock().blockNumber()
        spans = self._document_spans(block_number, text)
        start = spans.block_starts[block_number]
        end = start + len(text)

        # setFormat counts UTF-16 code units
        units = utf16_offsets(text)
        for leaf_start, leaf_end, style in spans.leaves_between(start, end):
            fmt = self._formats.get(style)
            if fmt is None:
                continue
            first = max(leaf_start, start) - start
            last = min(leaf_end, end) - start
            if last > first:
                self.setFormat(units[first], units[last] - units[first], fmt)

        self.setCurrentBlockState(spans.state_at(end))

    def _document_spans(self, block_number: int, text: str) -> DocumentSpans:
        """Spans of the whole document, rebuilt when it has changed."""
        document = self.document()
        spans = self._spans
        if (
            spans is None
            or block_number == 0
            or spans.grammar is not self._grammar
            or not spans.matches(block_number, text, document.blockCount())
        ):
            blocks = []
            block = document.firstBlock()
            while block.isValid():
                blocks.append(block.text())
                block = block.next()
            spans = DocumentSpans.build(blocks, self._grammar)
            self._spans = spans
        return spans
