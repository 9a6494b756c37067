"""
Reusable widgets for the documentation viewer.

Provides:
- Syntax highlighting for code views
- Code blocks with a copy button
"""

from ourodocs.ui.widgets.syntax_highlighter import (
    ColorScheme,
    ColorSchemes,
    SyntaxHighlighter,
)
from ourodocs.ui.widgets.code_block import (
    CodeBlock,
    ClipboardError,
)

__all__ = [
    # Highlighting
    'ColorScheme',
    'ColorSchemes',
    'SyntaxHighlighter',
    # Code blocks
    'CodeBlock',
    'ClipboardError',
]
