"""
HTML rendering of highlighted code.

Markup follows Prism's conventions so existing Prism themes style it:
every classified span becomes ``<span class="token CATEGORY [ALIAS]">`` and
unclassified text is emitted as escaped text.
"""

from __future__ import annotations

import html
from typing import Iterable, Optional

from ourodocs.core.registry import GrammarRegistry, create_default_registry
from ourodocs.core.tokenizer import Span, tokenize


def render_spans(spans: Iterable[Span]) -> str:
    """Render spans (and their children) as HTML."""
    parts = []
    for span in spans:
        if span.is_plain:
            parts.append(html.escape(span.text, quote=False))
            continue

        classes = ['token', span.category.value]
        if span.alias is not None and span.alias != span.category:
            classes.append(span.alias.value)

        if span.children:
            inner = render_spans(span.children)
        else:
            inner = html.escape(span.text, quote=False)

        parts.append(f'<span class="{" ".join(classes)}">{inner}</span>')
    return ''.join(parts)


def highlight_html(
    code: str,
    language: str,
    registry: Optional[GrammarRegistry] = None
) -> str:
    """
    Highlight code as HTML.

    Raises:
        UnknownLanguageError: If the language is not registered
    """
    registry = registry or create_default_registry()
    handle = registry.require(language)
    return render_spans(tokenize(code, handle.grammar))


def render_code_block(
    code: str,
    language: str,
    registry: Optional[GrammarRegistry] = None
) -> str:
    """Highlight code wrapped in a ``<pre><code>`` block."""
    css_class = f"language-{html.escape(language.lower())}"
    body = highlight_html(code, language, registry)
    return f'<pre class="{css_class}"><code class="{css_class}">{body}</code></pre>'
