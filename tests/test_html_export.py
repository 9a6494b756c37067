"""
Tests for HTML rendering of highlighted code.
"""

import html
import re

import pytest

from ourodocs import GUIDE_PATH
from ourodocs.core.registry import UnknownLanguageError
from ourodocs.services.html_export import highlight_html, render_code_block, render_spans


def strip_markup(markup):
    return html.unescape(re.sub(r"<[^>]+>", "", markup))


def test_statement(registry):
    assert highlight_html("let x = 1;", "ouro", registry) == (
        '<span class="token keyword">let</span> x '
        '<span class="token operator">=</span> '
        '<span class="token number">1</span>'
        '<span class="token punctuation">;</span>'
    )


def test_plain_text_is_escaped(registry):
    assert highlight_html('"<b>&"', "ouro", registry) == (
        '<span class="token string">"&lt;b&gt;&amp;"</span>'
    )


def test_nested_interpolation_markup(registry):
    assert highlight_html('"${x}"', "ouro", registry) == (
        '<span class="token string">"'
        '<span class="token interpolation">'
        '<span class="token interpolation-punctuation punctuation">${</span>'
        'x'
        '<span class="token interpolation-punctuation punctuation">}</span>'
        '</span>"</span>'
    )


@pytest.mark.parametrize("code", [
    "a < b && c > d",
    'print("5 > 3 & ${a < b}");',
    GUIDE_PATH.read_text(encoding="utf-8"),
])
def test_markup_stripped_gives_input(code, registry):
    assert strip_markup(highlight_html(code, "ouroboros", registry)) == code


def test_render_spans_of_nothing():
    assert render_spans([]) == ""


def test_code_block_wrapper(registry):
    block = render_code_block("PI", "Ouro", registry)
    assert block == (
        '<pre class="language-ouro"><code class="language-ouro">'
        '<span class="token constant">PI</span>'
        '</code></pre>'
    )


def test_unknown_language(registry):
    with pytest.raises(UnknownLanguageError):
        highlight_html("x", "brainfuck", registry)


def test_default_registry_is_used():
    assert highlight_html("true", "ouro") == '<span class="token keyword">true</span>'
