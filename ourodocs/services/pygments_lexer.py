"""
Pygments lexer for the Ouroboros language.

Lets Sphinx and MkDocs highlight code blocks tagged ``ouroboros`` or
``ouro``. The lexer is published through the ``pygments.lexers`` entry point.
"""

from __future__ import annotations

from pygments.lexer import Lexer
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
)

from ourodocs.core.grammar import Category
from ourodocs.core.tokenizer import effective_style, tokenize, walk_leaves
from ourodocs.languages.ouroboros import OuroborosLanguage


TOKEN_MAP = {
    Category.COMMENT: Comment,
    Category.STRING: String.Double,
    Category.KEYWORD: Keyword,
    Category.BOOLEAN: Keyword.Constant,
    Category.NUMBER: Number,
    Category.OPERATOR: Operator,
    Category.PUNCTUATION: Punctuation,
    Category.CLASS_NAME: Name.Class,
    Category.FUNCTION: Name.Function,
    Category.BUILTIN: Name.Builtin,
    Category.TYPE: Keyword.Type,
    Category.CONSTANT: Name.Constant,
    Category.PROPERTY: Name.Attribute,
    Category.INTERPOLATION: String.Interpol,
    Category.INTERPOLATION_PUNCTUATION: String.Interpol,
    Category.PLAIN: Text,
}


class OuroborosLexer(Lexer):
    """Pygments lexer for the Ouroboros programming language."""

    name = "Ouroboros"
    aliases = ["ouroboros", "ouro"]
    filenames = ["*.ouro"]
    mimetypes = ["text/x-ouroboros"]

    grammar = OuroborosLanguage.grammar

    def get_tokens_unprocessed(self, text):
        for leaf, lineage in walk_leaves(tokenize(text, self.grammar)):
            yield leaf.start, TOKEN_MAP[effective_style(leaf, lineage)], leaf.text
