"""
Core highlighting and documentation models.

Everything in this package is UI-agnostic.
"""

from ourodocs.core.grammar import (
    Category,
    Grammar,
    GrammarRef,
    LanguageDefinition,
    MatchRule,
)
from ourodocs.core.tokenizer import (
    Span,
    reconstruct,
    tokenize,
    walk_leaves,
)
from ourodocs.core.registry import (
    GrammarRegistry,
    LanguageHandle,
    UnknownLanguageError,
    create_default_registry,
)

__all__ = [
    'Category',
    'Grammar',
    'GrammarRef',
    'LanguageDefinition',
    'MatchRule',
    'Span',
    'reconstruct',
    'tokenize',
    'walk_leaves',
    'GrammarRegistry',
    'LanguageHandle',
    'UnknownLanguageError',
    'create_default_registry',
]
