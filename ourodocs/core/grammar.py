"""
Grammar definitions for the span tokenizer.

Provides:
- Category: lexical classes a rule can emit
- MatchRule: a single pattern with lookbehind, greedy, alias and inside options
- Grammar: an ordered, immutable category table
- LanguageDefinition: base class bundling a grammar with its names

Grammars are built once and only read afterwards, so a single instance can be
shared by every highlighting pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Iterator, Optional, Pattern, Sequence, Tuple, Union


class Category(str, Enum):
    """Lexical categories emitted by the tokenizer."""
    COMMENT = "comment"
    STRING = "string"
    KEYWORD = "keyword"
    BOOLEAN = "boolean"
    NUMBER = "number"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    CLASS_NAME = "class-name"
    FUNCTION = "function"
    BUILTIN = "builtin"
    TYPE = "type"
    CONSTANT = "constant"
    PROPERTY = "property"
    INTERPOLATION = "interpolation"
    INTERPOLATION_PUNCTUATION = "interpolation-punctuation"

    PLAIN = "plain"  # Unmatched text

    def __str__(self) -> str:
        return self.value


class GrammarRef(Enum):
    """Symbolic grammar references resolved at tokenize time."""
    ROOT = auto()  # The grammar passed to the outermost tokenize() call


@dataclass(frozen=True)
class MatchRule:
    """
    A pattern that claims text for a category.

    Attributes:
        pattern: Regex source matched at the scan position
        flags: re flags for both pattern and lookbehind
        lookbehind: Regex that must match text ending exactly at the scan
            position; the prefix is required but not part of the token
        greedy: A longer greedy match preempts an earlier rule's match
        alias: Alternate category used for styling
        inside: Grammar applied to the matched text to produce child spans
    """
    pattern: str
    flags: int = 0
    lookbehind: Optional[str] = None
    greedy: bool = False
    alias: Optional[Category] = None
    inside: Optional[Grammar] = None

    _compiled: Pattern = field(init=False, repr=False, compare=False)
    _lookbehind_compiled: Optional[Pattern] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, '_compiled', re.compile(self.pattern, self.flags))
        lookbehind = None
        if self.lookbehind is not None:
            lookbehind = re.compile(rf'(?:{self.lookbehind})\Z', self.flags)
        object.__setattr__(self, '_lookbehind_compiled', lookbehind)

    def compile(self) -> Pattern:
        """Get the compiled pattern."""
        return self._compiled

    def compile_lookbehind(self) -> Optional[Pattern]:
        """Get the compiled lookbehind, anchored to the end of the search window."""
        return self._lookbehind_compiled


RuleSpec = Union[str, MatchRule, Sequence[Union[str, MatchRule]]]
RestSpec = Union['Grammar', GrammarRef, None]


def _to_rules(spec: RuleSpec) -> Tuple[MatchRule, ...]:
    if isinstance(spec, (str, MatchRule)):
        spec = [spec]
    return tuple(MatchRule(item) if isinstance(item, str) else item for item in spec)


@dataclass(frozen=True)
class Grammar:
    """
    Ordered table of categories to match rules.

    Categories are tried in declaration order, then the categories of
    ``rest``. Within a category, sub-rules are tried in listed order.
    """
    entries: Tuple[Tuple[Category, Tuple[MatchRule, ...]], ...]
    rest: RestSpec = None

    @classmethod
    def build(
        cls,
        entries: Iterable[Tuple[Category, RuleSpec]],
        rest: RestSpec = None
    ) -> Grammar:
        """
        Build a grammar from loose rule specifications.

        Each entry's rules may be a regex string, a MatchRule, or a list of
        either.
        """
        return cls(
            entries=tuple((category, _to_rules(spec)) for category, spec in entries),
            rest=rest,
        )

    @property
    def categories(self) -> Tuple[Category, ...]:
        """Own categories in declaration order."""
        return tuple(category for category, _ in self.entries)

    def rules_for(self, category: Category) -> Tuple[MatchRule, ...]:
        """Get the rules of one of this grammar's own categories."""
        for entry_category, rules in self.entries:
            if entry_category == category:
                return rules
        return ()

    def iter_rules(self, root: Optional[Grammar] = None) -> Iterator[Tuple[Category, MatchRule]]:
        """
        Iterate (category, rule) pairs in precedence order, ``rest`` included.

        Args:
            root: Grammar that GrammarRef.ROOT resolves to
        """
        for category, rules in self.entries:
            for rule in rules:
                yield category, rule

        rest = self.rest
        if rest is GrammarRef.ROOT:
            rest = root if root is not self else None
        if isinstance(rest, Grammar):
            yield from rest.iter_rules(root)


class LanguageDefinition:
    """Base class for language definitions."""

    name: str = "unknown"
    display_name: str = "Unknown"
    aliases: Tuple[str, ...] = ()
    file_extensions: Tuple[str, ...] = ()
    mime_types: Tuple[str, ...] = ()

    grammar: Grammar = Grammar(entries=())

    @classmethod
    def get_grammar(cls) -> Grammar:
        """Get the language's grammar."""
        return cls.grammar
