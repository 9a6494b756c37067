"""
Span tokenizer.

Applies a Grammar to text and yields tagged spans that cover the input
exactly: concatenating every span's text reproduces the input, spans never
overlap, and characters no rule claims come out as Category.PLAIN.

At each scan position the rules are tried in precedence order and the first
one matching there wins. A greedy rule further down the order takes over
only when its match is strictly longer. Rules with ``inside`` get child spans
from tokenizing their matched text with the nested grammar.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from ourodocs.core.grammar import Category, Grammar, MatchRule


# Characters of preceding text a lookbehind may inspect
LOOKBEHIND_WINDOW = 256


@dataclass(frozen=True)
class Span:
    """A tagged slice of the input."""
    category: Category
    text: str
    start: int = 0
    alias: Optional[Category] = None
    children: Tuple[Span, ...] = ()

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def style(self) -> Category:
        """Category the span should be styled as."""
        return self.alias or self.category

    @property
    def is_plain(self) -> bool:
        return self.category == Category.PLAIN


def tokenize(text: str, grammar: Grammar) -> Iterator[Span]:
    """
    Tokenize text with a grammar.

    Args:
        text: Source text; need not be valid code
        grammar: Grammar to apply

    Yields:
        Spans in input order
    """
    return _scan(text, grammar, grammar, 0)


def _scan(text: str, grammar: Grammar, root: Grammar, offset: int) -> Iterator[Span]:
    rules = list(grammar.iter_rules(root))
    length = len(text)
    pos = 0
    plain_start = 0

    while pos < length:
        hit = _match_at(text, pos, rules)
        if hit is None:
            pos += 1
            continue

        category, rule, end = hit
        if plain_start < pos:
            yield Span(Category.PLAIN, text[plain_start:pos], offset + plain_start)

        matched = text[pos:end]
        children: Tuple[Span, ...] = ()
        if rule.inside is not None:
            children = tuple(_scan(matched, rule.inside, root, offset + pos))

        yield Span(category, matched, offset + pos, rule.alias, children)
        pos = end
        plain_start = end

    if plain_start < length:
        yield Span(Category.PLAIN, text[plain_start:], offset + plain_start)


def _match_at(
    text: str,
    pos: int,
    rules: List[Tuple[Category, MatchRule]]
) -> Optional[Tuple[Category, MatchRule, int]]:
    """Find the winning rule at pos; returns (category, rule, end) or None."""
    best: Optional[Tuple[Category, MatchRule, int]] = None

    for category, rule in rules:
        if best is not None and not rule.greedy:
            continue

        match = rule.compile().match(text, pos)
        if match is None or match.end() == pos:
            continue

        lookbehind = rule.compile_lookbehind()
        if lookbehind is not None:
            window_start = max(0, pos - LOOKBEHIND_WINDOW)
            if lookbehind.search(text, window_start, pos) is None:
                continue

        if best is None or match.end() > best[2]:
            best = (category, rule, match.end())

    return best


def reconstruct(spans: Iterable[Span]) -> str:
    """Concatenate span texts back into source text."""
    return ''.join(span.text for span in spans)


def walk_leaves(
    spans: Iterable[Span],
    lineage: Tuple[Span, ...] = ()
) -> Iterator[Tuple[Span, Tuple[Span, ...]]]:
    """
    Iterate leaf spans depth-first.

    Yields:
        (leaf, lineage) where lineage lists enclosing spans outermost first
    """
    for span in spans:
        if span.children:
            yield from walk_leaves(span.children, lineage + (span,))
        else:
            yield span, lineage


def effective_style(span: Span, lineage: Tuple[Span, ...]) -> Category:
    """
    Style of a leaf, inheriting from the nearest styled ancestor.

    Plain text inside a string is styled as the string.
    """
    if not span.is_plain:
        return span.style
    for parent in reversed(lineage):
        if not parent.is_plain:
            return parent.style
    return Category.PLAIN
