"""
Documentation page model.

Parses the small Markdown subset the documentation pages are written in:
- ``# Title`` sets the document title
- ``## Heading {#anchor}`` starts a section
- fenced code blocks with a language tag
- blank-line separated paragraphs
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union


INTRODUCTION_ID = "introduction"
INTRODUCTION_TITLE = "Introduction"

_TITLE_RE = re.compile(r'^#\s+(.+?)\s*$')
_SECTION_RE = re.compile(r'^##\s+(.+?)(?:\s*\{#([\w-]+)\})?\s*$')
_FENCE_RE = re.compile(r'^```\s*([\w+-]*)\s*$')


@dataclass(frozen=True)
class Paragraph:
    """A run of prose."""
    text: str


@dataclass(frozen=True)
class CodeSample:
    """A fenced code block."""
    language: str
    code: str


Block = Union[Paragraph, CodeSample]


@dataclass(frozen=True)
class Section:
    """A navigable section of a page."""
    id: str
    title: str
    blocks: Tuple[Block, ...] = ()

    @property
    def code_samples(self) -> Tuple[CodeSample, ...]:
        return tuple(block for block in self.blocks if isinstance(block, CodeSample))


@dataclass(frozen=True)
class Document:
    """A parsed documentation page."""
    title: str
    sections: Tuple[Section, ...] = ()

    def get_section(self, section_id: str) -> Optional[Section]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None


def slugify(text: str) -> str:
    """Turn a heading into an anchor id."""
    slug = re.sub(r'[^\w\s-]', '', text.lower())
    slug = re.sub(r'[\s_-]+', '-', slug).strip('-')
    return slug or "section"


@dataclass
class _SectionBuilder:
    id: str
    title: str
    blocks: List[Block] = field(default_factory=list)
    paragraph: List[str] = field(default_factory=list)

    def flush_paragraph(self) -> None:
        if self.paragraph:
            self.blocks.append(Paragraph(' '.join(line.strip() for line in self.paragraph)))
            self.paragraph = []

    def build(self) -> Section:
        self.flush_paragraph()
        return Section(id=self.id, title=self.title, blocks=tuple(self.blocks))


def parse_document(source: str) -> Document:
    """
    Parse documentation source text.

    An unterminated code fence runs to the end of the input. Content before
    the first section heading becomes an introduction section.
    """
    title = ""
    used_ids: Dict[str, int] = {}
    sections: List[Section] = []
    intro = _SectionBuilder(INTRODUCTION_ID, INTRODUCTION_TITLE)
    current = intro

    def unique_id(candidate: str) -> str:
        count = used_ids.get(candidate, 0) + 1
        used_ids[candidate] = count
        return candidate if count == 1 else f"{candidate}-{count}"

    def close_section() -> None:
        section = current.build()
        if current is intro:
            if not section.blocks:
                return
            unique_id(INTRODUCTION_ID)
        sections.append(section)

    lines = source.splitlines()
    index = 0
    while index < len(lines):
        line = lines[index]

        fence = _FENCE_RE.match(line)
        if fence:
            current.flush_paragraph()
            language = fence.group(1)
            code_lines = []
            index += 1
            while index < len(lines) and not _FENCE_RE.match(lines[index]):
                code_lines.append(lines[index])
                index += 1
            current.blocks.append(CodeSample(language=language, code='\n'.join(code_lines)))
            index += 1
            continue

        heading = _SECTION_RE.match(line)
        if heading:
            close_section()
            heading_title = heading.group(1)
            current = _SectionBuilder(unique_id(heading.group(2) or slugify(heading_title)), heading_title)
            index += 1
            continue

        doc_title = _TITLE_RE.match(line)
        if doc_title and not title:
            title = doc_title.group(1)
        elif not line.strip():
            current.flush_paragraph()
        else:
            current.paragraph.append(line)
        index += 1

    close_section()

    return Document(title=title, sections=tuple(sections))
