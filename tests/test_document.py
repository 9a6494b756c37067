"""
Tests for documentation page parsing.
"""

from ourodocs import GUIDE_PATH
from ourodocs.core.document import (
    INTRODUCTION_ID,
    CodeSample,
    Paragraph,
    parse_document,
    slugify,
)


PAGE = """# Language Tour

Welcome to the tour.
It spans two lines.

## Basics {#basics}

Declare things.

```ouro
let x = 1;

let y = 2;
```

## Advanced Topics

More text.
"""


def test_title_and_sections():
    document = parse_document(PAGE)
    assert document.title == "Language Tour"
    assert [section.id for section in document.sections] == [INTRODUCTION_ID, "basics", "advanced-topics"]
    assert [section.title for section in document.sections] == ["Introduction", "Basics", "Advanced Topics"]


def test_paragraph_lines_are_joined():
    intro = parse_document(PAGE).get_section(INTRODUCTION_ID)
    assert intro.blocks == (Paragraph("Welcome to the tour. It spans two lines."),)


def test_code_blocks_keep_blank_lines():
    basics = parse_document(PAGE).get_section("basics")
    assert basics.blocks == (
        Paragraph("Declare things."),
        CodeSample(language="ouro", code="let x = 1;\n\nlet y = 2;"),
    )
    assert basics.code_samples == (CodeSample(language="ouro", code="let x = 1;\n\nlet y = 2;"),)


def test_empty_introduction_is_dropped():
    document = parse_document("# T\n\n## First\ntext\n")
    assert [section.id for section in document.sections] == ["first"]


def test_duplicate_ids_get_suffixes():
    document = parse_document("## Setup\n## Setup\n## Other {#setup}\n")
    assert [section.id for section in document.sections] == ["setup", "setup-2", "setup-3"]


def test_introduction_id_is_reserved():
    document = parse_document("Intro text.\n\n## Introduction\n")
    assert [section.id for section in document.sections] == ["introduction", "introduction-2"]


def test_unterminated_fence_runs_to_end():
    document = parse_document("## Code\n```ouro\nlet a;\nlet b;")
    (sample,) = document.sections[0].code_samples
    assert sample.code == "let a;\nlet b;"


def test_fence_without_language():
    (sample,) = parse_document("```\nplain\n```").sections[0].code_samples
    assert sample.language == ""


def test_missing_section():
    assert parse_document(PAGE).get_section("nope") is None


def test_empty_source():
    document = parse_document("")
    assert document.title == ""
    assert document.sections == ()


def test_slugify():
    assert slugify("Variables and Types") == "variables-and-types"
    assert slugify("  C++ & Friends!  ") == "c-friends"
    assert slugify("???") == "section"


def test_bundled_guide():
    document = parse_document(GUIDE_PATH.read_text(encoding="utf-8"))
    assert document.title == "Ouroboros Language Guide"
    assert document.sections[0].id == INTRODUCTION_ID
    assert document.get_section("getting-started") is not None
    samples = [sample for section in document.sections for sample in section.code_samples]
    assert samples
    assert all(sample.language == "ouro" for sample in samples)
