"""
Page behaviour calculations for the documentation viewer.

Pure functions so the viewer's event handlers stay thin:
- Scroll target for a navigation click
- Scroll spy (which section is active)
- Compact layout detection
- Reveal (fade-in) visibility checks
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


NAV_OFFSET = 80             # Space kept above a section after a nav click
SCROLL_SPY_OFFSET = 100     # Probe point below the top edge for scroll spy
COMPACT_BREAKPOINT = 768    # Widths at or below this use the compact layout
COPY_FEEDBACK_MS = 2000     # How long the copy confirmation stays visible
REVEAL_THRESHOLD = 0.1      # Fraction of an item that must be visible
REVEAL_BOTTOM_MARGIN = 50   # Viewport bottom shrink for reveal checks


@dataclass(frozen=True)
class SectionGeometry:
    """Vertical placement of a section within the scrolled content."""
    id: str
    top: int
    height: int

    @property
    def bottom(self) -> int:
        return self.top + self.height


def scroll_target(section_top: int, offset: int = NAV_OFFSET) -> int:
    """Scroll position that brings a section just below the header."""
    return max(0, section_top - offset)


def active_section(
    scroll_y: int,
    sections: Iterable[SectionGeometry],
    offset: int = SCROLL_SPY_OFFSET
) -> Optional[str]:
    """
    Find the section containing the scroll reading line.

    When sections overlap, the last one in document order wins.

    Returns:
        Section id, or None when the reading line is outside every section
    """
    line = scroll_y + offset
    current = None
    for section in sections:
        if section.top <= line < section.bottom:
            current = section.id
    return current


def is_compact(width: int, breakpoint: int = COMPACT_BREAKPOINT) -> bool:
    """Whether a window width calls for the compact (collapsed sidebar) layout."""
    return width <= breakpoint


def visible_ratio(
    item_top: int,
    item_height: int,
    viewport_top: int,
    viewport_height: int,
    bottom_margin: int = REVEAL_BOTTOM_MARGIN
) -> float:
    """
    Fraction of an item inside the viewport.

    The viewport's bottom edge is pulled up by ``bottom_margin``. Zero-height
    items count as fully visible when they sit inside the viewport.
    """
    view_bottom = viewport_top + viewport_height - bottom_margin
    if view_bottom <= viewport_top:
        return 0.0

    if item_height <= 0:
        return 1.0 if viewport_top <= item_top < view_bottom else 0.0

    overlap = min(item_top + item_height, view_bottom) - max(item_top, viewport_top)
    if overlap <= 0:
        return 0.0
    return overlap / item_height


def should_reveal(
    item_top: int,
    item_height: int,
    viewport_top: int,
    viewport_height: int,
    threshold: float = REVEAL_THRESHOLD,
    bottom_margin: int = REVEAL_BOTTOM_MARGIN
) -> bool:
    """Whether an item is visible enough to start its fade-in."""
    ratio = visible_ratio(item_top, item_height, viewport_top, viewport_height, bottom_margin)
    return ratio > 0 and ratio >= threshold
