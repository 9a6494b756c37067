"""
Ouroboros documentation tooling.

Provides:
- A span tokenizer and the Ouroboros grammar (ourodocs.core, ourodocs.languages)
- HTML and Pygments output (ourodocs.services)
- A PyQt6 documentation viewer (ourodocs.ui)
"""

from pathlib import Path

__version__ = "1.0.0"

RESOURCES_DIR = Path(__file__).parent / "resources"
GUIDE_PATH = RESOURCES_DIR / "guide.md"
