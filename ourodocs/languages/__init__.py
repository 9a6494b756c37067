"""
Bundled language definitions.
"""

from ourodocs.languages.ouroboros import OuroborosLanguage

BUILTIN_LANGUAGES = (
    OuroborosLanguage,
)

__all__ = [
    'OuroborosLanguage',
    'BUILTIN_LANGUAGES',
]
