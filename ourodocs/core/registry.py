"""
Registry of language grammars.

A registry is an ordinary object owned by whoever highlights code; there is
no process-wide table. Registering a language returns a handle carrying the
grammar, which callers may also pass straight to the tokenizer.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type

from ourodocs.core.grammar import Grammar, LanguageDefinition


class UnknownLanguageError(LookupError):
    """Raised when a language name is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown language: {name!r}")
        self.name = name


@dataclass(frozen=True)
class LanguageHandle:
    """A registered language."""
    name: str
    display_name: str
    aliases: Tuple[str, ...]
    file_extensions: Tuple[str, ...]
    grammar: Grammar


class GrammarRegistry:
    """Maps language names, aliases and file extensions to grammars."""

    def __init__(self):
        self._languages: Dict[str, LanguageHandle] = {}
        self._extension_map: Dict[str, str] = {}

    def register(self, language_class: Type[LanguageDefinition]) -> LanguageHandle:
        """
        Register a language definition.

        Re-registering an existing name or alias replaces it.

        Returns:
            Handle for the registered language
        """
        handle = LanguageHandle(
            name=language_class.name.lower(),
            display_name=language_class.display_name,
            aliases=tuple(alias.lower() for alias in language_class.aliases),
            file_extensions=tuple(ext.lower() for ext in language_class.file_extensions),
            grammar=language_class.get_grammar(),
        )

        for key in (handle.name,) + handle.aliases:
            if key in self._languages:
                logging.warning(f"GrammarRegistry - Replacing grammar registered as '{key}'")
            self._languages[key] = handle

        for ext in handle.file_extensions:
            self._extension_map[ext] = handle.name

        logging.debug(
            f"GrammarRegistry - Registered '{handle.name}' "
            f"(aliases: {', '.join(handle.aliases) or 'none'})"
        )
        return handle

    def get(self, name: str) -> Optional[LanguageHandle]:
        """Get a language by name or alias."""
        return self._languages.get(name.lower())

    def require(self, name: str) -> LanguageHandle:
        """Get a language by name or alias, raising if it is unknown."""
        handle = self.get(name)
        if handle is None:
            raise UnknownLanguageError(name)
        return handle

    def get_for_file(self, filename: str) -> Optional[LanguageHandle]:
        """Get a language based on a file's extension."""
        _, ext = os.path.splitext(filename)
        name = self._extension_map.get(ext.lower())
        if name:
            return self._languages.get(name)
        return None

    def names(self) -> List[str]:
        """Get all registered names and aliases."""
        return list(self._languages.keys())

    def extensions(self) -> List[str]:
        """Get all supported file extensions."""
        return list(self._extension_map.keys())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._languages


def create_default_registry() -> GrammarRegistry:
    """Create a registry with the bundled languages registered."""
    from ourodocs.languages import BUILTIN_LANGUAGES

    registry = GrammarRegistry()
    for language_class in BUILTIN_LANGUAGES:
        registry.register(language_class)
    return registry
