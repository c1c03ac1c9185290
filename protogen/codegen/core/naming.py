"""
Naming utilities for safe code generation.

Schema identifiers are kebab-case multi-word names. ``Name`` keeps the words
apart so every target convention can be rendered on demand, and
``NameSanitizer`` resolves clashes between those renderings and the target
language's reserved words.
"""

import re
from enum import Enum
from functools import total_ordering
from typing import Dict, Iterable, Set

from .errors import InvalidNameError

SEPARATOR = "-"

_PART_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # UserName
    KEBAB_CASE = "kebab"  # user-name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


def capitalize(word: str) -> str:
    """Upper-case the first letter and lower-case the rest."""
    return word[:1].upper() + word[1:].lower()


@total_ordering
class Name:
    """An identifier that can be rendered in any naming case.

    Built from the kebab-case spelling used in schema documents::

        >>> Name("user-profile").camel_case()
        'UserProfile'
    """

    __slots__ = ("_parts",)

    def __init__(self, text: str):
        if not isinstance(text, str):
            raise InvalidNameError(f"Name must be a string, got {type(text).__name__}")
        if any(char.isspace() for char in text):
            raise InvalidNameError(f"Name '{text}' contains spaces")
        parts = text.split(SEPARATOR)
        for part in parts:
            if not _PART_PATTERN.match(part):
                raise InvalidNameError(
                    f"Name '{text}' must consist of letters and digits separated by hyphens"
                )
        self._parts = tuple(part.lower() for part in parts)

    @classmethod
    def from_parts(cls, parts: Iterable[str]) -> "Name":
        """Construct a name from already separated words."""
        return cls(SEPARATOR.join(parts))

    @property
    def parts(self) -> tuple:
        return self._parts

    def snake_case(self) -> str:
        return "_".join(self._parts)

    def camel_case(self) -> str:
        return "".join(capitalize(part) for part in self._parts)

    def kebab_case(self) -> str:
        return SEPARATOR.join(self._parts)

    def screaming_snake_case(self) -> str:
        return self.snake_case().upper()

    def render(self, case: NamingCase) -> str:
        """Render the name in the given case style."""
        if case == NamingCase.SNAKE_CASE:
            return self.snake_case()
        elif case == NamingCase.CAMEL_CASE:
            return self.camel_case()
        elif case == NamingCase.KEBAB_CASE:
            return self.kebab_case()
        elif case == NamingCase.SCREAMING_SNAKE:
            return self.screaming_snake_case()
        raise ValueError(f"Unsupported naming case: {case}")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Name):
            return NotImplemented
        return self._parts == other._parts

    def __lt__(self, other) -> bool:
        if not isinstance(other, Name):
            return NotImplemented
        return self._parts < other._parts

    def __hash__(self) -> int:
        return hash(self._parts)

    def __setattr__(self, key, value):
        if hasattr(self, "_parts"):
            raise AttributeError("Name is immutable")
        object.__setattr__(self, key, value)

    def __str__(self) -> str:
        return self.kebab_case()

    def __repr__(self) -> str:
        return f"Name({self.kebab_case()!r})"


def snake_case(text: str) -> str:
    """Snake-case rendering of a kebab-case string."""
    return Name(text).snake_case()


def camel_case(text: str) -> str:
    """Camel-case rendering of a kebab-case string."""
    return Name(text).camel_case()


class NameSanitizer:
    """Turns rendered names into identifiers that are safe in the target language."""

    def __init__(self, reserved_words: Set[str] = None, builtin_types: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin names that must not be shadowed
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(
        self,
        name: Name,
        target_case: NamingCase = NamingCase.SNAKE_CASE,
        suffix_on_conflict: str = "_",
    ) -> str:
        """
        Render a name and make it safe for use in the target language.

        Args:
            name: Schema name to render
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for conflicts

        Returns:
            Rendered name, suffixed if it clashes with a reserved word
        """
        cache_key = f"{name.kebab_case()}_{target_case.value}_{suffix_on_conflict}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        rendered = name.render(target_case)
        final_name = self._resolve_conflicts(rendered, suffix_on_conflict)

        self._name_cache[cache_key] = final_name
        return final_name

    def _resolve_conflicts(self, name: str, suffix: str) -> str:
        """Resolve naming conflicts with reserved words and builtins."""
        if name in self.reserved_words or name in self.builtin_types:
            return f"{name}{suffix}"
        return name

    def is_reserved(self, name: str) -> bool:
        return name in self.reserved_words or name in self.builtin_types
