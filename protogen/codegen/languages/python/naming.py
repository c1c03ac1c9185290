"""
Python-specific naming utilities and sanitization.

Handles Python reserved words and names that generated classes must not
shadow.
"""

from pydantic import BaseModel

from ...core.naming import NameSanitizer

# Python reserved keywords
PYTHON_RESERVED_WORDS = {
    "False",
    "None",
    "True",
    "and",
    "as",
    "assert",
    "async",
    "await",
    "break",
    "class",
    "continue",
    "def",
    "del",
    "elif",
    "else",
    "except",
    "finally",
    "for",
    "from",
    "global",
    "if",
    "import",
    "in",
    "is",
    "lambda",
    "nonlocal",
    "not",
    "or",
    "pass",
    "raise",
    "return",
    "try",
    "while",
    "with",
    "yield",
}

# Builtins that appear in generated annotations, plus method receivers
PYTHON_BUILTIN_TYPES = {
    "int",
    "float",
    "str",
    "bool",
    "list",
    "tuple",
    "self",
    "cls",
}

# Public attributes every generated model inherits
PYDANTIC_MODEL_ATTRIBUTES = {name for name in dir(BaseModel) if not name.startswith("_")}


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer for module-level Python names."""
    return NameSanitizer(PYTHON_RESERVED_WORDS, PYTHON_BUILTIN_TYPES)


def create_field_sanitizer() -> NameSanitizer:
    """Create a name sanitizer for fields and parameters of generated models."""
    return NameSanitizer(
        PYTHON_RESERVED_WORDS, PYTHON_BUILTIN_TYPES | PYDANTIC_MODEL_ATTRIBUTES
    )
