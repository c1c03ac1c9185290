"""
Python code generator module.

Generates pydantic-based Python modules from API specifications.
"""

from .config import PythonConfig, render_imports
from .generator import PythonGenerator, create_python_generator
from .naming import create_field_sanitizer, create_python_sanitizer
from .validation import build_validator

__all__ = [
    # Generator
    "PythonGenerator",
    "create_python_generator",
    # Naming
    "create_python_sanitizer",
    "create_field_sanitizer",
    # Configuration
    "PythonConfig",
    "render_imports",
    # Validation
    "build_validator",
]
