"""
Core code generation components.

Provides the specification model and the base classes and utilities used by
all language generators.
"""

from .buffer import CodeBuffer
from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .errors import (
    GeneratorError,
    InvalidNameError,
    SchemaError,
    StaticRuleError,
    UnresolvedReferenceError,
)
from .generator import CodeGenerator, GenerationMode, GenerationResult, generate_code
from .naming import Name, NameSanitizer, NamingCase
from .paths import Path, routes_to_paths
from .resolver import SymbolTable, find_path, find_reason, find_type, find_yield
from .spec import Api, Routes
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GenerationMode",
    "GenerationResult",
    "generate_code",
    # Errors
    "GeneratorError",
    "SchemaError",
    "InvalidNameError",
    "UnresolvedReferenceError",
    "StaticRuleError",
    # Specification model
    "Api",
    "Routes",
    "Path",
    "routes_to_paths",
    # Resolution
    "SymbolTable",
    "find_type",
    "find_yield",
    "find_reason",
    "find_path",
    # Naming utilities - language-agnostic
    "Name",
    "NameSanitizer",
    "NamingCase",
    # Emission
    "CodeBuffer",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
