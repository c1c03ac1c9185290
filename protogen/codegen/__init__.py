"""
protogen code generation module.

Compiles API specifications into source code for the registered languages.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core.config import ConfigError, GeneratorConfig, ConfigManager, load_config
from .core.errors import (
    GeneratorError,
    InvalidNameError,
    SchemaError,
    StaticRuleError,
    UnresolvedReferenceError,
)
from .core.generator import CodeGenerator, GenerationMode, GenerationResult, generate_code
from .core.spec import Api, Routes
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    is_language_supported,
    list_all_language_info,
    list_supported_languages,
)
from ..utils import load_spec_from_file


def generate_from_file(
    path: Union[str, Path],
    mode: Union[GenerationMode, str] = GenerationMode.PROTOCOL,
    language: str = "python",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
) -> GenerationResult:
    """
    Generate code from a specification file.

    Args:
        path: YAML document describing an API or a route tree
        mode: What to generate
        language: Target language name
        config: Generator configuration, dict, or config file path

    Returns:
        GenerationResult with generated code
    """
    text = load_spec_from_file(path)
    generator = get_generator(language, config)
    return generate_code(generator, text, mode)


def quick_generate(text: str, mode: Union[GenerationMode, str] = "protocol", **options) -> str:
    """
    Generate Python code from specification text.

    Raises:
        RuntimeError: If generation fails
    """
    result = generate_code(get_generator("python", options), text, mode)

    if result.success:
        return result.code
    raise RuntimeError(result.error_message)


# Export main interfaces
__all__ = [
    "Api",
    "Routes",
    "CodeGenerator",
    "GenerationMode",
    "GenerationResult",
    "GeneratorConfig",
    "ConfigManager",
    "GeneratorRegistry",
    "GeneratorError",
    "SchemaError",
    "InvalidNameError",
    "UnresolvedReferenceError",
    "StaticRuleError",
    "ConfigError",
    "RegistryError",
    "generate_code",
    "generate_from_file",
    "quick_generate",
    "get_generator",
    "get_language_info",
    "is_language_supported",
    "list_all_language_info",
    "list_supported_languages",
    "load_config",
]
