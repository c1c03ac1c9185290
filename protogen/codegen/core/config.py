"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Code style settings
    indent_size: int = 4

    # Additional metadata
    add_comments: bool = True
    header_comment: str = "Generated by protogen. Do not edit."

    # Import path of the support package the generated code calls into
    runtime_module: str = "protogen.runtime"

    # Prepended to every route label; routes are unlabelled when None
    label_prefix: Optional[str] = None

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["python"] = {
            "indent_size": 4,
            "add_comments": True,
            "runtime_module": "protogen.runtime",
            "custom": {
                "max_blank_lines": 2,
            },
        }

    def get_config(
        self,
        language: str = "python",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        # Start with defaults
        base_config = json.loads(json.dumps(self._configs.get(language, {})))

        # Load from file if provided
        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        # Apply custom overrides
        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration from %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys land in the custom dict
        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def list_languages(self) -> List[str]:
        """Get list of languages with default configurations."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str) -> List[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings
        """
        warnings = []

        if config.indent_size < 1:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if language == "python":
            module_parts = config.runtime_module.split(".")
            if not all(part.isidentifier() for part in module_parts):
                warnings.append(f"Invalid runtime_module: {config.runtime_module}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "python",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)
