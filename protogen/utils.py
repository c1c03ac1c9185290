"""Utility functions for loading specification documents.

This module reads YAML API descriptions from disk with error handling
that names the offending file.
"""

from pathlib import Path
from typing import Union

from .logging_config import get_logger

logger = get_logger(__name__)

SPEC_SUFFIXES = {".yaml", ".yml"}


class SpecLoaderError(Exception):
    """Custom exception for specification loading errors."""

    pass


def load_spec_from_file(file_path: Union[str, Path]) -> str:
    """Load the text of a specification file.

    Args:
        file_path: Path to the YAML document.

    Returns:
        The document text; decoding happens in the generator.

    Raises:
        SpecLoaderError: If the file is missing or cannot be read.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load specification from file: %s", file_path)

    if not file_path.is_file():
        raise SpecLoaderError(f"File not found: {file_path}")

    if file_path.suffix.lower() not in SPEC_SUFFIXES:
        logger.warning("File does not have a YAML extension: %s", file_path)

    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SpecLoaderError(f"Error reading file {file_path}: {e}") from e

    logger.info("Loaded specification from %s", file_path)
    return text
