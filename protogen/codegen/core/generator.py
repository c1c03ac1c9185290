"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger
from .config import GeneratorConfig, load_config
from .errors import GeneratorError
from .paths import routes_to_paths
from .spec import Api, EnumRepr, Routes, StructRepr
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)


class GenerationMode(Enum):
    """What to generate from a document."""

    PROTOCOL = "protocol"  # full API
    ROUTES = "routes"  # route tree construction only
    PATHS = "paths"  # path parameter records only


Document = Union[str, Api, Routes]


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    # Indent width templates are written with; output is re-indented to indent_size
    source_indent = 4

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or load_config(self.language_name)
        self.warnings: List[str] = []
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            # Fallback to in-memory templates
            self._template_engine = create_template_engine()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.py')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate_api(self, api: Api) -> str:
        """
        Generate the complete protocol module for an API.

        Args:
            api: Decoded API document

        Returns:
            Generated code as a string
        """
        pass

    @abstractmethod
    def generate_routes(self, routes: Routes) -> str:
        """Generate the route tree construction for a routes document."""
        pass

    @abstractmethod
    def generate_paths(self, routes: Routes) -> str:
        """Generate one path parameter record per named route."""
        pass

    def generate(self, document: Document, mode: GenerationMode) -> str:
        """Decode ``document`` if needed and generate code for ``mode``."""
        self.warnings = []
        if mode == GenerationMode.PROTOCOL:
            api = Api.from_str(document) if isinstance(document, str) else document
            self.warnings.extend(self.validate_api(api))
            return self.generate_api(api)

        routes = Routes.from_str(document) if isinstance(document, str) else document
        if isinstance(routes, Api):
            routes = Routes(routes=routes.routes)
        if mode == GenerationMode.ROUTES:
            return self.generate_routes(routes)
        return self.generate_paths(routes)

    def validate_api(self, api: Api) -> List[str]:
        """
        Report suspicious but compilable constructs.

        Language generators can override this to add language-specific checks.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for type_def in api.types:
            if isinstance(type_def.container, StructRepr) and not type_def.container.members:
                warnings.append(f"Struct '{type_def.name}' has no members")
            elif isinstance(type_def.container, EnumRepr) and not type_def.container.values:
                warnings.append(f"Enum '{type_def.name}' has no values")

        used_paths = {method.request.path for method in api.methods}
        for path in routes_to_paths(api.routes):
            if path.name not in used_paths:
                logger.debug("Path '%s' is not used by any method", path.name)

        if not api.methods:
            warnings.append("API defines no methods")

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code, indented by ``indent_size`` and ending with
            exactly one newline
        """
        max_blank = self.config.custom.get("max_blank_lines", 2)
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= max_blank:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(self._reindent(stripped))

        return "\n".join(formatted_lines).strip("\n") + "\n"

    def _reindent(self, line: str) -> str:
        if self.config.indent_size == self.source_indent:
            return line
        content = line.lstrip(" ")
        levels, rest = divmod(len(line) - len(content), self.source_indent)
        return " " * (levels * self.config.indent_size + rest) + content

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def _document_metadata(document: Document) -> Dict[str, Any]:
    if isinstance(document, Api):
        return {
            "type_count": len(document.types),
            "path_count": len(routes_to_paths(document.routes)),
            "yield_count": len(document.yields),
            "reason_count": len(document.reasons),
            "method_count": len(document.methods),
        }
    if isinstance(document, Routes):
        return {"path_count": len(routes_to_paths(document.routes))}
    return {}


def generate_code(
    generator: CodeGenerator,
    document: Document,
    mode: Union[GenerationMode, str] = GenerationMode.PROTOCOL,
) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        document: Document text, or an already decoded ``Api``/``Routes``
        mode: What to generate

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    mode = GenerationMode(mode)
    logger.info("Generating %s code in %s mode", generator.language_name, mode.value)

    try:
        if isinstance(document, str):
            if mode == GenerationMode.PROTOCOL:
                document = Api.from_str(document)
            else:
                document = Routes.from_str(document)

        code = generator.generate(document, mode)
        formatted_code = generator.format_code(code)

    except (GeneratorError, TemplateError) as e:
        logger.debug("Generation aborted: %s", e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "mode": mode.value,
        **_document_metadata(document),
    }

    for warning in generator.warnings:
        logger.warning(warning)

    return GenerationResult(formatted_code, list(generator.warnings), metadata)
