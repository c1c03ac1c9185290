"""
Python-specific configuration and type mappings.

Provides the mapping from schema types to Python annotations and the
import table of generated modules.
"""

from typing import Dict, List, Optional, Set, Tuple

from ...core.spec import HttpResponse, SimpleType
from .naming import PYTHON_BUILTIN_TYPES, PYTHON_RESERVED_WORDS

# Python type mappings
PYTHON_TYPE_MAP = {
    SimpleType.U8: "int",
    SimpleType.U32: "int",
    SimpleType.I32: "int",
    SimpleType.F32: "float",
    SimpleType.F64: "float",
    SimpleType.STR: "str",
    SimpleType.ID: "runtime.Id",
}

STATUS_MAP = {response: f"HTTPStatus.{response.status.name}" for response in HttpResponse}

# Name -> (import group, module); a module of None means ``import <name>``
PYTHON_IMPORT_MAP: Dict[str, Tuple[int, Optional[str]]] = {
    "json": (0, None),
    "Enum": (0, "enum"),
    "HTTPStatus": (0, "http"),
    "Annotated": (0, "typing"),
    "Literal": (0, "typing"),
    "Mapping": (0, "typing"),
    "Optional": (0, "typing"),
    "Union": (0, "typing"),
    "BaseModel": (1, "pydantic"),
    "ConfigDict": (1, "pydantic"),
    "Field": (1, "pydantic"),
    "RootModel": (1, "pydantic"),
}

RUNTIME_ALIAS = "runtime"

# Module-level names a generated definition must not shadow
IMPORTED_NAMES = (
    set(PYTHON_IMPORT_MAP)
    | {RUNTIME_ALIAS, "annotations"}
    | PYTHON_RESERVED_WORDS
    | PYTHON_BUILTIN_TYPES
)


class PythonConfig:
    """Python-specific configuration."""

    def __init__(self, **kwargs):
        """Initialize Python configuration from the ``custom`` settings."""
        # Reject fields absent from the schema instead of ignoring them
        self.extra_forbid = kwargs.get("extra_forbid", False)

        # Make generated records immutable
        self.frozen_models = kwargs.get("frozen_models", False)

        # Module providing the types declared as external
        self.external_module = kwargs.get("external_module")

    def model_config_items(self, has_alias: bool) -> List[str]:
        """Arguments of ``ConfigDict`` for a record, empty when none are needed."""
        items = []
        if has_alias:
            items.append("populate_by_name=True")
        if self.extra_forbid:
            items.append('extra="forbid"')
        if self.frozen_models:
            items.append("frozen=True")
        return items

    def get_python_type(self, simple_type: SimpleType) -> str:
        return PYTHON_TYPE_MAP[simple_type]


def render_imports(used: Set[str], runtime_module: Optional[str]) -> List[str]:
    """
    Build the import block for the names a module uses.

    Returns:
        Import lines, grouped standard library, third party, runtime, with an
        empty string between groups
    """
    groups: Dict[int, Dict[Optional[str], Set[str]]] = {}
    for name in used:
        group, module = PYTHON_IMPORT_MAP[name]
        groups.setdefault(group, {}).setdefault(module, set()).add(name)

    blocks = []
    for group in sorted(groups):
        modules = groups[group]
        lines = [f"import {name}" for name in sorted(modules.get(None, ()))]
        for module in sorted(m for m in modules if m is not None):
            lines.append(f"from {module} import {', '.join(sorted(modules[module]))}")
        blocks.append(lines)

    if runtime_module:
        blocks.append([f"import {runtime_module} as {RUNTIME_ALIAS}"])

    result = []
    for block in blocks:
        if result:
            result.append("")
        result.extend(block)
    return result
