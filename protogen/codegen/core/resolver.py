"""
Name resolution over the flat definition lists of an API document.

Definitions refer to each other by bare name. A reference that does not
resolve is an authoring defect and aborts generation.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, TypeVar

from .errors import UnresolvedReferenceError
from .naming import Name
from .paths import Path, routes_to_paths
from .spec import Api, Reason, TypeDef, Yield

T = TypeVar("T")


def _find(kind: str, name: Name, items: Iterable[T]) -> T:
    for item in items:
        if item.name == name:
            return item
    raise UnresolvedReferenceError(kind, name)


def find_type(name: Name, types: Iterable[TypeDef]) -> TypeDef:
    return _find("type", name, types)


def find_yield(name: Name, yields: Iterable[Yield]) -> Yield:
    return _find("yield", name, yields)


def find_reason(name: Name, reasons: Iterable[Reason]) -> Reason:
    return _find("reason", name, reasons)


def find_path(name: Name, paths: Iterable[Path]) -> Path:
    return _find("path", name, paths)


def _index(kind: str, items: Iterable[T], warnings: List[str]) -> Dict[Name, T]:
    index = {}
    for item in items:
        if item.name in index:
            warnings.append(
                f"Duplicate {kind} '{item.name}'; the first definition is used"
            )
            continue
        index[item.name] = item
    return index


@dataclass
class SymbolTable:
    """Name to definition maps built once per generation run.

    Lookups behave exactly like the linear ``find_*`` functions: the first
    definition of a name wins and a miss raises ``UnresolvedReferenceError``.
    """

    types: Dict[Name, TypeDef] = field(default_factory=dict)
    yields: Dict[Name, Yield] = field(default_factory=dict)
    reasons: Dict[Name, Reason] = field(default_factory=dict)
    paths: Dict[Name, Path] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, api: Api, paths: Optional[List[Path]] = None) -> "SymbolTable":
        if paths is None:
            paths = routes_to_paths(api.routes)
        warnings = []
        return cls(
            types=_index("type", api.types, warnings),
            yields=_index("yield", api.yields, warnings),
            reasons=_index("reason", api.reasons, warnings),
            paths=_index("path", paths, warnings),
            warnings=warnings,
        )

    def _lookup(self, kind: str, table: Dict[Name, T], name: Name) -> T:
        try:
            return table[name]
        except KeyError:
            raise UnresolvedReferenceError(kind, name) from None

    def find_type(self, name: Name) -> TypeDef:
        return self._lookup("type", self.types, name)

    def find_yield(self, name: Name) -> Yield:
        return self._lookup("yield", self.yields, name)

    def find_reason(self, name: Name) -> Reason:
        return self._lookup("reason", self.reasons, name)

    def find_path(self, name: Name) -> Path:
        return self._lookup("path", self.paths, name)
