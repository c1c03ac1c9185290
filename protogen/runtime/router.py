"""
Tree of served resources.

``build_routes`` in generated code returns a ``Route`` built with the
chaining constructors below; servers use ``Route.match`` to find the view
for a request path and ``Route.labels`` to rebuild paths from labels.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple


class MissingPathParam(LookupError):
    """A path parameter required to build a path was not supplied."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing path parameter '{name}'")


class SegmentKind(Enum):
    INDEX = "index"
    EXACT = "exact"
    PARAM = "param"


@dataclass
class RouteMatch:
    route: "Route"
    params: Dict[str, str]

    @property
    def view(self) -> Any:
        return self.route.view


class Route:
    """A node of the route tree, built with chained calls."""

    def __init__(self, kind: SegmentKind, name: str = ""):
        self.kind = kind
        self.name = name
        self.view: Any = None
        self.label: Optional[str] = None
        self.routes: List[Route] = []

    @classmethod
    def index(cls) -> "Route":
        return cls(SegmentKind.INDEX)

    @classmethod
    def exact(cls, name: str) -> "Route":
        return cls(SegmentKind.EXACT, name)

    @classmethod
    def param(cls, name: str) -> "Route":
        return cls(SegmentKind.PARAM, name)

    def with_view(self, view: Any) -> "Route":
        self.view = view
        return self

    def with_label(self, label: str) -> "Route":
        self.label = label
        return self

    def with_routes(self, routes: List["Route"]) -> "Route":
        self.routes = list(routes)
        return self

    def _match_segment(self, segment: str) -> Optional[Dict[str, str]]:
        if self.kind is SegmentKind.EXACT:
            return {} if segment == self.name else None
        if self.kind is SegmentKind.PARAM:
            return {self.name: segment}
        return None

    def match(self, path: str) -> Optional[RouteMatch]:
        """Find the node serving ``path``; exact segments win over parameters."""
        segments = [segment for segment in path.split("/") if segment]
        return self._match(segments, {})

    def _match(self, segments: List[str], params: Dict[str, str]) -> Optional[RouteMatch]:
        if not segments:
            if self.view is None:
                return None
            return RouteMatch(route=self, params=params)

        head, rest = segments[0], segments[1:]
        candidates = sorted(self.routes, key=lambda route: route.kind is not SegmentKind.EXACT)
        for child in candidates:
            captured = child._match_segment(head)
            if captured is None:
                continue
            found = child._match(rest, {**params, **captured})
            if found is not None:
                return found
        return None

    def walk(self) -> Iterator[Tuple["Route", List["Route"]]]:
        """Yield every node with the nodes leading to it, pre-order."""
        stack: List[Route] = []

        def visit(route):
            stack.append(route)
            yield route, list(stack)
            for child in route.routes:
                yield from visit(child)
            stack.pop()

        yield from visit(self)

    def labels(self) -> Dict[str, List["Route"]]:
        """Map each label to the nodes from the root to the labelled node."""
        return {route.label: trail for route, trail in self.walk() if route.label is not None}

    def path_for(self, label: str, params: Optional[Mapping[str, str]] = None) -> str:
        """Rebuild the path of a labelled node, filling in its parameters."""
        params = params or {}
        trail = self.labels()[label]
        parts = []
        for route in trail:
            if route.kind is SegmentKind.EXACT:
                parts.append(route.name)
            elif route.kind is SegmentKind.PARAM:
                if route.name not in params:
                    raise MissingPathParam(route.name)
                parts.append(params[route.name])
        return "/" + "/".join(parts)

    def __repr__(self) -> str:
        return f"Route({self.kind.value}, {self.name!r}, routes={len(self.routes)})"
