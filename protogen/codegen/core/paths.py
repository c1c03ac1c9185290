"""
Flattening of the route tree into addressable paths.
"""

from dataclasses import dataclass, field
from typing import List

from .naming import Name
from .spec import Route, Segment


@dataclass(frozen=True)
class Path:
    """A named route and the segments leading from the root to it."""

    name: Name
    segments: List[Segment] = field(default_factory=list)

    @property
    def params(self) -> List[Name]:
        """Names of the captured segments, in order."""
        return [segment.name for segment in self.segments if not segment.is_exact]


def routes_to_paths(routes: List[Route]) -> List[Path]:
    """
    Collect one ``Path`` per named route.

    Walks the tree depth-first in declaration order; paths come out in the
    order their names are first encountered.
    """
    paths: List[Path] = []
    stack: List[Segment] = []

    def visit(route: Route):
        stack.append(route.segment)
        if route.name is not None:
            paths.append(Path(name=route.name, segments=list(stack)))
        for child in route.routes:
            visit(child)
        stack.pop()

    for route in routes:
        visit(route)

    return paths
