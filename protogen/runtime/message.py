"""Transport-level values exchanged between a client and a server."""

import json
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, List, Sequence
from urllib.parse import parse_qsl, urlencode


@dataclass(frozen=True)
class Message:
    """An outgoing call: verb, path and exactly one of query or body."""

    method: str
    path: str
    query: str = ""
    body: str = ""

    def to_url(self) -> str:
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path


@dataclass(frozen=True)
class Request:
    """An incoming call as seen by a server."""

    method: str
    path: str
    query: str = ""
    body: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_message(cls, message: Message) -> "Request":
        return cls(
            method=message.method,
            path=message.path,
            query=message.query,
            body=message.body,
        )


@dataclass(frozen=True)
class Response:
    status: HTTPStatus
    body: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        return json.loads(self.body)


def parse_query(query: str, sequences: Sequence[str] = ()) -> Dict[str, Any]:
    """Decode a query string; keys listed in ``sequences`` collect every value.

    A sequence key absent from the query decodes as an empty list.
    """
    result: Dict[str, Any] = {key: [] for key in sequences}
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key in sequences:
            result[key].append(value)
        else:
            result[key] = value
    return result


def build_query(data: Dict[str, Any]) -> str:
    """Encode a mapping as a query string, repeating keys of list values.

    Raises:
        ValueError: If a value is a mapping, or a list holding one.
    """
    items: List[tuple] = []
    for key, value in data.items():
        if value is None:
            continue
        values = value if isinstance(value, (list, tuple)) else [value]
        if any(isinstance(item, (dict, list, tuple)) for item in values):
            raise ValueError(f"Query value for '{key}' must be a scalar or a list of scalars")
        items.append((key, value))
    return urlencode(items, doseq=True)

