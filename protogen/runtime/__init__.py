"""
Support code for modules generated by protogen.

Generated modules import this package as ``runtime`` and refer to every
name through it.
"""

from .id import Id
from .message import Message, Request, Response, build_query, parse_query
from .method import Method
from .router import MissingPathParam, Route, RouteMatch
from .validation import ValidationResult, validate_email

__all__ = [
    "Id",
    "Message",
    "Request",
    "Response",
    "build_query",
    "parse_query",
    "Method",
    "MissingPathParam",
    "Route",
    "RouteMatch",
    "ValidationResult",
    "validate_email",
]
