"""Binding of the generated types that make up one API call."""

from typing import ClassVar, Type

from .message import Message, Request


class Method:
    """Groups the path parameters, request and response types of a call.

    Generated subclasses fill in the class attributes.
    """

    name: ClassVar[str]
    http_method: ClassVar[str]
    path_params: ClassVar[Type]
    request: ClassVar[Type]
    response: ClassVar[Type]

    @classmethod
    def build_message(cls, params, request) -> Message:
        """Client side: turn path parameters and a request into a message."""
        return request.to_message(params)

    @classmethod
    def parse_request(cls, request: Request):
        """Server side: decode the request type from an incoming request."""
        return cls.request.from_request(request)

    @classmethod
    def parse_params(cls, params):
        """Server side: build the path parameters captured by the router."""
        return cls.path_params.new_from_map(params)
