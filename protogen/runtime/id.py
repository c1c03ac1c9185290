"""Opaque 12-byte identifier, carried on the wire as 24 hex digits."""

import os
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema


class Id:
    SIZE = 12

    __slots__ = ("_value",)

    def __init__(self, value: bytes):
        if not isinstance(value, bytes) or len(value) != self.SIZE:
            raise ValueError(f"Id must be exactly {self.SIZE} bytes")
        self._value = value

    @classmethod
    def generate(cls) -> "Id":
        return cls(os.urandom(cls.SIZE))

    @classmethod
    def from_str(cls, text: str) -> "Id":
        if len(text) != 2 * cls.SIZE:
            raise ValueError(f"Id must be {2 * cls.SIZE} hex digits, got {text!r}")
        try:
            return cls(bytes.fromhex(text))
        except ValueError:
            raise ValueError(f"Id must be {2 * cls.SIZE} hex digits, got {text!r}") from None

    def to_str(self) -> str:
        return self._value.hex()

    def to_bytes(self) -> bytes:
        return self._value

    def __eq__(self, other) -> bool:
        if not isinstance(other, Id):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return self.to_str()

    def __repr__(self) -> str:
        return f"Id({self.to_str()!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        from_str_schema = core_schema.chain_schema(
            [
                core_schema.str_schema(),
                core_schema.no_info_plain_validator_function(cls.from_str),
            ]
        )
        return core_schema.json_or_python_schema(
            json_schema=from_str_schema,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(cls), from_str_schema]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )
