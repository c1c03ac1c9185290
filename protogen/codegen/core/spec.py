"""
Core specification representation for code generation.

Decodes an API description document (YAML) into a normalized internal format
that generators can work with consistently, and encodes it back into the
same document shape.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Set, Union

import yaml

from .errors import SchemaError
from .naming import Name

# -------------------------------------------------------------------------------------------------
# Common definitions


class HttpMethod(Enum):
    """HTTP verbs an API method can use."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"

    def to_str(self) -> str:
        return self.value.upper()

    @property
    def uses_query(self) -> bool:
        """GET requests carry their arguments in the query string."""
        return self is HttpMethod.GET


class HttpResponse(Enum):
    """Closed set of response codes a yield or reason case may use."""

    OK = "200-ok"
    CREATED = "201-created"
    BAD_REQUEST = "400-bad-request"
    UNAUTHORIZED = "401-unauthorized"
    FORBIDDEN = "403-forbidden"
    NOT_FOUND = "404-not-found"
    CONFLICT = "409-conflict"
    INTERNAL_SERVER_ERROR = "500-internal-server-error"

    @property
    def status(self) -> HTTPStatus:
        return HTTPStatus[self.name]


# -------------------------------------------------------------------------------------------------
# Validation


class Check(Enum):
    """Predefined checks of a value."""

    EMAIL = "email"

    def get_error_name(self) -> Name:
        return Name.from_parts(["email"])


class ConditionKind(Enum):
    """Parametrized bounds of a value."""

    LE = "le"
    GE = "ge"
    LEN_EQ = "len_eq"
    LEN_LE = "len_le"
    LEN_GE = "len_ge"

    @property
    def is_length(self) -> bool:
        return self in (ConditionKind.LEN_EQ, ConditionKind.LEN_LE, ConditionKind.LEN_GE)


_CONDITION_ERROR_NAMES = {
    ConditionKind.LE: ("too", "big"),
    ConditionKind.GE: ("too", "small"),
    ConditionKind.LEN_EQ: ("wrong", "length"),
    ConditionKind.LEN_LE: ("too", "long"),
    ConditionKind.LEN_GE: ("too", "short"),
}


@dataclass(frozen=True)
class Condition:
    """A bound a value must satisfy, e.g. ``le: 10``."""

    kind: ConditionKind
    value: Union[int, float]

    def get_error_name(self) -> Name:
        return Name.from_parts(_CONDITION_ERROR_NAMES[self.kind])

    def to_dict(self) -> Dict[str, Any]:
        return {self.kind.value: self.value}


@dataclass(frozen=True)
class Validation:
    """Checks and conditions attached to a simple type."""

    checks: List[Check] = field(default_factory=list)
    conditions: List[Condition] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        if self.checks:
            result["checks"] = [check.value for check in self.checks]
        if self.conditions:
            result["conditions"] = [condition.to_dict() for condition in self.conditions]
        return result


# -------------------------------------------------------------------------------------------------
# Types


class SimpleType(Enum):
    """Primitive wire types."""

    U8 = "u8"
    U32 = "u32"
    I32 = "i32"
    F32 = "f32"
    F64 = "f64"
    STR = "string"
    ID = "id"

    @property
    def is_integer(self) -> bool:
        return self in (SimpleType.U8, SimpleType.U32, SimpleType.I32)

    @property
    def is_float(self) -> bool:
        return self in (SimpleType.F32, SimpleType.F64)

    @property
    def is_numeric(self) -> bool:
        return self.is_integer or self.is_float


SIMPLE_TYPE_KEYWORDS = {simple.value for simple in SimpleType}


class ContainerType(Enum):
    """Alternative ways of holding a member's type."""

    VECTOR = "vector"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class Member:
    """A named, typed field of a record, request, yield or reason case."""

    name: Name
    type: Union[SimpleType, Name]
    container: Optional[ContainerType] = None

    @property
    def is_simple(self) -> bool:
        return self.container is None and isinstance(self.type, SimpleType)

    @property
    def is_defined(self) -> bool:
        return self.container is None and isinstance(self.type, Name)

    @property
    def is_contained(self) -> bool:
        return self.container is not None

    def to_dict(self) -> Dict[str, Any]:
        result = {"name": str(self.name), "type": _type_text(self.type)}
        if self.container is not None:
            result["container"] = self.container.value
        return result


@dataclass(frozen=True)
class SimpleRepr:
    simple_type: SimpleType
    validation: Optional[Validation] = None

    tag = "simple"

    def to_dict(self) -> Dict[str, Any]:
        result = {"repr": self.tag, "type": self.simple_type.value}
        if self.validation is not None:
            result["validation"] = self.validation.to_dict()
        return result


@dataclass(frozen=True)
class ExternalRepr:
    """A hand-written type; nothing is generated for it."""

    tag = "external"

    def to_dict(self) -> Dict[str, Any]:
        return {"repr": self.tag}


@dataclass(frozen=True)
class StructRepr:
    members: List[Member] = field(default_factory=list)

    tag = "struct"

    def to_dict(self) -> Dict[str, Any]:
        return {"repr": self.tag, "members": [m.to_dict() for m in self.members]}


@dataclass(frozen=True)
class UnionRepr:
    """Only one member is present at a time."""

    members: List[Member] = field(default_factory=list)

    tag = "union"

    def to_dict(self) -> Dict[str, Any]:
        return {"repr": self.tag, "members": [m.to_dict() for m in self.members]}


@dataclass(frozen=True)
class EnumRepr:
    values: List[Name] = field(default_factory=list)

    tag = "enum"

    def to_dict(self) -> Dict[str, Any]:
        return {"repr": self.tag, "values": [str(value) for value in self.values]}


TypeRepr = Union[SimpleRepr, ExternalRepr, StructRepr, UnionRepr, EnumRepr]


@dataclass(frozen=True)
class TypeDef:
    """A named type and its wire representation."""

    name: Name
    container: TypeRepr

    def dependencies(self) -> List[Name]:
        """Names of the types this definition refers to."""
        members = getattr(self.container, "members", [])
        return [member.type for member in members if isinstance(member.type, Name)]

    def to_dict(self) -> Dict[str, Any]:
        return {"name": str(self.name), "container": self.container.to_dict()}


# -------------------------------------------------------------------------------------------------
# Yields and reasons


@dataclass(frozen=True)
class Yield:
    """A successful result."""

    name: Name
    code: HttpResponse
    args: List[Member] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = {"name": str(self.name), "code": self.code.value}
        if self.args:
            result["args"] = [arg.to_dict() for arg in self.args]
        return result


@dataclass(frozen=True)
class Case:
    """One alternative of a reason."""

    name: Name
    code: HttpResponse
    args: List[Member] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = {"name": str(self.name), "code": self.code.value}
        if self.args:
            result["args"] = [arg.to_dict() for arg in self.args]
        return result


@dataclass(frozen=True)
class Reason:
    """A reason of failure or error."""

    name: Name
    cases: List[Case] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": str(self.name), "cases": [case.to_dict() for case in self.cases]}


# -------------------------------------------------------------------------------------------------
# Routes


class SegmentKind(Enum):
    EXACT = "exact"
    CAPTURED = "string"


@dataclass(frozen=True)
class Segment:
    """A literal (``exact``) or captured (``string``) part of a URL path."""

    kind: SegmentKind
    name: Name

    @classmethod
    def exact(cls, name: Union[str, Name]) -> "Segment":
        return cls(SegmentKind.EXACT, _as_name(name))

    @classmethod
    def captured(cls, name: Union[str, Name]) -> "Segment":
        return cls(SegmentKind.CAPTURED, _as_name(name))

    @property
    def is_exact(self) -> bool:
        return self.kind is SegmentKind.EXACT

    def to_dict(self) -> Dict[str, Any]:
        return {self.kind.value: str(self.name)}


@dataclass(frozen=True)
class Route:
    """A node of the route tree; named nodes are addressable endpoints."""

    segment: Segment
    name: Optional[Name] = None
    routes: List["Route"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        if self.name is not None:
            result["name"] = str(self.name)
        result.update(self.segment.to_dict())
        if self.routes:
            result["routes"] = [route.to_dict() for route in self.routes]
        return result


# -------------------------------------------------------------------------------------------------
# Methods


@dataclass(frozen=True)
class Request:
    method: HttpMethod
    path: Name
    args: List[Member] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "path": str(self.path),
            "args": [arg.to_dict() for arg in self.args],
        }


@dataclass(frozen=True)
class Response:
    success: Name
    error: Name
    failure: Optional[Name] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"success": str(self.success)}
        if self.failure is not None:
            result["failure"] = str(self.failure)
        result["error"] = str(self.error)
        return result


@dataclass(frozen=True)
class Method:
    """An API call: the request shape, its path and its possible responses."""

    name: Name
    request: Request
    response: Response

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": str(self.name),
            "request": self.request.to_dict(),
            "response": self.response.to_dict(),
        }


# -------------------------------------------------------------------------------------------------
# Documents


@dataclass(frozen=True)
class Routes:
    """A routes-only document: the index node and its sub-routes."""

    routes: List[Route] = field(default_factory=list)
    name: Optional[Name] = None
    label_prefix: Optional[str] = None

    @classmethod
    def from_str(cls, text: str) -> "Routes":
        return cls.from_dict(_load_yaml(text))

    @classmethod
    def from_dict(cls, data: Any) -> "Routes":
        return decode_routes(data)

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        if self.name is not None:
            result["name"] = str(self.name)
        if self.label_prefix is not None:
            result["label_prefix"] = self.label_prefix
        result["routes"] = [route.to_dict() for route in self.routes]
        return result


@dataclass(frozen=True)
class Api:
    """A complete API definition."""

    types: List[TypeDef] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)
    yields: List[Yield] = field(default_factory=list)
    reasons: List[Reason] = field(default_factory=list)
    methods: List[Method] = field(default_factory=list)

    @classmethod
    def from_str(cls, text: str) -> "Api":
        return cls.from_dict(_load_yaml(text))

    @classmethod
    def from_dict(cls, data: Any) -> "Api":
        return decode_api(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "types": [tipe.to_dict() for tipe in self.types],
            "routes": [route.to_dict() for route in self.routes],
            "yields": [yeeld.to_dict() for yeeld in self.yields],
            "reasons": [reason.to_dict() for reason in self.reasons],
            "methods": [method.to_dict() for method in self.methods],
        }

    def to_str(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


# -------------------------------------------------------------------------------------------------
# Decoding


def _type_text(tipe: Union[SimpleType, Name]) -> str:
    return tipe.value if isinstance(tipe, SimpleType) else str(tipe)


def _as_name(value: Union[str, Name]) -> Name:
    return value if isinstance(value, Name) else Name(value)


def _load_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid YAML: {e}") from e


def _expect_mapping(data: Any, context: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise SchemaError(f"{context}: expected a mapping, got {type(data).__name__}")
    return data


def _expect_list(data: Any, context: str) -> List[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise SchemaError(f"{context}: expected a list, got {type(data).__name__}")
    return data


def _check_keys(
    data: Dict[str, Any], required: Set[str], optional: Set[str], context: str
) -> None:
    missing = sorted(required - set(data))
    if missing:
        raise SchemaError(f"{context}: missing field '{missing[0]}'")
    unknown = sorted(set(data) - required - optional, key=str)
    if unknown:
        raise SchemaError(f"{context}: unknown field '{unknown[0]}'")


def _decode_name(data: Any, context: str) -> Name:
    if not isinstance(data, str):
        raise SchemaError(f"{context}: expected a name, got {data!r}")
    try:
        return Name(data)
    except SchemaError as e:
        raise type(e)(f"{context}: {e}") from e


def _decode_enum(enum_cls, data: Any, context: str):
    try:
        return enum_cls(data)
    except ValueError:
        allowed = ", ".join(item.value for item in enum_cls)
        raise SchemaError(f"{context}: unknown value {data!r} (expected one of: {allowed})")


def _decode_number(data: Any, context: str) -> Union[int, float]:
    if isinstance(data, bool) or not isinstance(data, (int, float)):
        raise SchemaError(f"{context}: expected a number, got {data!r}")
    if not math.isfinite(data):
        raise SchemaError(f"{context}: expected a finite number, got {data!r}")
    return data


def _decode_length(data: Any, context: str) -> int:
    if isinstance(data, bool) or not isinstance(data, int) or data < 0:
        raise SchemaError(f"{context}: expected a non-negative integer, got {data!r}")
    return data


def decode_member(data: Any, context: str = "member") -> Member:
    mapping = _expect_mapping(data, context)
    _check_keys(mapping, {"name", "type"}, {"container"}, context)
    name = _decode_name(mapping["name"], f"{context}.name")

    type_text = mapping["type"]
    if not isinstance(type_text, str):
        raise SchemaError(f"{context}.type: expected a type name, got {type_text!r}")
    if type_text in SIMPLE_TYPE_KEYWORDS:
        tipe = SimpleType(type_text)
    else:
        tipe = _decode_name(type_text, f"{context}.type")

    container = None
    if "container" in mapping:
        container = _decode_enum(ContainerType, mapping["container"], f"{context}.container")

    return Member(name=name, type=tipe, container=container)


def decode_members(data: Any, context: str) -> List[Member]:
    return [
        decode_member(item, f"{context}[{index}]")
        for index, item in enumerate(_expect_list(data, context))
    ]


def decode_condition(data: Any, context: str) -> Condition:
    mapping = _expect_mapping(data, context)
    if len(mapping) != 1:
        raise SchemaError(f"{context}: a condition must have exactly one kind")
    ((key, value),) = mapping.items()
    kind = _decode_enum(ConditionKind, key, context)
    if kind.is_length:
        return Condition(kind, _decode_length(value, f"{context}.{key}"))
    return Condition(kind, _decode_number(value, f"{context}.{key}"))


def decode_validation(data: Any, context: str) -> Validation:
    mapping = _expect_mapping(data, context)
    _check_keys(mapping, set(), {"checks", "conditions"}, context)
    checks_context = f"{context}.checks"
    checks = [
        _decode_enum(Check, item, f"{checks_context}[{index}]")
        for index, item in enumerate(_expect_list(mapping.get("checks"), checks_context))
    ]
    conditions_context = f"{context}.conditions"
    conditions = [
        decode_condition(item, f"{conditions_context}[{index}]")
        for index, item in enumerate(
            _expect_list(mapping.get("conditions"), conditions_context)
        )
    ]
    return Validation(checks=checks, conditions=conditions)


def decode_type_repr(data: Any, context: str) -> TypeRepr:
    mapping = _expect_mapping(data, context)
    if "repr" not in mapping:
        raise SchemaError(f"{context}: missing field 'repr'")
    tag = mapping["repr"]

    if tag == SimpleRepr.tag:
        _check_keys(mapping, {"repr", "type"}, {"validation"}, context)
        simple_type = _decode_enum(SimpleType, mapping["type"], f"{context}.type")
        validation = None
        if mapping.get("validation") is not None:
            validation = decode_validation(mapping["validation"], f"{context}.validation")
        return SimpleRepr(simple_type=simple_type, validation=validation)
    elif tag == ExternalRepr.tag:
        _check_keys(mapping, {"repr"}, set(), context)
        return ExternalRepr()
    elif tag == StructRepr.tag:
        _check_keys(mapping, {"repr", "members"}, set(), context)
        return StructRepr(members=decode_members(mapping["members"], f"{context}.members"))
    elif tag == UnionRepr.tag:
        _check_keys(mapping, {"repr", "members"}, set(), context)
        return UnionRepr(members=decode_members(mapping["members"], f"{context}.members"))
    elif tag == EnumRepr.tag:
        _check_keys(mapping, {"repr", "values"}, set(), context)
        values_context = f"{context}.values"
        values = [
            _decode_name(item, f"{values_context}[{index}]")
            for index, item in enumerate(_expect_list(mapping["values"], values_context))
        ]
        return EnumRepr(values=values)

    raise SchemaError(
        f"{context}.repr: unknown value {tag!r} "
        "(expected one of: simple, external, struct, union, enum)"
    )


def decode_type_def(data: Any, context: str) -> TypeDef:
    mapping = _expect_mapping(data, context)
    _check_keys(mapping, {"name", "container"}, set(), context)
    name = _decode_name(mapping["name"], f"{context}.name")
    # Name the type in diagnostics from here on
    container = decode_type_repr(mapping["container"], f"type '{name}'")
    return TypeDef(name=name, container=container)


def decode_route(data: Any, context: str) -> Route:
    mapping = _expect_mapping(data, context)
    segment_keys = [kind.value for kind in SegmentKind if kind.value in mapping]
    if len(segment_keys) != 1:
        raise SchemaError(f"{context}: a route needs exactly one of 'exact' or 'string'")
    (segment_key,) = segment_keys
    _check_keys(mapping, {segment_key}, {"name", "routes"}, context)

    segment = Segment(
        SegmentKind(segment_key),
        _decode_name(mapping[segment_key], f"{context}.{segment_key}"),
    )
    name = None
    if mapping.get("name") is not None:
        name = _decode_name(mapping["name"], f"{context}.name")
    routes_context = f"{context}.routes"
    routes = [
        decode_route(item, f"{routes_context}[{index}]")
        for index, item in enumerate(_expect_list(mapping.get("routes"), routes_context))
    ]
    return Route(segment=segment, name=name, routes=routes)


def decode_route_list(data: Any, context: str = "routes") -> List[Route]:
    return [
        decode_route(item, f"{context}[{index}]")
        for index, item in enumerate(_expect_list(data, context))
    ]


def decode_yield(data: Any, context: str) -> Yield:
    mapping = _expect_mapping(data, context)
    _check_keys(mapping, {"name", "code"}, {"args"}, context)
    name = _decode_name(mapping["name"], f"{context}.name")
    return Yield(
        name=name,
        code=_decode_enum(HttpResponse, mapping["code"], f"yield '{name}'.code"),
        args=decode_members(mapping.get("args"), f"yield '{name}'.args"),
    )


def decode_case(data: Any, context: str) -> Case:
    mapping = _expect_mapping(data, context)
    _check_keys(mapping, {"name", "code"}, {"args"}, context)
    name = _decode_name(mapping["name"], f"{context}.name")
    return Case(
        name=name,
        code=_decode_enum(HttpResponse, mapping["code"], f"{context}.code"),
        args=decode_members(mapping.get("args"), f"{context}.args"),
    )


def decode_reason(data: Any, context: str) -> Reason:
    mapping = _expect_mapping(data, context)
    _check_keys(mapping, {"name", "cases"}, set(), context)
    name = _decode_name(mapping["name"], f"{context}.name")
    cases_context = f"reason '{name}'.cases"
    cases = [
        decode_case(item, f"{cases_context}[{index}]")
        for index, item in enumerate(_expect_list(mapping["cases"], cases_context))
    ]
    return Reason(name=name, cases=cases)


def decode_method(data: Any, context: str) -> Method:
    mapping = _expect_mapping(data, context)
    _check_keys(mapping, {"name", "request", "response"}, set(), context)
    name = _decode_name(mapping["name"], f"{context}.name")
    context = f"method '{name}'"

    request_data = _expect_mapping(mapping["request"], f"{context}.request")
    _check_keys(request_data, {"method", "path"}, {"args"}, f"{context}.request")
    request = Request(
        method=_decode_enum(HttpMethod, request_data["method"], f"{context}.request.method"),
        path=_decode_name(request_data["path"], f"{context}.request.path"),
        args=decode_members(request_data.get("args"), f"{context}.request.args"),
    )

    response_data = _expect_mapping(mapping["response"], f"{context}.response")
    _check_keys(response_data, {"success", "error"}, {"failure"}, f"{context}.response")
    failure = None
    if response_data.get("failure") is not None:
        failure = _decode_name(response_data["failure"], f"{context}.response.failure")
    response = Response(
        success=_decode_name(response_data["success"], f"{context}.response.success"),
        error=_decode_name(response_data["error"], f"{context}.response.error"),
        failure=failure,
    )
    return Method(name=name, request=request, response=response)


API_SECTIONS = ("types", "routes", "yields", "reasons", "methods")


def decode_api(data: Any) -> Api:
    mapping = _expect_mapping(data, "document")
    _check_keys(mapping, set(), set(API_SECTIONS), "document")

    def section(key, decoder):
        return [
            decoder(item, f"{key}[{index}]")
            for index, item in enumerate(_expect_list(mapping.get(key), key))
        ]

    return Api(
        types=section("types", decode_type_def),
        routes=decode_route_list(mapping.get("routes")),
        yields=section("yields", decode_yield),
        reasons=section("reasons", decode_reason),
        methods=section("methods", decode_method),
    )


def decode_routes(data: Any) -> Routes:
    """Decode a routes-only document.

    The remaining sections of a full API document are tolerated and left
    undecoded, so one file can drive every generation mode.
    """
    mapping = _expect_mapping(data, "document")
    other_sections = set(API_SECTIONS) - {"routes"}
    _check_keys(mapping, set(), {"name", "label_prefix", "routes"} | other_sections, "document")

    name = None
    if mapping.get("name") is not None:
        name = _decode_name(mapping["name"], "document.name")
    label_prefix = mapping.get("label_prefix")
    if label_prefix is not None and not isinstance(label_prefix, str):
        raise SchemaError(f"document.label_prefix: expected a string, got {label_prefix!r}")

    return Routes(
        routes=decode_route_list(mapping.get("routes")),
        name=name,
        label_prefix=label_prefix,
    )
