"""
Python code generator implementation.

Generates a Python module of pydantic models, validators, path helpers and
route construction from an API document, using templates.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from ....logging_config import get_logger
from ...core.buffer import CodeBuffer
from ...core.config import GeneratorConfig
from ...core.errors import StaticRuleError
from ...core.generator import CodeGenerator
from ...core.naming import Name, NamingCase
from ...core.paths import Path as ApiPath
from ...core.paths import routes_to_paths
from ...core.resolver import SymbolTable
from ...core.spec import (
    Api,
    ContainerType,
    EnumRepr,
    ExternalRepr,
    Member,
    Method,
    Reason,
    Route,
    Routes,
    SimpleRepr,
    SimpleType,
    StructRepr,
    TypeDef,
    UnionRepr,
    Yield,
)
from .config import IMPORTED_NAMES, STATUS_MAP, PythonConfig, render_imports
from .naming import create_field_sanitizer, create_python_sanitizer
from .validation import build_validator

logger = get_logger(__name__)

FAILURE, ERROR = "failure", "error"


def _string_tuple(items: List[str]) -> str:
    quoted = [f'"{item}"' for item in items]
    if len(quoted) == 1:
        return f"({quoted[0]},)"
    return f"({', '.join(quoted)})"


class PythonGenerator(CodeGenerator):
    """Code generator for Python modules built on pydantic."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Python generator with configuration."""
        super().__init__(config)

        # Initialize naming
        self.sanitizer = create_python_sanitizer()
        self.field_sanitizer = create_field_sanitizer()

        # Initialize Python-specific configuration
        self.python_config = PythonConfig(**self.config.custom)

        # State tracking
        self._reset()

    def _reset(self):
        self.imports_used: Set[str] = set()
        self.declared: Dict[str, str] = {}
        self.symbols: Optional[SymbolTable] = None
        self.yield_models: Dict[Name, Dict[str, Any]] = {}
        self.reason_contexts: Dict[Name, Dict[str, Any]] = {}

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    # ---------------------------------------------------------------------------------------------
    # Entry points

    def generate_api(self, api: Api) -> str:
        """Generate the complete protocol module."""
        self._reset()
        paths = routes_to_paths(api.routes)
        self.symbols = SymbolTable.from_api(api, paths)
        self.warnings.extend(self.symbols.warnings)
        logger.debug(
            "Generating %d types, %d paths, %d methods",
            len(api.types),
            len(paths),
            len(api.methods),
        )

        sections = [
            ("Types", self._render_types(api.types)),
            ("Paths", self._render_paths(paths)),
            ("Yields", self._render_yields(api.yields)),
            ("Reasons", self._render_reasons(api.reasons)),
            ("Methods", self._render_methods(api.methods)),
            ("Routes", self._render_build_routes(api.routes, None, self.config.label_prefix)),
        ]
        return self._render_module(sections, self._external_imports(api.types))

    def generate_routes(self, routes: Routes) -> str:
        """Generate ``build_routes`` for a routes document."""
        self._reset()
        label_prefix = routes.label_prefix
        if label_prefix is None:
            label_prefix = self.config.label_prefix
        code = self._render_build_routes(routes.routes, routes.name, label_prefix)
        return self._render_module([("Routes", code)])

    def generate_paths(self, routes: Routes) -> str:
        """Generate path parameter records for a routes document."""
        self._reset()
        code = self._render_paths(routes_to_paths(routes.routes))
        return self._render_module([("Paths", code)])

    def _render_module(
        self, sections: List[Tuple[str, str]], extra_imports: Iterable[str] = ()
    ) -> str:
        imports = render_imports(self.imports_used, self.config.runtime_module)
        extra_imports = list(extra_imports)
        if extra_imports:
            imports.extend([""] + extra_imports)

        context = {
            "header": self.config.header_comment if self.config.add_comments else "",
            "add_comments": self.config.add_comments,
            "imports": imports,
            "sections": [
                {"title": title, "code": code.strip("\n")}
                for title, code in sections
                if code.strip()
            ],
        }
        return self.render_template("module.py.j2", context)

    # ---------------------------------------------------------------------------------------------
    # Naming

    def _use(self, *names: str):
        self.imports_used.update(names)

    def _identifier(self, text: str, what: str, name: Name) -> str:
        if not text.isidentifier():
            raise StaticRuleError(
                f"{what.capitalize()} '{name}' renders as '{text}', "
                "which is not a valid Python identifier"
            )
        return text

    def _class_name(self, name: Name, suffix: str = "") -> str:
        rendered = self.sanitizer.sanitize_name(name, NamingCase.CAMEL_CASE) + suffix
        return self._identifier(rendered, "name", name)

    def _declare(self, identifier: str, what: str) -> str:
        """Register a module-level name, rejecting duplicates and shadowed imports."""
        if identifier in IMPORTED_NAMES:
            raise StaticRuleError(
                f"Generated name '{identifier}' for {what} shadows a name the generated module imports"
            )
        if identifier in self.declared:
            raise StaticRuleError(
                f"Generated name '{identifier}' for {what} is already defined by {self.declared[identifier]}"
            )
        self.declared[identifier] = what
        return identifier

    def _type_class_name(self, name: Name) -> str:
        return self._class_name(name)

    def _member_type(self, member: Member) -> str:
        """Python annotation for a member."""
        if isinstance(member.type, SimpleType):
            base = self.python_config.get_python_type(member.type)
        else:
            type_def = self.symbols.find_type(member.type)
            base = self._type_class_name(type_def.name)

        if member.container == ContainerType.VECTOR:
            return f"list[{base}]"
        if member.container == ContainerType.OPTIONAL:
            self._use("Optional")
            return f"Optional[{base}]"
        return base

    def _build_model(
        self,
        class_name: str,
        members: List[Member],
        tag: Optional[Tuple[str, str]] = None,
        methods: Iterable[str] = (),
    ) -> Dict[str, Any]:
        """
        Build the template context of a pydantic model.

        Args:
            class_name: Python class name
            members: Fields in declaration order
            tag: Discriminator field name and literal value, if any
            methods: Names of methods generated on the class

        Returns:
            Dict with field declarations, ``new`` parameters and model config
        """
        taken = {method: "a generated method" for method in methods}
        fields, params, kwargs = [], [], []

        if tag is not None:
            tag_name, tag_value = tag
            self._use("Literal")
            fields.append(f'{tag_name}: Literal["{tag_value}"] = "{tag_value}"')
            taken[tag_name] = "the discriminator"

        has_alias = False
        for member in members:
            field_name = self._identifier(
                self.field_sanitizer.sanitize_name(member.name, NamingCase.SNAKE_CASE),
                "member",
                member.name,
            )
            if field_name in taken:
                raise StaticRuleError(
                    f"Member '{member.name}' of {class_name} clashes with {taken[field_name]}"
                )
            taken[field_name] = "another member"

            wire = member.name.snake_case()
            annotation = self._member_type(member)
            optional = member.container == ContainerType.OPTIONAL
            declaration = f"{field_name}: {annotation}"
            if wire != field_name:
                has_alias = True
                self._use("Field")
                default = "default=None, " if optional else ""
                declaration += f' = Field({default}alias="{wire}")'
            elif optional:
                declaration += " = None"

            fields.append(declaration)
            params.append(f"{field_name}: {annotation}")
            kwargs.append(f"{field_name}={field_name}")

        config_items = self.python_config.model_config_items(has_alias)
        if config_items:
            self._use("ConfigDict")

        self._use("BaseModel")
        return {
            "name": class_name,
            "fields": fields,
            "params": ", ".join(params),
            "kwargs": ", ".join(kwargs),
            "model_config": ", ".join(config_items),
        }

    def _tagged_root(self, class_names: List[str], tag: str) -> str:
        """RootModel parameter over the given alternatives."""
        self._use("RootModel")
        if len(class_names) == 1:
            return class_names[0]
        self._use("Annotated", "Union", "Field")
        return f'Annotated[Union[{", ".join(class_names)}], Field(discriminator="{tag}")]'

    # ---------------------------------------------------------------------------------------------
    # Types

    def _get_generation_order(self, types: List[TypeDef]) -> List[TypeDef]:
        """Order types so each follows the types it refers to."""
        by_name = {}
        for type_def in types:
            by_name.setdefault(type_def.name, type_def)

        visited = set()
        visiting = set()
        ordered = []

        def visit(type_def: TypeDef):
            if type_def.name in visited:
                return
            if type_def.name in visiting:
                return  # Cycle - keep declaration order

            visiting.add(type_def.name)
            for dependency in type_def.dependencies():
                if dependency in by_name:
                    visit(by_name[dependency])
            visiting.remove(type_def.name)
            visited.add(type_def.name)
            ordered.append(type_def)

        for type_def in types:
            if type_def.name in visited:
                # A later duplicate still reaches the duplicate-name check
                if type_def is not by_name[type_def.name]:
                    ordered.append(type_def)
                continue
            visit(type_def)

        return ordered

    def _render_types(self, types: List[TypeDef]) -> str:
        items = []
        for type_def in self._get_generation_order(types):
            item = self._type_context(type_def)
            if item is not None:
                items.append(item)
        if not items:
            return ""
        return self.render_template("types.py.j2", {"types": items})

    def _type_context(self, type_def: TypeDef) -> Optional[Dict[str, Any]]:
        name = self._type_class_name(type_def.name)
        container = type_def.container

        if isinstance(container, ExternalRepr):
            self._declare(name, f"external type '{type_def.name}'")
            return None

        self._declare(name, f"type '{type_def.name}'")

        if isinstance(container, SimpleRepr):
            item = {
                "kind": "alias",
                "name": name,
                "target": self.python_config.get_python_type(container.simple_type),
                "validator": None,
            }
            if container.validation is not None:
                validator = build_validator(
                    type_def.name, name, container.simple_type, container.validation
                )
                self._declare(validator.enum_name, f"validation result of '{type_def.name}'")
                self._declare(validator.function_name, f"validator of '{type_def.name}'")
                self._use("Enum")
                item["validator"] = validator
            return item

        if isinstance(container, StructRepr):
            model = self._build_model(name, container.members, methods=["new"])
            return {"kind": "struct", "model": model}

        if isinstance(container, UnionRepr):
            if not container.members:
                raise StaticRuleError(f"Union '{type_def.name}' has no members")
            wrappers = []
            seen = set()
            for member in container.members:
                tag = member.name.snake_case()
                if tag in seen:
                    raise StaticRuleError(
                        f"Union '{type_def.name}' has more than one member '{member.name}'"
                    )
                seen.add(tag)
                wrapper_name = self._declare(
                    name + self._class_name(member.name), f"member of union '{type_def.name}'"
                )
                self._use("BaseModel", "Literal")
                wrappers.append(
                    {
                        "name": wrapper_name,
                        "tag": tag,
                        "method": self._identifier(f"new_{tag}", "member", member.name),
                        "content_type": self._member_type(member),
                    }
                )
            return {
                "kind": "union",
                "name": name,
                "wrappers": wrappers,
                "root_type": self._tagged_root([w["name"] for w in wrappers], "variant"),
            }

        if isinstance(container, EnumRepr):
            values = []
            seen = set()
            for value in container.values:
                member_name = self._identifier(
                    value.screaming_snake_case(), "enum value", value
                )
                if member_name in seen:
                    raise StaticRuleError(
                        f"Enum '{type_def.name}' has more than one value '{value}'"
                    )
                seen.add(member_name)
                values.append({"name": member_name, "value": value.snake_case()})
            self._use("Enum", "Optional")
            return {"kind": "enum", "name": name, "values": values}

        raise StaticRuleError(f"Type '{type_def.name}' has an unsupported representation")

    def _external_imports(self, types: List[TypeDef]) -> List[str]:
        externals = sorted(
            self._type_class_name(t.name)
            for t in types
            if isinstance(t.container, ExternalRepr)
        )
        if not externals:
            return []
        module = self.python_config.external_module
        if module:
            return [f"from {module} import {', '.join(externals)}"]
        if self.config.add_comments:
            return [f"# Provided by hand-written code: {', '.join(externals)}"]
        return []

    # ---------------------------------------------------------------------------------------------
    # Paths

    def _path_context(self, path: ApiPath) -> Dict[str, Any]:
        name = self._declare(self._class_name(path.name, "PathParams"), f"path '{path.name}'")
        members = [Member(name=param, type=SimpleType.STR) for param in path.params]
        model = self._build_model(
            name, members, methods=["new", "new_from_map", "to_path", "get"]
        )

        params = []
        for member in members:
            field_name = self.field_sanitizer.sanitize_name(member.name, NamingCase.SNAKE_CASE)
            params.append({"field": field_name, "key": member.name.snake_case()})

        parts = []
        for segment in path.segments:
            if segment.is_exact:
                parts.append(segment.name.snake_case())
            else:
                field_name = self.field_sanitizer.sanitize_name(
                    segment.name, NamingCase.SNAKE_CASE
                )
                parts.append("{self.%s}" % field_name)
        if not parts:
            self_path = '"/"'
        elif params:
            self_path = 'f"/' + "/".join(parts) + '"'
        else:
            self_path = '"/' + "/".join(parts) + '"'

        self._use("Mapping")
        return {
            "name": name,
            "model": model,
            "params": params,
            "map_kwargs": ", ".join(f'{p["field"]}=params["{p["key"]}"]' for p in params),
            "self_path": self_path,
        }

    def _render_paths(self, paths: List[ApiPath]) -> str:
        if not paths:
            return ""
        contexts = [self._path_context(path) for path in paths]
        return self.render_template("paths.py.j2", {"paths": contexts})

    # ---------------------------------------------------------------------------------------------
    # Yields and reasons

    def _render_yields(self, yields: List[Yield]) -> str:
        contexts = []
        for yeeld in yields:
            name = self._declare(self._class_name(yeeld.name, "Yield"), f"yield '{yeeld.name}'")
            model = self._build_model(name, yeeld.args, methods=["new", "get_code"])
            self.yield_models.setdefault(yeeld.name, model)
            self._use("HTTPStatus")
            contexts.append({"model": model, "code": STATUS_MAP[yeeld.code]})
        if not contexts:
            return ""
        return self.render_template("yields.py.j2", {"yields": contexts})

    def _reason_context(self, reason: Reason) -> Dict[str, Any]:
        if not reason.cases:
            raise StaticRuleError(f"Reason '{reason.name}' has no cases")

        base = self._class_name(reason.name)
        name = self._declare(base + "Reason", f"reason '{reason.name}'")
        cases = []
        seen = set()
        for case in reason.cases:
            tag = case.name.snake_case()
            if tag in seen:
                raise StaticRuleError(
                    f"Reason '{reason.name}' has more than one case '{case.name}'"
                )
            seen.add(tag)
            case_name = self._declare(
                base + self._class_name(case.name), f"case of reason '{reason.name}'"
            )
            model = self._build_model(
                case_name, case.args, tag=("reason", tag), methods=["get_code"]
            )
            cases.append(
                {
                    "model": model,
                    "tag": tag,
                    "method": self._identifier(tag, "case", case.name),
                    "code": STATUS_MAP[case.code],
                }
            )

        self._use("HTTPStatus", "json")
        return {
            "name": name,
            "cases": cases,
            "root_type": self._tagged_root([c["model"]["name"] for c in cases], "reason"),
        }

    def _render_reasons(self, reasons: List[Reason]) -> str:
        contexts = []
        for reason in reasons:
            context = self._reason_context(reason)
            self.reason_contexts.setdefault(reason.name, context)
            contexts.append(context)
        if not contexts:
            return ""
        return self.render_template("reasons.py.j2", {"reasons": contexts})

    # ---------------------------------------------------------------------------------------------
    # Methods

    def _request_validators(self, method: Method) -> List[Dict[str, str]]:
        """Validation entry points for members whose type carries validation."""
        validators = []
        for member in method.request.args:
            if not member.is_defined:
                continue
            type_def = self.symbols.find_type(member.type)
            container = type_def.container
            if isinstance(container, SimpleRepr) and container.validation is not None:
                field_name = self.field_sanitizer.sanitize_name(
                    member.name, NamingCase.SNAKE_CASE
                )
                alias = self._type_class_name(type_def.name)
                validators.append(
                    {
                        "method": f"validate_{field_name}",
                        "field": field_name,
                        "enum_name": f"{alias}ValidationResult",
                        "function_name": f"validate_{type_def.name.snake_case()}",
                    }
                )
        return validators

    def _check_query_args(self, method: Method):
        """Query strings carry only scalars and lists of scalars."""
        for member in method.request.args:
            if not isinstance(member.type, Name):
                continue
            type_def = self.symbols.find_type(member.type)
            if not isinstance(type_def.container, (SimpleRepr, EnumRepr)):
                raise StaticRuleError(
                    f"Argument '{member.name}' of {method.request.method.to_str()} method "
                    f"'{method.name}' has {type_def.container.tag} type '{type_def.name}', "
                    "which cannot be encoded in a query string"
                )

    def _response_case(self, kind: str, reason_name: Name, response_name: str):
        reason = self.reason_contexts.get(self.symbols.find_reason(reason_name).name)
        return {
            "kind": kind,
            "reason": reason["name"],
            "cases": reason["cases"],
            "wrapper": self._declare(
                f"{response_name}{kind.capitalize()}", f"{kind} of '{response_name}'"
            ),
        }

    def _method_context(self, method: Method) -> Dict[str, Any]:
        base = self._class_name(method.name)
        request_name = self._declare(base + "Request", f"method '{method.name}'")
        response_name = self._declare(base + "Response", f"method '{method.name}'")
        method_name = self._declare(base + "Method", f"method '{method.name}'")

        path = self.symbols.find_path(method.request.path)
        path_params = self._class_name(path.name, "PathParams")
        uses_query = method.request.method.uses_query
        if uses_query:
            self._check_query_args(method)

        validators = self._request_validators(method)
        codec = ["from_query_string", "to_query_string"] if uses_query else [
            "from_json_string",
            "to_json_string",
        ]
        request_model = self._build_model(
            request_name,
            method.request.args,
            methods=["new", "get_method_name", "to_message", "from_request"]
            + codec
            + [v["method"] for v in validators],
        )
        sequences = [
            member.name.snake_case()
            for member in method.request.args
            if member.container == ContainerType.VECTOR
        ]

        yeeld = self.symbols.find_yield(method.response.success)
        success = {
            "yield": self._class_name(yeeld.name, "Yield"),
            "model": self.yield_models[yeeld.name],
            "code": STATUS_MAP[yeeld.code],
            "wrapper": self._declare(f"{response_name}Success", f"success of '{response_name}'"),
        }
        reasons = []
        if method.response.failure is not None:
            reasons.append(self._response_case(FAILURE, method.response.failure, response_name))
        reasons.append(self._response_case(ERROR, method.response.error, response_name))
        wrappers = [success["wrapper"]] + [part["wrapper"] for part in reasons]

        self._use("HTTPStatus", "Literal", "BaseModel")
        return {
            "name": method_name,
            "wire_name": method.name.kebab_case(),
            "verb": method.request.method.to_str(),
            "uses_query": uses_query,
            "path_params": path_params,
            "request": {
                "model": request_model,
                "sequences": _string_tuple(sequences),
                "validators": validators,
            },
            "response": {
                "name": response_name,
                "success": success,
                "reasons": reasons,
                "root_type": self._tagged_root(wrappers, "result"),
            },
        }

    def _render_methods(self, methods: List[Method]) -> str:
        if not methods:
            return ""
        contexts = [self._method_context(method) for method in methods]
        return self.render_template("methods.py.j2", {"methods": contexts})

    # ---------------------------------------------------------------------------------------------
    # Routes

    def _view_names(self, routes: List[Route], index_name: Optional[Name]) -> List[str]:
        names = []
        if index_name is not None:
            names.append(index_name)

        def collect(route: Route):
            if route.name is not None:
                names.append(route.name)
            for child in route.routes:
                collect(child)

        for route in routes:
            collect(route)

        views = []
        for name in names:
            view = self._identifier(
                self.field_sanitizer.sanitize_name(name, NamingCase.SNAKE_CASE), "route", name
            )
            if view in views:
                raise StaticRuleError(f"Route name '{name}' is used more than once")
            views.append(view)
        return views

    def _emit_route(
        self,
        buffer: CodeBuffer,
        head: str,
        name: Optional[Name],
        children: List[Route],
        label_prefix: Optional[str],
        terminator: str,
    ):
        buffer.push(head)
        if name is not None:
            view = self.field_sanitizer.sanitize_name(name, NamingCase.SNAKE_CASE)
            buffer.push(f".with_view({view})")
            if label_prefix is not None:
                label = json.dumps(label_prefix + name.snake_case())
                buffer.push(f".with_label({label})")

        if not children:
            buffer.line(terminator)
            return

        buffer.line(".with_routes(")
        with buffer.indent():
            buffer.line("[")
            with buffer.indent():
                for child in children:
                    segment = child.segment
                    constructor = "exact" if segment.is_exact else "param"
                    child_head = f'runtime.Route.{constructor}("{segment.name.snake_case()}")'
                    self._emit_route(
                        buffer, child_head, child.name, child.routes, label_prefix, ","
                    )
            buffer.line("]")
        buffer.line(")" + terminator)

    def _render_build_routes(
        self, routes: List[Route], index_name: Optional[Name], label_prefix: Optional[str]
    ) -> str:
        """Emit ``build_routes``, reproducing the route tree as builder calls."""
        views = self._view_names(routes, index_name)
        self._declare("build_routes", "route construction")

        buffer = CodeBuffer(indent_size=self.source_indent)
        signature = f"*, {', '.join(views)}" if views else ""
        buffer.line(f"def build_routes({signature}) -> runtime.Route:")
        with buffer.indent():
            buffer.push("return ")
            self._emit_route(buffer, "runtime.Route.index()", index_name, routes, label_prefix, "")
        return buffer.getvalue()


# Factory functions
def create_python_generator(config: GeneratorConfig = None, **custom) -> PythonGenerator:
    """Create a Python generator, passing keyword options as custom settings."""
    if config is None:
        from ...core.config import load_config

        config = load_config("python", custom_config=custom or None)

    return PythonGenerator(config)
