from http import HTTPStatus
from pathlib import Path

import pytest

from protogen.codegen.core.errors import InvalidNameError, SchemaError
from protogen.codegen.core.naming import Name
from protogen.codegen.core.spec import (
    Api,
    Check,
    ConditionKind,
    ContainerType,
    EnumRepr,
    ExternalRepr,
    HttpMethod,
    HttpResponse,
    Routes,
    SegmentKind,
    SimpleRepr,
    SimpleType,
    StructRepr,
    UnionRepr,
)

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def api() -> Api:
    return Api.from_str((FIXTURES / "api.yaml").read_text(encoding="utf-8"))


class TestApiDecoding:
    def test_sections(self, api):
        assert [str(t.name) for t in api.types] == [
            "project-id",
            "age",
            "email-address",
            "password-hash",
            "color",
            "project",
            "shape",
        ]
        assert len(api.routes) == 2
        assert [str(y.name) for y in api.yields] == ["project", "project-list", "created"]
        assert [str(r.name) for r in api.reasons] == [
            "lookup-failure",
            "create-failure",
            "server-error",
        ]
        assert [str(m.name) for m in api.methods] == [
            "get-project",
            "list-projects",
            "create-project",
        ]

    def test_type_representations(self, api):
        by_name = {str(t.name): t.container for t in api.types}
        assert isinstance(by_name["project-id"], SimpleRepr)
        assert by_name["project-id"].simple_type is SimpleType.ID
        assert isinstance(by_name["password-hash"], ExternalRepr)
        assert isinstance(by_name["color"], EnumRepr)
        assert by_name["color"].values == [Name("red"), Name("dark-blue")]
        assert isinstance(by_name["project"], StructRepr)
        assert isinstance(by_name["shape"], UnionRepr)

    def test_validation(self, api):
        email = next(t for t in api.types if t.name == Name("email-address")).container
        assert email.validation.checks == [Check.EMAIL]
        kinds = [c.kind for c in email.validation.conditions]
        assert kinds == [ConditionKind.LEN_GE, ConditionKind.LEN_LE]
        assert [c.value for c in email.validation.conditions] == [6, 64]

    def test_members(self, api):
        project = next(t for t in api.types if t.name == Name("project")).container
        tags = project.members[3]
        assert tags.name == Name("tags")
        assert tags.type is SimpleType.STR
        assert tags.container is ContainerType.VECTOR
        assert tags.is_contained and not tags.is_simple
        owner = project.members[2]
        assert owner.type == Name("email-address")
        assert owner.is_defined and not owner.is_contained

    def test_struct_dependencies(self, api):
        project = next(t for t in api.types if t.name == Name("project"))
        assert set(project.dependencies()) == {
            Name("project-id"),
            Name("email-address"),
            Name("color"),
        }

    def test_methods(self, api):
        get_project, list_projects, create_project = api.methods
        assert get_project.request.method is HttpMethod.GET
        assert get_project.request.path == Name("project")
        assert get_project.request.args == []
        assert get_project.response.failure == Name("lookup-failure")
        assert list_projects.response.failure is None
        assert create_project.request.method is HttpMethod.POST
        assert create_project.response.success == Name("created")

    def test_routes(self, api):
        projects = api.routes[1]
        assert projects.segment.kind is SegmentKind.EXACT
        project = projects.routes[0]
        assert project.segment.kind is SegmentKind.CAPTURED
        assert project.segment.name == Name("project-id")
        assert project.name == Name("project")

    def test_round_trip(self, api):
        assert Api.from_str(api.to_str()) == api

    def test_empty_document(self):
        assert Api.from_str("{}") == Api()


class TestHttpEnums:
    def test_verbs(self):
        assert HttpMethod.GET.to_str() == "GET"
        assert HttpMethod.DELETE.to_str() == "DELETE"
        assert HttpMethod.GET.uses_query
        assert not HttpMethod.POST.uses_query

    def test_response_status(self):
        assert HttpResponse.OK.status is HTTPStatus.OK
        assert HttpResponse.NOT_FOUND.status is HTTPStatus.NOT_FOUND
        assert HttpResponse("409-conflict").status is HTTPStatus.CONFLICT


class TestDecodingErrors:
    def test_invalid_yaml(self):
        with pytest.raises(SchemaError):
            Api.from_str("types: [")

    def test_unknown_section(self):
        with pytest.raises(SchemaError, match="document"):
            Api.from_str("widgets: []")

    def test_unknown_repr(self):
        text = "types:\n  - name: thing\n    container: {repr: tuple}\n"
        with pytest.raises(SchemaError, match="type 'thing'.repr"):
            Api.from_str(text)

    def test_unknown_simple_type(self):
        text = "types:\n  - name: thing\n    container: {repr: simple, type: u128}\n"
        with pytest.raises(SchemaError, match="type 'thing'"):
            Api.from_str(text)

    def test_bad_response_code(self):
        text = "yields:\n  - name: done\n    code: 299-weird\n"
        with pytest.raises(SchemaError, match="yield 'done'.code"):
            Api.from_str(text)

    def test_invalid_name(self):
        with pytest.raises(InvalidNameError):
            Api.from_str("types:\n  - name: bad name\n    container: {repr: external}\n")

    def test_route_needs_one_segment(self):
        with pytest.raises(SchemaError, match="exactly one"):
            Api.from_str("routes:\n  - {exact: a, string: b}\n")

    def test_length_condition_needs_integer(self):
        text = (
            "types:\n  - name: code\n    container:\n      repr: simple\n      type: string\n"
            "      validation:\n        conditions:\n          - len_eq: 2.5\n"
        )
        with pytest.raises(SchemaError):
            Api.from_str(text)

    @pytest.mark.parametrize("bound", [".inf", "-.inf", ".nan"])
    def test_bound_must_be_finite(self, bound):
        text = (
            "types:\n  - name: level\n    container:\n      repr: simple\n      type: f64\n"
            f"      validation:\n        conditions:\n          - le: {bound}\n"
        )
        with pytest.raises(SchemaError, match="expected a finite number"):
            Api.from_str(text)

    def test_method_context_names_method(self):
        text = (
            "methods:\n  - name: ping\n    request: {method: fetch, path: home}\n"
            "    response: {success: ok, error: oops}\n"
        )
        with pytest.raises(SchemaError, match="method 'ping'"):
            Api.from_str(text)


class TestRoutesDocument:
    def test_routes_only(self):
        routes = Routes.from_str((FIXTURES / "routes.yaml").read_text(encoding="utf-8"))
        assert routes.name == Name("home")
        assert routes.label_prefix == "site."
        assert [str(r.segment.name) for r in routes.routes] == ["about", "blog", "static"]

    def test_tolerates_api_sections(self):
        routes = Routes.from_str((FIXTURES / "api.yaml").read_text(encoding="utf-8"))
        assert routes.name is None
        assert len(routes.routes) == 2

    def test_rejects_unknown_keys(self):
        with pytest.raises(SchemaError):
            Routes.from_str("pages: []")

    def test_label_prefix_must_be_string(self):
        with pytest.raises(SchemaError, match="label_prefix"):
            Routes.from_str("label_prefix: 3\nroutes: []\n")

    def test_round_trip(self):
        routes = Routes.from_str((FIXTURES / "routes.yaml").read_text(encoding="utf-8"))
        assert Routes.from_dict(routes.to_dict()) == routes
