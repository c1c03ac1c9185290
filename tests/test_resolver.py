from pathlib import Path

import pytest

from protogen.codegen.core.errors import GeneratorError, UnresolvedReferenceError
from protogen.codegen.core.naming import Name
from protogen.codegen.core.paths import routes_to_paths
from protogen.codegen.core.resolver import (
    SymbolTable,
    find_path,
    find_reason,
    find_type,
    find_yield,
)
from protogen.codegen.core.spec import Api, ExternalRepr, Routes, TypeDef

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def api() -> Api:
    return Api.from_str((FIXTURES / "api.yaml").read_text(encoding="utf-8"))


class TestFind:
    def test_every_reference_resolves(self, api):
        paths = routes_to_paths(api.routes)
        for method in api.methods:
            assert find_path(method.request.path, paths).name == method.request.path
            assert find_yield(method.response.success, api.yields).name == method.response.success
            assert find_reason(method.response.error, api.reasons).name == method.response.error
        for type_def in api.types:
            for dependency in type_def.dependencies():
                assert find_type(dependency, api.types).name == dependency

    def test_first_definition_wins(self):
        first = TypeDef(Name("blob"), ExternalRepr())
        second = TypeDef(Name("blob"), ExternalRepr())
        assert find_type(Name("blob"), [first, second]) is first

    @pytest.mark.parametrize(
        "finder, kind",
        [(find_type, "type"), (find_yield, "yield"), (find_reason, "reason"), (find_path, "path")],
    )
    def test_miss_names_kind_and_identifier(self, finder, kind):
        with pytest.raises(UnresolvedReferenceError) as excinfo:
            finder(Name("ghost-thing"), [])
        assert str(excinfo.value) == f"No {kind} 'ghost-thing' found"
        assert excinfo.value.kind == kind
        assert excinfo.value.name == Name("ghost-thing")
        assert isinstance(excinfo.value, GeneratorError)


class TestSymbolTable:
    def test_lookups_match_linear_search(self, api):
        table = SymbolTable.from_api(api)
        assert table.find_type(Name("project")) is find_type(Name("project"), api.types)
        assert table.find_yield(Name("created")) is find_yield(Name("created"), api.yields)
        assert table.find_reason(Name("server-error")).name == Name("server-error")
        assert table.find_path(Name("project-members")).params == [Name("project-id")]
        assert table.warnings == []

    def test_miss_raises(self, api):
        table = SymbolTable.from_api(api)
        with pytest.raises(UnresolvedReferenceError, match="No reason 'missing' found"):
            table.find_reason(Name("missing"))

    def test_duplicates_warn_and_keep_first(self):
        first = TypeDef(Name("blob"), ExternalRepr())
        second = TypeDef(Name("blob"), ExternalRepr())
        table = SymbolTable.from_api(Api(types=[first, second]))
        assert table.find_type(Name("blob")) is first
        assert table.warnings == ["Duplicate type 'blob'; the first definition is used"]


class TestRoutesToPaths:
    def test_preorder_with_full_segments(self):
        routes = Routes.from_str((FIXTURES / "routes.yaml").read_text(encoding="utf-8"))
        paths = routes_to_paths(routes.routes)
        assert [str(p.name) for p in paths] == [
            "about",
            "blog",
            "post",
            "post-comments",
            "comment",
            "asset",
        ]
        comment = paths[4]
        assert [str(s.name) for s in comment.segments] == ["blog", "post-id", "comment-id"]
        assert comment.params == [Name("post-id"), Name("comment-id")]

    def test_unnamed_routes_contribute_segments_only(self):
        routes = Routes.from_str((FIXTURES / "routes.yaml").read_text(encoding="utf-8"))
        asset = routes_to_paths(routes.routes)[-1]
        assert [s.is_exact for s in asset.segments] == [True, False]
        assert [str(s.name) for s in asset.segments] == ["static", "file"]

    def test_index_name_is_not_a_path(self):
        routes = Routes.from_str("name: home\nroutes: []\n")
        assert routes_to_paths(routes.routes) == []

    def test_empty(self):
        assert routes_to_paths([]) == []
