import pytest

from protogen.codegen.core.errors import InvalidNameError
from protogen.codegen.core.naming import Name, NameSanitizer, NamingCase, camel_case, snake_case
from protogen.codegen.languages.python.naming import (
    create_field_sanitizer,
    create_python_sanitizer,
)


class TestName:
    def test_renderings(self):
        name = Name("user-profile-id")
        assert name.snake_case() == "user_profile_id"
        assert name.camel_case() == "UserProfileId"
        assert name.kebab_case() == "user-profile-id"
        assert name.screaming_snake_case() == "USER_PROFILE_ID"
        assert str(name) == "user-profile-id"

    def test_single_word(self):
        name = Name("project")
        assert name.parts == ("project",)
        assert name.camel_case() == "Project"

    def test_parts_are_lowercased(self):
        assert Name("User-ID") == Name("user-id")

    def test_from_parts_round_trips(self):
        name = Name("http-status-code")
        assert Name.from_parts(name.parts) == name
        assert Name(str(name)) == name

    def test_render_dispatches_on_case(self):
        name = Name("dark-blue")
        assert name.render(NamingCase.SNAKE_CASE) == "dark_blue"
        assert name.render(NamingCase.CAMEL_CASE) == "DarkBlue"
        assert name.render(NamingCase.KEBAB_CASE) == "dark-blue"
        assert name.render(NamingCase.SCREAMING_SNAKE) == "DARK_BLUE"

    @pytest.mark.parametrize(
        "text", ["", "user profile", "user--id", "-user", "user-", "user_id", "naïve", "a.b"]
    )
    def test_rejects_invalid_text(self, text):
        with pytest.raises(InvalidNameError):
            Name(text)

    def test_rejects_non_string(self):
        with pytest.raises(InvalidNameError):
            Name(42)

    def test_hashable_and_ordered(self):
        names = {Name("b"), Name("a"), Name("a")}
        assert sorted(names) == [Name("a"), Name("b")]

    def test_immutable(self):
        name = Name("a")
        with pytest.raises(AttributeError):
            name._parts = ("b",)

    def test_module_helpers(self):
        assert snake_case("page-count") == "page_count"
        assert camel_case("page-count") == "PageCount"


class TestNameSanitizer:
    def test_suffixes_reserved_words(self):
        sanitizer = NameSanitizer({"class"}, {"int"})
        assert sanitizer.sanitize_name(Name("class")) == "class_"
        assert sanitizer.sanitize_name(Name("int")) == "int_"
        assert sanitizer.sanitize_name(Name("count")) == "count"

    def test_custom_suffix(self):
        sanitizer = NameSanitizer({"for"})
        assert sanitizer.sanitize_name(Name("for"), suffix_on_conflict="_field") == "for_field"

    def test_is_reserved(self):
        sanitizer = create_python_sanitizer()
        assert sanitizer.is_reserved("lambda")
        assert sanitizer.is_reserved("str")
        assert not sanitizer.is_reserved("json_schema")

    def test_field_sanitizer_protects_model_attributes(self):
        sanitizer = create_field_sanitizer()
        assert sanitizer.sanitize_name(Name("copy")) == "copy_"
        assert sanitizer.sanitize_name(Name("model-dump")) == "model_dump_"
        assert sanitizer.sanitize_name(Name("self")) == "self_"
        assert sanitizer.sanitize_name(Name("title")) == "title"

    def test_class_names_are_not_field_reserved(self):
        sanitizer = create_python_sanitizer()
        assert sanitizer.sanitize_name(Name("copy"), NamingCase.CAMEL_CASE) == "Copy"
