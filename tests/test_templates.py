import pytest

from protogen.codegen.core.templates import TemplateEngine, TemplateError, create_template_engine


@pytest.fixture
def template_dir(tmp_path):
    (tmp_path / "greeting.j2").write_text("hello {{ who }}\n")
    (tmp_path / "header.j2").write_text("{{ text | comment }}\n")
    (tmp_path / "strict.j2").write_text("{{ missing }}\n")
    (tmp_path / "blocks.j2").write_text(
        "{% for item in items %}\n    {% if item %}\nx = {{ item }}\n    {% endif %}\n{% endfor %}\n"
    )
    return tmp_path


class TestTemplateEngine:
    def test_renders_from_directory(self, template_dir):
        engine = create_template_engine(template_dir)
        assert engine.render_template("greeting.j2", {"who": "world"}) == "hello world\n"

    def test_comment_filter(self, template_dir):
        engine = create_template_engine(template_dir)
        assert engine.render_template("header.j2", {"text": "one\n\ntwo"}) == "# one\n#\n# two\n"

    def test_block_tags_leave_no_whitespace(self, template_dir):
        engine = create_template_engine(template_dir)
        assert engine.render_template("blocks.j2", {"items": [1, 0, 2]}) == "x = 1\nx = 2\n"

    def test_no_escaping(self, template_dir):
        engine = create_template_engine(template_dir)
        assert engine.render_template("greeting.j2", {"who": "<a & b>"}) == "hello <a & b>\n"

    def test_undefined_variables_fail(self, template_dir):
        engine = create_template_engine(template_dir)
        with pytest.raises(TemplateError, match="strict.j2"):
            engine.render_template("strict.j2", {})

    def test_missing_template_fails(self):
        with pytest.raises(TemplateError):
            TemplateEngine().render_template("nope.j2", {})
