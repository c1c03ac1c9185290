import json
from pathlib import Path

import pytest

from protogen import __version__
from protogen.main import main
from protogen.utils import SpecLoaderError, load_spec_from_file

FIXTURES = Path(__file__).parent / "fixtures"
API = str(FIXTURES / "api.yaml")
ROUTES = str(FIXTURES / "routes.yaml")


class TestGenerate:
    def test_protocol_to_stdout(self, capsys):
        assert main(["--mode", "protocol", "--input", API]) == 0
        out = capsys.readouterr().out
        assert out.startswith("# Generated by protogen. Do not edit.\n")
        compile(out, "<stdout>", "exec")

    def test_output_file(self, tmp_path, capsys):
        target = tmp_path / "api.py"
        assert main(["-m", "paths", "-i", ROUTES, "-o", str(target)]) == 0
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "saved to" in captured.err
        assert "class CommentPathParams(BaseModel):" in target.read_text(encoding="utf-8")

    def test_label_prefix_option(self, capsys):
        assert main(["--mode", "routes", "--input", API, "--label-prefix", "api."]) == 0
        assert '.with_label("api.about")' in capsys.readouterr().out

    def test_no_comments(self, capsys):
        assert main(["--mode", "routes", "--input", ROUTES, "--no-comments"]) == 0
        assert capsys.readouterr().out.startswith("from __future__ import annotations\n")

    def test_runtime_module_option(self, capsys):
        assert main(["--mode", "paths", "-i", ROUTES, "--runtime-module", "app.rt"]) == 0
        assert "import app.rt as runtime" in capsys.readouterr().out

    def test_config_file(self, tmp_path, capsys):
        config = tmp_path / "protogen.json"
        config.write_text(json.dumps({"header_comment": "Custom header"}))
        assert main(["--mode", "routes", "--input", ROUTES, "--config", str(config)]) == 0
        assert capsys.readouterr().out.startswith("# Custom header\n")

    def test_alias_language(self, capsys):
        assert main(["--mode", "routes", "--input", ROUTES, "--language", "py"]) == 0
        assert "def build_routes" in capsys.readouterr().out

    def test_verbose_metadata(self, capsys):
        assert main(["--mode", "protocol", "--input", API, "--verbose"]) == 0
        assert "Method Count" in capsys.readouterr().err

    def test_log_level_is_case_insensitive(self, capsys):
        assert main(["--mode", "routes", "--input", ROUTES, "--log-level", "error"]) == 0


class TestFailures:
    def test_generation_error(self, tmp_path, capsys):
        spec = tmp_path / "broken.yaml"
        spec.write_text(
            "types:\n  - name: box\n    container:\n      repr: struct\n"
            "      members: [{name: item, type: ghost}]\n"
        )
        assert main(["--mode", "protocol", "--input", str(spec)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "No type 'ghost' found" in captured.err

    def test_mode_required(self, capsys):
        assert main(["--input", API]) == 1
        assert "--mode is required" in capsys.readouterr().err

    def test_input_required(self, capsys):
        assert main(["--mode", "protocol"]) == 1
        assert "--input is required" in capsys.readouterr().err

    def test_missing_input(self, tmp_path, capsys):
        assert main(["--mode", "protocol", "--input", str(tmp_path / "nope.yaml")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_unsupported_language(self, capsys):
        assert main(["--mode", "protocol", "--input", API, "--language", "cobol"]) == 1
        assert "Unsupported language 'cobol'" in capsys.readouterr().err

    def test_bad_config(self, tmp_path, capsys):
        config = tmp_path / "config.json"
        config.write_text("{")
        assert main(["--mode", "protocol", "--input", API, "--config", str(config)]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_invalid_mode(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["--mode", "everything", "--input", API])
        assert excinfo.value.code == 2


class TestInformation:
    def test_list_languages(self, capsys):
        assert main(["--list-languages"]) == 0
        out = capsys.readouterr().out
        assert "python" in out
        assert "PythonGenerator" in out

    def test_language_info(self, capsys):
        assert main(["--language-info", "py"]) == 0
        out = capsys.readouterr().out
        assert "protogen.runtime" in out
        assert "Max Blank Lines" in out

    def test_language_info_unknown(self, capsys):
        assert main(["--language-info", "cobol"]) == 1

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])
        assert __version__ in capsys.readouterr().out


class TestLoadSpec:
    def test_reads_text(self):
        assert load_spec_from_file(ROUTES).startswith("name: home")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpecLoaderError, match="File not found"):
            load_spec_from_file(tmp_path / "absent.yaml")

    def test_directory_is_not_a_spec(self, tmp_path):
        with pytest.raises(SpecLoaderError):
            load_spec_from_file(tmp_path)

    def test_other_suffix_is_accepted(self, tmp_path):
        path = tmp_path / "api.txt"
        path.write_text("routes: []\n")
        assert load_spec_from_file(path) == "routes: []\n"
