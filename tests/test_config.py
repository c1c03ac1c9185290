import json

import pytest

from protogen.codegen.core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    get_config_manager,
    load_config,
)
from protogen.codegen.languages.python.config import PythonConfig, render_imports


class TestConfigManager:
    def test_python_defaults(self):
        config = load_config("python")
        assert config.indent_size == 4
        assert config.add_comments is True
        assert config.runtime_module == "protogen.runtime"
        assert config.label_prefix is None
        assert config.custom == {"max_blank_lines": 2}

    def test_unknown_keys_go_to_custom(self):
        config = load_config("python", {"label_prefix": "api.", "frozen_models": True})
        assert config.label_prefix == "api."
        assert config.custom == {"max_blank_lines": 2, "frozen_models": True}

    def test_defaults_are_not_mutated(self):
        load_config("python", {"custom": {"max_blank_lines": 1}})
        assert load_config("python").custom == {"max_blank_lines": 2}

    def test_config_file(self, tmp_path):
        path = tmp_path / "protogen.json"
        path.write_text(json.dumps({"indent_size": 2, "external_module": "app.types"}))
        config = load_config("python", {"indent_size": 3}, path)
        assert config.indent_size == 3
        assert config.custom["external_module"] == "app.types"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(config_file=tmp_path / "absent.json")

    def test_requires_json_suffix(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("indent_size: 2")
        with pytest.raises(ConfigError, match="must be JSON"):
            load_config(config_file=path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{indent_size")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(config_file=path)

    def test_requires_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(config_file=path)

    def test_validate_config(self):
        manager = get_config_manager()
        config = GeneratorConfig(indent_size=0, runtime_module="my-app.runtime")
        assert manager.validate_config(config, "python") == [
            "Invalid indent_size: 0",
            "Invalid runtime_module: my-app.runtime",
        ]
        assert manager.validate_config(GeneratorConfig(), "python") == []

    def test_list_languages(self):
        assert ConfigManager().list_languages() == ["python"]


class TestPythonConfig:
    def test_model_config_items(self):
        assert PythonConfig().model_config_items(False) == []
        assert PythonConfig().model_config_items(True) == ["populate_by_name=True"]
        config = PythonConfig(extra_forbid=True, frozen_models=True)
        assert config.model_config_items(False) == ['extra="forbid"', "frozen=True"]

    def test_render_imports(self):
        lines = render_imports({"Optional", "BaseModel", "json", "Enum", "Field"}, "app.rt")
        assert lines == [
            "import json",
            "from enum import Enum",
            "from typing import Optional",
            "",
            "from pydantic import BaseModel, Field",
            "",
            "import app.rt as runtime",
        ]

    def test_render_imports_runtime_only(self):
        assert render_imports(set(), "protogen.runtime") == ["import protogen.runtime as runtime"]
