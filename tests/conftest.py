import importlib.util
import itertools
import sys
from pathlib import Path

import pytest

from protogen.codegen import generate_code, get_generator

FIXTURES = Path(__file__).parent / "fixtures"

_counter = itertools.count()


@pytest.fixture
def api_text() -> str:
    return (FIXTURES / "api.yaml").read_text(encoding="utf-8")


@pytest.fixture
def routes_text() -> str:
    return (FIXTURES / "routes.yaml").read_text(encoding="utf-8")


@pytest.fixture
def generate():
    """Generate code with the python generator, failing the test on errors."""

    def _generate(text, mode="protocol", **config):
        result = generate_code(get_generator("python", config or None), text, mode)
        assert result.success, result.error_message
        return result.code

    return _generate


@pytest.fixture
def load_module(tmp_path):
    """Import generated source as a module registered in ``sys.modules``."""
    loaded = []

    def _load(code: str):
        name = f"generated_{next(_counter)}"
        path = tmp_path / f"{name}.py"
        path.write_text(code, encoding="utf-8")
        spec = importlib.util.spec_from_file_location(name, path)
        module = importlib.util.module_from_spec(spec)
        # pydantic resolves annotations through the module registry
        sys.modules[name] = module
        loaded.append(name)
        spec.loader.exec_module(module)
        return module

    yield _load

    for name in loaded:
        sys.modules.pop(name, None)
