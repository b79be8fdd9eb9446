"""Pytest configuration and fixtures for HookReg CLI tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from hookreg_cli.js_parser import JavaScriptParser, JsNode
from hookreg_cli.samples import SAMPLES


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch):
    """Point the persisted config at a throwaway directory in every test."""
    base = tmp_path / "hookreg_home"
    monkeypatch.setattr("hookreg_cli.config.BASE_DIR", base)
    monkeypatch.setattr("hookreg_cli.config.CONFIG_FILE", base / "config.toml")
    return base


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture(scope="session")
def js_parser() -> JavaScriptParser:
    return JavaScriptParser()


@pytest.fixture
def parse(js_parser: JavaScriptParser) -> Callable[[str], JsNode]:
    """Parse a source string strictly."""
    return js_parser.parse


@pytest.fixture
def write_js(temp_dir: Path) -> Callable[[str, str], Path]:
    """Write JavaScript source to a file and return its path."""

    def _write(source: str, name: str = "input.js") -> Path:
        path = temp_dir / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_js() -> str:
    """The bundled nested-object sample."""
    return SAMPLES["default"]


@pytest.fixture
def minimal_js() -> str:
    return SAMPLES["minimal"]
