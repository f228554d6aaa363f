"""
Shared pytest fixtures for all tests.

Every test gets its own content, component, cache and static directories
under tmp_path.
"""

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from jsonpage.settings import Settings, clear_settings_cache


@pytest.fixture(autouse=True)
def isolate_settings():
    """Drop cached environment settings around each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def content_dir(tmp_path) -> Path:
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture
def components_dir(tmp_path) -> Path:
    path = tmp_path / "components"
    path.mkdir()
    return path


@pytest.fixture
def cache_dir(components_dir) -> Path:
    return components_dir / "cached"


@pytest.fixture
def static_dir(tmp_path) -> Path:
    path = tmp_path / "static"
    path.mkdir()
    return path


@pytest.fixture
def settings(content_dir, components_dir, cache_dir, static_dir) -> Settings:
    return Settings(
        content_dir=content_dir,
        components_dir=components_dir,
        cache_dir=cache_dir,
        static_dir=static_dir,
        log_format="text",
    )


@pytest.fixture
def design_settings(settings) -> Settings:
    settings.ai_design = True
    return settings


@pytest.fixture
def write_document(content_dir) -> Callable[..., Path]:
    """Write a document as index.json (or index.<name>.json)."""

    def _write(document: Any, name: str = None) -> Path:
        filename = "index.json" if name is None else f"index.{name}.json"
        path = content_dir / filename
        if isinstance(document, (str, bytes)):
            data = document.encode("utf-8") if isinstance(document, str) else document
            path.write_bytes(data)
        else:
            path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_component(components_dir) -> Callable[[str, str], Path]:
    """Write a default component template."""

    def _write(name: str, source: str) -> Path:
        path = components_dir / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write
