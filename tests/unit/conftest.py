"""Shared fixtures for stackmapsource unit tests."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from stackmapsource.sourcemap.registry import SourceMapRegistry

# Generated line 1:
#   col 100 -> src/a.js 10:4 "foo"
#   col 150 -> src/b.js 20:0 "bar"
# Generated line 2:
#   col 0   -> src/b.js 20:0 (no name)
BUNDLE_MAPPINGS = "oGASIA,kDCUJC;AAAA"


def source_map_json(
    file: str = "bundle.js",
    mappings: str = BUNDLE_MAPPINGS,
) -> str:
    """Build source map JSON for a generated file."""
    return json.dumps(
        {
            "version": 3,
            "file": file,
            "sources": ["src/a.js", "src/b.js"],
            "names": ["foo", "bar"],
            "mappings": mappings,
        },
    )


@pytest.fixture
def map_json() -> Callable[..., str]:
    """Provide the source map JSON builder."""
    return source_map_json


@pytest.fixture
def write_map(tmp_path: Path) -> Callable[..., Path]:
    """Write a source map for a generated file under tmp_path."""

    def _write(
        generated: str = "bundle.js",
        subdir: str = "maps",
        content: str | None = None,
    ) -> Path:
        folder = tmp_path / subdir
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / f"{generated}.map"
        path.write_text(
            source_map_json(generated) if content is None else content,
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture
def maps_dir(tmp_path: Path, write_map) -> Path:
    """Directory holding a valid map for bundle.js."""
    write_map("bundle.js")
    return tmp_path / "maps"


@pytest.fixture
def registry(maps_dir: Path) -> SourceMapRegistry:
    """Registry initialized with the bundle.js map."""
    reg = SourceMapRegistry()
    reg.initialize(maps_dir)
    return reg


@pytest.fixture
def empty_registry(tmp_path: Path) -> SourceMapRegistry:
    """Registry initialized with a directory without maps."""
    empty = tmp_path / "empty"
    empty.mkdir()
    reg = SourceMapRegistry()
    reg.initialize(empty)
    return reg
