"""Tests for SourceMapRegistry discovery and decoder caching."""

import threading
import time
from pathlib import Path
from unittest.mock import Mock

import pytest

from stackmapsource.errors import MapLoadError
from stackmapsource.sourcemap.consumer import SourceMapConsumer
from stackmapsource.sourcemap.registry import SourceMapRegistry, map_key


class TestMapKey:
    """Test computing registry keys from frame file references."""

    def test_plain_file(self) -> None:
        assert map_key("bundle.js") == "bundle.js.map"

    def test_path(self) -> None:
        assert map_key("/srv/app/static/bundle.js") == "bundle.js.map"

    def test_url_with_query(self) -> None:
        assert map_key("https://cdn.example.com/js/main.js?v=3#x") == "main.js.map"

    def test_windows_path(self) -> None:
        assert map_key("C:\\app\\main.js") == "main.js.map"


class TestInitialize:
    """Test indexing map files."""

    def test_single_file_indexed_by_own_name(self, write_map) -> None:
        """A file root is indexed under its own basename."""
        path = write_map("bundle.js")
        registry = SourceMapRegistry()
        registry.initialize(path)

        assert len(registry) == 1
        assert "bundle.js.map" in registry
        assert registry.entries["bundle.js.map"].full_path == path.absolute()

    def test_directory_recursive(self, tmp_path: Path, write_map) -> None:
        """Maps in nested directories are all indexed."""
        write_map("bundle.js", subdir="maps")
        write_map("vendor.js", subdir="maps/nested/deeper")
        registry = SourceMapRegistry()
        registry.initialize(tmp_path / "maps")

        assert set(registry.entries) == {"bundle.js.map", "vendor.js.map"}

    def test_pattern_is_case_insensitive(self, tmp_path: Path) -> None:
        """Upper-case .JS.MAP files are indexed."""
        folder = tmp_path / "maps"
        folder.mkdir()
        (folder / "App.JS.MAP").write_text("{}")
        registry = SourceMapRegistry()
        registry.initialize(folder)

        assert "App.JS.MAP" in registry

    def test_non_js_maps_ignored(self, tmp_path: Path) -> None:
        """Only names ending with .js.map are indexed."""
        folder = tmp_path / "maps"
        folder.mkdir()
        (folder / "style.css.map").write_text("{}")
        (folder / "bundle.js.map.bak").write_text("{}")
        (folder / "bundle.js").write_text("")
        registry = SourceMapRegistry()
        registry.initialize(folder)

        assert len(registry) == 0

    def test_basename_collision_last_write_wins(
        self,
        tmp_path: Path,
        write_map,
    ) -> None:
        """Two maps with one basename leave one entry, the last visited."""
        write_map("bundle.js", subdir="maps/a")
        later = write_map("bundle.js", subdir="maps/b")
        registry = SourceMapRegistry()
        registry.initialize(tmp_path / "maps")

        assert len(registry) == 1
        assert registry.entries["bundle.js.map"].full_path == later.absolute()

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        registry = SourceMapRegistry()
        with pytest.raises(FileNotFoundError):
            registry.initialize(tmp_path / "missing")

    def test_initialize_resets_state(self, tmp_path: Path, write_map) -> None:
        """A second initialize drops the previous index and cache."""
        first = write_map("bundle.js", subdir="first")
        write_map("other.js", subdir="second")
        registry = SourceMapRegistry()
        registry.initialize(first)
        assert registry.get_decoder("bundle.js") is not None

        registry.initialize(tmp_path / "second")

        assert "bundle.js.map" not in registry
        assert registry.get_decoder("bundle.js") is None
        assert registry.get_decoder("other.js") is not None


class TestGetDecoder:
    """Test lazy decoder creation and caching."""

    def test_no_map_returns_none(self, registry: SourceMapRegistry) -> None:
        """Files without a discovered map are not an error."""
        assert registry.get_decoder("runtime.js") is None

    def test_decoder_resolves(self, registry: SourceMapRegistry) -> None:
        decoder = registry.get_decoder("http://localhost/static/bundle.js")
        assert decoder is not None
        position = decoder.original_position_for(1, 100)
        assert position is not None
        assert position.source == "src/a.js"

    def test_decoder_cached(self, maps_dir: Path) -> None:
        """Repeated lookups return the same decoder and decode once."""
        decode = Mock(side_effect=SourceMapConsumer.from_json)
        registry = SourceMapRegistry(decode=decode)
        registry.initialize(maps_dir)

        first = registry.get_decoder("bundle.js")
        second = registry.get_decoder("/other/dir/bundle.js")

        assert first is not None
        assert first is second
        assert decode.call_count == 1

    def test_concurrent_lookups_decode_once(self, maps_dir: Path) -> None:
        """Threads racing on one map share a single decode."""

        def slow_decode(content: str) -> SourceMapConsumer:
            time.sleep(0.05)
            return SourceMapConsumer.from_json(content)

        decode = Mock(side_effect=slow_decode)
        registry = SourceMapRegistry(decode=decode)
        registry.initialize(maps_dir)

        results = []
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            results.append(registry.get_decoder("bundle.js"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert decode.call_count == 1
        assert len(results) == 8
        assert all(result is results[0] for result in results)

    def test_malformed_map_raises_map_load_error(self, write_map) -> None:
        path = write_map("bundle.js", content="{ not json")
        registry = SourceMapRegistry()
        registry.initialize(path.parent)

        with pytest.raises(MapLoadError) as exc_info:
            registry.get_decoder("bundle.js")
        assert exc_info.value.map_path == path.absolute()

    def test_failed_load_not_retried(self, write_map) -> None:
        """A failing map is decoded once and the same error is re-raised."""
        path = write_map("bundle.js")
        decode = Mock(side_effect=ValueError("bad mappings"))
        registry = SourceMapRegistry(decode=decode)
        registry.initialize(path.parent)

        with pytest.raises(MapLoadError) as first:
            registry.get_decoder("bundle.js")
        with pytest.raises(MapLoadError) as second:
            registry.get_decoder("bundle.js")

        assert first.value is second.value
        assert decode.call_count == 1
        assert "ValueError: bad mappings" in str(first.value)

    def test_deleted_map_raises_map_load_error(self, write_map) -> None:
        """A map removed after discovery fails at load time."""
        path = write_map("bundle.js")
        registry = SourceMapRegistry()
        registry.initialize(path.parent)
        path.unlink()

        with pytest.raises(MapLoadError):
            registry.get_decoder("bundle.js")
