"""Source map registry.

Index the source map files available under a root path and lazily decode
one map per generated file, caching the result for the registry lifetime.
"""

import re
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from stackmapsource.errors import MapLoadError
from stackmapsource.log import get_logger
from stackmapsource.sourcemap.consumer import PositionDecoder, SourceMapConsumer
from stackmapsource.utils.file_discovery import SOURCE_MAP_PATTERN, find_files

logger = get_logger(__name__)

MAP_SUFFIX = ".map"
"""Suffix appended to a generated file basename to form its map name."""

_URL_TAIL = re.compile(r"[?#].*$")


@dataclass(frozen=True)
class MapEntry:
    """A discovered source map file."""

    basename: str
    """Map file name, i.e. the generated file basename plus ``.map``."""

    full_path: Path
    """Where the map file was found."""


def map_key(generated_file: str) -> str:
    """Compute the registry key for a generated file.

    Generated files may be paths or URLs; only the last path segment,
    without query string or fragment, is significant.

    Args:
        generated_file: File reference taken from a stack frame.

    Returns:
        Name of the map file expected to describe it.

    """
    tail = _URL_TAIL.sub("", generated_file)
    basename = re.split(r"[/\\]", tail)[-1]
    return basename + MAP_SUFFIX


class SourceMapRegistry:
    """Registry of source map files and their decoded contents.

    The index of map files is rebuilt by ``initialize``. Decoders are created
    on first use, at most once per map key, and kept until the next
    ``initialize``.
    """

    def __init__(
        self,
        decode: Callable[[str], PositionDecoder] = SourceMapConsumer.from_json,
    ) -> None:
        """Initialize an empty registry.

        Args:
            decode: Turns raw map file content into a decoder. Raises on
                malformed input.

        """
        self._decode = decode
        self._entries: dict[str, MapEntry] = {}
        self._decoders: dict[str, PositionDecoder] = {}
        self._failures: dict[str, MapLoadError] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def entries(self) -> Mapping[str, MapEntry]:
        """Discovered map files keyed by basename."""
        return MappingProxyType(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, basename: object) -> bool:
        return basename in self._entries

    def initialize(self, root: Path) -> None:
        """Reset the registry and index the map files under ``root``.

        A single file is indexed under its own name. A directory is searched
        recursively for ``*.js.map`` files (case-insensitive); when two files
        share a name, the one visited last wins.

        Args:
            root: A source map file or a directory containing map files.

        Raises:
            FileNotFoundError: If ``root`` does not exist.

        """
        self._entries = {}
        self._decoders = {}
        self._failures = {}
        with self._locks_guard:
            self._locks = {}

        if root.is_file():
            self._add(root.absolute())
        elif root.is_dir():
            for path in find_files(root, SOURCE_MAP_PATTERN):
                self._add(path)
        else:
            msg = f"Source map path not found: {root}"
            raise FileNotFoundError(msg)

        logger.debug("Indexed %d source map(s) under %s", len(self._entries), root)

    def _add(self, path: Path) -> None:
        previous = self._entries.get(path.name)
        if previous is not None:
            logger.debug(
                "Source map %s replaces %s",
                path,
                previous.full_path,
            )
        self._entries[path.name] = MapEntry(basename=path.name, full_path=path)

    def _lock_for(self, key: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def get_decoder(self, generated_file: str) -> PositionDecoder | None:
        """Get the decoder for a generated file, loading it on first use.

        Args:
            generated_file: File reference taken from a stack frame.

        Returns:
            The cached decoder, or None if no map was discovered for the file.

        Raises:
            MapLoadError: If the map file cannot be read or decoded. The
                failure is remembered and raised again on later calls.

        """
        key = map_key(generated_file)

        decoder = self._decoders.get(key)
        if decoder is not None:
            return decoder

        entry = self._entries.get(key)
        if entry is None:
            return None

        with self._lock_for(key):
            # Another thread may have filled the cache while we waited
            decoder = self._decoders.get(key)
            if decoder is not None:
                return decoder
            failure = self._failures.get(key)
            if failure is not None:
                raise failure

            try:
                decoder = self._load(entry)
            except MapLoadError as err:
                self._failures[key] = err
                raise

            self._decoders[key] = decoder
            return decoder

    def _load(self, entry: MapEntry) -> PositionDecoder:
        logger.debug("Loading source map %s", entry.full_path)
        try:
            content = entry.full_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            raise MapLoadError(entry.full_path, str(err)) from err

        try:
            return self._decode(content)
        except Exception as err:
            # Malformed maps surface as ValueError, KeyError, IndexError, ...
            reason = f"{type(err).__name__}: {err}"
            raise MapLoadError(entry.full_path, reason) from err
