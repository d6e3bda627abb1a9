"""Source map module for stackmapsource.

Discover source map files and translate generated positions back to
original source locations.
"""

from stackmapsource.sourcemap.consumer import (
    OriginalPosition,
    PositionDecoder,
    SourceMapConsumer,
)
from stackmapsource.sourcemap.registry import MapEntry, SourceMapRegistry, map_key

__all__ = [
    "MapEntry",
    "OriginalPosition",
    "PositionDecoder",
    "SourceMapConsumer",
    "SourceMapRegistry",
    "map_key",
]
