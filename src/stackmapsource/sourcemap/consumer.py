"""Position lookups backed by the ``sourcemap`` library.

Translate generated (line, column) positions into original source
positions. Decoding of the mapping payload is delegated to ``sourcemap``.
"""

from dataclasses import dataclass
from typing import Protocol

import sourcemap

from stackmapsource.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OriginalPosition:
    """Original source location for a generated position."""

    source: str
    """Original source file, as listed in the map's ``sources``."""

    name: str | None
    """Original identifier, if the mapping carries one."""

    line: int
    """Line number in the original source (1-indexed)."""

    column: int
    """Column number in the original source (0-indexed)."""


class PositionDecoder(Protocol):
    """Capability to translate generated positions to original ones."""

    def original_position_for(
        self,
        line: int,
        column: int,
    ) -> OriginalPosition | None:
        """Find the original position for a generated position.

        Args:
            line: Generated line (1-indexed).
            column: Generated column (0-indexed).

        Returns:
            The original position, or None when nothing maps there.

        """
        ...


class SourceMapConsumer:
    """PositionDecoder over a decoded ``sourcemap.SourceMapIndex``."""

    def __init__(self, index: "sourcemap.objects.SourceMapIndex") -> None:
        """Wrap an already decoded source map index.

        Args:
            index: Index returned by ``sourcemap.loads``.

        """
        self._index = index

    @classmethod
    def from_json(cls, content: str) -> "SourceMapConsumer":
        """Decode raw source map JSON.

        Args:
            content: Source map file content.

        Returns:
            A consumer for the decoded map.

        Raises:
            ValueError: If the content is not a valid source map. This
                includes ``sourcemap.SourceMapDecodeError``.

        """
        return cls(sourcemap.loads(content))

    def original_position_for(
        self,
        line: int,
        column: int,
    ) -> OriginalPosition | None:
        """Find the original position for a generated position.

        Use the closest mapping at or before ``column`` on the same
        generated line.

        Args:
            line: Generated line (1-indexed).
            column: Generated column (0-indexed).

        Returns:
            The original position, or None when the line has no mapping at
            or before the column, or the mapping has no source.

        """
        if line < 1 or column < 0:
            return None

        try:
            token = self._index.lookup(line - 1, column)
        except IndexError:
            return None

        # lookup() may fall back to a token from elsewhere on the line
        if token.dst_line != line - 1 or token.dst_col > column:
            return None
        if not token.src:
            return None

        return OriginalPosition(
            source=token.src,
            name=token.name or None,
            line=token.src_line + 1,
            column=token.src_col,
        )
