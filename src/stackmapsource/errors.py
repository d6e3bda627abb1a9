"""Error types raised by the stack trace translation pipeline."""

from pathlib import Path


class StackMapSourceError(Exception):
    """Base class for all stackmapsource errors."""


class EmptyTraceError(StackMapSourceError):
    """Raised when the input contains no recognizable stack frames."""

    def __init__(self) -> None:
        """Initialize with a fixed message."""
        super().__init__("No stack found")


class MapLoadError(StackMapSourceError):
    """Raised when a discovered source map cannot be read or decoded.

    Recoverable per frame: callers fall back to the unresolved frame.
    """

    def __init__(self, map_path: Path, reason: str) -> None:
        """Initialize the error.

        Args:
            map_path: Path of the map file that failed to load.
            reason: Short description of the underlying failure.

        """
        super().__init__(f"Failed to load source map {map_path}: {reason}")
        self.map_path = map_path
        self.reason = reason
