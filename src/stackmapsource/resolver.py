"""Resolve generated stack frames to their original source positions."""

import threading

from stackmapsource.errors import MapLoadError
from stackmapsource.formatter import (
    ResolvedFrame,
    format_bare,
    format_raw,
    format_resolved,
)
from stackmapsource.frames import StackFrame
from stackmapsource.log import get_logger
from stackmapsource.sourcemap.registry import SourceMapRegistry

logger = get_logger(__name__)


class PositionResolver:
    """Translate frames through the source maps held by a registry."""

    def __init__(self, registry: SourceMapRegistry) -> None:
        """Initialize the resolver.

        Args:
            registry: Initialized registry to take decoders from.

        """
        self.registry = registry
        self._reported: set[str] = set()
        self._reported_lock = threading.Lock()

    def resolve(self, frame: StackFrame) -> str:
        """Render a frame, translated to its original position when possible.

        Frames without a line are rendered as ``at method``. Frames without
        a usable map, or whose position the map does not cover, are rendered
        unresolved.

        Args:
            frame: Frame parsed from the input trace.

        Returns:
            The output line for the frame.

        """
        if frame.line is None or frame.line < 1:
            return format_bare(frame)
        if not frame.file:
            return format_raw(frame)

        try:
            decoder = self.registry.get_decoder(frame.file)
        except MapLoadError as err:
            self._report(err)
            return format_raw(frame)
        if decoder is None:
            logger.debug("No source map for %s", frame.file)
            return format_raw(frame)

        position = decoder.original_position_for(frame.line, frame.column or 0)
        if position is None:
            logger.debug(
                "No mapping for %s:%d:%d",
                frame.file,
                frame.line,
                frame.column or 0,
            )
            return format_raw(frame)

        return format_resolved(ResolvedFrame.from_position(position))

    def _report(self, err: MapLoadError) -> None:
        key = str(err.map_path)
        with self._reported_lock:
            if key in self._reported:
                return
            self._reported.add(key)
        logger.warning("%s", err)
