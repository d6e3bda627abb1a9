"""Translate a whole stack trace, frame by frame."""

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TextIO

from stackmapsource.formatter import FAILED_LINE
from stackmapsource.frames import StackFrame, parse_trace
from stackmapsource.log import get_logger
from stackmapsource.resolver import PositionResolver
from stackmapsource.sourcemap.registry import SourceMapRegistry

logger = get_logger(__name__)


def _safe(resolve: Callable[[StackFrame], str]) -> Callable[[StackFrame], str]:
    def resolve_or_fail(frame: StackFrame) -> str:
        try:
            return resolve(frame)
        except Exception:  # noqa: BLE001
            # Per-frame failures render as FAILED_LINE
            logger.debug("Failed to resolve frame %r", frame.raw, exc_info=True)
            return FAILED_LINE

    return resolve_or_fail


def translate(
    text: str,
    registry: SourceMapRegistry,
    jobs: int = 1,
) -> list[str]:
    """Translate a stack trace into original source positions.

    Args:
        text: The whole stack trace input.
        registry: Initialized source map registry.
        jobs: Number of threads resolving frames. Output order does not
            depend on it.

    Returns:
        The header line, if any, followed by one line per input frame.

    Raises:
        EmptyTraceError: If the input contains no stack frames.

    """
    trace = parse_trace(text)
    resolve = _safe(PositionResolver(registry).resolve)

    lines = []
    if trace.header is not None:
        lines.append(trace.header)

    if jobs > 1 and len(trace.frames) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            lines.extend(executor.map(resolve, trace.frames))
    else:
        lines.extend(resolve(frame) for frame in trace.frames)

    return lines


def write_translation(
    text: str,
    registry: SourceMapRegistry,
    out: TextIO,
    jobs: int = 1,
) -> None:
    """Translate a stack trace and write it out, one line per frame."""
    for line in translate(text, registry, jobs=jobs):
        out.write(f"{line}\n")
