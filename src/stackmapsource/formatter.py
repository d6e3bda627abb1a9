"""Render stack frames as output lines."""

from dataclasses import dataclass

from stackmapsource.frames import StackFrame
from stackmapsource.sourcemap.consumer import OriginalPosition

INDENT = "    "
FAILED_LINE = f"{INDENT}at FAILED_TO_PARSE_LINE"
"""Line emitted for a frame whose resolution failed unexpectedly."""


@dataclass(frozen=True)
class ResolvedFrame:
    """A frame translated to its original source location."""

    display_name: str
    source: str
    line: int
    column: int

    @classmethod
    def from_position(cls, position: OriginalPosition) -> "ResolvedFrame":
        """Build a resolved frame from a source map lookup result."""
        return cls(
            display_name=position.name or "",
            source=position.source,
            line=position.line,
            column=position.column,
        )


def format_resolved(frame: ResolvedFrame) -> str:
    """Format a resolved frame as ``at name (source:line:column)``."""
    location = f"{frame.source}:{frame.line}:{frame.column}"
    return f"{INDENT}at {frame.display_name} ({location})"


def format_raw(frame: StackFrame) -> str:
    """Format an unresolved frame as ``at method (file:column:line)``.

    Column precedes line here, unlike ``format_resolved``. The location is
    only printed when both numbers are non-zero.
    """
    parts = [INDENT, "at ", frame.method_name]
    if frame.file:
        parts.append(f" ({frame.file}")
        if frame.line and frame.column:
            parts.append(f":{frame.column}:{frame.line}")
        parts.append(")")
    return "".join(parts)


def format_bare(frame: StackFrame) -> str:
    """Format a frame without location as ``at method``."""
    return f"{INDENT}at {frame.method_name}"
