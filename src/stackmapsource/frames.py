"""Stack trace parser.

Parse free-text JavaScript stack traces into structured frames.

Supported formats
-----------------
Chrome / V8 (browser URLs)::

    at functionName (https://example.com/bundle.js:1:100)

WinJS::

    at functionName (ms-appx://app/bundle.js:1:100)

Gecko / Safari / JavaScriptCore::

    functionName@https://example.com/bundle.js:1:100
    value@[native code]

Node / React Native::

    at functionName (bundle.js:1:100)
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from stackmapsource.errors import EmptyTraceError
from stackmapsource.log import get_logger

logger = get_logger(__name__)

UNKNOWN_FUNCTION = "<unknown>"
"""Method name used when the frame does not carry one."""

NATIVE_CODE = "[native code]"


@dataclass(frozen=True)
class StackFrame:
    """A single call site from a generated-code stack trace."""

    file: str | None
    """Generated file, URL or location marker; None for native frames."""

    method_name: str = UNKNOWN_FUNCTION
    """Function or method name as it appears in the trace."""

    line: int | None = None
    """Generated line number (1-indexed), if present."""

    column: int | None = None
    """Generated column number (0-indexed), if present."""

    raw: str = field(default="", compare=False)
    """The input line the frame was parsed from."""


@dataclass(frozen=True)
class ParsedTrace:
    """Frames of a stack trace plus the message line above them."""

    header: str | None
    frames: list[StackFrame]


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# [native code] value
_NATIVE = re.compile(r"^\s*\[native code\]\s+(?P<method>\S.*?)\s*$")

# at foo (https://host/bundle.js:1:100), at foo (native), at foo (eval at ...)
_CHROME = re.compile(
    r"^\s*at (?:(?P<method>.*?) ?\()?"
    r"(?P<file>(?:file|https?|blob|chrome-extension|native|eval|webpack|rsc"
    r"|<anonymous>|/|[a-z]:\\|\\\\).*?)"
    r"(?::(?P<line>\d+))?(?::(?P<column>\d+))?\)?\s*$",
    re.IGNORECASE,
)
_CHROME_EVAL = re.compile(
    r"\((?P<file>\S*)(?::(?P<line>\d+))(?::(?P<column>\d+))\)",
)

# at foo (ms-appx://app/bundle.js:1:100)
_WINJS = re.compile(
    r"^\s*at (?:(?P<method>(?:\[object object\])?.+) )?\(?"
    r"(?P<file>(?:file|ms-appx|https?|webpack|rsc|blob):.*?)"
    r":(?P<line>\d+)(?::(?P<column>\d+))?\)?\s*$",
    re.IGNORECASE,
)

# foo@https://host/bundle.js:1:100, value@[native code], foo@index.bundle:1:2
_GECKO = re.compile(
    r"^\s*(?P<method>.*?)(?:\((?P<args>.*?)\))?(?:^|@)"
    r"(?P<file>(?:file|https?|blob|chrome|webpack|rsc|resource|\[native).*?"
    r"|[^@]*bundle)"
    r"(?::(?P<line>\d+))?(?::(?P<column>\d+))?\s*$",
    re.IGNORECASE,
)
_GECKO_EVAL = re.compile(
    r"(?P<file>\S+) line (?P<line>\d+)(?: > eval line \d+)* > eval",
    re.IGNORECASE,
)

# at foo (bundle.js:1:100), at bundle.js:1:100
_NODE = re.compile(
    r"^\s*at (?:(?P<method>(?:\[object object\])?[^\\/]+(?: \[as \S+\])?) )?"
    r"\(?(?P<file>.*?):(?P<line>\d+)(?::(?P<column>\d+))?\)?\s*$",
    re.IGNORECASE,
)

# foo@bundle.js:1:100
_JSC = re.compile(
    r"^\s*(?:(?P<method>[^@]*)(?:\((?P<args>.*?)\))?@)?"
    r"(?P<file>\S.*?):(?P<line>\d+)(?::(?P<column>\d+))?\s*$",
    re.IGNORECASE,
)


def _int_or_none(value: str | None) -> int | None:
    return int(value) if value else None


def _parse_native(line: str) -> StackFrame | None:
    match = _NATIVE.match(line)
    if not match:
        return None
    return StackFrame(file=NATIVE_CODE, method_name=match.group("method"), raw=line)


def _parse_chrome(line: str) -> StackFrame | None:
    match = _CHROME.match(line)
    if not match:
        return None

    file = match.group("file")
    line_no = match.group("line")
    column = match.group("column")
    is_native = file.lower().startswith("native")
    if file.lower().startswith("eval"):
        submatch = _CHROME_EVAL.search(file)
        if submatch:
            file = submatch.group("file")
            line_no = submatch.group("line")
            column = submatch.group("column")

    return StackFrame(
        file=None if is_native else file,
        method_name=match.group("method") or UNKNOWN_FUNCTION,
        line=_int_or_none(line_no),
        column=_int_or_none(column),
        raw=line,
    )


def _parse_winjs(line: str) -> StackFrame | None:
    match = _WINJS.match(line)
    if not match:
        return None
    return StackFrame(
        file=match.group("file"),
        method_name=match.group("method") or UNKNOWN_FUNCTION,
        line=int(match.group("line")),
        column=_int_or_none(match.group("column")),
        raw=line,
    )


def _parse_gecko(line: str) -> StackFrame | None:
    match = _GECKO.match(line)
    if not match:
        return None

    file = match.group("file")
    line_no = match.group("line")
    column = match.group("column")
    if " > eval" in file:
        submatch = _GECKO_EVAL.search(file)
        if submatch:
            file = submatch.group("file")
            line_no = submatch.group("line")
            column = None

    return StackFrame(
        file=file,
        method_name=match.group("method") or UNKNOWN_FUNCTION,
        line=_int_or_none(line_no),
        column=_int_or_none(column),
        raw=line,
    )


def _parse_node(line: str) -> StackFrame | None:
    match = _NODE.match(line)
    if not match:
        return None
    return StackFrame(
        file=match.group("file"),
        method_name=match.group("method") or UNKNOWN_FUNCTION,
        line=int(match.group("line")),
        column=_int_or_none(match.group("column")),
        raw=line,
    )


def _parse_jsc(line: str) -> StackFrame | None:
    match = _JSC.match(line)
    if not match:
        return None
    return StackFrame(
        file=match.group("file"),
        method_name=match.group("method") or UNKNOWN_FUNCTION,
        line=int(match.group("line")),
        column=_int_or_none(match.group("column")),
        raw=line,
    )


_PARSERS: tuple[Callable[[str], StackFrame | None], ...] = (
    _parse_native,
    _parse_chrome,
    _parse_winjs,
    _parse_gecko,
    _parse_node,
    _parse_jsc,
)


def parse_frame(line: str) -> StackFrame | None:
    """Parse a single line of a stack trace.

    Args:
        line: One line of input, without the line terminator.

    Returns:
        The parsed frame, or None if the line is not a stack frame.

    """
    for parser in _PARSERS:
        frame = parser(line)
        if frame is not None:
            return frame
    return None


def extract_frames(text: str) -> list[StackFrame]:
    """Parse every recognizable stack frame in the text, in input order."""
    frames = []
    for line in text.splitlines():
        frame = parse_frame(line)
        if frame is not None:
            frames.append(frame)
    return frames


def find_header(text: str, frames: list[StackFrame]) -> str | None:
    """Find the message line printed above the frames.

    The header is the first non-blank line, unless it already is (or
    contains the file of) the first frame.

    Args:
        text: The full stack trace input.
        frames: Frames extracted from ``text``.

    Returns:
        The header line, or None if there is nothing to print above frames.

    """
    if not frames:
        return None

    header = next((line for line in text.splitlines() if line.strip()), None)
    if header is None:
        return None

    first = frames[0]
    if first.file is not None and first.file in header:
        return None
    if header == first.raw:
        return None
    return header


def parse_trace(text: str) -> ParsedTrace:
    """Parse a stack trace into its header and frames.

    Raises:
        EmptyTraceError: If no stack frame is recognized.

    """
    frames = extract_frames(text)
    if not frames:
        raise EmptyTraceError
    logger.debug("Parsed %d stack frame(s)", len(frames))
    return ParsedTrace(header=find_header(text, frames), frames=frames)
