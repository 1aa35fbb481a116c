"""Template parser.

Splits template text into literal and placeholder segments.  Only the
double-brace form ``{{name}}`` opens a placeholder; a single ``{`` or ``}`` is
host-language syntax (JSX expressions, object literals, comments such as
``{/* ... */}``) and passes through untouched.

There is no escape syntax: a backslash is always literal text.  A ``}}`` that
does not close a placeholder is plain literal text.
"""

from __future__ import annotations

import re

from .errors import MalformedTemplateError
from .models import LiteralSegment, PlaceholderSegment, Template

OPEN = "{{"
CLOSE = "}}"

_OPEN_RE = re.compile(r"\{\{")
_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _position(source: str, offset: int) -> tuple[int, int]:
    """Return the 1-based ``(line, column)`` of *offset* in *source*."""
    line = source.count("\n", 0, offset) + 1
    column = offset - (source.rfind("\n", 0, offset) + 1) + 1
    return line, column


def _malformed(message: str, source: str, offset: int) -> MalformedTemplateError:
    line, column = _position(source, offset)
    return MalformedTemplateError(message, offset=offset, line=line, column=column)


def parse_template(source: str) -> Template:
    """Parse *source* into an immutable ``Template``.

    Args:
        source: Raw template text.

    Returns:
        The parsed template.  Adjacent literal text is merged into a single
        segment and empty literals are dropped.

    Raises:
        MalformedTemplateError: If a ``{{`` is never closed, if a second
            ``{{`` appears before the closing ``}}``, or if a placeholder name
            is empty or not an identifier.
    """
    segments: list[LiteralSegment | PlaceholderSegment] = []
    literal: list[str] = []

    def flush() -> None:
        text = "".join(literal)
        if text:
            segments.append(LiteralSegment(text=text))
        literal.clear()

    pos = 0
    while True:
        match = _OPEN_RE.search(source, pos)
        if match is None:
            literal.append(source[pos:])
            break

        literal.append(source[pos:match.start()])
        start = match.start()
        close = source.find(CLOSE, match.end())
        if close == -1:
            raise _malformed("Unclosed placeholder delimiter '{{'", source, start)

        nested = source.find(OPEN, match.end(), close)
        if nested != -1:
            raise _malformed("Nested '{{' inside placeholder", source, nested)

        name = source[match.end():close].strip()
        if not name:
            raise _malformed("Empty placeholder name", source, start)
        if not _NAME_RE.fullmatch(name):
            raise _malformed(f"Invalid placeholder name {name!r}", source, start)

        flush()
        line, column = _position(source, start)
        segments.append(
            PlaceholderSegment(name=name, offset=start, line=line, column=column)
        )
        pos = close + len(CLOSE)

    flush()
    return Template(source=source, segments=tuple(segments))
