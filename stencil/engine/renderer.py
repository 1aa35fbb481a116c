"""Renders a parsed ``Template`` against a binding map."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping

from .errors import UnboundPlaceholderError
from .models import BindingMap, LiteralSegment, Template

_LEADING_WS = re.compile(r"[ \t]*")


class Renderer:
    """Substitutes placeholder segments with their bound values.

    Values are opaque text: they are inserted once and never re-parsed, so a
    value such as ``{{evil}}`` reaches the output verbatim.

    Args:
        indent_multiline: When enabled, continuation lines of a multi-line
            value are indented to match the output line the placeholder sits
            on.  Blank continuation lines are left empty.
        escape: Optional function applied to every value before insertion,
            for destination formats that need escaping.
    """

    def __init__(
        self,
        indent_multiline: bool = False,
        escape: Callable[[str], str] | None = None,
    ) -> None:
        self.indent_multiline = indent_multiline
        self.escape = escape

    def render(self, template: Template, bindings: BindingMap | Mapping[str, str]) -> str:
        """Render *template* with *bindings*.

        Raises:
            UnboundPlaceholderError: If a placeholder has no entry in
                *bindings*.
        """
        parts: list[str] = []
        current_line = ""

        for segment in template.segments:
            if isinstance(segment, LiteralSegment):
                text = segment.text
            else:
                if segment.name not in bindings:
                    raise UnboundPlaceholderError(segment.name)
                text = bindings[segment.name]
                if self.escape is not None:
                    text = self.escape(text)
                if self.indent_multiline and "\n" in text:
                    indent = _LEADING_WS.match(current_line).group()
                    text = _indent_continuation(text, indent)

            parts.append(text)
            if "\n" in text:
                current_line = text.rsplit("\n", 1)[1]
            else:
                current_line += text

        return "".join(parts)


def _indent_continuation(value: str, indent: str) -> str:
    """Prefix every line of *value* after the first with *indent*."""
    if not indent:
        return value
    first, *rest = value.split("\n")
    return "\n".join([first, *(f"{indent}{line}" if line.strip() else line for line in rest)])
