"""Exception hierarchy for the scaffolding engine.

Every error raised by the core derives from ``ScaffoldError`` so a caller
(typically the CLI) can catch the whole family in one place.  The core never
logs or retries; it raises to the immediate caller and leaves messaging to it.
"""

from __future__ import annotations

from collections.abc import Sequence


class ScaffoldError(Exception):
    """Base class for all scaffolding engine errors."""


class MalformedTemplateError(ScaffoldError):
    """Raised when template text cannot be parsed.

    Covers an unclosed ``{{``, a nested ``{{`` before the closing ``}}`` and
    placeholder names that violate the identifier grammar.
    """

    def __init__(self, message: str, offset: int = 0, line: int = 1, column: int = 1) -> None:
        self.offset = offset
        self.line = line
        self.column = column
        super().__init__(f"{message} (line {line}, column {column})")


class MissingBindingError(ScaffoldError):
    """Raised when required user values are absent.

    ``missing`` lists every absent name so the caller can report (or prompt
    for) all of them in a single pass.
    """

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"Missing values for: {', '.join(self.missing)}")


class CyclicDerivationError(ScaffoldError):
    """Raised when derivation rules depend on each other circularly."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        super().__init__(f"Cyclic derivation: {' -> '.join(self.cycle)}")


class UnboundPlaceholderError(ScaffoldError):
    """Raised by the renderer when a required binding is absent.

    Resolution already guarantees completeness, so reaching this indicates an
    engine bug rather than a user error.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No binding for placeholder '{name}'")
