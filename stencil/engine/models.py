"""Pydantic v2 models for parsed templates and resolved bindings.

A ``Template`` is an ordered tuple of segments, each either a literal text
span or a reference to a named placeholder.  Every model here is frozen: once
parsed or resolved, nothing is mutated, so instances can be shared freely
between concurrent scaffold calls.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

PLACEHOLDER_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"


# ---------------------------------------------------------------------------
# Placeholders & segments
# ---------------------------------------------------------------------------

class Placeholder(BaseModel):
    """A named substitution slot, deduplicated across a template."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=PLACEHOLDER_PATTERN)
    occurrence_count: int = Field(default=1, ge=1)
    is_derived: bool = Field(default=False, description="Value is computed by a derivation rule")


class LiteralSegment(BaseModel):
    """Verbatim text between placeholders."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    text: str


class PlaceholderSegment(BaseModel):
    """A single ``{{name}}`` occurrence.

    ``offset`` is 0-based; ``line`` and ``column`` are 1-based and point at the
    opening delimiter.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["placeholder"] = "placeholder"
    name: str = Field(..., pattern=PLACEHOLDER_PATTERN)
    offset: int = Field(default=0, ge=0)
    line: int = Field(default=1, ge=1)
    column: int = Field(default=1, ge=1)


Segment = Annotated[Union[LiteralSegment, PlaceholderSegment], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Template
# ---------------------------------------------------------------------------

class Template(BaseModel):
    """Immutable parsed representation of template source text."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(default="", description="Original template text")
    segments: tuple[Segment, ...] = Field(default=())

    @classmethod
    def parse(cls, source: str) -> Template:
        """Parse *source* into a ``Template``.

        Raises:
            MalformedTemplateError: On unclosed or nested delimiters and on
                placeholder names outside ``[A-Za-z_][A-Za-z0-9_]*``.
        """
        from stencil.engine.parser import parse_template

        return parse_template(source)

    @property
    def placeholder_names(self) -> tuple[str, ...]:
        """Distinct placeholder names in first-occurrence order."""
        seen: dict[str, None] = {}
        for segment in self.segments:
            if isinstance(segment, PlaceholderSegment):
                seen.setdefault(segment.name, None)
        return tuple(seen)

    @property
    def literal_text(self) -> str:
        """Concatenation of every literal segment."""
        return "".join(s.text for s in self.segments if isinstance(s, LiteralSegment))

    def placeholders(self, derived: Iterable[str] = ()) -> frozenset[Placeholder]:
        """Return the distinct placeholders with their occurrence counts.

        Names listed in *derived* are flagged ``is_derived``.
        """
        derived_names = set(derived)
        counts = Counter(
            s.name for s in self.segments if isinstance(s, PlaceholderSegment)
        )
        return frozenset(
            Placeholder(name=name, occurrence_count=count, is_derived=name in derived_names)
            for name, count in counts.items()
        )


# ---------------------------------------------------------------------------
# Binding map
# ---------------------------------------------------------------------------

class BindingMap(BaseModel):
    """Placeholder name -> value mapping produced by resolution.

    Besides the values themselves, the map records which names were derived,
    which user-supplied names went unused and which were overridden by a
    derivation rule.  Those are warnings for the caller to surface, never
    errors.
    """

    model_config = ConfigDict(frozen=True)

    values: dict[str, str] = Field(default_factory=dict)
    derived: frozenset[str] = Field(default_factory=frozenset)
    unused: tuple[str, ...] = Field(default=())
    shadowed: tuple[str, ...] = Field(default=())

    def __getitem__(self, name: str) -> str:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def __len__(self) -> int:
        return len(self.values)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.values.get(name, default)

    def items(self):
        return self.values.items()

    def as_dict(self) -> dict[str, str]:
        """Return a plain copy of the bound values."""
        return dict(self.values)

    @property
    def warnings(self) -> list[str]:
        """Human-readable messages for unused and shadowed bindings."""
        messages = [f"Unused binding '{name}'" for name in self.unused]
        messages.extend(
            f"Binding '{name}' ignored; its value is derived" for name in self.shadowed
        )
        return messages
