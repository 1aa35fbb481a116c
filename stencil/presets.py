"""Bundled scaffold presets.

A preset pairs a template shipped inside ``stencil/templates/`` with the
derivation rules, default values and output filename that go with it, so the
CLI can render it from nothing more than the primary values.
"""

from __future__ import annotations

import importlib.resources as ilr
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from stencil.engine import DerivationRule, ScaffoldEngine, derive

_TEMPLATE_PACKAGE = "stencil.templates"


class Preset(BaseModel):
    """A bundled template with its rules and defaults."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Preset identifier used on the command line")
    description: str = Field(default="")
    template: str = Field(..., description="Template filename inside stencil/templates/")
    rules: tuple[DerivationRule, ...] = Field(default=())
    defaults: dict[str, str] = Field(default_factory=dict)
    output_name: str = Field(..., description="Filename template, rendered with the same values")

    def load_source(self) -> str:
        """Read the bundled template text."""
        return ilr.files(_TEMPLATE_PACKAGE).joinpath(self.template).read_text(encoding="utf-8")

    def values(self, user_values: Mapping[str, str]) -> dict[str, str]:
        """Merge *user_values* over the preset defaults."""
        return {**self.defaults, **user_values}

    def output_filename(self, user_values: Mapping[str, str]) -> str:
        """Render ``output_name`` with the preset rules and *user_values*.

        Raises:
            ValueError: If the rendered name is not a plain file name (empty,
                ``.``/``..`` or containing a path separator).
        """
        rendered = ScaffoldEngine(rules=self.rules).generate(self.output_name, self.values(user_values))
        if rendered in ("", ".", "..") or "/" in rendered or "\\" in rendered:
            raise ValueError(f"Output filename {rendered!r} must be a plain file name")
        return rendered


PRESETS: dict[str, Preset] = {
    preset.name: preset
    for preset in (
        Preset(
            name="react-component",
            description="React function component with propTypes and defaultProps",
            template="react-component.jsx",
            rules=(derive("component_class", "component", "kebab"),),
            defaults={
                "description": "",
                "author": "",
                "props": "",
                "prop_types": "",
                "default_props": "",
            },
            output_name="{{component}}.jsx",
        ),
    )
}


def get_preset(name: str) -> Preset:
    """Look up a bundled preset by name.

    Raises:
        ValueError: If no preset is registered under *name*.
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown preset '{name}'; available: {', '.join(sorted(PRESETS))}"
        ) from None
