"""Scaffold engine orchestration.

``ScaffoldEngine`` chains the three stages -- parse, resolve, render -- and
propagates the first error raised.  It performs no I/O: the caller reads the
template from wherever it lives and writes the returned text wherever it
belongs.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from stencil.config import EngineConfig

from .derivation import RuleSet, build_registry, merge_registries
from .models import BindingMap, Template
from .renderer import Renderer
from .resolver import BindingResolver


class ScaffoldResult(BaseModel):
    """Output of a scaffold run with the intermediate artefacts."""

    model_config = ConfigDict(frozen=True)

    output: str
    template: Template
    bindings: BindingMap

    @property
    def warnings(self) -> list[str]:
        return self.bindings.warnings


class ScaffoldEngine:
    """Parses, resolves and renders a template in one call.

    Args:
        config: Engine options; defaults to ``EngineConfig()``.
        rules: Default derivation rules, applied on every call.  Rules passed
            to ``generate``/``scaffold`` replace defaults of the same name.
    """

    def __init__(self, config: EngineConfig | None = None, rules: RuleSet = ()) -> None:
        self.config = config or EngineConfig()
        self.rules = build_registry(rules)
        self.resolver = BindingResolver()
        self.renderer = Renderer(indent_multiline=self.config.indent_multiline)

    def scaffold(
        self,
        source: str,
        user_values: Mapping[str, str],
        rules: RuleSet = (),
    ) -> ScaffoldResult:
        """Run the full pipeline and return output plus diagnostics."""
        template = Template.parse(source)
        registry = merge_registries(self.rules, build_registry(rules))
        bindings = self.resolver.resolve(template, user_values, registry)
        output = self.renderer.render(template, bindings)
        return ScaffoldResult(output=output, template=template, bindings=bindings)

    def generate(
        self,
        source: str,
        user_values: Mapping[str, str],
        rules: RuleSet = (),
    ) -> str:
        """Render *source* with *user_values* and *rules*.

        Raises:
            MalformedTemplateError: If *source* cannot be parsed.
            CyclicDerivationError: If the rules are circular.
            MissingBindingError: If required values are absent.
            UnboundPlaceholderError: On an internal consistency failure.
        """
        return self.scaffold(source, user_values, rules).output


def generate(
    source: str,
    user_values: Mapping[str, str],
    rules: RuleSet = (),
) -> str:
    """Render *source* with a default-configured ``ScaffoldEngine``."""
    return ScaffoldEngine().generate(source, user_values, rules)
