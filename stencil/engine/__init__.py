"""Template rendering engine -- parse, resolve and render ``{{placeholder}}`` templates.

Quick usage::

    from stencil.engine import ScaffoldEngine, derive

    engine = ScaffoldEngine()
    text = engine.generate(
        "<div className=\\"{{component_class}}\\">{{component}}</div>",
        {"component": "UserCard"},
        [derive("component_class", "component", "kebab")],
    )
"""

from stencil.engine.derivation import (
    TRANSFORMS,
    DerivationRule,
    camel_case,
    derive,
    kebab_case,
    pascal_case,
    slugify,
    snake_case,
)
from stencil.engine.engine import ScaffoldEngine, ScaffoldResult, generate
from stencil.engine.errors import (
    CyclicDerivationError,
    MalformedTemplateError,
    MissingBindingError,
    ScaffoldError,
    UnboundPlaceholderError,
)
from stencil.engine.models import (
    BindingMap,
    LiteralSegment,
    Placeholder,
    PlaceholderSegment,
    Template,
)
from stencil.engine.renderer import Renderer
from stencil.engine.resolver import BindingResolver, resolve

__all__ = [
    "TRANSFORMS",
    "BindingMap",
    "BindingResolver",
    "CyclicDerivationError",
    "DerivationRule",
    "LiteralSegment",
    "MalformedTemplateError",
    "MissingBindingError",
    "Placeholder",
    "PlaceholderSegment",
    "Renderer",
    "ScaffoldEngine",
    "ScaffoldError",
    "ScaffoldResult",
    "Template",
    "UnboundPlaceholderError",
    "camel_case",
    "derive",
    "generate",
    "kebab_case",
    "pascal_case",
    "resolve",
    "slugify",
    "snake_case",
]
