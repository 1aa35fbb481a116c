"""Derivation rules: placeholders computed from other placeholders.

A ``DerivationRule`` names a derived placeholder, the inputs it reads and a
pure function producing its value, e.g. ``component_class`` as the kebab-case
form of ``component``.  Rules are collected into a plain registry (derived
name -> rule) that is passed explicitly to the resolver; there is no global
rule table.

The case transforms mirror the naming filters used for scaffolded projects:
``kebab_case``, ``snake_case``, ``pascal_case``, ``camel_case`` and
``slugify``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .errors import CyclicDerivationError


# ---------------------------------------------------------------------------
# Case transforms
# ---------------------------------------------------------------------------

def snake_case(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value.strip())
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s_]+", "_", s2).lower().strip("_")


def kebab_case(value: str) -> str:
    """Convert ``SomeThing`` or ``some_thing`` to ``some-thing``."""
    return snake_case(value).replace("_", "-")


def pascal_case(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value.strip())
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


def camel_case(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = pascal_case(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


def slugify(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


TRANSFORMS: dict[str, Callable[[str], str]] = {
    "kebab": kebab_case,
    "snake": snake_case,
    "pascal": pascal_case,
    "camel": camel_case,
    "slug": slugify,
    "lower": str.lower,
    "upper": str.upper,
}


# ---------------------------------------------------------------------------
# Rule model
# ---------------------------------------------------------------------------

class DerivationRule(BaseModel):
    """A pure function computing one placeholder from others."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Derived placeholder name")
    inputs: tuple[str, ...] = Field(..., min_length=1, description="Names the rule reads")
    func: Callable[..., str] = Field(..., description="Receives input values positionally")
    description: str = Field(default="")

    @classmethod
    def from_transform(
        cls,
        name: str,
        source: str,
        transform: Callable[[str], str],
        description: str = "",
    ) -> DerivationRule:
        """Build a single-input rule applying *transform* to *source*."""
        return cls(name=name, inputs=(source,), func=transform, description=description)

    def apply(self, values: Mapping[str, str]) -> str:
        """Compute the derived value from already-resolved *values*.

        Raises:
            TypeError: If the rule function returns something other than ``str``.
        """
        result = self.func(*(values[name] for name in self.inputs))
        if not isinstance(result, str):
            raise TypeError(
                f"Derivation rule '{self.name}' returned {type(result).__name__}, expected str"
            )
        return result


def derive(name: str, source: str, case: str) -> DerivationRule:
    """Shorthand for a rule applying a named case transform.

    Example::

        derive("component_class", "component", "kebab")
    """
    try:
        transform = TRANSFORMS[case]
    except KeyError:
        raise ValueError(
            f"Unknown transform '{case}'; expected one of {', '.join(sorted(TRANSFORMS))}"
        ) from None
    return DerivationRule.from_transform(
        name, source, transform, description=f"{case} case of {source}"
    )


# ---------------------------------------------------------------------------
# Registry helpers
# ---------------------------------------------------------------------------

RuleSet = Iterable[DerivationRule] | Mapping[str, DerivationRule]


def build_registry(rules: RuleSet) -> dict[str, DerivationRule]:
    """Normalise *rules* into a ``{derived_name: rule}`` registry.

    Raises:
        ValueError: If an iterable defines the same derived name twice, or a
            mapping key disagrees with its rule's name.
    """
    registry: dict[str, DerivationRule] = {}
    if isinstance(rules, Mapping):
        for key, rule in rules.items():
            if key != rule.name:
                raise ValueError(f"Registry key '{key}' does not match rule '{rule.name}'")
            registry[key] = rule
        return registry

    for rule in rules:
        if rule.name in registry:
            raise ValueError(f"Duplicate derivation rule for '{rule.name}'")
        registry[rule.name] = rule
    return registry


def merge_registries(
    base: Mapping[str, DerivationRule], override: Mapping[str, DerivationRule]
) -> dict[str, DerivationRule]:
    """Return *base* with every rule in *override* replacing its namesake."""
    merged = dict(base)
    merged.update(override)
    return merged


def find_cycle(registry: Mapping[str, DerivationRule]) -> list[str] | None:
    """Return a dependency cycle among *registry* rules, or ``None``.

    The cycle is returned as a closed path, e.g. ``["a", "b", "a"]``.
    """
    visiting: list[str] = []
    done: set[str] = set()

    def visit(name: str) -> list[str] | None:
        if name in done:
            return None
        if name in visiting:
            return visiting[visiting.index(name):] + [name]
        visiting.append(name)
        for dep in registry[name].inputs:
            if dep in registry:
                cycle = visit(dep)
                if cycle:
                    return cycle
        visiting.pop()
        done.add(name)
        return None

    for name in registry:
        cycle = visit(name)
        if cycle:
            return cycle
    return None


def check_acyclic(registry: Mapping[str, DerivationRule]) -> None:
    """Raise ``CyclicDerivationError`` if *registry* contains a cycle."""
    cycle = find_cycle(registry)
    if cycle:
        raise CyclicDerivationError(cycle)


def derivation_order(
    registry: Mapping[str, DerivationRule], targets: Iterable[str]
) -> list[str]:
    """Return the rules needed for *targets* with dependencies first.

    Assumes *registry* is acyclic (see ``check_acyclic``).
    """
    order: list[str] = []
    seen: set[str] = set()

    def visit(name: str) -> None:
        if name in seen or name not in registry:
            return
        seen.add(name)
        for dep in registry[name].inputs:
            visit(dep)
        order.append(name)

    for target in targets:
        visit(target)
    return order
