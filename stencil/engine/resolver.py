"""Binding resolution.

Turns the raw values a user supplied for the primary placeholders into a
complete ``BindingMap`` by applying derivation rules.  Missing values are
collected and reported together; rule cycles are rejected before any value
is computed.  Values are never escaped here; that is the renderer's job.
"""

from __future__ import annotations

from collections.abc import Mapping

from .derivation import RuleSet, build_registry, check_acyclic, derivation_order
from .errors import MissingBindingError
from .models import BindingMap, Template


class BindingResolver:
    """Resolves user values plus derivation rules against a template."""

    def resolve(
        self,
        template: Template,
        user_values: Mapping[str, str],
        rules: RuleSet = (),
    ) -> BindingMap:
        """Build the complete binding map for *template*.

        Args:
            template: The parsed template.
            user_values: Raw values for the primary placeholders.
            rules: Derivation rules, as an iterable or a ``{name: rule}`` map.

        Returns:
            A ``BindingMap`` with an entry for every placeholder in the
            template plus any extra user values (reported as ``unused``).

        Raises:
            CyclicDerivationError: If the rules depend on each other circularly.
            MissingBindingError: Listing every required name absent from
                *user_values*.
        """
        registry = build_registry(rules)
        check_acyclic(registry)

        names = template.placeholder_names
        order = derivation_order(registry, names)
        applied = set(order)

        # Everything a placeholder or an applied rule reads that no rule provides.
        required: dict[str, None] = {}
        for name in names:
            if name not in registry:
                required.setdefault(name, None)
        for rule_name in order:
            for dep in registry[rule_name].inputs:
                if dep not in registry:
                    required.setdefault(dep, None)

        missing = [name for name in required if name not in user_values]
        if missing:
            raise MissingBindingError(missing)

        values: dict[str, str] = {
            name: value for name, value in user_values.items() if name not in applied
        }
        for rule_name in order:
            values[rule_name] = registry[rule_name].apply(values)

        referenced = set(names) | set(required)
        unused = tuple(name for name in user_values if name not in referenced and name not in applied)
        shadowed = tuple(name for name in user_values if name in applied)

        return BindingMap(
            values=values,
            derived=frozenset(applied),
            unused=unused,
            shadowed=shadowed,
        )


def resolve(
    template: Template,
    user_values: Mapping[str, str],
    rules: RuleSet = (),
) -> BindingMap:
    """Module-level shortcut for ``BindingResolver().resolve``."""
    return BindingResolver().resolve(template, user_values, rules)
