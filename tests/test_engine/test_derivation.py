"""Tests for derivation rules and case transforms (stencil.engine.derivation).

Covers:
- kebab/snake/pascal/camel/slug transforms
- DerivationRule construction, apply() and type checking
- derive() shorthand and unknown transforms
- Registry building, merging and duplicate detection
- Cycle detection and dependency ordering
"""

from __future__ import annotations

import pytest

from stencil.engine import CyclicDerivationError, DerivationRule, derive
from stencil.engine.derivation import (
    build_registry,
    camel_case,
    check_acyclic,
    derivation_order,
    find_cycle,
    kebab_case,
    merge_registries,
    pascal_case,
    slugify,
    snake_case,
)

pytestmark = pytest.mark.unit


def _rule(name: str, *inputs: str) -> DerivationRule:
    return DerivationRule(name=name, inputs=inputs, func=lambda *values: "-".join(values))


# ---------------------------------------------------------------------------
# Case transforms
# ---------------------------------------------------------------------------


class TestTransforms:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("UserCard", "user-card"),
            ("Widget", "widget"),
            ("user_profile_card", "user-profile-card"),
            ("HTTPServer", "http-server"),
            ("my widget", "my-widget"),
            ("already-kebab", "already-kebab"),
        ],
    )
    def test_kebab_case(self, value: str, expected: str):
        assert kebab_case(value) == expected

    def test_snake_case(self):
        assert snake_case("UserCard") == "user_card"
        assert snake_case("user-card") == "user_card"

    def test_pascal_case(self):
        assert pascal_case("user-card") == "UserCard"
        assert pascal_case("user_card") == "UserCard"
        assert pascal_case("userCard") == "UserCard"

    def test_camel_case(self):
        assert camel_case("user-card") == "userCard"
        assert camel_case("") == ""

    def test_slugify(self):
        assert slugify("  My Cool Widget! ") == "my-cool-widget"


# ---------------------------------------------------------------------------
# DerivationRule
# ---------------------------------------------------------------------------


class TestDerivationRule:
    def test_apply_single_input(self):
        rule = DerivationRule.from_transform("cls", "component", kebab_case)
        assert rule.inputs == ("component",)
        assert rule.apply({"component": "UserCard"}) == "user-card"

    def test_apply_multiple_inputs_positionally(self):
        rule = DerivationRule(
            name="full",
            inputs=("first", "last"),
            func=lambda first, last: f"{first} {last}",
        )
        assert rule.apply({"last": "Lovelace", "first": "Ada"}) == "Ada Lovelace"

    def test_non_string_result_rejected(self):
        rule = DerivationRule(name="n", inputs=("a",), func=len)
        with pytest.raises(TypeError, match="expected str"):
            rule.apply({"a": "abc"})

    def test_requires_inputs(self):
        with pytest.raises(ValueError):
            DerivationRule(name="n", inputs=(), func=str.lower)

    def test_derive_shorthand(self):
        rule = derive("name_class", "name", "lower")
        assert rule.apply({"name": "Widget"}) == "widget"
        assert "lower" in rule.description

    def test_derive_unknown_transform(self):
        with pytest.raises(ValueError, match="Unknown transform"):
            derive("x", "y", "shouty")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_from_iterable(self):
        registry = build_registry([_rule("a", "x"), _rule("b", "y")])
        assert list(registry) == ["a", "b"]

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            build_registry([_rule("a", "x"), _rule("a", "y")])

    def test_from_mapping(self):
        rule = _rule("a", "x")
        assert build_registry({"a": rule}) == {"a": rule}

    def test_mapping_key_mismatch_rejected(self):
        with pytest.raises(ValueError, match="does not match"):
            build_registry({"b": _rule("a", "x")})

    def test_merge_overrides(self):
        base = build_registry([_rule("a", "x"), _rule("b", "x")])
        override = build_registry([_rule("b", "y")])
        merged = merge_registries(base, override)
        assert merged["a"] is base["a"]
        assert merged["b"].inputs == ("y",)


# ---------------------------------------------------------------------------
# Cycles & ordering
# ---------------------------------------------------------------------------


class TestCycles:
    def test_acyclic(self):
        registry = build_registry([_rule("b", "a"), _rule("c", "b")])
        assert find_cycle(registry) is None
        check_acyclic(registry)

    def test_two_rule_cycle(self):
        registry = build_registry([_rule("a", "b"), _rule("b", "a")])
        assert find_cycle(registry) == ["a", "b", "a"]
        with pytest.raises(CyclicDerivationError) as exc_info:
            check_acyclic(registry)
        assert exc_info.value.cycle == ("a", "b", "a")
        assert "a -> b -> a" in str(exc_info.value)

    def test_self_cycle(self):
        assert find_cycle(build_registry([_rule("a", "a")])) == ["a", "a"]

    def test_longer_cycle_reports_only_the_loop(self):
        registry = build_registry([_rule("z", "a"), _rule("a", "b"), _rule("b", "c"), _rule("c", "a")])
        assert find_cycle(registry) == ["a", "b", "c", "a"]

    def test_order_dependencies_first(self):
        registry = build_registry([_rule("c", "b"), _rule("b", "a")])
        assert derivation_order(registry, ["c"]) == ["b", "c"]

    def test_order_skips_unneeded_rules(self):
        registry = build_registry([_rule("b", "a"), _rule("unused", "a")])
        assert derivation_order(registry, ["b", "plain"]) == ["b"]
