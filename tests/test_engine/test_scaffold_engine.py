"""Tests for the ScaffoldEngine orchestrator (stencil.engine.engine).

Covers:
- End-to-end generate() for the documented scenarios
- The bundled React component template
- Error propagation from each stage without partial output
- Default engine rules merged with per-call rules
- EngineConfig driving the renderer
- Independent concurrent calls
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from stencil.config import EngineConfig
from stencil.engine import (
    CyclicDerivationError,
    DerivationRule,
    MalformedTemplateError,
    MissingBindingError,
    ScaffoldEngine,
    ScaffoldResult,
    derive,
    generate,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def engine() -> ScaffoldEngine:
    return ScaffoldEngine()


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestGenerate:
    def test_hello_scenario(self, engine: ScaffoldEngine, hello_source: str, lowercase_rule):
        output = engine.generate(hello_source, {"name": "Widget"}, [lowercase_rule])
        assert output == "Hello Widget, class=widget"

    def test_module_level_generate(self, hello_source: str, lowercase_rule):
        assert generate(hello_source, {"name": "A"}, [lowercase_rule]) == "Hello A, class=a"

    def test_cycle_scenario(self, engine: ScaffoldEngine):
        rules = [
            DerivationRule(name="a", inputs=("b",), func=str.lower),
            DerivationRule(name="b", inputs=("a",), func=str.lower),
        ]
        with pytest.raises(CyclicDerivationError):
            engine.generate("{{a}}{{b}}", {}, rules)

    def test_react_component(self, engine: ScaffoldEngine, react_source: str, component_class_rule):
        values = {
            "component": "UserCard",
            "description": "Shows a user.",
            "author": "Dana",
            "props": "name",
            "prop_types": "name: PropTypes.string,",
            "default_props": "name: '',",
        }
        output = engine.generate(react_source, values, [component_class_rule])

        assert "const UserCard = ({ name }) => {" in output
        assert '<div className="user-card">' in output
        assert "<h1>UserCard</h1>" in output
        assert "{/* Component content */}" in output
        assert "UserCard.propTypes = {\n  name: PropTypes.string,\n};" in output
        assert "export default UserCard;" in output
        assert " * @author Dana" in output
        assert "{{" not in output

    def test_backslash_before_placeholder_is_substituted(self, engine: ScaffoldEngine):
        output = engine.generate("path=C:\\{{dir}}\\{{file}}", {"dir": "tmp", "file": "a.txt"})
        assert output == "path=C:\\tmp\\a.txt"
        assert "{{" not in output

    def test_scaffold_returns_result(self, engine: ScaffoldEngine, hello_source: str, lowercase_rule):
        result = engine.scaffold(hello_source, {"name": "W", "unused": "x"}, [lowercase_rule])
        assert isinstance(result, ScaffoldResult)
        assert result.output == "Hello W, class=w"
        assert result.template.placeholder_names == ("name", "name_class")
        assert result.bindings["name_class"] == "w"
        assert result.warnings == ["Unused binding 'unused'"]


# ---------------------------------------------------------------------------
# Error propagation
# ---------------------------------------------------------------------------


class TestErrors:
    def test_malformed_before_resolution(self, engine: ScaffoldEngine):
        # Values are missing too, but parsing fails first
        with pytest.raises(MalformedTemplateError):
            engine.generate("{{a}} {{b", {})

    def test_missing_bindings(self, engine: ScaffoldEngine):
        with pytest.raises(MissingBindingError) as exc_info:
            engine.generate("{{a}}{{b}}{{c}}", {"a": "1"})
        assert exc_info.value.missing == ("b", "c")

    def test_rule_errors_propagate(self, engine: ScaffoldEngine):
        rule = DerivationRule(name="n", inputs=("a",), func=len)
        with pytest.raises(TypeError):
            engine.generate("{{n}}", {"a": "abc"}, [rule])


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestEngineConfiguration:
    def test_default_rules(self, hello_source: str, lowercase_rule):
        engine = ScaffoldEngine(rules=[lowercase_rule])
        assert engine.generate(hello_source, {"name": "X"}) == "Hello X, class=x"

    def test_call_rules_override_defaults(self, hello_source: str, lowercase_rule):
        engine = ScaffoldEngine(rules=[lowercase_rule])
        output = engine.generate(hello_source, {"name": "my widget"}, [derive("name_class", "name", "kebab")])
        assert output == "Hello my widget, class=my-widget"

    def test_indent_from_config(self, props_source: str):
        engine = ScaffoldEngine(EngineConfig(indent_multiline=True))
        output = engine.generate(props_source, {"prop_types": "a,\nb,"})
        assert "  a,\n  b," in output

    def test_default_config(self, engine: ScaffoldEngine):
        assert engine.config == EngineConfig()
        assert engine.renderer.indent_multiline is False


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestConcurrency:
    def test_parallel_calls_are_independent(self, engine: ScaffoldEngine, hello_source: str, lowercase_rule):
        names = [f"Name{i}" for i in range(50)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            outputs = list(
                pool.map(lambda n: engine.generate(hello_source, {"name": n}, [lowercase_rule]), names)
            )
        assert outputs == [f"Hello {n}, class={n.lower()}" for n in names]
