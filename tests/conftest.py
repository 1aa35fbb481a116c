"""Shared pytest fixtures for the stencil test suite.

Provides reusable fixtures for:
- The bundled React component template text
- Small inline templates and derivation rules
- Values files on disk (JSON and YAML)
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest

from stencil.engine import DerivationRule, derive

REACT_TEMPLATE_PATH = Path(__file__).parent.parent / "stencil" / "templates" / "react-component.jsx"


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

@pytest.fixture
def react_source() -> str:
    """Raw text of the bundled React component template."""
    return REACT_TEMPLATE_PATH.read_text(encoding="utf-8")


@pytest.fixture
def hello_source() -> str:
    """A two-placeholder template whose second value is derived."""
    return "Hello {{name}}, class={{name_class}}"


@pytest.fixture
def props_source() -> str:
    """An indented block placeholder, as in a propTypes object."""
    return textwrap.dedent("""\
        Widget.propTypes = {
          {{prop_types}}
        };
        """)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

@pytest.fixture
def lowercase_rule() -> DerivationRule:
    """``name_class = lowercase(name)``."""
    return derive("name_class", "name", "lower")


@pytest.fixture
def component_class_rule() -> DerivationRule:
    """``component_class = kebab_case(component)``."""
    return derive("component_class", "component", "kebab")


# ---------------------------------------------------------------------------
# Values files
# ---------------------------------------------------------------------------

@pytest.fixture
def values_json(tmp_path: Path) -> Path:
    """A JSON values file for the React template."""
    path = tmp_path / "values.json"
    path.write_text(
        json.dumps({"component": "UserCard", "author": "Dana", "description": "Shows a user."}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def values_yaml(tmp_path: Path) -> Path:
    """A YAML values file with a multi-line value and non-string scalars."""
    path = tmp_path / "values.yaml"
    path.write_text(
        textwrap.dedent("""\
            component: UserCard
            prop_types: |-
              name: PropTypes.string,
              age: PropTypes.number,
            version: 2
            visible: true
            empty:
            """),
        encoding="utf-8",
    )
    return path
