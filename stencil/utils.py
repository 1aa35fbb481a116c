"""Shared helpers for the stencil command-line front end.

Provides Rich-based console reporting, parsing of ``key=value`` assignments,
loading of JSON/YAML value files and async file output.  None of this is used
by the engine core, which stays free of I/O and printing.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Diagnostics go to stderr so rendered output can be piped from stdout.
console = Console(stderr=True)
# Listings requested by the user (inspect, presets) go to stdout.
out_console = Console()


# ---------------------------------------------------------------------------
# Value parsing
# ---------------------------------------------------------------------------


def parse_assignment(text: str) -> tuple[str, str]:
    """Split a ``key=value`` assignment.

    Only the first ``=`` separates; the value may itself contain ``=``.

    Examples::

        parse_assignment("component=UserCard") -> ("component", "UserCard")
        parse_assignment("props=a = 1")       -> ("props", "a = 1")

    Raises:
        ValueError: If there is no ``=`` or the key is empty.
    """
    key, sep, value = text.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"Expected KEY=VALUE, got: {text!r}")
    return key, value


def _scalar_to_str(key: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"Value for '{key}' must be a scalar, got {type(value).__name__}")


def load_values(path: str | Path) -> dict[str, str]:
    """Load binding values from a JSON or YAML file.

    The file must contain a top-level mapping.  Scalars are coerced to
    strings (``None`` becomes ``""``, booleans become ``true``/``false``).

    Args:
        path: A ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        Mapping of placeholder name to string value.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON/YAML, the extension is
            unsupported, the top level is not a mapping, or a value is not a
            scalar.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    suffix = file_path.suffix.lower()
    if suffix == ".json":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {file_path}: {exc}") from exc
    elif suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {file_path}: {exc}") from exc
    else:
        raise ValueError(f"Expected a .json, .yaml or .yml file, got: {file_path.suffix}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Values file must contain a mapping: {file_path}")
    return {str(key): _scalar_to_str(str(key), value) for key, value in data.items()}


# ---------------------------------------------------------------------------
# File output
# ---------------------------------------------------------------------------


async def write_output(
    path: str | Path,
    content: str,
    *,
    encoding: str = "utf-8",
    overwrite: bool = False,
) -> Path:
    """Write rendered *content* to *path* without blocking the event loop.

    Parent directories are created automatically.

    Raises:
        FileExistsError: If *path* exists and *overwrite* is ``False``.
    """
    out = Path(path)
    if out.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {out}")
    await asyncio.to_thread(_write_file, out, content, encoding)
    return out


async def write_outputs(
    outputs: dict[Path, str],
    *,
    encoding: str = "utf-8",
    overwrite: bool = False,
) -> list[Path]:
    """Write several rendered files concurrently, one task per file.

    Existing files are checked before anything is written, so a refused
    batch leaves the disk untouched.

    Raises:
        FileExistsError: If any path exists and *overwrite* is ``False``.
    """
    if not overwrite:
        existing = [str(path) for path in outputs if Path(path).exists()]
        if existing:
            raise FileExistsError(f"Output files already exist: {', '.join(existing)}")
    return list(
        await asyncio.gather(
            *(
                write_output(path, content, encoding=encoding, overwrite=overwrite)
                for path, content in outputs.items()
            )
        )
    )


def _write_file(path: Path, content: str, encoding: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding=encoding)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(
    rows: list[tuple[str, ...]],
    columns: list[str],
    title: str = "Summary",
    out: Console | None = None,
) -> None:
    """Print a table with the given column headers and rows.

    Goes to the diagnostics console unless *out* is given.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for index, column in enumerate(columns):
        if index == 0:
            table.add_column(column, style="dim", no_wrap=True)
        else:
            table.add_column(column)

    for row in rows:
        table.add_row(*(str(cell) for cell in row))

    (out or console).print(table)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}", highlight=False)
