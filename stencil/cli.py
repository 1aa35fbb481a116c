"""stencil command-line front end.

Reads templates from disk (or the bundled presets), collects values from
``--set`` flags and values files, hands everything to ``ScaffoldEngine`` and
writes the result.  All I/O and user-facing messaging live here; the engine
itself only raises.

Usage::

    stencil render --preset react-component --set component=UserCard -o src/components/
    stencil render template.jsx --values values.yaml --derive cls=component:kebab
    stencil render a.txt b.txt --preset react-component -s component=Card -o out/
    stencil inspect --preset react-component
    stencil presets
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from stencil.config import EngineConfig
from stencil.engine import (
    BindingMap,
    DerivationRule,
    MissingBindingError,
    ScaffoldEngine,
    ScaffoldError,
    ScaffoldResult,
    Template,
    UnboundPlaceholderError,
    derive,
)
from stencil.presets import PRESETS, Preset, get_preset
from stencil.utils import (
    console,
    load_values,
    out_console,
    parse_assignment,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    write_outputs,
)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERNAL = 3


class RenderJob(BaseModel):
    """One template to render: a file on disk or a bundled preset."""

    model_config = ConfigDict(frozen=True)

    label: str
    source: str
    preset: Preset | None = None

    @property
    def rules(self) -> tuple[DerivationRule, ...]:
        return self.preset.rules if self.preset else ()

    def values(self, user_values: Mapping[str, str]) -> dict[str, str]:
        return self.preset.values(user_values) if self.preset else dict(user_values)

    def output_filename(self, user_values: Mapping[str, str]) -> str:
        """Preset output name, or the template's own file name."""
        if self.preset:
            return self.preset.output_filename(user_values)
        return Path(self.label).name


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------


def parse_derive(text: str) -> DerivationRule:
    """Parse ``NAME=SOURCE:CASE`` into a derivation rule.

    Example: ``component_class=component:kebab``.
    """
    name, target = parse_assignment(text)
    source, sep, case = target.partition(":")
    if not sep or not source.strip() or not case.strip():
        raise ValueError(f"Expected NAME=SOURCE:CASE, got: {text!r}")
    return derive(name, source.strip(), case.strip())


def _read_template(path_text: str, encoding: str) -> str:
    path = Path(path_text)
    if not path.is_file():
        raise FileNotFoundError(f"Template file not found: {path}")
    return path.read_text(encoding=encoding)


def _load_template(args: argparse.Namespace, encoding: str) -> tuple[str, Preset | None]:
    if args.preset:
        if args.template:
            raise ValueError("Pass either a template path or --preset, not both")
        preset = get_preset(args.preset)
        return preset.load_source(), preset
    if not args.template:
        raise ValueError("A template path or --preset is required")
    return _read_template(args.template, encoding), None


def _load_jobs(args: argparse.Namespace, encoding: str) -> list[RenderJob]:
    """Build one render job per template path and per ``--preset``."""
    jobs = [
        RenderJob(label=path_text, source=_read_template(path_text, encoding))
        for path_text in args.templates
    ]
    for name in args.presets:
        preset = get_preset(name)
        jobs.append(RenderJob(label=preset.name, source=preset.load_source(), preset=preset))
    if not jobs:
        raise ValueError("A template path or --preset is required")
    return jobs


def _collect_values(args: argparse.Namespace) -> dict[str, str]:
    """Merge values with precedence ``--set`` > values file.

    Preset defaults sit below both and are applied per job.
    """
    values: dict[str, str] = {}
    if args.values:
        values.update(load_values(args.values))
    for assignment in args.set:
        key, value = parse_assignment(assignment)
        values[key] = value
    return values


def _config_from_args(args: argparse.Namespace) -> EngineConfig:
    config = EngineConfig.from_env()
    update: dict[str, object] = {}
    if getattr(args, "indent", False):
        update["indent_multiline"] = True
    if getattr(args, "force", False):
        update["overwrite"] = True
    if getattr(args, "encoding", None):
        update["encoding"] = args.encoding
    if update:
        config = EngineConfig.model_validate({**config.model_dump(), **update})
    return config


def _merge_warnings(results: list[ScaffoldResult]) -> list[str]:
    """Combine warnings of several renders sharing one value set.

    A value counts as unused only if no render used it.
    """
    if len(results) == 1:
        return results[0].warnings
    unused = set.intersection(*(set(r.bindings.unused) for r in results))
    merged = BindingMap(
        unused=tuple(name for name in results[0].bindings.unused if name in unused),
        shadowed=tuple(dict.fromkeys(name for r in results for name in r.bindings.shadowed)),
    )
    return merged.warnings


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_render(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    jobs = _load_jobs(args, config.encoding)
    values = _collect_values(args)
    derived_rules = [parse_derive(d) for d in args.derive]
    if len(jobs) > 1 and not args.output:
        raise ValueError("Rendering several templates requires --output DIR")

    engine = ScaffoldEngine(config)
    results = [
        engine.scaffold(job.source, job.values(values), [*job.rules, *derived_rules])
        for job in jobs
    ]
    for warning in _merge_warnings(results):
        print_warning(warning)

    if not args.output:
        sys.stdout.write(results[0].output)
        return EXIT_OK

    target = Path(args.output)
    if len(jobs) == 1 and not (target.is_dir() or args.output.endswith(("/", "\\"))):
        outputs = {target: results[0].output}
    else:
        outputs = {}
        for job, result in zip(jobs, results):
            path = target / job.output_filename(values)
            if path in outputs:
                raise ValueError(f"Two templates render to the same file: {path}")
            outputs[path] = result.output

    written = asyncio.run(
        write_outputs(outputs, encoding=config.encoding, overwrite=config.overwrite)
    )
    for path in written:
        print_success(f"Wrote {path}")
    return EXIT_OK


def cmd_inspect(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    source, preset = _load_template(args, config.encoding)
    template = Template.parse(source)

    derived = {rule.name for rule in (preset.rules if preset else ())}
    derived.update(parse_derive(d).name for d in args.derive)
    by_name = {p.name: p for p in template.placeholders(derived)}

    rows = [
        (name, str(by_name[name].occurrence_count), "yes" if by_name[name].is_derived else "")
        for name in template.placeholder_names
    ]
    print_summary_table(rows, ["Placeholder", "Occurrences", "Derived"], title="Placeholders", out=out_console)
    return EXIT_OK


def cmd_presets(args: argparse.Namespace) -> int:
    rows = [(p.name, p.template, p.description) for p in PRESETS.values()]
    print_summary_table(rows, ["Preset", "Template", "Description"], title="Presets", out=out_console)
    return EXIT_OK


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stencil",
        description="stencil -- render {{placeholder}} scaffold templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  stencil render --preset react-component --set component=UserCard\n"
            "  stencil render template.jsx --values values.yaml -o out.jsx\n"
            "  stencil render a.txt b.txt --preset react-component -s component=Card -o out/\n"
            "  stencil inspect template.jsx\n"
        ),
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--derive",
            action="append",
            default=[],
            metavar="NAME=SOURCE:CASE",
            help="Derive NAME from SOURCE with a case transform (kebab, snake, pascal, camel, slug, lower, upper)",
        )
        p.add_argument("--encoding", default=None, help="Template/output encoding (default: utf-8)")

    render = sub.add_parser("render", help="Render one or more templates")
    render.add_argument("templates", nargs="*", metavar="TEMPLATE", help="Paths to template files")
    render.add_argument(
        "--preset", "-p",
        dest="presets",
        action="append",
        default=[],
        help="Also render a bundled preset (repeatable)",
    )
    add_common_args(render)
    render.add_argument(
        "--set", "-s",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Bind a placeholder value (repeatable)",
    )
    render.add_argument("--values", "-f", help="JSON or YAML file of placeholder values")
    render.add_argument(
        "--output", "-o",
        help="Output file, or directory when rendering several templates (default: stdout)",
    )
    render.add_argument("--force", action="store_true", help="Overwrite existing output files")
    render.add_argument(
        "--indent",
        action="store_true",
        help="Indent continuation lines of multi-line values",
    )
    render.set_defaults(handler=cmd_render)

    inspect = sub.add_parser("inspect", help="List the placeholders of a template")
    inspect.add_argument("template", nargs="?", help="Path to a template file")
    inspect.add_argument("--preset", "-p", help="Use a bundled preset instead of a file")
    add_common_args(inspect)
    inspect.set_defaults(handler=cmd_inspect)

    presets = sub.add_parser("presets", help="List bundled presets")
    presets.set_defaults(handler=cmd_presets)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``stencil`` / ``python -m stencil.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return args.handler(args)
    except UnboundPlaceholderError as exc:
        print_error(f"Internal error: {exc}")
        return EXIT_INTERNAL
    except MissingBindingError as exc:
        print_error(str(exc))
        for name in exc.missing:
            console.print(f"  pass [bold]--set {name}=...[/bold]", highlight=False)
        return EXIT_FAILURE
    except ScaffoldError as exc:
        print_error(str(exc))
        return EXIT_FAILURE
    except (FileNotFoundError, FileExistsError, ValueError) as exc:
        print_error(str(exc))
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
