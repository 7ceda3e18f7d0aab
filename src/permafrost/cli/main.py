"""
Main CLI entry point for permafrost.

Provides the command-line interface using Click. The CLI is a thin
consumer of the library: it loads YAML/JSON documents, merges them with
permafrost.merge and prints the result.
"""

import collections.abc as _abc
import datetime as _datetime
import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.syntax as _rich_syntax
import yaml as _yaml

import permafrost
import permafrost._yaml as yaml_bridge
import permafrost.config as config

_logger = _logging.getLogger(__name__)

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_INPUT_PATH = _click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path)


def _load_document(path: _pathlib.Path) -> _abc.Mapping[str, _typing.Any]:
    """Load one YAML (or JSON) document whose root must be a mapping."""
    data = yaml_bridge.load(path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    if not isinstance(data, _abc.Mapping):
        raise permafrost.InvalidArgument(
            f"{path}: root document must be a mapping, got {type(data).__name__}"
        )
    _logger.debug("Loaded %s (%d top-level keys)", path, len(data))
    return data


def _json_default(value: _typing.Any) -> _typing.Any:
    """Encode YAML timestamps for --format json; anything else is an error."""
    if isinstance(value, (_datetime.date, _datetime.datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _should_use_color(cli_flag: bool | None, setting: bool | None) -> tuple[bool, bool]:
    """Determine whether to highlight YAML output.

    Priority:
    1. CLI flag (--color / --no-color) if specified
    2. PERMAFROST_COLOR setting
    3. NO_COLOR env var (if set, disable color)
    4. Auto-detect: color if stdout is a TTY

    Returns:
        Tuple of (color_enabled, force_color). force_color is True when
        color was explicitly requested rather than auto-detected.
    """
    if cli_flag is not None:
        return (cli_flag, cli_flag)
    if setting is not None:
        return (setting, setting)
    if _os.environ.get("NO_COLOR") is not None:
        return (False, False)
    return (_sys.stdout.isatty(), False)


def _print_yaml(yaml_text: str, *, color: bool, force_color: bool) -> None:
    """Print YAML text, with syntax highlighting when color is enabled."""
    if not color:
        _click.echo(yaml_text, nl=False)
        return

    # Forced color must survive piping and override NO_COLOR / FORCE_COLOR=0
    console = _rich_console.Console(
        force_terminal=force_color,
        no_color=False if force_color else None,
        color_system="truecolor" if force_color else "auto",
    )
    console.print(
        _rich_syntax.Syntax(yaml_text, "yaml", theme="monokai", background_color="default"),
        end="",
    )


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(permafrost.__version__, "-v", "--version", prog_name="permafrost")
@_click.pass_context
def cli(ctx: _click.Context) -> None:
    """permafrost - deeply immutable data with structural merging."""
    try:
        settings = config.Settings()
    except _pydantic.ValidationError as e:
        _click.echo(f"Error: invalid PERMAFROST_* settings: {e}", err=True)
        raise SystemExit(1) from None

    _logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=_sys.stderr,
    )

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@_click.argument("base", type=_INPUT_PATH)
@_click.argument("sources", nargs=-1, type=_INPUT_PATH)
@_click.option(
    "--mode",
    type=_click.Choice(["deep", "shallow"]),
    default=None,
    help="How nested mappings are combined (default: PERMAFROST_MERGE_MODE or deep)",
)
@_click.option(
    "--format",
    "output_format",
    type=_click.Choice(["yaml", "json"]),
    default=None,
    help="Output format (default: PERMAFROST_OUTPUT_FORMAT or yaml)",
)
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Force YAML syntax highlighting on or off (default: auto-detect TTY)",
)
@_click.pass_context
def merge(
    ctx: _click.Context,
    base: _pathlib.Path,
    sources: tuple[_pathlib.Path, ...],
    mode: str | None,
    output_format: str | None,
    use_color: bool | None,
) -> None:
    """Merge SOURCES into BASE and print the result.

    Sources are applied left to right; later files win. Nested mappings
    are merged key by key unless --mode shallow is given. Values tagged
    !replace in a source replace the base value without merging.
    """
    settings: config.Settings = ctx.obj["settings"]
    effective_mode = mode or settings.merge_mode
    effective_format = output_format or settings.output_format

    try:
        # Merging into an empty mapping also unwraps !replace tags in the base
        target = permafrost.ImmutableMapping().merge(_load_document(base))
        documents = [_load_document(path) for path in sources]
        result = target.merge(documents, mode=effective_mode)  # type: ignore[arg-type]
        if effective_format == "json":
            text = _json.dumps(result.as_mutable(), indent=2, default=_json_default) + "\n"
        else:
            text = yaml_bridge.dump(result)
    except (permafrost.PermafrostError, _yaml.YAMLError, TypeError, ValueError) as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None

    if result is target:
        _click.echo("no changes", err=True)

    if effective_format == "json":
        _click.echo(text, nl=False)
    else:
        color_enabled, force_color = _should_use_color(use_color, settings.color)
        _print_yaml(text, color=color_enabled, force_color=force_color)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="permafrost")


if __name__ == "__main__":
    main()
