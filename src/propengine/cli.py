"""CLI for inspecting propengine settings.

Property tests run inside the test harness (pytest); this CLI answers the
questions that come up while tuning them: which limits does a preset or
config file resolve to, and which size hint will each generation cycle get.

Usage:
    # List bundled presets
    propengine presets

    # Effective settings for a preset, as JSON
    propengine show-config --preset=nightly --format=json

    # Layer a project config file over a preset, then pin the seed
    propengine show-config --preset=ci --config=propengine.yaml --seed=1234

    # Size ramp for the quick preset, every 5th case
    propengine sizes --preset=quick --every=5
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from pydantic import ValidationError

from propengine import __version__
from propengine.core.config import EngineSettings, list_presets, load_settings
from propengine.core.logging import configure_logging
from propengine.engine.runner import compute_size

app = typer.Typer(
    name="propengine",
    help="propengine: deterministic property-based testing engine.",
    no_args_is_help=True,
)

PresetOption = Annotated[
    str | None,
    typer.Option(
        "--preset",
        "-p",
        help="Preset to start from. Use 'propengine presets' to list them.",
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML settings file layered over the preset.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"propengine version {__version__}")
        raise typer.Exit()


def _resolve_settings(preset: str | None, config_file: Path | None, overrides: dict[str, Any]) -> EngineSettings:
    """Load settings or exit 1 with a readable message."""
    try:
        return load_settings(preset=preset, config_file=config_file, overrides=overrides or None)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e
    except ValidationError as e:
        typer.secho("Configuration errors:", fg=typer.colors.RED, err=True)
        for error in e.errors():
            loc = ".".join(str(part) for part in error["loc"]) or "<root>"
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None
    except (yaml.YAMLError, ValueError) as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e


@app.callback()
def callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit structured JSON log lines."),
    ] = False,
) -> None:
    """propengine: deterministic property-based testing engine."""
    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")


@app.command()
def presets() -> None:
    """List bundled presets."""
    available = list_presets()
    if not available:
        typer.echo("No presets found.")
        return

    typer.secho("Available presets:", fg=typer.colors.GREEN)
    for name in available:
        typer.echo(f"  - {name}")
    typer.echo()
    typer.echo("Select one with PROPENGINE_PRESET=<name> or load_settings(preset=<name>)")


@app.command()
def show_config(
    preset: PresetOption = None,
    config_file: ConfigOption = None,
    max_tests: Annotated[
        int | None,
        typer.Option("--max-tests", help="Override max_tests."),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Override the seed."),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json or yaml."),
    ] = "yaml",
) -> None:
    """Show the effective settings.

    Merges defaults, preset, config file, PROPENGINE_* environment variables
    and the override options, in that order.
    """
    if output_format not in ("json", "yaml"):
        typer.secho(f"Error: unknown format '{output_format}' (expected json or yaml)", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)

    overrides: dict[str, Any] = {}
    if max_tests is not None:
        overrides["max_tests"] = max_tests
    if seed is not None:
        overrides["seed"] = seed

    settings_dict = _resolve_settings(preset, config_file, overrides).model_dump()
    if output_format == "json":
        typer.echo(json.dumps(settings_dict, indent=2))
    else:
        typer.echo(yaml.safe_dump(settings_dict, default_flow_style=False, sort_keys=False))


@app.command()
def sizes(
    preset: PresetOption = None,
    config_file: ConfigOption = None,
    every: Annotated[
        int,
        typer.Option("--every", "-e", min=1, help="Print every Nth case (the last case is always printed)."),
    ] = 10,
) -> None:
    """Print the size hint each generation cycle will receive."""
    settings = _resolve_settings(preset, config_file, {})
    total = settings.max_tests
    if total == 0:
        typer.echo("max_tests is 0: no generation cycles.")
        return

    typer.echo(f"{total} cases, size {settings.min_size} -> {settings.max_size}")
    for test_case in range(total):
        if test_case % every == 0 or test_case == total - 1:
            size = compute_size(test_case, total, settings.min_size, settings.max_size)
            typer.echo(f"  case {test_case:>5}: size {size}")


def main() -> None:
    """Entry point for the propengine CLI."""
    app()


if __name__ == "__main__":
    main()
