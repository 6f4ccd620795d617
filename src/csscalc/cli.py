"""Click CLI entry point for csscalc."""

from __future__ import annotations

from pathlib import Path

import click

from csscalc import __version__
from csscalc.config import CalcConfig, load_config
from csscalc.errors import CalcError
from csscalc.resolver import css_calc
from csscalc.serializer import serialize_calc
from csscalc.warning_policy import DESCRIPTIONS, WarningPolicy


def _build_warning_policy(
    warn_as_error: str | None, suppress_warning: str | None
) -> WarningPolicy | None:
    """Parse CLI warning options into a WarningPolicy, or None if unset."""
    try:
        return WarningPolicy.from_code_lists(warn_as_error, suppress_warning)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


def _parse_pairs(pairs: tuple[str, ...], option: str) -> dict[str, str]:
    """Split repeated ``NAME=VALUE`` options into a dict."""
    parsed: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise click.UsageError(f"{option} expects NAME=VALUE, got {pair!r}")
        parsed[name.strip()] = value.strip()
    return parsed


def _load_config(config_file: Path | None) -> CalcConfig:
    if config_file is None:
        return CalcConfig()
    try:
        return load_config(config_file)
    except CalcError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__, prog_name="csscalc")
def main() -> None:
    """csscalc: resolve and canonicalize CSS calc() expressions."""


@main.command()
@click.argument("value")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["default", "specified-value"]),
    default=None,
    help="Output format. Overrides the config file.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="YAML config with custom properties, unit sizes and cache size.",
)
@click.option(
    "--var",
    "variables",
    multiple=True,
    help="Custom property as NAME=VALUE (e.g. --var=--gap=8px). May be repeated.",
)
@click.option(
    "--unit",
    "units",
    multiple=True,
    help="Pixels per unit as UNIT=PX (e.g. --unit em=16). May be repeated.",
)
@click.option(
    "--warn-as-error",
    "warn_as_error",
    type=str,
    default=None,
    help="Comma-separated W-codes to treat as errors (e.g. W01,W02).",
)
@click.option(
    "--suppress-warning",
    "suppress_warning",
    type=str,
    default=None,
    help="Comma-separated W-codes to suppress (e.g. W03).",
)
def resolve(
    value: str,
    output_format: str | None = None,
    config_file: Path | None = None,
    variables: tuple[str, ...] = (),
    units: tuple[str, ...] = (),
    warn_as_error: str | None = None,
    suppress_warning: str | None = None,
) -> None:
    """Resolve the math functions in VALUE."""
    warning_policy = _build_warning_policy(warn_as_error, suppress_warning)
    config = _load_config(config_file)

    custom_property = dict(config.custom_properties)
    custom_property.update(_parse_pairs(variables, "--var"))
    dimension: dict[str, float] = dict(config.dimensions)
    for unit, factor in _parse_pairs(units, "--unit").items():
        try:
            dimension[unit.lower()] = float(factor)
        except ValueError as e:
            raise click.UsageError(f"--unit {unit}: {factor!r} is not a number") from e

    overrides: dict = {"custom_property": custom_property, "dimension": dimension}
    if output_format is not None:
        overrides["format"] = output_format

    try:
        options = config.to_options(warning_policy=warning_policy, **overrides)
        result = css_calc(value, options, cache=config.build_cache())
    except CalcError as e:
        raise click.ClickException(str(e))
    click.echo(result)


@main.command()
@click.argument("value")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="YAML config; only its cache size is used.",
)
def serialize(value: str, config_file: Path | None = None) -> None:
    """Serialize VALUE in specified-value form."""
    config = _load_config(config_file)
    try:
        result = serialize_calc(
            value, config.to_options(format="specified-value"), cache=config.build_cache()
        )
    except CalcError as e:
        raise click.ClickException(str(e))
    click.echo(result)


@main.command(name="warnings")
def list_warnings() -> None:
    """List the warning codes accepted by --warn-as-error and --suppress-warning."""
    for code, description in sorted(DESCRIPTIONS.items()):
        click.echo(f"{code}  {description}")
