"""YAML configuration loading for csscalc."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from csscalc.cache import MAX_CACHE, CalcCache
from csscalc.errors import ConfigError
from csscalc.options import CalcOptions, OutputFormat
from csscalc.warning_policy import WarningPolicy, parse_code_list


class CalcConfig(BaseModel):
    """Settings read from a ``.csscalc.yaml`` file."""

    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    format: OutputFormat = "default"
    custom_properties: dict[str, str] = Field(default_factory=dict)
    dimensions: dict[str, float] = Field(default_factory=dict)
    cache_size: int = Field(default=MAX_CACHE, gt=0)
    warn_as_error: list[str] = Field(default_factory=list)
    suppress_warnings: list[str] = Field(default_factory=list)

    @field_validator("custom_properties")
    @classmethod
    def _dashed_names(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            if not name.startswith("--"):
                raise ValueError(f"Custom property name must start with '--': {name!r}")
        return value

    @field_validator("dimensions")
    @classmethod
    def _lowercase_units(cls, value: dict[str, float]) -> dict[str, float]:
        return {unit.lower(): factor for unit, factor in value.items()}

    @field_validator("warn_as_error", "suppress_warnings")
    @classmethod
    def _known_codes(cls, value: list[str]) -> list[str]:
        parse_code_list(",".join(value))
        return value

    def build_warning_policy(self) -> WarningPolicy | None:
        if not self.warn_as_error and not self.suppress_warnings:
            return None
        return WarningPolicy(
            warn_as_error=frozenset(self.warn_as_error),
            suppress=frozenset(self.suppress_warnings),
        )

    def to_options(
        self, warning_policy: WarningPolicy | None = None, **overrides: Any
    ) -> CalcOptions:
        """Build runtime options.

        An explicit ``warning_policy`` replaces the one from the config file;
        ``overrides`` replace individual fields.
        """
        if warning_policy is None:
            warning_policy = self.build_warning_policy()
        data: dict[str, Any] = {
            "format": self.format,
            "custom_property": dict(self.custom_properties),
            "dimension": dict(self.dimensions),
            "warning_policy": warning_policy,
        }
        data.update(overrides)
        try:
            return CalcOptions(**data)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid options:\n{e}") from e

    def build_cache(self) -> CalcCache:
        return CalcCache(self.cache_size)


def _make_yaml() -> YAML:
    """Create a ruamel.yaml safe loader that errors on duplicate keys."""
    yml = YAML(typ="safe")
    yml.allow_duplicate_keys = False
    return yml


def _read_source_text(source: str | Path) -> str:
    """Read YAML content from a path or treat the input as raw YAML text."""
    if isinstance(source, Path):
        try:
            return source.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read file: {e}") from e
    return source


def load_config(source: str | Path) -> CalcConfig:
    """Load a csscalc YAML config from a string or file path.

    An empty document yields the default configuration.

    Raises:
        ConfigError: On YAML syntax errors or schema violations.
    """
    text = _read_source_text(source)
    try:
        data = _make_yaml().load(text)
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML value must be a mapping")

    try:
        return CalcConfig(**data)
    except PydanticValidationError as e:
        raise ConfigError(f"Schema validation failed:\n{e}") from e
