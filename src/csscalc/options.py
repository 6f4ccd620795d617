"""Pydantic v2 model for the options accepted by the resolvers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, field_validator
from pydantic import ValidationError as PydanticValidationError

from csscalc.errors import CalcTypeError, ConfigError
from csscalc.warning_policy import WarningPolicy

OutputFormat = Literal["default", "specified-value"]

VAL_SPEC: OutputFormat = "specified-value"

_NON_JSON_FIELDS = frozenset(
    {"custom_property_callback", "dimension_callback", "warning_policy"}
)


class CalcOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, coerce_numbers_to_str=True)

    format: OutputFormat = "default"
    custom_property: dict[str, str] = Field(default_factory=dict)
    custom_property_callback: Callable[[str], Any] | None = None
    dimension: dict[str, float] = Field(default_factory=dict)
    dimension_callback: Callable[[str], Any] | None = None
    warning_policy: InstanceOf[WarningPolicy] | None = None

    @field_validator("custom_property")
    @classmethod
    def _dashed_names(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            if not name.startswith("--"):
                raise ValueError(f"Custom property name must start with '--': {name!r}")
        return value

    @property
    def is_specified_value(self) -> bool:
        return self.format == VAL_SPEC

    @property
    def has_callbacks(self) -> bool:
        return self.custom_property_callback is not None or self.dimension_callback is not None

    def cache_fragment(self) -> dict[str, Any]:
        """JSON-safe view of the options that determine a result or its diagnostics."""
        data = self.model_dump(mode="json", exclude=set(_NON_JSON_FIELDS))
        policy = self.warning_policy
        data["warning_policy"] = policy.cache_fragment() if policy is not None else None
        return data


DEFAULT_OPTIONS = CalcOptions()


def as_options(options: CalcOptions | Mapping[str, Any] | None) -> CalcOptions:
    """Coerce ``None``, a mapping, or ``CalcOptions`` into ``CalcOptions``.

    Raises:
        ConfigError: If a mapping fails validation.
        CalcTypeError: If ``options`` is of any other type.
    """
    if options is None:
        return DEFAULT_OPTIONS
    if isinstance(options, CalcOptions):
        return options
    if isinstance(options, Mapping):
        try:
            return CalcOptions(**options)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid options:\n{e}") from e
    raise CalcTypeError(f"{options!r} is not a mapping.")
