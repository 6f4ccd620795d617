"""Pixel resolution for dimension tokens."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from csscalc.cache import NullObject
from csscalc.canonical import CANONICAL_UNITS
from csscalc.errors import CalcTypeError
from csscalc.options import CalcOptions, as_options
from csscalc.tokens import Token, TokenType
from csscalc.util import HEX, LENGTH_UNITS, format_number, round_to_precision
from csscalc.warning_policy import UNRESOLVED_DIMENSION, emit_warning


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def resolve_length_in_pixels(
    value: float, unit: str, options: CalcOptions | Mapping[str, Any] | None = None
) -> float:
    """Convert ``value`` in ``unit`` to pixels.

    Lookup order: ``options.dimension[unit]`` (pixels per unit), then
    ``options.dimension_callback(unit)``, then the absolute length table.
    Only length units are converted; a callback answer that is not a finite
    number falls through to the table.

    Returns:
        The pixel value, or NaN when the unit cannot be converted.
    """
    opts = as_options(options)
    unit = unit.lower()
    if not math.isfinite(value) or unit not in LENGTH_UNITS:
        return math.nan
    if unit in opts.dimension:
        return value * opts.dimension[unit]
    if opts.dimension_callback is not None:
        factor = _to_float(opts.dimension_callback(unit))
        if math.isfinite(factor):
            return value * factor
    target = CANONICAL_UNITS.get(unit)
    if target is not None and target[0] == "px":
        return value * target[1]
    return math.nan


def resolve_dimension(
    token: Token, options: CalcOptions | Mapping[str, Any] | None = None
) -> str | NullObject:
    """Resolve a dimension token to ``<n>px`` text.

    Returns:
        The pixel text, or a ``NullObject`` when the unit cannot be resolved
        so that the caller can keep the original text.

    Raises:
        CalcTypeError: If ``token`` is not a dimension ``Token``.
    """
    if not isinstance(token, Token) or token.type is not TokenType.DIMENSION:
        raise CalcTypeError(f"{token!r} is not a dimension token.")
    opts = as_options(options)
    unit = token.unit or ""
    if unit == "px":
        return f"{format_number(token.number)}{unit}"
    pixels = resolve_length_in_pixels(token.number, unit, opts)
    if math.isfinite(pixels):
        return f"{format_number(round_to_precision(pixels, HEX))}px"
    if unit in LENGTH_UNITS:
        emit_warning(
            UNRESOLVED_DIMENSION,
            f"Cannot resolve {token.value!r} to pixels; kept as is",
            value=token.value,
            policy=opts.warning_policy,
        )
    return NullObject()
