"""csscalc: resolution and canonical serialization of CSS calc() expressions."""

__version__ = "0.1.0"

from csscalc.cache import CacheItem, CalcCache, NullObject, create_cache_key, default_cache
from csscalc.calculator import Calculator, Role, sort_terms
from csscalc.canonical import reduce_calc
from csscalc.config import CalcConfig, load_config
from csscalc.dimension import resolve_dimension, resolve_length_in_pixels
from csscalc.errors import (
    CalcError,
    CalcSyntaxError,
    CalcTypeError,
    ConfigError,
    UnresolvedValueError,
)
from csscalc.options import CalcOptions
from csscalc.resolver import css_calc, parse_tokens
from csscalc.serializer import serialize_calc, sort_calc_values
from csscalc.tokens import Token, TokenType, tokenize
from csscalc.variables import resolve_var
from csscalc.warning_policy import CalcWarning, WarningPolicy

__all__ = [
    "CacheItem",
    "CalcCache",
    "CalcConfig",
    "CalcError",
    "CalcOptions",
    "CalcSyntaxError",
    "CalcTypeError",
    "CalcWarning",
    "Calculator",
    "ConfigError",
    "NullObject",
    "Role",
    "Token",
    "TokenType",
    "UnresolvedValueError",
    "WarningPolicy",
    "create_cache_key",
    "css_calc",
    "default_cache",
    "load_config",
    "parse_tokens",
    "reduce_calc",
    "resolve_dimension",
    "resolve_length_in_pixels",
    "resolve_var",
    "serialize_calc",
    "sort_calc_values",
    "sort_terms",
    "tokenize",
]
