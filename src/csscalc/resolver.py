"""Top-level resolution of CSS values containing math functions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from csscalc.cache import CalcCache, create_cache_key, default_cache
from csscalc.canonical import reduce_calc
from csscalc.dimension import resolve_dimension
from csscalc.errors import CalcTypeError
from csscalc.options import CalcOptions, as_options
from csscalc.serializer import NAMESPACE, serialize_calc
from csscalc.tokens import Token, TokenType, tokenize
from csscalc.util import (
    HEX,
    REG_FN_CALC,
    REG_FN_CALC_NUM,
    REG_FN_MATH_START,
    REG_FN_VAR,
    REG_FN_VAR_START,
    REG_NON_FINITE,
    REG_OPERATOR,
    REG_TYPE_DIM_PCT,
    format_number,
    round_to_precision,
)
from csscalc.variables import resolve_var
from csscalc.warning_policy import NON_FINITE_RESULT, emit_warning


def parse_tokens(
    tokens: list[Token], options: CalcOptions | Mapping[str, Any] | None = None
) -> list[str]:
    """Turn a token list into value strings ready to be joined.

    Dimensions are resolved to pixels where possible, except outside math
    functions in specified-value format.  Whitespace collapses to one space
    and is dropped after an opening and before a closing parenthesis.

    Raises:
        CalcTypeError: If ``tokens`` is not a list of ``Token``.
    """
    if not isinstance(tokens, list):
        raise CalcTypeError(f"{tokens!r} is not a list.")
    opts = as_options(options)
    math_func: set[int] = set()
    nest = 0
    res: list[str] = []
    for token in tokens:
        if not isinstance(token, Token):
            raise CalcTypeError(f"{token!r} is not a token.")
        kind = token.type
        value = token.value
        if kind is TokenType.DIMENSION:
            if opts.is_specified_value and nest not in math_func:
                res.append(value)
            else:
                resolved = resolve_dimension(token, opts)
                res.append(resolved if isinstance(resolved, str) else value)
        elif kind in (TokenType.FUNCTION, TokenType.PAREN_OPEN):
            res.append(value)
            nest += 1
            if REG_FN_MATH_START.match(value):
                math_func.add(nest)
        elif kind is TokenType.PAREN_CLOSE:
            if res and res[-1] == " ":
                res[-1] = value
            else:
                res.append(value)
            math_func.discard(nest)
            nest -= 1
        elif kind is TokenType.WHITESPACE:
            if res and not res[-1].endswith("(") and res[-1] != " ":
                res.append(" ")
        elif kind not in (TokenType.COMMENT, TokenType.EOF):
            res.append(value)
    return res


def css_calc(
    value: str,
    options: CalcOptions | Mapping[str, Any] | None = None,
    *,
    cache: CalcCache | None = None,
) -> str:
    """Resolve the math functions in a CSS value.

    Args:
        value: CSS value text, e.g. ``"calc(1px + 2px)"``.
        options: ``CalcOptions`` or an equivalent mapping.
        cache: Cache service; the process-wide cache when omitted.

    Returns:
        The canonical value.  An empty string means the value resolves to
        nothing (an unresolved ``var()``).

    Raises:
        CalcTypeError: If ``value`` is not a string.
        CalcSyntaxError: If specified-value serialization meets malformed groups.
    """
    if not isinstance(value, str):
        raise CalcTypeError(f"{value!r} is not a string.")
    opts = as_options(options)
    if REG_FN_VAR.search(value):
        if opts.is_specified_value:
            return value
        resolved = resolve_var(value, opts)
        return resolved if isinstance(resolved, str) else ""
    if not REG_FN_CALC.search(value):
        return value
    value = value.lower().strip()

    cache = cache if cache is not None else default_cache()
    cache_key = create_cache_key({"namespace": NAMESPACE, "name": "css_calc", "value": value}, opts)
    cached = cache.get(cache_key)
    if cached is not None:
        return "" if cached.is_null else cached.item

    values = parse_tokens(tokenize(value), opts)
    resolved_value = reduce_calc("".join(values))
    if REG_FN_VAR_START.match(value):
        m = REG_TYPE_DIM_PCT.match(resolved_value)
        if m:
            number, unit = m.groups()
            resolved_value = f"{format_number(round_to_precision(float(number), HEX))}{unit}"
        if (
            resolved_value
            and not REG_FN_VAR_START.match(resolved_value)
            and opts.is_specified_value
        ):
            resolved_value = f"calc({resolved_value})"
    if opts.is_specified_value:
        if REG_OPERATOR.search(resolved_value) and "NaN" not in resolved_value:
            resolved_value = serialize_calc(resolved_value, opts, cache=cache)
        else:
            m = REG_FN_CALC_NUM.match(resolved_value)
            if m:
                number = round_to_precision(float(m.group(1)), HEX)
                resolved_value = f"calc({format_number(number)})"
    if REG_NON_FINITE.search(resolved_value):
        emit_warning(
            NON_FINITE_RESULT,
            f"{value!r} resolves to a non-finite value {resolved_value!r}",
            value=value,
            policy=opts.warning_policy,
        )

    cache.set(cache_key, resolved_value or None)
    return resolved_value
