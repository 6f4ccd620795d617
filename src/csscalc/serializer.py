"""Flattening of nested calc() groups and specified-value serialization."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from csscalc.cache import CalcCache, create_cache_key, default_cache
from csscalc.calculator import Calculator, Role
from csscalc.canonical import reduce_calc
from csscalc.errors import CalcSyntaxError, CalcTypeError
from csscalc.options import CalcOptions, as_options
from csscalc.terms import classify_term
from csscalc.tokens import TokenType, tokenize
from csscalc.util import REG_FN_VAR_START

NAMESPACE = "css-calc"
TRIA = 3

_PLUS_MINUS = re.compile(r"\+\s-")


def _is_string_or_number(value: object) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def find_last_open(items: list[str]) -> int:
    """Index of the last item opening a group, or -1."""
    for index in range(len(items) - 1, -1, -1):
        item = items[index]
        if isinstance(item, str) and item.endswith("("):
            return index
    return -1


def find_group_close(items: list[str], start: int) -> int:
    """Index of the first ``)`` after ``start``, or -1."""
    for index in range(start + 1, len(items)):
        if items[index] == ")":
            return index
    return -1


def sort_calc_values(values: list[str | float], finalize: bool = False) -> str:
    """Reduce one group ``[open, operand..., ")"]`` to canonical text.

    Multiplicative runs between ``+`` / ``-`` are folded first; with
    ``finalize`` the runs are then summed by kind.

    Raises:
        CalcSyntaxError: If the group is too short or holds an unexpected token.
    """
    if len(values) < TRIA:
        raise CalcSyntaxError(f"Unexpected array length {len(values)}.")
    values = list(values)
    start = values.pop(0)
    if not isinstance(start, str) or not start.endswith("("):
        raise CalcSyntaxError(f"Unexpected token {start}.")
    end = values.pop()
    if end != ")":
        raise CalcSyntaxError(f"Unexpected token {end}.")
    if len(values) == 1:
        (value,) = values
        if not _is_string_or_number(value):
            raise CalcSyntaxError(f"Unexpected token {value}.")
        return f"{start}{value}{end}"

    sorted_values: list[str] = []
    cal = Calculator()
    operator = ""
    last = len(values) - 1
    for i, value in enumerate(values):
        if not _is_string_or_number(value):
            raise CalcSyntaxError(f"Unexpected token {value}.")
        if value in ("*", "/"):
            operator = value
        elif value in ("+", "-"):
            sorted_value = cal.multiply()
            if sorted_value:
                sorted_values.extend([sorted_value, value])
            cal.clear()
            operator = ""
        else:
            role = Role.DIVIDE if operator == "/" else Role.MULTIPLY
            cal.add_term(classify_term(value), role)
        if i == last:
            sorted_value = cal.multiply()
            if sorted_value:
                sorted_values.append(sorted_value)
            cal.clear()
            operator = ""

    if finalize and ("+" in sorted_values or "-" in sorted_values):
        finalized_values: list[str] = []
        cal.clear()
        operator = ""
        last = len(sorted_values) - 1
        for i, value in enumerate(sorted_values):
            if value in ("+", "-"):
                operator = value
            else:
                role = Role.SUBTRACT if operator == "-" else Role.ADD
                cal.add_term(classify_term(value), role)
            if i == last:
                sorted_value = cal.sum()
                if sorted_value:
                    finalized_values.append(sorted_value)
                cal.clear()
                operator = ""
        resolved_value = _PLUS_MINUS.sub("- ", " ".join(finalized_values))
    else:
        resolved_value = _PLUS_MINUS.sub("- ", " ".join(sorted_values))

    if (
        resolved_value.startswith("(")
        and resolved_value.endswith(")")
        and resolved_value.rfind("(") == 0
        and resolved_value.find(")") == len(resolved_value) - 1
    ):
        resolved_value = resolved_value[1:-1]
    return f"{start}{resolved_value}{end}"


def flatten_groups(items: list[str]) -> list[str]:
    """Reduce nested groups innermost-last first until one group remains.

    Each reduced group replaces its slice in ``items`` as a single item; a
    reduced math function or ``var()`` is passed to the canonical-unit
    evaluator first.

    Raises:
        CalcSyntaxError: On unmatched parentheses.
    """
    items = list(items)
    start_index = find_last_open(items)
    if start_index < 0:
        raise CalcSyntaxError(f"No group found in {' '.join(map(str, items))!r}.")
    while start_index > 0:
        end_index = find_group_close(items, start_index)
        if end_index < 0:
            raise CalcSyntaxError(f"Unmatched parenthesis after {items[start_index]!r}.")
        serialized_value = sort_calc_values(items[start_index : end_index + 1])
        if REG_FN_VAR_START.match(serialized_value):
            serialized_value = reduce_calc(serialized_value)
        items[start_index : end_index + 1] = [serialized_value]
        start_index = find_last_open(items)
    return items


def serialize_calc(
    value: str,
    options: CalcOptions | Mapping[str, Any] | None = None,
    *,
    cache: CalcCache | None = None,
) -> str:
    """Serialize a math function in specified-value form.

    Values that do not start with a math function or ``var()``, or any value
    when the format is not ``specified-value``, are returned unchanged.

    Raises:
        CalcTypeError: If ``value`` is not a string.
        CalcSyntaxError: If the expression's groups are malformed.
    """
    if not isinstance(value, str):
        raise CalcTypeError(f"{value!r} is not a string.")
    opts = as_options(options)
    if not REG_FN_VAR_START.match(value) or not opts.is_specified_value:
        return value
    value = value.lower().strip()
    cache = cache if cache is not None else default_cache()
    cache_key = create_cache_key(
        {"namespace": NAMESPACE, "name": "serialize_calc", "value": value}, opts
    )
    cached = cache.get(cache_key)
    if cached is not None:
        return "" if cached.is_null else cached.item

    items = [
        token.value
        for token in tokenize(value)
        if token.type not in (TokenType.WHITESPACE, TokenType.COMMENT) and token.value
    ]
    items = flatten_groups(items)
    serialized = sort_calc_values(items, finalize=True)
    cache.set(cache_key, serialized)
    return serialized
