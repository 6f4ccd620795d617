"""Canonical-unit evaluation of calc(), min(), max() and clamp() expressions.

Every computable math function found in the input (at any depth) is replaced
by its value.  Functions that cannot be computed, because an operand is not
numeric or the unit types do not combine, are kept in symbolic form with
their nested functions reduced.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import tinycss2
from tinycss2 import ast

from csscalc.util import divide, format_number

_PX_PER_IN = 96.0

# unit -> (canonical unit, ratio)
CANONICAL_UNITS: dict[str, tuple[str, float]] = {
    # <length>
    "px": ("px", 1.0),
    "in": ("px", _PX_PER_IN),
    "cm": ("px", _PX_PER_IN / 2.54),
    "mm": ("px", _PX_PER_IN / 25.4),
    "q": ("px", _PX_PER_IN / 101.6),
    "pc": ("px", _PX_PER_IN / 6),
    "pt": ("px", _PX_PER_IN / 72),
    # <angle>
    "deg": ("deg", 1.0),
    "grad": ("deg", 0.9),
    "rad": ("deg", 180 / math.pi),
    "turn": ("deg", 360.0),
    # <time>
    "s": ("s", 1.0),
    "ms": ("s", 0.001),
    # <frequency>
    "hz": ("hz", 1.0),
    "khz": ("hz", 1000.0),
    # <resolution>
    "dppx": ("dppx", 1.0),
    "x": ("dppx", 1.0),
    "dpi": ("dppx", 1 / _PX_PER_IN),
    "dpcm": ("dppx", 2.54 / _PX_PER_IN),
}

_CONSTANTS = {
    "e": math.e,
    "pi": math.pi,
    "infinity": math.inf,
    "-infinity": -math.inf,
    "nan": math.nan,
}

_EVALUATED_FUNCTIONS = frozenset({"calc", "min", "max", "clamp"})


class _Unresolvable(Exception):
    """Internal signal: the expression cannot be reduced to one value."""


@dataclass(frozen=True)
class Quantity:
    """A numeric value with a unit; ``""`` for plain numbers, ``"%"`` for percentages."""

    value: float
    unit: str = ""

    def serialize(self) -> str:
        if math.isfinite(self.value):
            return f"{format_number(self.value)}{self.unit}"
        if self.unit:
            return f"calc({format_number(self.value)} * 1{self.unit})"
        return f"calc({format_number(self.value)})"


def reduce_calc(text: str, *, to_canonical_units: bool = True) -> str:
    """Reduce the math functions in ``text``.

    Args:
        text: CSS text, e.g. ``"calc(1in + 4px)"``.
        to_canonical_units: Convert absolute units to their canonical unit
            (``px``, ``deg``, ``s``, ``hz``, ``dppx``) so they can combine.

    Returns:
        The reduced text; ``"100px"`` for the example above.
    """
    nodes = tinycss2.parse_component_value_list(text, skip_comments=True)
    return _serialize_nodes(nodes, to_canonical_units).strip()


def _serialize_nodes(nodes: list, canonical: bool) -> str:
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, ast.WhitespaceToken):
            if parts and parts[-1] != " ":
                parts.append(" ")
        elif isinstance(node, ast.FunctionBlock):
            parts.append(_serialize_function(node, canonical))
        elif isinstance(node, ast.ParenthesesBlock):
            parts.append(f"({_serialize_nodes(node.content, canonical).strip()})")
        else:
            parts.append(tinycss2.serialize([node]))
    return "".join(parts)


def _serialize_function(node: ast.FunctionBlock, canonical: bool) -> str:
    if node.lower_name in _EVALUATED_FUNCTIONS:
        try:
            return _evaluate_function(node, canonical).serialize()
        except _Unresolvable:
            pass
    inner = _serialize_nodes(node.arguments, canonical).strip()
    return f"{node.name}({inner})"


def _evaluate_function(node: ast.FunctionBlock, canonical: bool) -> Quantity:
    name = node.lower_name
    if name not in _EVALUATED_FUNCTIONS:
        raise _Unresolvable(name)
    args = _split_arguments(node.arguments)
    values = [_evaluate_sum(arg, canonical) for arg in args]
    if name == "calc":
        if len(values) != 1:
            raise _Unresolvable(name)
        return values[0]
    unit = _common_unit(values)
    numbers = [v.value for v in values]
    if name == "min":
        return Quantity(_nan_aware(min, numbers), unit)
    if name == "max":
        return Quantity(_nan_aware(max, numbers), unit)
    if len(numbers) != 3:
        raise _Unresolvable(name)
    low, mid, high = numbers
    return Quantity(_nan_aware(max, [low, _nan_aware(min, [mid, high])]), unit)


def _nan_aware(func, numbers: list[float]) -> float:
    if any(math.isnan(n) for n in numbers):
        return math.nan
    return func(numbers)


def _common_unit(values: list[Quantity]) -> str:
    units = {v.unit for v in values}
    if len(units) != 1:
        raise _Unresolvable("mixed units")
    return units.pop()


def _split_arguments(nodes: list) -> list[list]:
    """Split function arguments on top-level commas, dropping whitespace."""
    args: list[list] = [[]]
    for node in nodes:
        if isinstance(node, (ast.WhitespaceToken, ast.Comment)):
            continue
        if isinstance(node, ast.LiteralToken) and node.value == ",":
            args.append([])
        else:
            args[-1].append(node)
    if any(not arg for arg in args):
        raise _Unresolvable("empty argument")
    return args


def _evaluate_sum(nodes: list, canonical: bool) -> Quantity:
    items = [n for n in nodes if not isinstance(n, (ast.WhitespaceToken, ast.Comment))]
    pos = 0
    result, pos = _evaluate_product(items, pos, canonical)
    while pos < len(items):
        op = _operator(items[pos])
        if op not in ("+", "-"):
            raise _Unresolvable(op)
        rhs, pos = _evaluate_product(items, pos + 1, canonical)
        if result.unit != rhs.unit:
            raise _Unresolvable("incompatible units")
        if op == "+":
            result = Quantity(result.value + rhs.value, result.unit)
        else:
            result = Quantity(result.value - rhs.value, result.unit)
    return result


def _evaluate_product(items: list, pos: int, canonical: bool) -> tuple[Quantity, int]:
    result, pos = _evaluate_value(items, pos, canonical)
    while pos < len(items):
        op = _operator(items[pos])
        if op not in ("*", "/"):
            break
        rhs, pos = _evaluate_value(items, pos + 1, canonical)
        if op == "*":
            result = _multiply(result, rhs)
        else:
            result = _divide(result, rhs)
    return result, pos


def _multiply(lhs: Quantity, rhs: Quantity) -> Quantity:
    if lhs.unit and rhs.unit:
        raise _Unresolvable("product of two dimensions")
    return Quantity(lhs.value * rhs.value, lhs.unit or rhs.unit)


def _divide(lhs: Quantity, rhs: Quantity) -> Quantity:
    if not rhs.unit:
        return Quantity(divide(lhs.value, rhs.value), lhs.unit)
    if lhs.unit == rhs.unit:
        return Quantity(divide(lhs.value, rhs.value))
    raise _Unresolvable("division by a dimension")


def _operator(node) -> str | None:
    if isinstance(node, ast.LiteralToken):
        return node.value
    return None


def _evaluate_value(items: list, pos: int, canonical: bool) -> tuple[Quantity, int]:
    if pos >= len(items):
        raise _Unresolvable("missing operand")
    node = items[pos]
    if isinstance(node, ast.NumberToken):
        value = Quantity(float(node.value))
    elif isinstance(node, ast.PercentageToken):
        value = Quantity(float(node.value), "%")
    elif isinstance(node, ast.DimensionToken):
        value = _dimension(float(node.value), node.lower_unit, canonical)
    elif isinstance(node, ast.IdentToken) and node.lower_value in _CONSTANTS:
        value = Quantity(_CONSTANTS[node.lower_value])
    elif isinstance(node, ast.ParenthesesBlock):
        value = _evaluate_sum(node.content, canonical)
    elif isinstance(node, ast.FunctionBlock):
        value = _evaluate_function(node, canonical)
    else:
        raise _Unresolvable(tinycss2.serialize([node]))
    return value, pos + 1


def _dimension(number: float, unit: str, canonical: bool) -> Quantity:
    if canonical and unit in CANONICAL_UNITS:
        target, ratio = CANONICAL_UNITS[unit]
        return Quantity(number * ratio, target)
    return Quantity(number, unit)
