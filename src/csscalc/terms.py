"""Classification of calc() operands into numbers, percentages, dimensions and opaque terms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from csscalc.util import REG_TYPE_DIM, REG_TYPE_PCT, format_number, parse_number


@dataclass(frozen=True)
class NumberTerm:
    value: float


@dataclass(frozen=True)
class PercentageTerm:
    value: float


@dataclass(frozen=True)
class DimensionTerm:
    text: str
    value: float
    unit: str


@dataclass(frozen=True)
class OpaqueTerm:
    text: str


Term = Union[NumberTerm, PercentageTerm, DimensionTerm, OpaqueTerm]


def classify_term(value: str | float | int) -> Term:
    """Classify one operand by its textual form.

    Non-finite numbers are carried as opaque ``NaN`` / ``Infinity`` text.
    """
    number = parse_number(value)
    if number is not None:
        return NumberTerm(number)
    text = value if isinstance(value, str) else format_number(value)
    m = REG_TYPE_PCT.match(text)
    if m:
        return PercentageTerm(float(m.group(1)))
    m = REG_TYPE_DIM.match(text)
    if m:
        return DimensionTerm(text, float(m.group(1)), m.group(2))
    return OpaqueTerm(text)
