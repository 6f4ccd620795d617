"""CSS grammar patterns and numeric helpers shared across csscalc."""

from __future__ import annotations

import math
import re
from decimal import Decimal

# Precision budget used when emitting folded numbers.
HEX = 16
OCT = 8
MAX_PCT = 100

NUM = r"[+-]?(?:(?:0|[1-9]\d*)(?:\.\d*)?|\.\d+)(?:e[+-]?(?:0|[1-9]\d*))?"

ANGLE_UNITS = ("deg", "grad", "rad", "turn")
LENGTH_UNITS = (
    "cap", "ch", "cm", "cqb", "cqh", "cqi", "cqmax", "cqmin", "cqw",
    "dvb", "dvh", "dvi", "dvmax", "dvmin", "dvw", "em", "ex", "ic", "in",
    "lh", "lvb", "lvh", "lvi", "lvmax", "lvmin", "lvw", "mm", "pc", "pt",
    "px", "q", "rcap", "rch", "rem", "rex", "ric", "rlh", "svb", "svh",
    "svi", "svmax", "svmin", "svw", "vb", "vh", "vi", "vmax", "vmin", "vw",
)  # fmt: skip

ANGLE = "|".join(ANGLE_UNITS)
LENGTH = "|".join(sorted(LENGTH_UNITS, key=len, reverse=True))

MATH_FUNCTIONS = (
    "abs|acos|asin|atan|atan2|calc|clamp|cos|exp|hypot|log|max|min|mod|pow"
    "|rem|round|sign|sin|sqrt|tan"
)

REG_NUM = re.compile(rf"^{NUM}$")
REG_TYPE_DIM = re.compile(rf"^({NUM})({ANGLE}|{LENGTH})$")
REG_TYPE_DIM_PCT = re.compile(rf"^({NUM})({ANGLE}|{LENGTH}|%)$")
REG_TYPE_PCT = re.compile(rf"^({NUM})%$")
REG_OPERATOR = re.compile(r"\s[*+/-]\s")

REG_FN_MATH_START = re.compile(rf"^(?:{MATH_FUNCTIONS})\($")
REG_FN_CALC = re.compile(rf"^(?:{MATH_FUNCTIONS})\(|(?<=[*/\s(])(?:{MATH_FUNCTIONS})\(")
REG_FN_CALC_NUM = re.compile(rf"^calc\(({NUM})\)$")
REG_FN_VAR = re.compile(r"^var\(|(?<=[*/\s(])var\(")
REG_FN_VAR_START = re.compile(rf"^(?:{MATH_FUNCTIONS}|var)\(")
REG_NON_FINITE = re.compile(r"\b(?:nan|infinity)\b", re.IGNORECASE)


def parse_number(value: str | float | int) -> float | None:
    """Return the finite float a CSS number text denotes, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and REG_NUM.match(value):
        number = float(value)
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def format_number(value: float | int) -> str:
    """Serialize a number the way CSS text expects it.

    Integral values drop the trailing ``.0``, tiny and huge values use a
    short exponent (``1e-7``, ``1e+21``), non-finite values become
    ``NaN`` / ``Infinity`` / ``-Infinity``.  Digits come from the shortest
    round-trip ``repr``, so ``1.2345678901234568e20`` prints as
    ``123456789012345680000``.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    text = repr(value)
    if "e" not in text:
        return text[:-2] if text.endswith(".0") else text
    mantissa, exponent = text.split("e")
    power = int(exponent)
    if -7 < power < 21:
        return format(Decimal(text), "f")
    sign = "+" if power > 0 else "-"
    return f"{mantissa}e{sign}{abs(power)}"


def round_to_precision(value: float, bit: int = 0) -> float:
    """Round ``value`` to the significant-digit budget selected by ``bit``.

    ``bit`` 0 rounds to an integer; ``HEX`` keeps 6 significant digits,
    ``bit`` below ``OCT`` keeps 4, anything else keeps 5.

    Raises:
        TypeError: If ``value`` is not finite.
        ValueError: If ``bit`` is outside ``0..HEX``.
    """
    if not math.isfinite(value):
        raise TypeError(f"{value} is not a finite number.")
    if bit < 0 or bit > HEX:
        raise ValueError(f"{bit} is not between 0 and {HEX}.")
    if bit == 0:
        return float(math.floor(value + 0.5))
    if bit == HEX:
        digits = 6
    elif bit < OCT:
        digits = 4
    else:
        digits = 5
    return float(f"{value:.{digits}g}")


def divide(numerator: float, denominator: float) -> float:
    """IEEE division: ``x/0`` is a signed infinity and ``0/0`` is NaN."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator
