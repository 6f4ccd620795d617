"""Kind-aware accumulation of calc() terms.

A ``Calculator`` collects the operands of one parenthesized group, split by
kind (number, percentage, dimension, opaque) and by role, then folds them
with ``multiply()`` or ``sum()``.  Kinds never merge with each other: each
kind's partial result is emitted as its own space-separated segment, always
in the order number, percentage, dimension, opaque.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from functools import cmp_to_key

from csscalc.canonical import reduce_calc
from csscalc.errors import CalcTypeError
from csscalc.terms import DimensionTerm, NumberTerm, OpaqueTerm, PercentageTerm, Term
from csscalc.util import (
    HEX,
    MAX_PCT,
    REG_OPERATOR,
    REG_TYPE_DIM_PCT,
    divide,
    format_number,
    round_to_precision,
)

_CALC_PREFIX = re.compile(r"^calc")


class Role(Enum):
    MULTIPLY = "*"
    DIVIDE = "/"
    ADD = "+"
    SUBTRACT = "-"


def _compare(a: str, b: str) -> int:
    ma = REG_TYPE_DIM_PCT.match(a)
    mb = REG_TYPE_DIM_PCT.match(b)
    if ma and mb:
        val_a, unit_a = float(ma.group(1)), ma.group(2)
        val_b, unit_b = float(mb.group(1)), mb.group(2)
        if unit_a == unit_b:
            return (val_a > val_b) - (val_a < val_b)
        return 1 if unit_a > unit_b else -1
    return (a > b) - (a < b)


def sort_terms(values: list[str]) -> list[str]:
    """Return ``values`` in canonical order.

    Same-unit dimensions and percentages compare numerically, different
    units compare by unit name, everything else compares lexically.
    """
    return sorted(values, key=cmp_to_key(_compare))


def _is_finite(value: float | str | None) -> bool:
    return isinstance(value, float) and math.isfinite(value)


def _text(value: float | str) -> str:
    return value if isinstance(value, str) else format_number(value)


def _strip_calc(value: str) -> str:
    return _CALC_PREFIX.sub("", value, count=1)


def _wrap_operation(item: str) -> str:
    if REG_OPERATOR.search(item) and not item.startswith("(") and not item.endswith(")"):
        return f"({item})"
    return item


class Calculator:
    """Term buckets for one group, folded by ``multiply()`` or ``sum()``."""

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        # number
        self.has_num = False
        self.num_sum: list[float] = []
        self.num_mul: list[float] = []
        # percentage
        self.has_pct = False
        self.pct_sum: list[float] = []
        self.pct_mul: list[float] = []
        # dimension
        self.has_dim = False
        self.dim_sum: list[str] = []
        self.dim_sub: list[str] = []
        self.dim_mul: list[str] = []
        self.dim_div: list[str] = []
        # et cetera
        self.has_etc = False
        self.etc_sum: list[str] = []
        self.etc_sub: list[str] = []
        self.etc_mul: list[str] = []
        self.etc_div: list[str] = []

    def add_term(self, term: Term, role: Role) -> None:
        """File ``term`` into the bucket for its kind and ``role``."""
        if isinstance(term, NumberTerm):
            self.has_num = True
            if role is Role.MULTIPLY:
                self.num_mul.append(term.value)
            elif role is Role.DIVIDE:
                self.num_mul.append(divide(1.0, term.value))
            elif role is Role.ADD:
                self.num_sum.append(term.value)
            else:
                self.num_sum.append(-1 * term.value)
        elif isinstance(term, PercentageTerm):
            self.has_pct = True
            if role is Role.MULTIPLY:
                self.pct_mul.append(term.value)
            elif role is Role.DIVIDE:
                self.pct_mul.append(divide(MAX_PCT * MAX_PCT, term.value))
            elif role is Role.ADD:
                self.pct_sum.append(term.value)
            else:
                self.pct_sum.append(-1 * term.value)
        elif isinstance(term, DimensionTerm):
            self.has_dim = True
            self._bucket("dim", role).append(term.text)
        elif isinstance(term, OpaqueTerm):
            self.has_etc = True
            self._bucket("etc", role).append(term.text)
        else:
            raise CalcTypeError(f"Unknown term {term!r}")

    def _bucket(self, kind: str, role: Role) -> list[str]:
        suffix = {
            Role.MULTIPLY: "mul",
            Role.DIVIDE: "div",
            Role.ADD: "sum",
            Role.SUBTRACT: "sub",
        }[role]
        return getattr(self, f"{kind}_{suffix}")

    def multiply(self) -> str:
        """Fold the multiplicative buckets into one term."""
        value: list[str] = []
        num: float | str | None = None
        if self.has_num:
            num = 1.0
            for i in self.num_mul:
                num *= i
                if num == 0 or not math.isfinite(num):
                    break
            if not self.has_pct and not self.has_dim and not self.has_etc:
                if math.isfinite(num):
                    num = round_to_precision(num, HEX)
                value.append(format_number(num))
        if self.has_pct:
            if not isinstance(num, float):
                num = 1.0
            for i in self.pct_mul:
                num *= i
                if num == 0 or not math.isfinite(num):
                    break
            if math.isfinite(num):
                num = f"{format_number(round_to_precision(num, HEX))}%"
            if not self.has_dim and not self.has_etc:
                value.append(_text(num))
        if self.has_dim:
            self._multiply_dimensions(num, value)
        if self.has_etc:
            if not value and num is not None:
                value.append(_text(num))
            if self.etc_mul:
                mul = " * ".join(sort_terms(self.etc_mul))
                if value:
                    value.append(f"* {mul}")
                else:
                    value.append(mul)
            if self.etc_div:
                div = " * ".join(sort_terms(self.etc_div))
                if "*" in div:
                    value.append(f"/ ({div})" if value else f"1 / ({div})")
                else:
                    value.append(f"/ {div}" if value else f"1 / {div}")
        return " ".join(value)

    def _multiply_dimensions(self, num: float | str | None, value: list[str]) -> None:
        mul = ""
        div = ""
        if self.dim_mul:
            if len(self.dim_mul) == 1:
                mul = self.dim_mul[0]
            else:
                mul = " * ".join(sort_terms(self.dim_mul))
        if self.dim_div:
            if len(self.dim_div) == 1:
                div = self.dim_div[0]
            else:
                div = " * ".join(sort_terms(self.dim_div))
        denominator = f"({div})" if "*" in div else div
        if _is_finite(num):
            scalar = format_number(num)
            if mul:
                if div:
                    dim = reduce_calc(f"calc({scalar} * {mul} / {denominator})")
                else:
                    dim = reduce_calc(f"calc({scalar} * {mul})")
            else:
                dim = reduce_calc(f"calc({scalar} / {denominator})")
            value.append(_strip_calc(dim))
            return
        if not value and num is not None:
            value.append(_text(num))
        if mul:
            if div:
                dim = reduce_calc(f"calc({mul} / {denominator})")
            else:
                dim = reduce_calc(f"calc({mul})")
            if value:
                value.extend(["*", _strip_calc(dim)])
            else:
                value.append(_strip_calc(dim))
        else:
            dim = reduce_calc(f"calc({div})")
            if value:
                value.extend(["/", _strip_calc(dim)])
            else:
                value.extend(["1", "/", _strip_calc(dim)])

    def sum(self) -> str:
        """Fold the additive buckets into one term."""
        value: list[str] = []
        if self.has_num:
            num = 0.0
            for i in self.num_sum:
                num += i
                if not math.isfinite(num):
                    break
            value.append(format_number(num))
        if self.has_pct:
            pct = 0.0
            for i in self.pct_sum:
                pct += i
                if not math.isfinite(pct):
                    break
            pct_text = f"{format_number(pct)}%" if math.isfinite(pct) else format_number(pct)
            value.append(f"+ {pct_text}" if value else pct_text)
        if self.has_dim:
            total = " + ".join(sort_terms(self.dim_sum))
            sub = " + ".join(sort_terms(self.dim_sub))
            if total:
                if sub:
                    if "-" in sub:
                        dim = reduce_calc(f"calc({total} - ({sub}))")
                    else:
                        dim = reduce_calc(f"calc({total} - {sub})")
                else:
                    dim = reduce_calc(f"calc({total})")
            else:
                dim = reduce_calc(f"calc(-1 * ({sub}))")
            if value:
                value.extend(["+", _strip_calc(dim)])
            else:
                value.append(_strip_calc(dim))
        if self.has_etc:
            if self.etc_sum:
                total = " + ".join(_wrap_operation(i) for i in sort_terms(self.etc_sum))
                if value:
                    value.append(f"+ ({total})" if len(self.etc_sum) > 1 else f"+ {total}")
                else:
                    value.append(total)
            if self.etc_sub:
                sub = " + ".join(_wrap_operation(i) for i in sort_terms(self.etc_sub))
                if value:
                    value.append(f"- ({sub})" if len(self.etc_sub) > 1 else f"- {sub}")
                elif len(self.etc_sub) > 1:
                    value.append(f"-1 * ({sub})")
                else:
                    value.append(f"-1 * {sub}")
        return " ".join(value)
