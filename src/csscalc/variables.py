"""Substitution of var() references."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import tinycss2
from tinycss2 import ast

from csscalc.errors import CalcTypeError
from csscalc.options import CalcOptions, as_options
from csscalc.util import REG_FN_CALC
from csscalc.warning_policy import UNRESOLVED_VARIABLE, emit_warning


class _Unresolved(Exception):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)


def resolve_var(value: str, options: CalcOptions | Mapping[str, Any] | None = None) -> str | None:
    """Substitute every ``var()`` in ``value``.

    Custom properties are looked up in ``options.custom_property``, then via
    ``options.custom_property_callback``, then the reference's fallback.
    A substituted value holding a math function is passed on to ``css_calc``.

    Returns:
        The substituted text, or ``None`` when a reference cannot be resolved.
    """
    if not isinstance(value, str):
        raise CalcTypeError(f"{value!r} is not a string.")
    opts = as_options(options)
    nodes = tinycss2.parse_component_value_list(value, skip_comments=True)
    try:
        resolved = _substitute(nodes, opts, frozenset()).strip()
    except _Unresolved as e:
        emit_warning(
            UNRESOLVED_VARIABLE,
            f"Cannot resolve custom property {e.name!r} in {value!r}",
            value=value,
            policy=opts.warning_policy,
        )
        return None
    if REG_FN_CALC.search(resolved):
        from csscalc.resolver import css_calc

        resolved = css_calc(resolved, opts)
    return resolved


def _substitute(nodes: list, opts: CalcOptions, seen: frozenset[str]) -> str:
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, ast.FunctionBlock):
            if node.lower_name == "var":
                parts.append(_substitute_reference(node, opts, seen))
            else:
                parts.append(f"{node.name}({_substitute(node.arguments, opts, seen)})")
        elif isinstance(node, ast.ParenthesesBlock):
            parts.append(f"({_substitute(node.content, opts, seen)})")
        else:
            parts.append(tinycss2.serialize([node]))
    return "".join(parts)


def _substitute_reference(node: ast.FunctionBlock, opts: CalcOptions, seen: frozenset[str]) -> str:
    args = list(node.arguments)
    while args and isinstance(args[0], ast.WhitespaceToken):
        args.pop(0)
    if not args or not isinstance(args[0], ast.IdentToken) or not args[0].value.startswith("--"):
        raise _Unresolved(tinycss2.serialize(node.arguments).strip())
    name = args[0].value
    rest = args[1:]
    fallback: list | None = None
    for index, arg in enumerate(rest):
        if isinstance(arg, ast.LiteralToken) and arg.value == ",":
            fallback = rest[index + 1 :]
            break

    if name not in seen:
        raw = _lookup(name, opts)
        if raw is not None and raw.strip():
            inner = tinycss2.parse_component_value_list(raw, skip_comments=True)
            try:
                return _substitute(inner, opts, seen | {name}).strip()
            except _Unresolved:
                if fallback is None:
                    raise
    if fallback is not None:
        return _substitute(fallback, opts, seen).strip()
    raise _Unresolved(name)


def _lookup(name: str, opts: CalcOptions) -> str | None:
    if name in opts.custom_property:
        return opts.custom_property[name]
    if opts.custom_property_callback is not None:
        value = opts.custom_property_callback(name)
        if value is not None:
            return str(value)
    return None
