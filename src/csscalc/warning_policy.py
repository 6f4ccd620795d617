"""Coded diagnostics for values csscalc cannot fully resolve.

A value that only partly resolves is still returned; the missing piece is
reported as a ``CalcWarning`` carrying one of the codes below.  A
``WarningPolicy`` can drop a code or turn it into an ``UnresolvedValueError``.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable
from dataclasses import dataclass, field

from csscalc.errors import UnresolvedValueError

UNRESOLVED_DIMENSION = "W01"
UNRESOLVED_VARIABLE = "W02"
NON_FINITE_RESULT = "W03"

DESCRIPTIONS: dict[str, str] = {
    UNRESOLVED_DIMENSION: "length unit with no pixel size",
    UNRESOLVED_VARIABLE: "var() reference with no value",
    NON_FINITE_RESULT: "result is NaN or infinite",
}

KNOWN_CODES: frozenset[str] = frozenset(DESCRIPTIONS)


class CalcWarning(UserWarning):
    """Warning about ``value``, the CSS text being resolved."""

    def __init__(self, code: str, message: str, value: str | None = None) -> None:
        self.code = code
        self.value = value
        super().__init__(f"[{code}] {message}")


def parse_code_list(raw: str) -> frozenset[str]:
    """Parse a comma-separated string of W-codes and validate them.

    Raises ``ValueError`` for unknown codes.
    """
    return _validated(token.strip() for token in raw.split(",") if token.strip())


def _validated(codes: Iterable[str]) -> frozenset[str]:
    codes = frozenset(codes)
    for code in sorted(codes):
        if code not in KNOWN_CODES:
            raise ValueError(f"Unknown warning code: {code!r} (known: {sorted(KNOWN_CODES)})")
    return codes


@dataclass(frozen=True)
class WarningPolicy:
    """Per-code handling of diagnostics; suppression wins over promotion."""

    warn_as_error: frozenset[str] = field(default_factory=frozenset)
    suppress: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "warn_as_error", _validated(self.warn_as_error))
        object.__setattr__(self, "suppress", _validated(self.suppress))

    @classmethod
    def from_code_lists(
        cls, warn_as_error: str | None = None, suppress: str | None = None
    ) -> WarningPolicy | None:
        """Build a policy from comma-separated code lists, or None if both are unset."""
        if warn_as_error is None and suppress is None:
            return None
        return cls(
            warn_as_error=parse_code_list(warn_as_error or ""),
            suppress=parse_code_list(suppress or ""),
        )

    def action(self, code: str) -> str:
        """``"ignore"``, ``"error"`` or ``"warn"`` for ``code``."""
        if code in self.suppress:
            return "ignore"
        if code in self.warn_as_error:
            return "error"
        return "warn"

    def cache_fragment(self) -> dict[str, list[str]]:
        """Sorted code lists, so equal policies give equal cache keys."""
        return {"warn_as_error": sorted(self.warn_as_error), "suppress": sorted(self.suppress)}


def emit_warning(
    code: str,
    message: str,
    *,
    value: str | None = None,
    policy: WarningPolicy | None = None,
) -> None:
    """Report ``code`` for ``value`` as the policy dictates.

    Raises:
        UnresolvedValueError: If the policy promotes ``code`` to an error.
    """
    action = policy.action(code) if policy is not None else "warn"
    if action == "ignore":
        return
    if action == "error":
        raise UnresolvedValueError(f"[{code}] {message}")
    warnings.warn(CalcWarning(code, message, value), stacklevel=3)
