"""Custom exception hierarchy for csscalc."""


class CalcError(Exception):
    """Base exception for all csscalc errors."""


class CalcTypeError(CalcError, TypeError):
    """Raised when an argument has the wrong shape (not a string, not a token list)."""


class CalcSyntaxError(CalcError, SyntaxError):
    """Raised when a calc() group is malformed (bad nesting, unexpected token)."""


class ConfigError(CalcError):
    """Raised when options or a YAML config file fail validation."""


class UnresolvedValueError(CalcError):
    """Raised when an unresolved-value warning is promoted to an error."""
