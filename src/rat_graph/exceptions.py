"""Exceptions raised while rendering node content."""


class RatError(Exception):
    """Base exception for all rat graph errors."""


class DirectiveSyntaxError(RatError, ValueError):
    """Raised when a directive body cannot be parsed."""


class UnknownDirectiveError(DirectiveSyntaxError):
    """Raised when a directive names a type outside the directive set."""

    def __init__(self, directive_type: str) -> None:
        self.directive_type = directive_type
        super().__init__(f"unknown directive type {directive_type!r}")


class MissingArgumentError(DirectiveSyntaxError):
    """Raised when required directive arguments are absent."""

    def __init__(self, directive_type: str, keys: list[str]) -> None:
        self.directive_type = directive_type
        self.keys = keys
        names = ", ".join(repr(k) for k in keys)
        super().__init__(f"{directive_type} directive is missing argument(s) {names}")


class ChecklistSyntaxError(RatError, ValueError):
    """Raised when a checklist block contains an invalid line."""


class UnknownHintError(RatError, ValueError):
    """Raised when a hint key is not one of the known hint kinds."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"unknown hint type {key!r}")


class HintValueError(RatError, ValueError):
    """Raised when a hint value or filter operand has the wrong shape."""


class NodeNotFoundError(RatError, LookupError):
    """Raised when a provider cannot resolve an ID or path."""


class TraversalError(RatError, RuntimeError):
    """Raised when walking a subtree fails part way through."""


class ConfigError(RatError):
    """Raised when settings cannot be loaded."""
