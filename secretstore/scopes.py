"""
Scope matching.

A scope is a capability string such as ``secrets:get:captain:foo``. A scope
ending in ``*`` is a prefix pattern: ``secrets:get:captain:*`` satisfies any
required scope starting with ``secrets:get:captain:``, and ``*`` alone
satisfies everything. A ``*`` anywhere else is an ordinary character.

Patterns are parsed once into ``ScopePattern`` values and then compared with
plain string equality or ``startswith``; there is no regex involved.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

WILDCARD = "*"

SECRET_OPERATIONS = ("get", "set", "remove")

# Prefix shared by every per-secret read scope
READ_SCOPE_PREFIX = "secrets:get:"


class ScopeKind(str, Enum):
    EXACT = "exact"
    PREFIX = "prefix"


@dataclass(frozen=True)
class ScopePattern:
    """A granted scope, decided once as an exact token or a prefix."""

    kind: ScopeKind
    value: str

    def matches(self, required: str) -> bool:
        if self.kind is ScopeKind.PREFIX:
            return required.startswith(self.value)
        return required == self.value

    def could_match_under(self, prefix: str) -> bool:
        """True if some scope starting with ``prefix`` would match this pattern."""
        if self.kind is ScopeKind.PREFIX:
            return self.value.startswith(prefix) or prefix.startswith(self.value)
        return self.value.startswith(prefix)


def parse_scope(scope: str) -> ScopePattern:
    if scope.endswith(WILDCARD):
        return ScopePattern(ScopeKind.PREFIX, scope[: -len(WILDCARD)])
    return ScopePattern(ScopeKind.EXACT, scope)


def parse_scopes(scopes: Iterable[str]) -> frozenset[ScopePattern]:
    return frozenset(parse_scope(s) for s in scopes)


def _patterns(granted: Iterable[str] | Iterable[ScopePattern]) -> Iterable[ScopePattern]:
    for scope in granted:
        yield scope if isinstance(scope, ScopePattern) else parse_scope(scope)


def satisfies(required: str, granted: Iterable[str] | Iterable[ScopePattern]) -> bool:
    """
    Check whether any granted scope satisfies the required scope.

    Args:
        required: Scope needed for the operation
        granted: Caller's scopes, as strings or pre-parsed patterns

    Returns:
        True if at least one granted scope matches exactly or by prefix
    """
    return any(pattern.matches(required) for pattern in _patterns(granted))


def could_satisfy_prefix(prefix: str, granted: Iterable[str] | Iterable[ScopePattern]) -> bool:
    """Whether any granted scope can satisfy some required scope beginning with ``prefix``."""
    return any(pattern.could_match_under(prefix) for pattern in _patterns(granted))


def required_scope(operation: str, name: str) -> str:
    """Build the scope required to perform ``operation`` on secret ``name``."""
    if operation not in SECRET_OPERATIONS:
        raise ValueError(f"Unknown secret operation: {operation}")
    return f"secrets:{operation}:{name}"
