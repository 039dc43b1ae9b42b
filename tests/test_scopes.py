"""Tests for scope parsing and matching."""
import pytest

from secretstore.scopes import (
    READ_SCOPE_PREFIX,
    ScopeKind,
    ScopePattern,
    could_satisfy_prefix,
    parse_scope,
    parse_scopes,
    required_scope,
    satisfies,
)


class TestParseScope:
    """Scopes are classified once as exact tokens or prefixes"""

    def test_plain_scope_is_exact(self):
        assert parse_scope("secrets:get:captain:foo") == ScopePattern(ScopeKind.EXACT, "secrets:get:captain:foo")

    def test_trailing_star_is_prefix(self):
        assert parse_scope("secrets:get:captain:*") == ScopePattern(ScopeKind.PREFIX, "secrets:get:captain:")

    def test_bare_star_matches_everything(self):
        pattern = parse_scope("*")
        assert pattern.kind is ScopeKind.PREFIX
        assert pattern.value == ""
        assert pattern.matches("secrets:remove:anything")

    def test_inner_star_is_literal(self):
        pattern = parse_scope("secrets:get:*:foo")
        assert pattern.kind is ScopeKind.EXACT
        assert pattern.matches("secrets:get:*:foo")
        assert not pattern.matches("secrets:get:captain:foo")

    def test_parse_scopes_deduplicates(self):
        patterns = parse_scopes(["a:*", "a:*", "b"])
        assert len(patterns) == 2


class TestSatisfies:
    """satisfies() ORs exact and prefix matches across the granted set"""

    def test_exact_match(self):
        assert satisfies("secrets:get:captain:foo", ["secrets:get:captain:foo"])

    def test_exact_requires_full_string(self):
        assert not satisfies("secrets:get:captain:foo", ["secrets:get:captain:fo"])
        assert not satisfies("secrets:get:captain:fo", ["secrets:get:captain:foo"])

    def test_prefix_match(self):
        assert satisfies("secrets:get:captain:foo", ["secrets:get:captain:*"])
        assert satisfies("secrets:get:captain:", ["secrets:get:captain:*"])

    def test_prefix_does_not_cross_namespaces(self):
        assert not satisfies("secrets:get:tennille:foo", ["secrets:get:captain:*"])
        assert not satisfies("secrets:set:captain:foo", ["secrets:get:captain:*"])

    def test_prefix_is_not_regex(self):
        assert not satisfies("secrets:get:captainXfoo", ["secrets:get:captain.*"])

    def test_any_granted_scope_suffices(self):
        granted = ["queue:create-task:*", "secrets:get:other", "secrets:get:captain:*"]
        assert satisfies("secrets:get:captain:foo", granted)

    def test_empty_scope_set(self):
        assert not satisfies("secrets:get:captain:foo", [])

    def test_case_sensitive(self):
        assert not satisfies("secrets:get:Captain:foo", ["secrets:get:captain:*"])

    def test_accepts_parsed_patterns(self):
        patterns = parse_scopes(["secrets:get:captain:*"])
        assert satisfies("secrets:get:captain:foo", patterns)

    @pytest.mark.parametrize("required,granted,expected", [
        ("secrets:get:a", ["*"], True),
        ("secrets:get:a", ["secrets:*"], True),
        ("secrets:get:a", ["secrets:get:a*"], True),
        ("secrets:get:ab", ["secrets:get:a*"], True),
        ("secrets:get:", ["secrets:get:a*"], False),
        ("", ["*"], True),
        ("", [""], True),
        ("x", [""], False),
    ])
    def test_matrix(self, required, granted, expected):
        assert satisfies(required, granted) is expected


class TestRequiredScope:
    """Required scopes are built deterministically from operation and name"""

    @pytest.mark.parametrize("operation", ["get", "set", "remove"])
    def test_format(self, operation):
        assert required_scope(operation, "captain:foo") == f"secrets:{operation}:captain:foo"

    def test_names_with_slashes(self):
        assert required_scope("get", "captain:hidden/1") == "secrets:get:captain:hidden/1"

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            required_scope("list", "captain:foo")


class TestCouldSatisfyPrefix:
    """Used to skip enumeration for callers who can never read anything"""

    def test_no_scopes(self):
        assert not could_satisfy_prefix(READ_SCOPE_PREFIX, [])

    def test_write_only_scopes(self):
        assert not could_satisfy_prefix(READ_SCOPE_PREFIX, ["secrets:set:captain:*", "secrets:remove:captain:*"])

    def test_read_prefix_under_namespace(self):
        assert could_satisfy_prefix(READ_SCOPE_PREFIX, ["secrets:get:captain:*"])

    def test_broader_wildcard(self):
        assert could_satisfy_prefix(READ_SCOPE_PREFIX, ["secrets:*"])
        assert could_satisfy_prefix(READ_SCOPE_PREFIX, ["*"])

    def test_exact_read_scope(self):
        assert could_satisfy_prefix(READ_SCOPE_PREFIX, ["secrets:get:captain:foo"])

    def test_unrelated_wildcard(self):
        assert not could_satisfy_prefix(READ_SCOPE_PREFIX, ["queue:*"])
