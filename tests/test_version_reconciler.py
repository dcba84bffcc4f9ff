"""Tests for picking locked versions that satisfy a requirement."""

import logging

import pytest

from errors import ConstraintError
from versioning.parser import parse_lock
from versioning.reconciler import matching_entries, reconcile, select_target


def make_pool(*pairs):
    """Build a lock pool from (name, version) pairs."""
    body = "".join(f'[[package]]\nname = "{n}"\nversion = "{v}"\n\n' for n, v in pairs)
    return parse_lock(body)


class TestReconcile:
    """Test version reconciliation against the lock pool."""

    def test_single_match(self):
        pool = make_pool(("foo", "1.3.5"), ("bar", "0.1.0"))
        assert reconcile(pool, "foo", "1.2.0") == "foo:1.3.5"

    def test_highest_of_several_matches(self):
        pool = make_pool(("foo", "1.3.2"), ("foo", "1.10.0"), ("foo", "1.4.0"))
        assert reconcile(pool, "foo", "1.0") == "foo:1.10.0"

    def test_incompatible_major_line_is_ignored(self):
        pool = make_pool(("rand", "0.7.3"), ("rand", "0.8.5"), ("rand", "0.6.5"))
        assert reconcile(pool, "rand", "0.7") == "rand:0.7.3"

    @pytest.mark.parametrize("constraint,expected", [
        ("^0", "foo:0.3.1"),
        ("0", "foo:0.3.1"),
        ("0.0", "foo:0.0.9"),
        ("0.0.9", "foo:0.0.9"),
        ("~0", "foo:0.3.1"),
    ])
    def test_zero_major_requirements(self, constraint, expected):
        pool = make_pool(("foo", "0.0.9"), ("foo", "0.3.1"), ("foo", "1.0.0"))
        assert reconcile(pool, "foo", constraint) == expected

    @pytest.mark.parametrize("constraint", ["1.x", "1.X", "1.*", "=1.x"])
    def test_x_range_wildcards(self, constraint):
        pool = make_pool(("foo", "1.4.0"), ("foo", "2.0.0"), ("foo", "1.9.2"))
        assert reconcile(pool, "foo", constraint) == "foo:1.9.2"

    def test_minor_x_range(self):
        pool = make_pool(("foo", "1.2.7"), ("foo", "1.3.0"))
        assert reconcile(pool, "foo", "1.2.x") == "foo:1.2.7"

    def test_wildcard_picks_highest_regardless_of_major(self):
        pool = make_pool(("foo", "0.9.0"), ("foo", "2.0.1"), ("foo", "1.5.0"))
        assert reconcile(pool, "foo", "*") == "foo:2.0.1"

    def test_exact_requirement(self):
        pool = make_pool(("foo", "1.3.5"), ("foo", "1.3.6"))
        assert reconcile(pool, "foo", "=1.3.5") == "foo:1.3.5"

    def test_range_requirement(self):
        pool = make_pool(("foo", "1.4.0"), ("foo", "1.5.0"), ("foo", "1.2.0"))
        assert reconcile(pool, "foo", ">=1.2, <1.5") == "foo:1.4.0"

    def test_name_match_is_exact(self):
        pool = make_pool(("foo-bar", "1.0.0"))
        target = select_target(pool, "foo_bar", "1")
        assert target.unresolved is True
        assert str(target) == "foo_bar"

    def test_duplicate_entries_collapse(self):
        pool = make_pool(("foo", "1.3.5"), ("foo", "1.3.5"))
        assert [e.version for e in matching_entries(pool, "foo", "1")] == ["1.3.5"]

    def test_missing_dependency_degrades_with_warning(self, caplog):
        pool = make_pool(("foo", "1.3.5"))
        with caplog.at_level(logging.WARNING):
            result = reconcile(pool, "absent", "1.0")
        assert result == "absent"
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "absent not found in Cargo.lock" in warnings[0].getMessage()

    def test_no_compatible_version_degrades(self, caplog):
        pool = make_pool(("foo", "2.0.0"))
        with caplog.at_level(logging.WARNING):
            assert reconcile(pool, "foo", "1.0") == "foo"
        assert "foo not found" in caplog.text

    def test_keeps_lock_version_text(self):
        pool = make_pool(("foo", "1.0.0-alpha.1+build.5"))
        assert reconcile(pool, "foo", "*") == "foo:1.0.0-alpha.1+build.5"

    def test_invalid_requirement(self):
        pool = make_pool(("foo", "1.0.0"))
        with pytest.raises(ConstraintError) as exc_info:
            reconcile(pool, "foo", "latest")
        assert exc_info.value.name == "foo"
        assert "latest" in str(exc_info.value)

    def test_debug_context_names_lock_source(self, caplog):
        pool = parse_lock(
            '[[package]]\nname = "libc"\nversion = "0.2.43"\n'
            'source = "registry+https://github.com/rust-lang/crates.io-index"\n'
        )
        with caplog.at_level(logging.DEBUG, logger="versioning.reconciler"):
            assert reconcile(pool, "libc", "0.2") == "libc:0.2.43"
        record = next(r for r in caplog.records if r.getMessage() == "Reconciled libc 0.2")
        assert record.context["selected"] == "0.2.43"
        assert record.context["source"] == "registry+https://github.com/rust-lang/crates.io-index"
