"""Tests for Cargo.toml / Cargo.lock decoding and requirement normalization."""

import logging

import pytest

from errors import LockfileError, ManifestError
from versioning.parser import (
    load_lock,
    load_manifest,
    normalize_constraint,
    parse_lock,
    parse_manifest,
)


class TestParseManifest:
    """Test Cargo.toml decoding."""

    def test_inline_tables_keep_document_order(self):
        manifest = parse_manifest('dependencies = {some-crate = "1.0.0", foo = "1.2.0"}')
        assert list(manifest.dependencies) == ["some-crate", "foo"]
        assert manifest.dependencies["foo"].version == "1.2.0"
        assert manifest.dependencies["foo"].is_table is False
        assert manifest.build_dependencies == {}
        assert manifest.workspace_members is None

    def test_structured_dependency_fields(self):
        manifest = parse_manifest("""
[package]
name = "demo"

[dependencies]
renamed = { package = "foo", version = "1.3" }
local = { path = "../local" }

[dependencies.libc]
git = "https://github.com/rust-lang/libc"

[build-dependencies]
cc = "1.0"
""")
        assert manifest.package_name == "demo"
        renamed = manifest.dependencies["renamed"]
        assert renamed.package == "foo"
        assert renamed.version == "1.3"
        assert renamed.is_table is True
        assert manifest.dependencies["local"].path == "../local"
        assert manifest.dependencies["libc"].git == "https://github.com/rust-lang/libc"
        assert list(manifest.build_dependencies) == ["cc"]

    def test_workspace_members_and_exclude(self):
        manifest = parse_manifest("""
[workspace]
members = ["a", "crates/*"]
exclude = ["crates/old"]
""", directory="/ws")
        assert manifest.is_workspace
        assert manifest.workspace_members == ("a", "crates/*")
        assert manifest.workspace_exclude == ("crates/old",)
        assert str(manifest.directory) == "/ws"

    def test_workspace_without_members_is_not_a_workspace(self):
        manifest = parse_manifest("[workspace]\n")
        assert manifest.is_workspace is False

    def test_invalid_value_type_names_key(self):
        with pytest.raises(ManifestError) as exc_info:
            parse_manifest("dependencies = {broken = 5}", source="Cargo.toml")
        assert "broken" in str(exc_info.value)
        assert "Cargo.toml" in str(exc_info.value)

    def test_non_string_version_field(self):
        with pytest.raises(ManifestError, match="version"):
            parse_manifest("dependencies = {foo = {version = 1}}")

    def test_invalid_toml_names_document(self):
        with pytest.raises(ManifestError) as exc_info:
            parse_manifest("dependencies = {", source="/tmp/x/Cargo.toml")
        assert exc_info.value.path == "/tmp/x/Cargo.toml"

    def test_members_must_be_strings(self):
        with pytest.raises(ManifestError, match="workspace.members"):
            parse_manifest("[workspace]\nmembers = [1, 2]\n")

    def test_load_manifest_missing_file(self, tmp_path):
        with pytest.raises(ManifestError) as exc_info:
            load_manifest(tmp_path / "Cargo.toml")
        assert str(tmp_path) in str(exc_info.value)

    def test_load_manifest_invalid_utf8_names_file(self, tmp_path):
        (tmp_path / "Cargo.toml").write_bytes(b"[dependencies]\nfoo = \"\xff\"\n")
        with pytest.raises(ManifestError) as exc_info:
            load_manifest(tmp_path / "Cargo.toml")
        assert exc_info.value.path == str(tmp_path / "Cargo.toml")
        assert "UTF-8" in str(exc_info.value)

    def test_load_manifest_sets_directory(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text('[dependencies]\nfoo = "1"\n', encoding="utf-8")
        manifest = load_manifest(tmp_path / "Cargo.toml")
        assert manifest.directory == tmp_path


class TestParseLock:
    """Test Cargo.lock decoding."""

    def test_duplicate_names_are_kept_in_order(self):
        pool = parse_lock("""
version = 3

[[package]]
name = "some-crate"
version = "1.3.2"

[[package]]
name = "some-crate"
version = "1.3.6"

[[package]]
name = "libc"
version = "0.2.43"
source = "git+https://github.com/rust-lang/libc#9c5e70ae306463a23ec02179ac2c9fe05c3fb44e"
""")
        assert len(pool) == 3
        assert [e.version for e in pool.candidates("some-crate")] == ["1.3.2", "1.3.6"]
        assert pool.candidates("libc")[0].source.startswith("git+")
        assert pool.candidates("missing") == []

    def test_no_package_section(self):
        assert len(parse_lock("version = 3\n")) == 0

    def test_record_without_version(self):
        with pytest.raises(LockfileError, match="package #1"):
            parse_lock('[[package]]\nname = "foo"\n')

    def test_invalid_semver(self):
        with pytest.raises(LockfileError, match="not-a-version"):
            parse_lock('[[package]]\nname = "foo"\nversion = "not-a-version"\n')

    def test_invalid_toml(self):
        with pytest.raises(LockfileError):
            parse_lock("invalid toml {")

    def test_missing_lock_file_is_empty_pool_with_warning(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            pool = load_lock(tmp_path / "Cargo.lock")
        assert len(pool) == 0
        assert "cargo build" in caplog.text

    def test_load_lock_invalid_utf8_names_file(self, tmp_path):
        (tmp_path / "Cargo.lock").write_bytes(b"[[package]]\nname = \"\xfe\"\n")
        with pytest.raises(LockfileError) as exc_info:
            load_lock(tmp_path / "Cargo.lock")
        assert exc_info.value.path == str(tmp_path / "Cargo.lock")
        assert "UTF-8" in str(exc_info.value)


class TestNormalizeConstraint:
    """Test translation of Cargo requirements."""

    @pytest.mark.parametrize("raw,expected", [
        ("1.0.0", ">=1.0.0,<2.0.0"),
        ("1.3", ">=1.3.0,<2.0.0"),
        ("^1.2.3", ">=1.2.3,<2.0.0"),
        ("0.3.1", ">=0.3.1,<0.4.0"),
        ("0.0.3", ">=0.0.3,<0.0.4"),
        ("^0", ">=0.0.0,<1.0.0"),
        ("0.0", ">=0.0.0,<0.1.0"),
        ("1.2.3-beta.1", ">=1.2.3-beta.1,<2.0.0"),
        ("1.2.3+build.5", ">=1.2.3,<2.0.0"),
        ("=1.2.3", "==1.2.3"),
        ("=1.2", ">=1.2.0,<1.3.0"),
        ("~1.2.3", ">=1.2.3,<1.3.0"),
        ("~1.2", ">=1.2.0,<1.3.0"),
        ("~1", ">=1.0.0,<2.0.0"),
        (">= 1.2, < 1.5", ">=1.2.0,<1.5.0"),
        (">1.2", ">=1.3.0"),
        ("<=1.2", "<1.3.0"),
        ("<=1.2.3", "<=1.2.3"),
        ("1.*", ">=1.0.0,<2.0.0"),
        ("1.2.*", ">=1.2.0,<1.3.0"),
        ("1.x", ">=1.0.0,<2.0.0"),
        ("1.2.X", ">=1.2.0,<1.3.0"),
        ("=1.x", ">=1.0.0,<2.0.0"),
    ])
    def test_translation(self, raw, expected):
        assert normalize_constraint(raw) == expected

    @pytest.mark.parametrize("raw", ["*", "  *  ", "x", "X"])
    def test_wildcard_is_unrestricted(self, raw):
        assert normalize_constraint(raw) is None

    @pytest.mark.parametrize("raw", ["", "latest", ">=*", "1.*.3", "^1.x", "1.2-beta", "1.2.3.4"])
    def test_rejects_garbage(self, raw):
        with pytest.raises(ValueError):
            normalize_constraint(raw)
