"""Tests for core/excludes.py module.

Covers:
- ExclusionPolicy rule order (prefix exclusion beats allowed extension)
- Default-deny for unrecognized extensions
- Built-in defaults
"""

from __future__ import annotations

import pytest

from covdelta.core.excludes import (
    DEFAULT_ALLOWED_EXTENSIONS,
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_POLICY,
    ExclusionPolicy,
    is_excluded,
)


class TestDefaultPolicy:
    """Tests for the built-in rule sets."""

    @pytest.mark.parametrize(
        "path",
        [
            "src/test/util_tests.cpp",
            "src/qt/test/apptests.cpp",
            "src/wallet/test/wallet_tests.cpp",
            "test/functional/feature_block.cpp",
            "src/bench/checkblock.cpp",
            "src/bench/bench.h",
        ],
    )
    def test_excluded_prefix_wins_over_allowed_extension(self, path: str) -> None:
        """A path under an excluded prefix is excluded even with .cpp/.h."""
        assert is_excluded(path)

    @pytest.mark.parametrize(
        "path",
        ["src/init.cpp", "src/net.h", "src/crypto/sha256.c", "src/wallet/wallet.cpp"],
    )
    def test_allowed_extension_outside_prefix_is_included(self, path: str) -> None:
        assert not is_excluded(path)

    @pytest.mark.parametrize(
        "path",
        ["src/init.py", "README.md", "src/Makefile.am", "doc/release-notes.txt", ""],
    )
    def test_unrecognized_extension_is_excluded(self, path: str) -> None:
        """Default deny: neither prefix nor extension matched."""
        assert is_excluded(path)

    def test_prefix_is_plain_string_match(self) -> None:
        """'test' matches any path starting with those characters."""
        assert is_excluded("testing/foo.cpp")

    def test_matching_is_case_sensitive(self) -> None:
        assert not is_excluded("Test/foo.cpp")
        assert is_excluded("src/foo.CPP")

    def test_defaults(self) -> None:
        assert DEFAULT_POLICY.excluded_dirs == DEFAULT_EXCLUDED_DIRS
        assert DEFAULT_POLICY.allowed_extensions == DEFAULT_ALLOWED_EXTENSIONS
        assert ".cpp" in DEFAULT_ALLOWED_EXTENSIONS
        assert "src/bench" in DEFAULT_EXCLUDED_DIRS


class TestCustomPolicy:
    """Tests for policies built from configuration."""

    def test_from_lists(self) -> None:
        policy = ExclusionPolicy.from_lists(["vendor/"], [".py"])

        assert policy.is_excluded("vendor/lib.py")
        assert not policy.is_excluded("app/main.py")
        assert policy.is_excluded("app/main.cpp")

    def test_empty_extensions_excludes_everything(self) -> None:
        policy = ExclusionPolicy(excluded_dirs=(), allowed_extensions=())

        assert policy.is_excluded("src/init.cpp")

    def test_is_excluded_accepts_policy(self) -> None:
        policy = ExclusionPolicy(excluded_dirs=(), allowed_extensions=(".rs",))

        assert not is_excluded("src/lib.rs", policy)
        assert is_excluded("src/lib.rs")
