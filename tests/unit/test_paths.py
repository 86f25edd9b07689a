"""Tests for package path classification."""

from __future__ import annotations

import pytest

from goconv.engine.paths import Group, classify


class TestClassify:
    def test_single_segment_has_no_group(self) -> None:
        assert classify("fmt") == ("", ("fmt",))

    def test_empty_path_is_degenerate(self) -> None:
        result = classify("")
        assert result.group == ""
        assert result.remainder == ("",)

    def test_two_segments_use_first_as_group(self) -> None:
        assert classify("lib/client") == ("lib", ("client",))

    def test_deeper_paths_skip_the_root(self) -> None:
        assert classify("example/lib/client/http") == ("lib", ("client", "http"))

    def test_three_segments(self) -> None:
        result = classify("example/internal/db")
        assert result.group == "internal"
        assert result.remainder == ("db",)

    def test_hosted_module_uses_owner_as_group(self) -> None:
        """The root is always skipped, even for host-qualified module paths."""
        assert classify("github.com/acme/lib/x").group == "acme"


class TestGroup:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("lib", Group.LIB),
            ("internal", Group.INTERNAL),
            ("cmd", Group.CMD),
            ("model", Group.MODEL),
            ("gen", Group.GEN),
            ("pkg", None),
            ("", None),
        ],
    )
    def test_parse(self, name: str, expected: Group | None) -> None:
        assert Group.parse(name) is expected

    def test_layer_property(self) -> None:
        assert classify("example/cmd/server").layer is Group.CMD
        assert classify("example/api/server").layer is None
