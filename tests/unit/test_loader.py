"""Tests for Go package discovery and loading."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from goconv.core.errors import PackageDiscoveryError, SourceError
from goconv.golang.loader import (
    PackageDir,
    discover_packages,
    find_module,
    load_package,
    read_module_path,
)


class TestModule:
    def test_reads_module_path(self, tmp_path: Path) -> None:
        go_mod = tmp_path / "go.mod"
        go_mod.write_text("// comment\nmodule github.com/acme/shop\n\ngo 1.22\n")
        assert read_module_path(go_mod) == "github.com/acme/shop"

    def test_missing_module_line(self, tmp_path: Path) -> None:
        go_mod = tmp_path / "go.mod"
        go_mod.write_text("go 1.22\n")
        assert read_module_path(go_mod) is None

    def test_unreadable_go_mod(self, tmp_path: Path) -> None:
        with pytest.raises(SourceError):
            read_module_path(tmp_path / "go.mod")

    def test_find_module_searches_parents(self, go_module: Callable[..., Path]) -> None:
        root = go_module({"lib/client/client.go": "package client\n"})
        found = find_module(root / "lib" / "client")
        assert found == (root.resolve(), "example")


class TestDiscovery:
    def test_groups_files_by_directory(self, go_module: Callable[..., Path]) -> None:
        root = go_module(
            {
                "main.go": "package main\n",
                "lib/client/a.go": "package client\n",
                "lib/client/b.go": "package client\n",
                "lib/client/a_test.go": "package client\n",
                "internal/db/db.go": "package db\n",
            }
        )
        packages = discover_packages(root)
        assert [p.import_path for p in packages] == [
            "example",
            "example/internal/db",
            "example/lib/client",
        ]
        client = packages[-1]
        assert [f.name for f in client.files] == ["a.go", "b.go"]

    def test_include_tests(self, go_module: Callable[..., Path]) -> None:
        root = go_module({"lib/client/a.go": "package client\n", "lib/client/a_test.go": ""})
        (client,) = discover_packages(root, include_tests=True)
        assert [f.name for f in client.files] == ["a.go", "a_test.go"]

    def test_skips_vendor_hidden_and_nested_modules(
        self, go_module: Callable[..., Path]
    ) -> None:
        root = go_module(
            {
                "vendor/x/x.go": "package x\n",
                ".cache/y/y.go": "package y\n",
                "_old/z/z.go": "package z\n",
                "tools/go.mod": "module tools\n",
                "tools/gen.go": "package tools\n",
                "lib/a/a.go": "package a\n",
            }
        )
        assert [p.import_path for p in discover_packages(root)] == ["example/lib/a"]

    def test_module_override(self, go_module: Callable[..., Path]) -> None:
        root = go_module({"lib/a/a.go": "package a\n"})
        (package,) = discover_packages(root, module_path="corp/shop")
        assert package.import_path == "corp/shop/lib/a"

    def test_file_target(self, go_module: Callable[..., Path]) -> None:
        root = go_module({"lib/a/a.go": "package a\n", "lib/a/b.go": "package a\n"})
        (package,) = discover_packages(root / "lib" / "a" / "b.go")
        assert package.import_path == "example/lib/a"
        assert [f.name for f in package.files] == ["b.go"]

    def test_missing_target(self, tmp_path: Path) -> None:
        with pytest.raises(PackageDiscoveryError) as exc_info:
            discover_packages(tmp_path / "missing")
        assert "missing" in str(exc_info.value)


class TestLoadPackage:
    def test_parses_every_file(self, go_module: Callable[..., Path]) -> None:
        root = go_module(
            {
                "lib/a/a.go": "package a\n\nimport \"fmt\"\n",
                "lib/a/b.go": "package a\n",
            }
        )
        (package_dir,) = discover_packages(root)
        package = load_package(package_dir)
        assert package.import_path == "example/lib/a"
        assert [f.package_name for f in package.files] == ["a", "a"]
        assert [f.package_path for f in package.files] == ["example/lib/a"] * 2
        assert [s.path for s in package.files[0].imports] == ["fmt"]

    def test_unreadable_file(self, tmp_path: Path) -> None:
        package_dir = PackageDir(tmp_path, "example/lib/a", (tmp_path / "gone.go",))
        with pytest.raises(SourceError):
            load_package(package_dir)
