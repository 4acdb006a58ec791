# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for file stores and file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from contextweaver.core.files import (
    FileStore,
    InMemoryFileStore,
    LocalFileStore,
    discover_files,
    join_path,
    normalize_path,
)
from contextweaver.exceptions import FileIOError


pytestmark = [pytest.mark.unit]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("src/app.ts", "src/app.ts"),
        ("./src/app.ts", "src/app.ts"),
        ("/src/", "src"),
        ("src\\lib\\a.ts", "src/lib/a.ts"),
        ("", ""),
        ("/", ""),
        (".", ""),
    ],
)
def test_normalize_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


def test_join_path() -> None:
    assert join_path("", "a.ts") == "a.ts"
    assert join_path("src", "a.ts") == "src/a.ts"


class TestInMemoryFileStore:
    @pytest.fixture
    def store(self) -> InMemoryFileStore:
        return InMemoryFileStore({
            "src/app.ts": "app",
            "src/lib/util.ts": "util",
            "README.md": "readme",
        })

    def test_is_a_file_store(self, store: InMemoryFileStore) -> None:
        assert isinstance(store, FileStore)

    def test_read_file(self, store: InMemoryFileStore) -> None:
        assert store.read_file("./src/app.ts") == "app"

    def test_missing_file(self, store: InMemoryFileStore) -> None:
        with pytest.raises(FileIOError):
            store.read_file("src/missing.ts")

    def test_list_root(self, store: InMemoryFileStore) -> None:
        assert store.list_directory("") == ["README.md", "src"]
        assert store.list_directory("/") == ["README.md", "src"]

    def test_list_nested(self, store: InMemoryFileStore) -> None:
        assert store.list_directory("src") == ["app.ts", "lib"]
        assert store.list_directory("src/lib") == ["util.ts"]

    def test_implicit_directories(self, store: InMemoryFileStore) -> None:
        assert store.is_directory("src/lib")
        assert not store.is_directory("src/app.ts")

    def test_missing_directory(self, store: InMemoryFileStore) -> None:
        with pytest.raises(FileIOError):
            store.list_directory("nope")


class TestLocalFileStore:
    @pytest.fixture
    def root(self, tmp_path: Path) -> Path:
        project = tmp_path / "project"
        (project / "src").mkdir(parents=True)
        (project / "src" / "app.ts").write_text("export const a = 1;\n", encoding="utf-8")
        (project / "notes.md").write_text("notes", encoding="utf-8")
        return project

    def test_read_and_list(self, root: Path) -> None:
        store = LocalFileStore(root)
        assert store.list_directory("") == ["notes.md", "src"]
        assert store.is_directory("src")
        assert store.read_file("src/app.ts") == "export const a = 1;\n"

    def test_missing_file_raises(self, root: Path) -> None:
        with pytest.raises(FileIOError) as exc_info:
            LocalFileStore(root).read_file("src/missing.ts")
        assert exc_info.value.suggestions

    def test_binary_file_raises(self, root: Path) -> None:
        (root / "blob.ts").write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(FileIOError):
            LocalFileStore(root).read_file("blob.ts")


class TestDiscoverFiles:
    @pytest.fixture
    def project(self, tmp_path: Path) -> Path:
        project = tmp_path / "repo"
        for relative in (
            "src/app.ts",
            "src/app.test.ts",
            "src/styles.css",
            "src/logo.png",
            "node_modules/pkg/index.js",
            "dist/bundle.js",
            "build/out.js",
        ):
            path = project / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("x", encoding="utf-8")
        (project / ".gitignore").write_text("build/\n", encoding="utf-8")
        return project

    def test_skips_ignored_and_unprocessable(self, project: Path) -> None:
        found = [path.as_posix() for path in discover_files(project)]
        assert found == ["src/app.ts", "src/styles.css"]

    def test_include_tests(self, project: Path) -> None:
        found = [path.as_posix() for path in discover_files(project, include_tests=True)]
        assert "src/app.test.ts" in found
