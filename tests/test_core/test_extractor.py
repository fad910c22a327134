"""Unit tests for arcwatch.core.extractor module.

Test Coverage:
- Reference collection across several go.mod files
- Replace targets recorded as direct references
- Unreadable or unparseable manifests skipped with a log record
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

from arcwatch.core.extractor import DependencyExtractor
from arcwatch.models import Reference, RepositoryIdentity


# ============================================================================
# Fixtures
# ============================================================================


WriteManifest = Callable[[str, str], Path]


@pytest.fixture
def write_manifest(tmp_path: Path) -> WriteManifest:
    """Return a helper that writes a go.mod below ``tmp_path``.

    Returns:
        Callable taking a relative directory and file content, returning
        the path of the written manifest.
    """

    def _write(directory: str, content: str) -> Path:
        target = tmp_path / directory / "go.mod"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    return _write


# ============================================================================
# Test: DependencyExtractor
# ============================================================================


@pytest.mark.unit
class TestDependencyExtractor:
    """Tests for DependencyExtractor.extract."""

    def test_github_requirements_are_indexed(self, write_manifest: WriteManifest) -> None:
        """Test GitHub modules are indexed and other hosts ignored."""
        path = write_manifest(
            "svc",
            "module m\n"
            "require (\n"
            "  github.com/spf13/cobra v1.8.0\n"
            "  golang.org/x/net v0.19.0\n"
            "  gopkg.in/yaml.v3 v3.0.1\n"
            ")\n",
        )

        index = DependencyExtractor().extract([path])

        assert list(index) == [RepositoryIdentity("spf13", "cobra")]
        assert index.references(RepositoryIdentity("spf13", "cobra")) == [Reference(path)]

    def test_versioned_paths_collapse_to_one_identity(
        self, write_manifest: WriteManifest
    ) -> None:
        """Test major-version and sub-package modules share an identity."""
        path = write_manifest(
            ".",
            "module m\n"
            "require (\n"
            "  github.com/foo/bar v1.0.0\n"
            "  github.com/foo/bar/v2 v2.1.0\n"
            ")\n",
        )

        index = DependencyExtractor().extract([path])

        assert len(index) == 1
        assert len(index.references(RepositoryIdentity("foo", "bar"))) == 2

    def test_indirect_marker_is_kept(self, write_manifest: WriteManifest) -> None:
        """Test references carry the requirement's indirect flag."""
        path = write_manifest(".", "module m\nrequire github.com/x/y v1.0.0 // indirect\n")

        index = DependencyExtractor().extract([path])

        assert index.references(RepositoryIdentity("x", "y")) == [
            Reference(path, indirect=True)
        ]
        assert index.is_indirect_only(RepositoryIdentity("x", "y"))

    def test_references_across_manifests(self, write_manifest: WriteManifest) -> None:
        """Test one identity referenced from two manifests has two references."""
        first = write_manifest("a", "module a\nrequire github.com/x/y v1.0.0\n")
        second = write_manifest("b", "module b\nrequire github.com/x/y v1.1.0 // indirect\n")

        index = DependencyExtractor().extract([first, second])

        assert index.references(RepositoryIdentity("x", "y")) == [
            Reference(first),
            Reference(second, indirect=True),
        ]
        assert not index.is_indirect_only(RepositoryIdentity("x", "y"))

    def test_replace_target_adds_direct_reference(self, write_manifest: WriteManifest) -> None:
        """Test a GitHub replace target becomes a direct reference."""
        path = write_manifest(
            ".",
            "module m\n"
            "require example.com/thing v1.0.0\n"
            "replace example.com/thing => github.com/fork/thing v1.0.1\n",
        )

        index = DependencyExtractor().extract([path])

        assert index.references(RepositoryIdentity("fork", "thing")) == [
            Reference(path, indirect=False)
        ]

    def test_replace_does_not_duplicate_existing_reference(
        self, write_manifest: WriteManifest
    ) -> None:
        """Test a replace target already required by the manifest is not re-added."""
        path = write_manifest(
            ".",
            "module m\n"
            "require github.com/x/y v1.0.0 // indirect\n"
            "replace github.com/a/b => github.com/x/y v1.0.0\n",
        )

        index = DependencyExtractor().extract([path])

        assert index.references(RepositoryIdentity("x", "y")) == [
            Reference(path, indirect=True)
        ]

    def test_replace_with_local_target_is_ignored(self, write_manifest: WriteManifest) -> None:
        """Test replace directives pointing at directories add nothing."""
        path = write_manifest(".", "module m\nreplace github.com/a/b => ../b\n")

        index = DependencyExtractor().extract([path])

        assert len(index) == 0

    def test_unparseable_manifest_is_skipped(
        self,
        write_manifest: WriteManifest,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test a broken manifest is logged and the others still indexed."""
        broken = write_manifest("broken", "module m\nrequire (\n")
        good = write_manifest("good", "module g\nrequire github.com/x/y v1.0.0\n")

        with caplog.at_level(logging.DEBUG, logger="arcwatch"):
            index = DependencyExtractor().extract([broken, good])

        assert list(index) == [RepositoryIdentity("x", "y")]
        assert f"failed to parse {broken}" in caplog.text

    def test_unreadable_manifest_is_skipped(
        self,
        tmp_path: Path,
        write_manifest: WriteManifest,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test a missing manifest is logged and skipped."""
        missing = tmp_path / "gone" / "go.mod"
        good = write_manifest("good", "module g\nrequire github.com/x/y v1.0.0\n")

        with caplog.at_level(logging.DEBUG, logger="arcwatch"):
            index = DependencyExtractor().extract([missing, good])

        assert len(index) == 1
        assert f"could not open {missing}" in caplog.text

    def test_no_manifests(self) -> None:
        """Test an empty manifest list yields an empty index."""
        assert len(DependencyExtractor().extract([])) == 0
