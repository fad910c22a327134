"""Unit tests for arcwatch.models.dependency module.

Covers owner/name identity parsing, mapping github.com module paths
(including major-version and sub-package suffixes) to repositories, and
the DependencyIndex that groups references by repository.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from arcwatch.exceptions import InvalidIdentityError
from arcwatch.models import DependencyIndex, Reference, RepositoryIdentity


# ============================================================================
# Test: RepositoryIdentity.parse
# ============================================================================


@pytest.mark.unit
class TestRepositoryIdentityParse:
    """Tests for RepositoryIdentity.parse."""

    def test_parse_owner_name(self) -> None:
        """Test a well-formed owner/name string is split into its parts."""
        identity = RepositoryIdentity.parse("golang/mock")

        assert identity.owner == "golang"
        assert identity.name == "mock"
        assert str(identity) == "golang/mock"

    @pytest.mark.parametrize(
        "text",
        ["golang", "golang/mock/extra", "/mock", "golang/", "", "/"],
        ids=["one-segment", "three-segments", "empty-owner", "empty-name", "empty", "slash"],
    )
    def test_parse_rejects_malformed(self, text: str) -> None:
        """Test anything but exactly two non-empty segments is rejected."""
        with pytest.raises(InvalidIdentityError) as exc_info:
            RepositoryIdentity.parse(text)

        assert exc_info.value.message == f"invalid repo: {text}"
        assert exc_info.value.identity == text

    def test_identities_are_hashable_and_equal_by_value(self) -> None:
        """Test identities with the same parts collapse to one dict key."""
        first = RepositoryIdentity.parse("foo/bar")
        second = RepositoryIdentity("foo", "bar")

        assert first == second
        assert len({first: 1, second: 2}) == 1

    def test_url(self) -> None:
        """Test the repository URL is rendered from the identity."""
        identity = RepositoryIdentity("spf13", "cobra")

        assert identity.url == "https://github.com/spf13/cobra"


# ============================================================================
# Test: RepositoryIdentity.from_module_path
# ============================================================================


@pytest.mark.unit
class TestRepositoryIdentityFromModulePath:
    """Tests for RepositoryIdentity.from_module_path."""

    @pytest.mark.parametrize(
        "module_path, expected",
        [
            ("github.com/foo/bar", RepositoryIdentity("foo", "bar")),
            ("github.com/foo/bar/v2", RepositoryIdentity("foo", "bar")),
            ("github.com/foo/bar/v2/baz", RepositoryIdentity("foo", "bar")),
            ("github.com/foo/bar/internal/pkg", RepositoryIdentity("foo", "bar")),
        ],
        ids=["plain", "major-version", "version-and-subpackage", "subpackage"],
    )
    def test_github_paths(self, module_path: str, expected: RepositoryIdentity) -> None:
        """Test version suffixes and sub-packages are dropped."""
        assert RepositoryIdentity.from_module_path(module_path) == expected

    @pytest.mark.parametrize(
        "module_path",
        [
            "golang.org/x/net",
            "gopkg.in/yaml.v3",
            "github.com/foo",
            "github.com",
            "github.com//bar",
            "github.com/foo/",
            "example.com/github.com/foo/bar",
        ],
        ids=[
            "golang-org",
            "gopkg",
            "owner-only",
            "host-only",
            "empty-owner",
            "empty-name",
            "github-not-prefix",
        ],
    )
    def test_non_github_or_truncated_paths(self, module_path: str) -> None:
        """Test paths that do not name a GitHub repository yield None."""
        assert RepositoryIdentity.from_module_path(module_path) is None


# ============================================================================
# Test: DependencyIndex
# ============================================================================


@pytest.mark.unit
class TestDependencyIndex:
    """Tests for DependencyIndex."""

    @pytest.fixture
    def index(self) -> DependencyIndex:
        """Create an index with one direct and one indirect-only repository.

        Returns:
            DependencyIndex: ``foo/bar`` referenced directly by ``a/go.mod``
            and indirectly by ``b/go.mod``; ``x/y`` referenced only
            indirectly by ``a/go.mod``.
        """
        index = DependencyIndex()
        index.add(RepositoryIdentity("foo", "bar"), Reference(Path("a/go.mod")))
        index.add(RepositoryIdentity("foo", "bar"), Reference(Path("b/go.mod"), indirect=True))
        index.add(RepositoryIdentity("x", "y"), Reference(Path("a/go.mod"), indirect=True))
        return index

    def test_empty_index(self) -> None:
        """Test a new index is empty and falsy."""
        index = DependencyIndex()

        assert len(index) == 0
        assert not index
        assert list(index) == []

    def test_len_counts_identities(self, index: DependencyIndex) -> None:
        """Test len() counts repositories, not references."""
        assert len(index) == 2

    def test_references_keep_insertion_order(self, index: DependencyIndex) -> None:
        """Test references are returned in the order they were added."""
        refs = index.references(RepositoryIdentity("foo", "bar"))

        assert [ref.manifest_path for ref in refs] == [Path("a/go.mod"), Path("b/go.mod")]

    def test_references_for_unknown_identity(self, index: DependencyIndex) -> None:
        """Test an unknown identity has no references."""
        assert index.references(RepositoryIdentity("nope", "nope")) == []

    def test_references_returns_a_copy(self, index: DependencyIndex) -> None:
        """Test mutating the returned list does not change the index."""
        refs = index.references(RepositoryIdentity("x", "y"))
        refs.clear()

        assert len(index.references(RepositoryIdentity("x", "y"))) == 1

    def test_is_indirect_only(self, index: DependencyIndex) -> None:
        """Test a single direct reference makes the repository direct."""
        assert index.is_indirect_only(RepositoryIdentity("x", "y")) is True
        assert index.is_indirect_only(RepositoryIdentity("foo", "bar")) is False

    def test_has_reference(self, index: DependencyIndex) -> None:
        """Test has_reference matches on identity and manifest path."""
        identity = RepositoryIdentity("x", "y")

        assert index.has_reference(identity, Path("a/go.mod")) is True
        assert index.has_reference(identity, Path("b/go.mod")) is False
        assert index.has_reference(RepositoryIdentity("a", "b"), Path("a/go.mod")) is False

    def test_contains_and_iteration(self, index: DependencyIndex) -> None:
        """Test membership and iteration over identities."""
        assert RepositoryIdentity("foo", "bar") in index
        assert RepositoryIdentity("a", "b") not in index
        assert list(index) == [RepositoryIdentity("foo", "bar"), RepositoryIdentity("x", "y")]

    def test_items(self, index: DependencyIndex) -> None:
        """Test items yields each identity with its references."""
        items = dict(index.items())

        assert set(items) == {RepositoryIdentity("foo", "bar"), RepositoryIdentity("x", "y")}
        assert items[RepositoryIdentity("x", "y")] == [Reference(Path("a/go.mod"), indirect=True)]

    def test_repr(self, index: DependencyIndex) -> None:
        """Test repr shows the repository count."""
        assert repr(index) == "DependencyIndex(repositories=2)"
