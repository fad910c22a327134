"""
Dependency data models for arcwatch.

A :class:`RepositoryIdentity` names a GitHub repository independently of
the module version or sub-package that referenced it, a
:class:`Reference` records one place a manifest mentions it, and a
:class:`DependencyIndex` groups every reference by identity.
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from arcwatch.exceptions import InvalidIdentityError
from arcwatch.constants import GITHUB_MODULE_PREFIX, GITHUB_REPO_URL


@dataclass(frozen=True, order=True)
class RepositoryIdentity:
    """A GitHub repository as an ``owner/name`` pair.

    Attributes:
        owner: Account or organisation owning the repository.
        name: Repository name.
    """

    owner: str
    name: str

    @classmethod
    def parse(cls, text: str) -> "RepositoryIdentity":
        """Build an identity from an ``owner/name`` string.

        Raises:
            InvalidIdentityError: *text* does not have exactly two
                non-empty segments.
        """
        parts = text.split("/")
        if len(parts) != 2 or not all(parts):
            raise InvalidIdentityError(
                f"invalid repo: {text}",
                identity=text,
            )
        return cls(owner=parts[0], name=parts[1])

    @classmethod
    def from_module_path(cls, module_path: str) -> Optional["RepositoryIdentity"]:
        """Derive the identity from a Go module path.

        Only ``github.com/<owner>/<name>[/...]`` paths qualify; the version
        suffix and any sub-package segments are dropped, so
        ``github.com/foo/bar/v2/baz`` maps to ``foo/bar``.

        Returns:
            The identity, or ``None`` for non-GitHub or truncated paths.
        """
        if not module_path.startswith(GITHUB_MODULE_PREFIX):
            return None

        parts = module_path.split("/")
        if len(parts) < 3 or not parts[1] or not parts[2]:
            return None

        return cls(owner=parts[1], name=parts[2])

    @property
    def url(self) -> str:
        return GITHUB_REPO_URL.format(repository=self)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class Reference:
    """One mention of a repository inside one manifest.

    Attributes:
        manifest_path: Path of the ``go.mod`` containing the mention.
        indirect: Whether the requirement carried the ``// indirect`` marker.
    """

    manifest_path: Path
    indirect: bool = False


class DependencyIndex:
    """Mapping from :class:`RepositoryIdentity` to its references.

    Identities and references keep insertion order so that output for a
    given repository follows manifest order.
    """

    def __init__(self) -> None:
        self._references: Dict[RepositoryIdentity, List[Reference]] = {}

    def add(self, identity: RepositoryIdentity, reference: Reference) -> None:
        self._references.setdefault(identity, []).append(reference)

    def has_reference(self, identity: RepositoryIdentity, manifest_path: Path) -> bool:
        """Return True if *manifest_path* already references *identity*."""
        return any(
            ref.manifest_path == manifest_path
            for ref in self._references.get(identity, ())
        )

    def references(self, identity: RepositoryIdentity) -> List[Reference]:
        return list(self._references.get(identity, ()))

    def is_indirect_only(self, identity: RepositoryIdentity) -> bool:
        """Return True when every reference to *identity* is indirect."""
        return all(ref.indirect for ref in self._references.get(identity, ()))

    def items(self) -> Iterator[Tuple[RepositoryIdentity, List[Reference]]]:
        for identity, refs in self._references.items():
            yield identity, list(refs)

    def __contains__(self, identity: object) -> bool:
        return identity in self._references

    def __iter__(self) -> Iterator[RepositoryIdentity]:
        return iter(self._references)

    def __len__(self) -> int:
        return len(self._references)

    def __repr__(self) -> str:
        return f"DependencyIndex(repositories={len(self._references)})"
