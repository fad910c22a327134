"""
Repository status models.

:class:`RepoStatus` is the snapshot of GitHub metadata arcwatch cares
about; :class:`ArchivedMatch` is one reported line of the final report.
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from arcwatch.constants import GITHUB_REPO_URL


@dataclass(frozen=True)
class RepoStatus:
    """Archived flag and last push timestamp of a repository.

    Attributes:
        archived: Whether GitHub marks the repository read-only.
        pushed_at: ISO-8601 timestamp of the last push, or ``""`` when
            the repository has never been pushed to.
    """

    archived: bool
    pushed_at: str = ""

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "RepoStatus":
        """Build a status from a ``GET /repos/{owner}/{repo}`` response.

        Raises:
            ValueError: The payload lacks a boolean ``archived`` field or
                carries a non-string ``pushed_at``.
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")

        archived = payload.get("archived")
        if not isinstance(archived, bool):
            raise ValueError("repository payload has no boolean 'archived' field")

        pushed_at = payload.get("pushed_at")
        if pushed_at is None:
            pushed_at = ""
        elif not isinstance(pushed_at, str):
            raise ValueError("repository payload has a non-string 'pushed_at' field")

        return cls(archived=archived, pushed_at=pushed_at)


@dataclass(frozen=True)
class ArchivedMatch:
    """One archived repository as referenced by one manifest."""

    manifest_path: Path
    repository: str
    pushed_at: str
    indirect: bool = False

    @property
    def url(self) -> str:
        return GITHUB_REPO_URL.format(repository=self.repository)

    def to_line(self) -> str:
        """Render the match in the plain-text report format."""
        line = f"{self.manifest_path}: {self.url} (last push: {self.pushed_at})"
        if self.indirect:
            line += " // indirect"
        return line

    def to_json(self) -> Dict[str, Any]:
        return {
            "manifest": str(self.manifest_path),
            "repository": self.repository,
            "url": self.url,
            "pushed_at": self.pushed_at,
            "indirect": self.indirect,
        }
