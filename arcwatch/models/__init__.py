"""
Unified data model exports for arcwatch.

Example:
    >>> from arcwatch.models import RepositoryIdentity, Reference, RepoStatus
"""

from __future__ import annotations

from arcwatch.models.status import ArchivedMatch, RepoStatus
from arcwatch.models.modfile import ModFile, ModuleRequirement, ReplaceDirective
from arcwatch.models.dependency import DependencyIndex, Reference, RepositoryIdentity

__all__ = [
    "ArchivedMatch",
    "DependencyIndex",
    "ModFile",
    "ModuleRequirement",
    "Reference",
    "ReplaceDirective",
    "RepoStatus",
    "RepositoryIdentity",
]
