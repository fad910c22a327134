"""Dependency extraction from ``go.mod`` files.

Turns a list of manifest paths into a :class:`DependencyIndex`: every
GitHub-hosted module required by a manifest becomes a :class:`Reference`
under its ``owner/name`` identity, and every ``replace`` directive whose
target is a GitHub module adds a direct reference unless that manifest
already references the identity.

Extraction is best effort. A manifest that cannot be read or parsed is
logged at debug level and skipped; the rest are still indexed. No network
access happens here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from arcwatch.core.parser import GoModParser
from arcwatch.models import DependencyIndex, ModFile, Reference, RepositoryIdentity
from arcwatch.exceptions import ManifestParseError, ManifestReadError
from arcwatch.utils import get_logger, safe_read_file

logger = get_logger("extractor")


class DependencyExtractor:
    """Build a :class:`DependencyIndex` from ``go.mod`` files.

    Args:
        parser: go.mod parser to use; a fresh :class:`GoModParser` by default.

    Example::

        >>> extractor = DependencyExtractor()
        >>> index = extractor.extract([Path("go.mod")])
        >>> [str(identity) for identity in index]
        ['spf13/cobra', 'stretchr/testify']
    """

    def __init__(self, parser: Optional[GoModParser] = None) -> None:
        self.parser = parser or GoModParser()

    def extract(self, manifest_paths: Iterable[Union[str, Path]]) -> DependencyIndex:
        """Index the GitHub dependencies of every manifest in *manifest_paths*."""
        index = DependencyIndex()

        for manifest in manifest_paths:
            path = Path(manifest)

            try:
                content = safe_read_file(path)
            except ManifestReadError as exc:
                logger.debug("could not open %s: %s", path, exc)
                continue

            try:
                mod = self.parser.parse_string(content, source_file_path=str(path))
            except ManifestParseError as exc:
                logger.debug("failed to parse %s: %s", path, exc)
                continue

            self.add_manifest(index, path, mod)

        if not index:
            logger.debug("no github.com modules found in any go.mod file")

        return index

    @staticmethod
    def add_manifest(index: DependencyIndex, path: Path, mod: ModFile) -> None:
        """Record the references contributed by one parsed manifest."""
        for requirement in mod.requires:
            identity = RepositoryIdentity.from_module_path(requirement.path)
            if identity is None:
                continue
            index.add(identity, Reference(manifest_path=path, indirect=requirement.indirect))

        for replacement in mod.replaces:
            identity = RepositoryIdentity.from_module_path(replacement.new_path)
            if identity is None:
                continue
            # Replace directives carry no indirect marker of their own.
            if not index.has_reference(identity, path):
                index.add(identity, Reference(manifest_path=path, indirect=False))
