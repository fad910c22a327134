"""Archived-dependency resolution.

:class:`ResolutionEngine` ties the pipeline together:

1. **Locate** every ``go.mod`` below a root directory.
2. **Extract** a :class:`DependencyIndex` of GitHub repositories and the
   manifests that reference them.
3. **Filter** by the indirect-inclusion policy: unless indirect
   dependencies are requested, a repository referenced only indirectly is
   never looked up.
4. **Look up** every remaining repository concurrently on a thread pool,
   one task per repository, through a shared :class:`StatusClient`.
5. **Report** each archived repository once per referencing manifest
   through an :class:`ArchivedPrinter`, which serialises output and
   counts matches.

A failed lookup is logged at debug level and does not affect the other
repositories. Only a failure to walk the directory tree aborts the run.
"""

from __future__ import annotations

import sys
import threading
from enum import Enum
from pathlib import Path
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, TextIO, Tuple, Union

from arcwatch.core.extractor import DependencyExtractor
from arcwatch.core.status_client import StatusClient
from arcwatch.exceptions import ArcwatchError
from arcwatch.constants import GOMOD_FILENAME
from arcwatch.utils import find_manifest_files, get_logger
from arcwatch.models import ArchivedMatch, DependencyIndex, Reference, RepositoryIdentity

logger = get_logger("resolver")

__all__ = ["ArchivedPrinter", "LookupOutcome", "ResolutionEngine"]


class LookupOutcome(str, Enum):
    """Terminal state of one repository within a run."""

    SKIPPED = "skipped"
    ARCHIVED = "archived"
    NOT_ARCHIVED = "not_archived"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class ArchivedPrinter:
    """Thread-safe collector, printer and counter of archived matches.

    Recording a match appends it, writes its report line (when a stream
    is attached) and increments the count while holding one lock, so
    lines from different threads never interleave.

    Args:
        stream: Where report lines are written; ``None`` only collects.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()
        self._matches: List[ArchivedMatch] = []

    def record(
        self,
        manifest_path: Union[str, Path],
        repository: Union[str, RepositoryIdentity],
        pushed_at: str,
        indirect: bool = False,
    ) -> ArchivedMatch:
        match = ArchivedMatch(
            manifest_path=Path(manifest_path),
            repository=str(repository),
            pushed_at=pushed_at,
            indirect=indirect,
        )
        with self._lock:
            if self._stream is not None:
                print(match.to_line(), file=self._stream, flush=True)
            self._matches.append(match)
        return match

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._matches)

    @property
    def matches(self) -> List[ArchivedMatch]:
        """Recorded matches in recording order."""
        with self._lock:
            return list(self._matches)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ResolutionEngine:
    """Find archived GitHub repositories referenced by ``go.mod`` files.

    Args:
        status_client: Shared, thread-safe status lookup.
        extractor: Manifest extractor; a default one when omitted.
        max_workers: Thread pool size; ``None`` uses the executor default.
        stream: Destination for report lines; ``sys.stdout`` (looked up at
            run time) when omitted.
        quiet: Collect matches without writing report lines.
        manifest_name: File name of the manifests to look for.

    Example::

        >>> engine = ResolutionEngine(StatusClient(http))
        >>> engine.resolve(".", include_indirect=False)
        go.mod: https://github.com/golang/mock (last push: 2023-06-28T13:26:05Z)
        1
    """

    def __init__(
        self,
        status_client: StatusClient,
        *,
        extractor: Optional[DependencyExtractor] = None,
        max_workers: Optional[int] = None,
        stream: Optional[TextIO] = None,
        quiet: bool = False,
        manifest_name: str = GOMOD_FILENAME,
    ) -> None:
        self.status_client = status_client
        self.extractor = extractor or DependencyExtractor()
        self.max_workers = max_workers
        self.stream = stream
        self.quiet = quiet
        self.manifest_name = manifest_name
        self.outcomes: Dict[RepositoryIdentity, LookupOutcome] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(
        self,
        root: Union[str, Path] = ".",
        include_indirect: bool = False,
    ) -> int:
        """Report archived dependencies below *root* and return the match count.

        Raises:
            TraversalError: The directory tree cannot be walked.
        """
        return self.run(root, include_indirect).count

    def run(
        self,
        root: Union[str, Path] = ".",
        include_indirect: bool = False,
    ) -> ArchivedPrinter:
        """Like :meth:`resolve` but return the full report.

        Raises:
            TraversalError: The directory tree cannot be walked.
        """
        report = ArchivedPrinter(None if self.quiet else (self.stream or sys.stdout))
        self.outcomes = {}

        manifests = find_manifest_files(root, name=self.manifest_name)
        logger.info("Found %d %s file(s) below %s", len(manifests), self.manifest_name, root)

        index = self.extractor.extract(manifests)
        if not index:
            return report

        selected = self.select(index, include_indirect)
        for identity in index:
            if identity not in selected:
                self.outcomes[identity] = LookupOutcome.SKIPPED

        if selected:
            self._lookup_all(selected, include_indirect, report)

        logger.info(
            "Checked %d of %d repositories: %d archived, %d failed",
            len(selected),
            len(index),
            sum(1 for o in self.outcomes.values() if o is LookupOutcome.ARCHIVED),
            sum(1 for o in self.outcomes.values() if o is LookupOutcome.FAILED),
        )
        return report

    @staticmethod
    def select(
        index: DependencyIndex,
        include_indirect: bool,
    ) -> Dict[RepositoryIdentity, List[Reference]]:
        """Apply the indirect-inclusion policy to *index*.

        With *include_indirect* off, repositories whose every reference is
        indirect are dropped. Repositories with at least one direct
        reference keep all their references; indirect ones are filtered
        when printing.
        """
        return {
            identity: refs
            for identity, refs in index.items()
            if include_indirect or not index.is_indirect_only(identity)
        }

    # ------------------------------------------------------------------
    # Concurrency
    # ------------------------------------------------------------------

    def _lookup_all(
        self,
        selected: Dict[RepositoryIdentity, List[Reference]],
        include_indirect: bool,
        report: ArchivedPrinter,
    ) -> None:
        """Run one lookup task per repository and wait for all of them."""
        with ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="arcwatch-lookup",
        ) as pool:
            futures: Dict[Future, RepositoryIdentity] = {
                pool.submit(self._check, identity, refs, include_indirect, report): identity
                for identity, refs in selected.items()
            }
            for future in as_completed(futures):
                identity, outcome = future.result()
                self.outcomes[identity] = outcome

    def _check(
        self,
        identity: RepositoryIdentity,
        refs: List[Reference],
        include_indirect: bool,
        report: ArchivedPrinter,
    ) -> Tuple[RepositoryIdentity, LookupOutcome]:
        try:
            status = self.status_client.get_repo_result(identity)
        except ArcwatchError as exc:
            logger.debug("error fetching repo %s: %s", identity, exc)
            return identity, LookupOutcome.FAILED

        if not status.archived:
            return identity, LookupOutcome.NOT_ARCHIVED

        for ref in refs:
            if ref.indirect and not include_indirect:
                continue
            report.record(ref.manifest_path, identity, status.pushed_at, ref.indirect)

        return identity, LookupOutcome.ARCHIVED
