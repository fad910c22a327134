"""
Core functionality exports for arcwatch.

    from arcwatch.core import ResolutionEngine, StatusClient
"""

from __future__ import annotations

from arcwatch.core.cache import StatusCache
from arcwatch.core.parser import GoModParser
from arcwatch.core.extractor import DependencyExtractor
from arcwatch.core.status_client import RESTClient, StatusClient
from arcwatch.core.resolver import ArchivedPrinter, LookupOutcome, ResolutionEngine

__all__ = [
    "ArchivedPrinter",
    "DependencyExtractor",
    "GoModParser",
    "LookupOutcome",
    "RESTClient",
    "ResolutionEngine",
    "StatusCache",
    "StatusClient",
]
