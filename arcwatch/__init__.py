"""
arcwatch: find archived GitHub dependencies in Go projects

arcwatch walks a project tree, collects every ``github.com`` module
required or substituted by the ``go.mod`` files it finds, asks the GitHub
REST API which of those repositories have been archived, and reports each
match together with the manifest that referenced it.

Typical usage::

    $ arcwatch gomod
    $ arcwatch gomod --indirect path/to/monorepo
"""

from __future__ import annotations

from arcwatch.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "arcwatch Contributors"
__license__ = "MIT"
__description__ = "List archived GitHub dependencies declared in go.mod files."

__all__ = [
    "__version__",
]
