"""
Structured representation of a parsed ``go.mod`` file.

Only the parts arcwatch consumes are modelled: the module path, the
``require`` entries with their indirect marker, and the ``replace``
directives.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ModuleRequirement:
    """A single ``require`` entry.

    Attributes:
        path: Module path, e.g. ``github.com/foo/bar/v2``.
        version: Required version, e.g. ``v2.1.0``.
        indirect: ``True`` when annotated with ``// indirect``.
        line_number: Line of the entry in the source file.
    """

    path: str
    version: str
    indirect: bool = False
    line_number: int = 0


@dataclass(frozen=True)
class ReplaceDirective:
    """A single ``replace old [v] => new [v]`` entry.

    ``new_version`` is ``None`` when the target is a local directory.
    """

    old_path: str
    new_path: str
    old_version: Optional[str] = None
    new_version: Optional[str] = None
    line_number: int = 0


@dataclass
class ModFile:
    """Parsed contents of one ``go.mod`` file."""

    module: Optional[str] = None
    go_version: Optional[str] = None
    requires: List[ModuleRequirement] = field(default_factory=list)
    replaces: List[ReplaceDirective] = field(default_factory=list)
    source: Optional[str] = None
