"""
arcwatch version information.

Single source of truth for the package version, read by ``--version``
and the HTTP ``User-Agent``.
"""

from __future__ import annotations

__version__ = "0.1.0"
