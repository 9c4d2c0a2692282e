"""
nftpermit.version — semantic version string.

Kept dependency-free so packaging and the CLI can import it very early.
"""

from __future__ import annotations

import os

# Bump this when making a tagged release. Use semver (major.minor.patch).
__version__ = "0.1.0"


def version_string() -> str:
    """Return `__version__`, or the NFTPERMIT_VERSION_OVERRIDE value for hermetic builds."""
    override = os.getenv("NFTPERMIT_VERSION_OVERRIDE")
    if override:
        return override.strip()
    return __version__


__all__ = ["__version__", "version_string"]
