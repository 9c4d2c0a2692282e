"""Developer-facing command line tools for nftpermit.

Offline helpers for computing permit digests and checking signatures. They are
not wallet or key-management tooling: nothing here ever handles a private key.
"""

from __future__ import annotations

from .main import app, main

__all__ = ["app", "main"]
