"""cryptofuncs - Cryptographic template functions for log rendering."""

from __future__ import annotations

__version__ = "0.1.0"
