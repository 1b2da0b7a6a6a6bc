"""Digest algorithm resolution for the hash template functions."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptofuncs.exceptions import CompileError, CompileErrorKind

if TYPE_CHECKING:
    from hashlib import _Hash

GENERIC_ALIAS = "hash"
DEFAULT_DIGEST = "sha256"


@dataclass(frozen=True)
class DigestAlgorithm:
    """A named hash construction with a fixed output size."""

    name: str
    digest_size: int

    @property
    def hex_length(self) -> int:
        """Number of hex characters in a full digest."""
        return self.digest_size * 2

    def new(self) -> _Hash:
        """Create a fresh digest context.

        Returns:
            Hasher object that belongs to the caller alone.
        """
        return hashlib.new(self.name)


def query_digest_size(name: str) -> int | None:
    """Ask hashlib for the output size of a named algorithm.

    Args:
        name: Algorithm name as understood by :func:`hashlib.new`.

    Returns:
        Output size in bytes, or None if the algorithm is unavailable or has
        no fixed output size (e.g. SHAKE).
    """
    try:
        size = hashlib.new(name).digest_size
    except (ValueError, TypeError):
        return None
    return size or None


def select_digest(alias: str, default: str = DEFAULT_DIGEST) -> DigestAlgorithm:
    """Resolve a function name to the digest algorithm it computes.

    The generic ``hash`` alias maps to ``default``; any other name maps to the
    algorithm of the same name.

    Args:
        alias: Function name the template used.
        default: Algorithm behind the generic alias.

    Returns:
        Resolved digest algorithm.

    Raises:
        CompileError: If the algorithm is unknown to this interpreter.
    """
    name = (default if alias == GENERIC_ALIAS else alias).lower()
    size = query_digest_size(name)
    if size is None:
        raise CompileError(CompileErrorKind.UNKNOWN_DIGEST, alias, name, argument=alias)
    return DigestAlgorithm(name=name, digest_size=size)
