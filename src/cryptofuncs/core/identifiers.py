"""The ``$(uuid)`` template function."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cryptofuncs.core.message import LogMessage


def generate_uuid(message: LogMessage | None, arguments: Sequence[bytes]) -> str:  # noqa: ARG001
    """Return a random RFC 4122 version 4 identifier in its 36-character form."""
    return str(uuid.uuid4())
