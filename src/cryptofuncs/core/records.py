"""Reading records for the render command."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from typing import IO

from cryptofuncs.core.message import LogMessage
from cryptofuncs.exceptions import RecordError


def parse_assignments(assignments: Iterable[str]) -> LogMessage:
    """Build a record from ``KEY=VALUE`` strings.

    Args:
        assignments: Strings of the form ``KEY=VALUE``; the value may be empty.

    Returns:
        Record holding the assigned values.

    Raises:
        RecordError: If an assignment has no ``=`` or an empty key.
    """
    message = LogMessage()
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep or not key:
            raise RecordError(f"Invalid value assignment, expected KEY=VALUE: {assignment}")
        message.set_value(key, value)
    return message


def read_records(stream: IO[str]) -> Iterator[LogMessage]:
    """Yield one record per JSON object line in ``stream``.

    Blank lines are skipped.

    Args:
        stream: Text stream of JSON lines.

    Yields:
        Decoded records.

    Raises:
        RecordError: If a line is not valid JSON or not a JSON object.
    """
    for lineno, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise RecordError(f"Invalid JSON on line {lineno}: {e}") from e
        if not isinstance(data, dict):
            raise RecordError(f"Record on line {lineno} is not a JSON object")
        yield LogMessage.from_mapping(data)
