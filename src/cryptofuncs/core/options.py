"""Option parsing for template function arguments."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from cryptofuncs.exceptions import CompileError, CompileErrorKind

# Plain ASCII integers, without underscores or padding
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class HashOptions:
    """Flags recognised in front of the positional arguments of a hash function."""

    length: int
    arguments: tuple[str, ...]


def _invalid(function: str, detail: str, token: str) -> CompileError:
    return CompileError(CompileErrorKind.INVALID_OPTION, function, detail, argument=token)


def _is_number(token: str) -> bool:
    return INTEGER_PATTERN.fullmatch(token) is not None


def parse_hash_options(function: str, argv: Sequence[str]) -> HashOptions:
    """Split the leading ``--length N`` / ``-l N`` flags from the positional arguments.

    Scanning stops at the first token that does not look like a flag. A bare
    ``--`` ends option scanning and is not itself treated as an argument.

    Args:
        function: Function name, used in error messages.
        argv: Raw arguments following the function name.

    Returns:
        Parsed length (0 when not given) and the remaining positional arguments.

    Raises:
        CompileError: For malformed or unknown flags and negative lengths.
    """
    long_flags = frozenset({"--length"})
    short_flags = frozenset({"-l"})

    length = 0
    i = 0
    while i < len(argv):
        token = argv[i]
        if token == "--":
            i += 1
            break
        # Negative numbers are positional values, not flags
        if not token.startswith("-") or token == "-" or _is_number(token):
            break

        if token.startswith("--"):
            flag, sep, value = token.partition("=")
            known = flag in long_flags
            inline = bool(sep)
        else:
            flag, value = token[:2], token[2:]
            known = flag in short_flags
            inline = bool(value)

        if not known:
            raise _invalid(function, f"unknown option {flag}", token)

        if not inline:
            i += 1
            if i >= len(argv):
                raise _invalid(function, f"missing argument for {flag}", token)
            value = argv[i]

        if not _is_number(value):
            raise _invalid(
                function, f"cannot parse integer value '{value}' for {flag}", value
            )
        length = int(value)
        i += 1

    if length < 0:
        raise CompileError(CompileErrorKind.NEGATIVE_LENGTH, function, argument=str(length))

    return HashOptions(length=length, arguments=tuple(argv[i:]))
