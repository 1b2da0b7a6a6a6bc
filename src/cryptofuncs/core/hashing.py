"""The ``$(hash)`` family of template functions.

``$(<digest> [--length N | -l N] arg1 arg2 ...)`` renders the hex digest of its
arguments. The rendered arguments are concatenated without any separator
before hashing, so ``$(sha1 12 3)`` and ``$(sha1 1 23)`` produce the same value.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from cryptofuncs.core.digests import DEFAULT_DIGEST, DigestAlgorithm, select_digest
from cryptofuncs.core.options import parse_hash_options
from cryptofuncs.core.plugin import (
    SimpleFuncState,
    TemplateFunction,
    compile_templates,
    simple_func_eval,
    simple_func_free_state,
)
from cryptofuncs.exceptions import CompileError, CompileErrorKind

if TYPE_CHECKING:
    from cryptofuncs.core.message import RenderContext
    from cryptofuncs.core.template import LogTemplate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HashState(SimpleFuncState):
    """Compiled state of one ``$(hash)`` occurrence."""

    digest: DigestAlgorithm
    length: int


def normalize_length(length: int, digest: DigestAlgorithm) -> int:
    """Map a requested length onto the range a digest can satisfy.

    0 selects the full digest; anything longer than the full digest is clamped.
    """
    if length == 0 or length > digest.hex_length:
        return digest.hex_length
    return length


def compile_hash(
    parent: LogTemplate,
    argv: Sequence[str],
    default_digest: str = DEFAULT_DIGEST,
) -> HashState:
    """Compile a ``$(hash)`` occurrence.

    Args:
        parent: Template the occurrence belongs to.
        argv: Function name followed by its raw arguments.
        default_digest: Algorithm used by the generic ``hash`` alias.

    Returns:
        Immutable compiled state.

    Raises:
        CompileError: For bad options, missing arguments or unknown digests.
        TemplateError: If an argument fails to compile as a template.
    """
    function = argv[0]
    options = parse_hash_options(function, argv[1:])

    if not options.arguments:
        raise CompileError(CompileErrorKind.ARITY, function, "at least one argument is required")

    digest = select_digest(function, default_digest)
    templates = compile_templates(parent, options.arguments)

    state = HashState(
        templates=templates,
        digest=digest,
        length=normalize_length(options.length, digest),
    )
    logger.debug(
        "$(%s) uses %s truncated to %d characters", function, digest.name, state.length
    )
    return state


def render_hash(state: HashState, arguments: Sequence[bytes], result: list[str]) -> None:
    """Append the truncated hex digest of ``arguments`` to ``result``.

    Args:
        state: Compiled state; read only.
        arguments: Rendered argument buffers, hashed in order with no separator.
        result: Output buffer.
    """
    hasher = state.digest.new()
    for arg in arguments:
        hasher.update(arg)

    # The full hex form is needed to truncate at odd character counts
    result.append(hasher.hexdigest()[: state.length])


class HashFunction(TemplateFunction):
    """Template function computing a message digest of its arguments."""

    kind = "hash"

    def __init__(self, default_digest: str = DEFAULT_DIGEST) -> None:
        self.default_digest = default_digest

    def prepare(self, parent: LogTemplate, argv: Sequence[str]) -> HashState:
        return compile_hash(parent, argv, self.default_digest)

    def evaluate(self, state: HashState, context: RenderContext) -> list[bytes]:
        return simple_func_eval(state, context)

    def call(
        self,
        state: HashState,
        arguments: Sequence[bytes],
        context: RenderContext,
        result: list[str],
    ) -> None:
        render_hash(state, arguments, result)

    def free_state(self, state: HashState) -> None:
        simple_func_free_state(state)

    def describe(self, name: str) -> dict[str, Any]:
        info = super().describe(name)
        try:
            digest = select_digest(name, self.default_digest)
        except CompileError:
            info.update(digest=None, hex_length=None)
        else:
            info.update(digest=digest.name, hex_length=digest.hex_length)
        return info
