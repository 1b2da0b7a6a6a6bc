"""Template function interface, simple-function adapter and plugin registry."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from cryptofuncs.exceptions import RegistryError

if TYPE_CHECKING:
    from cryptofuncs.core.message import LogMessage, RenderContext
    from cryptofuncs.core.template import LogTemplate

    SimpleFunc = Callable[[LogMessage | None, Sequence[bytes]], str]

logger = logging.getLogger(__name__)


class TemplateFunction(ABC):
    """Base class for functions callable from templates as ``$(name args...)``.

    A function is compiled once per occurrence in a template (:meth:`prepare`),
    then rendered once per record: :meth:`evaluate` turns the compiled state into
    argument buffers and :meth:`call` appends the output. The state returned by
    :meth:`prepare` is shared by all render calls and must not be mutated by them.
    """

    kind: str = "function"

    def prepare(self, parent: LogTemplate, argv: Sequence[str]) -> Any:
        """Compile ``argv`` (``argv[0]`` is the function name) into a state."""
        return None

    def evaluate(self, state: Any, context: RenderContext) -> list[bytes]:
        return []

    @abstractmethod
    def call(
        self,
        state: Any,
        arguments: Sequence[bytes],
        context: RenderContext,
        result: list[str],
    ) -> None:
        """Append the output for one render to ``result``."""

    def free_state(self, state: Any) -> None:
        """Release anything :meth:`prepare` allocated."""

    def describe(self, name: str) -> dict[str, Any]:
        """Return listing metadata for the function registered under ``name``."""
        return {"name": name, "kind": self.kind}


@dataclass(frozen=True)
class SimpleFuncState:
    """Compiled argument templates of a function."""

    templates: tuple[LogTemplate, ...]


def compile_templates(parent: LogTemplate, argv: Sequence[str]) -> tuple[LogTemplate, ...]:
    """Compile each argument as a sub-template of ``parent``.

    If any argument fails to compile, the ones already compiled are closed
    before the error propagates.

    Args:
        parent: Template the function occurrence belongs to.
        argv: Positional arguments (without the function name).

    Returns:
        Compiled sub-templates in argument order.
    """
    compiled: list[LogTemplate] = []
    try:
        for arg in argv:
            compiled.append(parent.compile_child(arg))
    except Exception:
        for template in compiled:
            template.close()
        raise
    return tuple(compiled)


def encode_argument(text: str) -> bytes:
    """Encode a rendered argument as UTF-8.

    Bytes that came in undecodable (``surrogateescape``) are restored as is.
    Any other lone surrogate is encoded with ``surrogatepass``.
    """
    try:
        return text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", "surrogatepass")


def simple_func_eval(state: SimpleFuncState, context: RenderContext) -> list[bytes]:
    """Render every argument template against the current context."""
    return [encode_argument(template.format_context(context)) for template in state.templates]


def simple_func_free_state(state: SimpleFuncState) -> None:
    for template in state.templates:
        template.close()


class SimpleTemplateFunction(TemplateFunction):
    """Adapter turning a plain ``func(message, arguments) -> str`` into a template function.

    Every argument is compiled as a sub-template and rendered before ``func``
    is called with the last message of the render context.
    """

    kind = "simple"

    def __init__(self, func: SimpleFunc) -> None:
        self.func = func

    def prepare(self, parent: LogTemplate, argv: Sequence[str]) -> SimpleFuncState:
        return SimpleFuncState(compile_templates(parent, argv[1:]))

    def evaluate(self, state: SimpleFuncState, context: RenderContext) -> list[bytes]:
        return simple_func_eval(state, context)

    def call(
        self,
        state: SimpleFuncState,
        arguments: Sequence[bytes],
        context: RenderContext,
        result: list[str],
    ) -> None:
        result.append(self.func(context.last_message, arguments))

    def free_state(self, state: SimpleFuncState) -> None:
        simple_func_free_state(state)


@dataclass(frozen=True)
class Plugin:
    """A function registered under a template-visible name."""

    name: str
    function: TemplateFunction


class FunctionRegistry:
    """Name to template function mapping, read-only once frozen."""

    def __init__(self) -> None:
        self._functions: dict[str, TemplateFunction] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, plugins: Iterable[Plugin]) -> None:
        """Add plugins to the registry.

        Args:
            plugins: Plugins to register.

        Raises:
            RegistryError: If the registry is frozen or a name is taken.
        """
        if self._frozen:
            raise RegistryError("Function registry is frozen, cannot register new functions")

        for plugin in plugins:
            if plugin.name in self._functions:
                raise RegistryError(f"Template function already registered: {plugin.name}")
            self._functions[plugin.name] = plugin.function
            logger.debug("Registered template function %s", plugin.name)

    def freeze(self) -> None:
        """Make the registry read-only."""
        if not self._frozen:
            self._functions = MappingProxyType(self._functions)  # type: ignore[assignment]
            self._frozen = True

    def lookup(self, name: str) -> TemplateFunction | None:
        return self._functions.get(name)

    def names(self) -> list[str]:
        return sorted(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)
