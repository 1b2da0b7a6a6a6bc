"""Minimal template engine hosting the template functions.

Supported syntax:

- ``$NAME`` and ``${NAME}`` expand to a value of the last record
- ``$$`` expands to a literal dollar sign
- ``$(func arg1 arg2 ...)`` calls a registered template function; arguments
  are whitespace separated, may be quoted, and are themselves templates
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from cryptofuncs.core.message import LogMessage, RenderContext, TemplateOptions
from cryptofuncs.exceptions import TemplateSyntaxError

if TYPE_CHECKING:
    from cryptofuncs.core.plugin import FunctionRegistry, TemplateFunction

logger = logging.getLogger(__name__)

QUOTES = "'\""


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_."


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class ValueRef:
    name: str


@dataclass(frozen=True)
class FunctionCall:
    name: str
    function: TemplateFunction
    state: Any


Element = Literal | ValueRef | FunctionCall


def find_closing_paren(text: str, start: int) -> int:
    """Return the index of the ``)`` matching the ``(`` at ``start``.

    Parentheses inside quoted strings are ignored.

    Raises:
        TemplateSyntaxError: If the parenthesis is never closed.
    """
    depth = 0
    quote: str | None = None
    for i in range(start, len(text)):
        ch = text[i]
        if quote:
            if ch == quote:
                quote = None
        elif ch in QUOTES:
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    raise TemplateSyntaxError("Missing closing parenthesis in template function call", text)


def split_arguments(body: str, template: str) -> list[str]:
    """Split the inside of ``$(...)`` into raw argument strings.

    Quotes around a top-level argument are removed; quotes, parentheses and
    ``${...}`` references in nested expressions are kept intact for the
    sub-template compiler.
    """
    args: list[str] = []
    current: list[str] = []
    in_token = False
    depth = 0
    braces = 0
    after_dollar = False
    quote: str | None = None

    for ch in body:
        if quote:
            if ch == quote:
                quote = None
                if depth or braces:
                    current.append(ch)
            else:
                current.append(ch)
            continue
        if ch in QUOTES:
            quote = ch
            in_token = True
            if depth or braces:
                current.append(ch)
            after_dollar = False
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "{" and after_dollar:
            braces += 1
        elif ch == "}" and braces:
            braces -= 1
        elif ch.isspace() and depth == 0 and braces == 0:
            if in_token:
                args.append("".join(current))
                current = []
                in_token = False
            after_dollar = False
            continue
        # "$$" is an escaped dollar and does not start a reference
        after_dollar = ch == "$" and not after_dollar
        current.append(ch)
        in_token = True

    if quote:
        raise TemplateSyntaxError("Unterminated quoted argument", template)
    if in_token:
        args.append("".join(current))
    return args


class LogTemplate:
    """A compiled template, rendered against records.

    Function states created while compiling are owned by the template and are
    released by :meth:`close`.
    """

    def __init__(self, text: str, registry: FunctionRegistry, elements: Sequence[Element]) -> None:
        self.text = text
        self.registry = registry
        self.elements = tuple(elements)
        self._closed = False

    @classmethod
    def compile(cls, text: str, registry: FunctionRegistry) -> LogTemplate:
        """Compile template text.

        Args:
            text: Template source.
            registry: Functions available to ``$(...)`` calls.

        Returns:
            Compiled template.

        Raises:
            TemplateError: If the text or any function call fails to compile.
        """
        template = cls(text, registry, ())
        elements: list[Element] = []
        try:
            template._parse(elements)
        except Exception:
            cls(text, registry, elements).close()
            raise
        template.elements = tuple(elements)
        return template

    def compile_child(self, text: str) -> LogTemplate:
        """Compile a sub-template using the same function registry."""
        return LogTemplate.compile(text, self.registry)

    def _parse(self, elements: list[Element]) -> None:
        text = self.text
        literal: list[str] = []

        def flush() -> None:
            if literal:
                elements.append(Literal("".join(literal)))
                literal.clear()

        i = 0
        n = len(text)
        while i < n:
            ch = text[i]
            nxt = text[i + 1] if i + 1 < n else ""
            if ch != "$" or not nxt:
                literal.append(ch)
                i += 1
            elif nxt == "$":
                literal.append("$")
                i += 2
            elif nxt == "{":
                end = text.find("}", i + 2)
                if end < 0:
                    raise TemplateSyntaxError("Missing closing brace in macro reference", text)
                name = text[i + 2 : end]
                if not name:
                    raise TemplateSyntaxError("Empty macro name", text)
                flush()
                elements.append(ValueRef(name))
                i = end + 1
            elif nxt == "(":
                end = find_closing_paren(text, i + 1)
                argv = split_arguments(text[i + 2 : end], text)
                flush()
                elements.append(self._compile_function(argv))
                i = end + 1
            elif _is_name_char(nxt):
                j = i + 1
                while j < n and _is_name_char(text[j]):
                    j += 1
                flush()
                elements.append(ValueRef(text[i + 1 : j]))
                i = j
            else:
                literal.append(ch)
                i += 1
        flush()

    def _compile_function(self, argv: list[str]) -> FunctionCall:
        if not argv or not argv[0]:
            raise TemplateSyntaxError("Empty template function call", self.text)

        name = argv[0]
        function = self.registry.lookup(name)
        if function is None:
            raise TemplateSyntaxError(f'Unknown template function "{name}"', self.text)

        state = function.prepare(self, argv)
        logger.debug("Compiled template function $(%s) with %d argument(s)", name, len(argv) - 1)
        return FunctionCall(name, function, state)

    def format_context(self, context: RenderContext) -> str:
        """Render the template for an already built render context."""
        result: list[str] = []
        self.append_format(context, result)
        return "".join(result)

    def append_format(self, context: RenderContext, result: list[str]) -> None:
        """Append the rendered template to ``result``."""
        message = context.last_message
        for element in self.elements:
            if isinstance(element, Literal):
                result.append(element.text)
            elif isinstance(element, ValueRef):
                if message is not None:
                    result.append(message.get_value(element.name))
            else:
                arguments = element.function.evaluate(element.state, context)
                element.function.call(element.state, arguments, context, result)

    def format(
        self,
        messages: LogMessage | Sequence[LogMessage],
        options: TemplateOptions | None = None,
        *,
        tz: int = 0,
        seq_num: int = 0,
        context_id: str | None = None,
    ) -> str:
        """Render the template against one record or a context of records.

        Args:
            messages: The record, or the records of a correlation context.
            options: Host formatting options passed to functions.
            tz: Time zone selector passed to functions.
            seq_num: Sequence number passed to functions.
            context_id: Correlation context id passed to functions.

        Returns:
            Rendered text.
        """
        if isinstance(messages, LogMessage):
            messages = (messages,)
        context = RenderContext(
            messages=tuple(messages),
            options=options or TemplateOptions(),
            tz=tz,
            seq_num=seq_num,
            context_id=context_id,
        )
        return self.format_context(context)

    def close(self) -> None:
        """Release every function state owned by this template."""
        if self._closed:
            return
        self._closed = True
        for element in self.elements:
            if isinstance(element, FunctionCall):
                element.function.free_state(element.state)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> LogTemplate:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"LogTemplate({self.text!r})"
