"""Custom exceptions for cryptofuncs."""

from __future__ import annotations

from enum import Enum


class CryptofuncsError(Exception):
    """Base exception for all cryptofuncs errors."""

    exit_code: int = 1


class ConfigError(CryptofuncsError):
    """Configuration file errors."""


class RegistryError(CryptofuncsError):
    """Function registration errors."""


class RecordError(CryptofuncsError):
    """Record input errors."""


class TemplateError(CryptofuncsError):
    """Base class for template compilation errors."""


class TemplateSyntaxError(TemplateError):
    """Template text could not be parsed."""

    def __init__(self, message: str, template: str | None = None) -> None:
        self.template = template
        if template is not None:
            message = f"{message}, template='{template}'"
        super().__init__(message)


class CompileErrorKind(Enum):
    """Reasons a template function can fail to compile."""

    INVALID_OPTION = "invalid option"
    NEGATIVE_LENGTH = "negative length"
    ARITY = "invalid number of arguments"
    UNKNOWN_DIGEST = "unknown digest type"


class CompileError(TemplateError):
    """A template function rejected its arguments at compile time."""

    def __init__(
        self,
        kind: CompileErrorKind,
        function: str,
        detail: str | None = None,
        argument: str | None = None,
    ) -> None:
        self.kind = kind
        self.function = function
        self.argument = argument
        message = f"$({function}) parsing failed, {kind.value}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
