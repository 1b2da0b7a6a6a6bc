"""Records and render-time context handed to templates."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class LogMessage:
    """A single record: a flat set of name-value pairs."""

    values: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LogMessage:
        """Build a message from arbitrary mapping data.

        Non-string values are converted with ``str()``; ``None`` becomes empty.

        Args:
            data: Source mapping, e.g. a decoded JSON object.

        Returns:
            New LogMessage instance.
        """
        return cls({str(k): "" if v is None else str(v) for k, v in data.items()})

    def get_value(self, name: str) -> str:
        """Return the value of ``name``, or an empty string if unset."""
        return self.values.get(name, "")

    def set_value(self, name: str, value: str) -> None:
        self.values[name] = value


@dataclass(frozen=True)
class TemplateOptions:
    """Host-level formatting options, passed through to template functions."""

    ts_format: str = "rfc3164"
    frac_digits: int = 0
    time_zone: str | None = None


@dataclass(frozen=True)
class RenderContext:
    """Everything a template function sees about the current render call."""

    messages: tuple[LogMessage, ...]
    options: TemplateOptions = field(default_factory=TemplateOptions)
    tz: int = 0
    seq_num: int = 0
    context_id: str | None = None

    @property
    def last_message(self) -> LogMessage | None:
        """The message macros are resolved against."""
        return self.messages[-1] if self.messages else None
