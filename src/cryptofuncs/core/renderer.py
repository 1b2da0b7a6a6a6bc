"""Rendering one compiled template against many records."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptofuncs.core.message import LogMessage, TemplateOptions

if TYPE_CHECKING:
    from cryptofuncs.config import Config
    from cryptofuncs.core.template import LogTemplate

logger = logging.getLogger(__name__)


@dataclass
class RenderedRecord:
    """Output of one render call."""

    seq_num: int
    output: str


def resolve_template_text(template: str, config: Config) -> str:
    """Return the named template from config, or ``template`` itself.

    Args:
        template: Template name or literal template text.
        config: Application configuration.

    Returns:
        Template source text.
    """
    return config.templates.get(template, template)


def render_records(
    template: LogTemplate,
    records: Iterable[LogMessage],
    jobs: int = 1,
    options: TemplateOptions | None = None,
) -> list[RenderedRecord]:
    """Render ``template`` once per record, optionally on a thread pool.

    The compiled template is shared by all workers; results keep input order.

    Args:
        template: Compiled template.
        records: Records to render.
        jobs: Number of worker threads.
        options: Formatting options passed to template functions.

    Returns:
        One rendered record per input record.
    """
    options = options or TemplateOptions()

    def render_one(item: tuple[int, LogMessage]) -> RenderedRecord:
        seq_num, message = item
        return RenderedRecord(seq_num, template.format(message, options, seq_num=seq_num))

    numbered = enumerate(records, start=1)
    if jobs <= 1:
        return [render_one(item) for item in numbered]

    logger.debug("Rendering with %d worker threads", jobs)
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        return list(executor.map(render_one, numbered))


def format_render_json(results: list[RenderedRecord]) -> str:
    """Format rendered records as JSON lines.

    Args:
        results: Rendered records.

    Returns:
        One JSON object per line.
    """
    return "\n".join(
        json.dumps({"seq_num": r.seq_num, "output": r.output}) for r in results
    )
