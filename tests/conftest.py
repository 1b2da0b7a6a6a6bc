"""Shared fixtures for cryptofuncs tests."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from cryptofuncs.core.message import LogMessage
from cryptofuncs.core.module import build_registry, module_init
from cryptofuncs.core.plugin import FunctionRegistry, Plugin, SimpleTemplateFunction
from cryptofuncs.core.template import LogTemplate

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence


@pytest.fixture(autouse=True)
def isolate_xdg_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate XDG_CONFIG_HOME for all tests to avoid interference from real config."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".xdg-config"))


@pytest.fixture
def registry() -> FunctionRegistry:
    """Return a frozen registry with the default cryptofuncs functions."""
    return build_registry()


@pytest.fixture
def render(registry: FunctionRegistry) -> Iterator[Callable[..., str]]:
    """Compile and render a template against a record built from keyword values.

    Every template compiled through this fixture is closed on teardown.
    """
    compiled: list[LogTemplate] = []

    def _render(text: str, **values: str) -> str:
        template = LogTemplate.compile(text, registry)
        compiled.append(template)
        return template.format(LogMessage(dict(values)))

    yield _render

    for template in compiled:
        template.close()


class TrackingFunction(SimpleTemplateFunction):
    """Simple function counting how often its state is prepared and freed."""

    def __init__(self, output: str = "x") -> None:
        super().__init__(lambda message, arguments: output)
        self.prepared = 0
        self.freed = 0

    def prepare(self, parent: LogTemplate, argv: Sequence[str]) -> Any:
        self.prepared += 1
        return super().prepare(parent, argv)

    def free_state(self, state: Any) -> None:
        self.freed += 1
        super().free_state(state)


@pytest.fixture
def tracking_function() -> TrackingFunction:
    return TrackingFunction()


@pytest.fixture
def tracking_registry(tracking_function: TrackingFunction) -> FunctionRegistry:
    """Return a registry with the default functions plus ``$(track)``."""
    registry = FunctionRegistry()
    module_init(registry)
    registry.register([Plugin("track", tracking_function)])
    registry.freeze()
    return registry


@pytest.fixture
def sample_config_yaml() -> str:
    """Return a sample config.yaml content."""
    return """version: 1

hash:
  default_digest: sha256

render:
  jobs: 2
  output_format: text

templates:
  host_id: "$(sha1 --length 8 $HOST)"
  message_hash: "$(hash $HOST $PROGRAM $MESSAGE)"
"""


@pytest.fixture
def minimal_config_yaml() -> str:
    """Return a minimal config.yaml content."""
    return "version: 1\n"
