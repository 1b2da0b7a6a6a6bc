"""CLI context object for cryptofuncs."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from cryptofuncs.config import load_config
from cryptofuncs.core.module import build_registry

if TYPE_CHECKING:
    from cryptofuncs.config import Config
    from cryptofuncs.core.plugin import FunctionRegistry


class Context:
    """CLI context object holding configuration and settings."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.config_path: Path | None = None
        self.verbose: int = 0
        self.quiet: bool = False
        self.no_color: bool = False
        self._registry: FunctionRegistry | None = None

    def load_config(self, config_path: Path | None = None) -> Config:
        """Load configuration, caching the result."""
        if self.config is None:
            self.config = load_config(config_path)
            self.config_path = config_path
        return self.config

    def get_registry(self) -> FunctionRegistry:
        """Get the function registry for the loaded configuration.

        Returns:
            Frozen registry, built on first use.
        """
        if self._registry is None:
            self._registry = build_registry(self.load_config())
        return self._registry
