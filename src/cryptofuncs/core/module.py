"""Plugin table and initialization entry point of the cryptofuncs module."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptofuncs import __version__
from cryptofuncs.core.digests import DEFAULT_DIGEST, GENERIC_ALIAS
from cryptofuncs.core.hashing import HashFunction
from cryptofuncs.core.identifiers import generate_uuid
from cryptofuncs.core.plugin import FunctionRegistry, Plugin, SimpleTemplateFunction

if TYPE_CHECKING:
    from cryptofuncs.config import Config

HASH_ALIASES = (GENERIC_ALIAS, "sha1", "sha256", "sha512", "md4", "md5")


@dataclass(frozen=True)
class ModuleInfo:
    """Descriptive metadata of a function module."""

    canonical_name: str
    version: str
    description: str
    plugins: tuple[Plugin, ...]


def build_plugins(default_digest: str = DEFAULT_DIGEST) -> tuple[Plugin, ...]:
    """Build the plugin table.

    Args:
        default_digest: Algorithm behind the generic ``hash`` alias.

    Returns:
        One plugin per template-visible function name.
    """
    hash_function = HashFunction(default_digest)
    return (
        Plugin("uuid", SimpleTemplateFunction(generate_uuid)),
        *(Plugin(alias, hash_function) for alias in HASH_ALIASES),
    )


MODULE_INFO = ModuleInfo(
    canonical_name="cryptofuncs",
    version=__version__,
    description="The cryptofuncs module provides cryptographic template functions.",
    plugins=build_plugins(),
)


def module_init(registry: FunctionRegistry, config: Config | None = None) -> None:
    """Register the module's functions.

    Args:
        registry: Registry to populate.
        config: Configuration supplying the generic hash algorithm, if any.
    """
    if config is None:
        registry.register(MODULE_INFO.plugins)
    else:
        registry.register(build_plugins(config.hash.default_digest))


def build_registry(config: Config | None = None) -> FunctionRegistry:
    """Create a frozen registry holding the module's functions."""
    registry = FunctionRegistry()
    module_init(registry, config)
    registry.freeze()
    return registry


@functools.cache
def default_registry() -> FunctionRegistry:
    """Process-wide registry built with the default configuration."""
    return build_registry()
