"""Unit tests for the plugin registry, simple functions and module table."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest

from cryptofuncs import __version__
from cryptofuncs.config import Config, HashConfig
from cryptofuncs.core.hashing import HashFunction
from cryptofuncs.core.identifiers import generate_uuid
from cryptofuncs.core.message import LogMessage
from cryptofuncs.core.module import (
    HASH_ALIASES,
    MODULE_INFO,
    build_registry,
    default_registry,
    module_init,
)
from cryptofuncs.core.plugin import (
    FunctionRegistry,
    Plugin,
    SimpleTemplateFunction,
    TemplateFunction,
)
from cryptofuncs.core.template import LogTemplate
from cryptofuncs.exceptions import RegistryError

if TYPE_CHECKING:
    from collections.abc import Callable


class TestFunctionRegistry:
    """Tests for FunctionRegistry."""

    def test_register_and_lookup(self) -> None:
        registry = FunctionRegistry()
        function = SimpleTemplateFunction(lambda message, arguments: "x")
        registry.register([Plugin("x", function)])
        assert registry.lookup("x") is function
        assert registry.lookup("y") is None
        assert "x" in registry
        assert len(registry) == 1

    def test_duplicate_name(self) -> None:
        registry = FunctionRegistry()
        function = SimpleTemplateFunction(lambda message, arguments: "x")
        registry.register([Plugin("x", function)])
        with pytest.raises(RegistryError, match="already registered"):
            registry.register([Plugin("x", function)])

    def test_frozen_registry_rejects_registration(self) -> None:
        registry = FunctionRegistry()
        registry.freeze()
        assert registry.frozen
        with pytest.raises(RegistryError, match="frozen"):
            registry.register([Plugin("x", SimpleTemplateFunction(lambda m, a: ""))])

    def test_names_sorted(self) -> None:
        registry = build_registry()
        assert registry.names() == sorted(registry.names())


class TestTemplateFunction:
    """Tests for the TemplateFunction interface."""

    def test_call_must_be_implemented(self) -> None:
        """Test that a function without call() cannot be instantiated."""

        class NoCall(TemplateFunction):
            pass

        with pytest.raises(TypeError, match="abstract"):
            NoCall()

    def test_defaults(self) -> None:
        class Constant(TemplateFunction):
            def call(self, state, arguments, context, result) -> None:  # type: ignore[override]
                result.append("c")

        function = Constant()
        assert function.prepare(None, ["c"]) is None  # type: ignore[arg-type]
        assert function.describe("c") == {"name": "c", "kind": "function"}


class TestSimpleTemplateFunction:
    """Tests for the simple function adapter."""

    def test_arguments_are_rendered(self) -> None:
        """Test that the wrapped callable receives rendered argument bytes."""
        registry = FunctionRegistry()
        registry.register(
            [Plugin("join", SimpleTemplateFunction(lambda m, args: b"+".join(args).decode()))]
        )
        with LogTemplate.compile("$(join a $B c)", registry) as template:
            assert template.format(LogMessage({"B": "b"})) == "a+b+c"


class TestUuid:
    """Tests for the $(uuid) function."""

    def test_layout(self) -> None:
        value = generate_uuid(None, [])
        assert len(value) == 36
        assert [i for i, ch in enumerate(value) if ch == "-"] == [8, 13, 18, 23]
        parsed = uuid.UUID(value)
        assert parsed.version == 4
        assert parsed.variant == uuid.RFC_4122
        assert value == value.lower()

    def test_successive_calls_differ(self, render: Callable[..., str]) -> None:
        first = render("$(uuid)")
        second = render("$(uuid)")
        assert len(first) == len(second) == 36
        assert first != second

    def test_each_render_is_new(self, registry: FunctionRegistry) -> None:
        """Test that one compiled occurrence produces a new id per record."""
        with LogTemplate.compile("$(uuid)", registry) as template:
            assert template.format(LogMessage()) != template.format(LogMessage())


class TestModule:
    """Tests for the module plugin table and init entry point."""

    def test_module_info(self) -> None:
        assert MODULE_INFO.canonical_name == "cryptofuncs"
        assert MODULE_INFO.version == __version__
        names = [plugin.name for plugin in MODULE_INFO.plugins]
        assert names == ["uuid", *HASH_ALIASES]

    def test_hash_aliases_share_function(self) -> None:
        functions = {p.function for p in MODULE_INFO.plugins if p.name in HASH_ALIASES}
        assert len(functions) == 1
        assert isinstance(functions.pop(), HashFunction)

    def test_module_init(self) -> None:
        registry = FunctionRegistry()
        module_init(registry)
        assert set(registry.names()) == {"uuid", "hash", "sha1", "sha256", "sha512", "md4", "md5"}

    def test_module_init_twice_fails(self) -> None:
        registry = FunctionRegistry()
        module_init(registry)
        with pytest.raises(RegistryError):
            module_init(registry)

    def test_default_registry_is_frozen_singleton(self) -> None:
        registry = default_registry()
        assert registry is default_registry()
        assert registry.frozen

    def test_config_changes_generic_digest(self) -> None:
        registry = build_registry(Config(hash=HashConfig(default_digest="md5")))
        with LogTemplate.compile("$(hash abc)", registry) as template:
            assert template.format(LogMessage()) == "900150983cd24fb0d6963f7d28e17f72"

    def test_describe(self) -> None:
        function = HashFunction()
        info = function.describe("sha1")
        assert info == {"name": "sha1", "kind": "hash", "digest": "sha1", "hex_length": 40}
        assert function.describe("hash")["digest"] == "sha256"
