"""Unit tests for context bindings and the context resolver."""

from __future__ import annotations

import pytest

from testgate.exceptions import ContextResolutionError, DuplicateDeclarationError
from testgate.preconditions import (
    ContextBinding,
    context_field,
    context_provider,
    find_context_binding,
    resolve_context,
)


class FieldSuite:
    _connection = context_field()

    def __init__(self, value: object = None) -> None:
        if value is not None:
            self._connection = value


class DefaultSuite:
    settings = context_field(default={"mode": "default"})


class ProviderSuite:
    def __init__(self) -> None:
        self.calls = 0

    @context_provider
    def connection(self) -> str:
        self.calls += 1
        return f"conn-{self.calls}"


class BrokenProviderSuite:
    @context_provider
    def connection(self) -> str:
        raise LookupError("no database")


class ChildSuite(FieldSuite):
    pass


class TestContextBinding:
    """Tests for the ContextBinding descriptor."""

    def test_class_access_returns_binding(self) -> None:
        assert isinstance(FieldSuite._connection, ContextBinding)

    def test_field_assignment_round_trips(self) -> None:
        suite = FieldSuite("db")

        assert suite._connection == "db"

    def test_unassigned_field_reads_default(self) -> None:
        assert DefaultSuite().settings == {"mode": "default"}
        assert FieldSuite()._connection is None

    def test_provider_is_read_only(self) -> None:
        with pytest.raises(AttributeError, match="read-only"):
            ProviderSuite().connection = "x"  # type: ignore[misc]

    def test_repr(self) -> None:
        assert repr(vars(ProviderSuite)["connection"]) == (
            "<ContextBinding provider 'connection'>"
        )


class TestFindContextBinding:
    """Tests for find_context_binding."""

    def test_finds_field(self) -> None:
        binding = find_context_binding(FieldSuite)

        assert binding is vars(FieldSuite)["_connection"]
        assert binding.name == "_connection"
        assert binding.owner is FieldSuite

    def test_none_declared(self) -> None:
        class Plain:
            pass

        assert find_context_binding(Plain) is None

    def test_ancestor_bindings_are_ignored(self) -> None:
        assert find_context_binding(ChildSuite) is None

    def test_more_than_one_raises(self) -> None:
        class Twice:
            a = context_field()

            @context_provider
            def b(self) -> int:
                return 1

        with pytest.raises(DuplicateDeclarationError):
            find_context_binding(Twice)


class TestResolveContext:
    """Tests for resolve_context."""

    def test_no_binding_is_absent(self) -> None:
        assert resolve_context(None, FieldSuite("db")) is None

    def test_reads_private_field_from_instance(self) -> None:
        binding = find_context_binding(FieldSuite)

        assert resolve_context(binding, FieldSuite("db")) == "db"

    def test_calls_provider_each_time(self) -> None:
        binding = find_context_binding(ProviderSuite)
        suite = ProviderSuite()

        assert resolve_context(binding, suite) == "conn-1"
        assert resolve_context(binding, suite) == "conn-2"

    def test_access_error_is_wrapped(self) -> None:
        binding = find_context_binding(BrokenProviderSuite)

        with pytest.raises(ContextResolutionError, match="no database") as exc_info:
            resolve_context(binding, BrokenProviderSuite())

        assert exc_info.value.field_name == "connection"
        assert exc_info.value.test_class is BrokenProviderSuite
        assert isinstance(exc_info.value.__cause__, LookupError)

    def test_instance_without_dict_is_wrapped(self) -> None:
        binding = find_context_binding(FieldSuite)

        with pytest.raises(ContextResolutionError):
            resolve_context(binding, object())
