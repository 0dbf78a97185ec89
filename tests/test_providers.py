"""Tests for provider normalization and registry entries."""

from __future__ import annotations

from typing import Any

import pytest

from tokenwire.exceptions import InvalidProviderError
from tokenwire.providers import (
    ClassProvider,
    FactoryProvider,
    Lifetime,
    RegistryEntry,
    ValueProvider,
    normalize_provider,
    normalize_providers,
)


class Service:
    pass


def build_service() -> Service:
    return Service()


class TestNormalizeProviders:
    def test_bare_class(self) -> None:
        assert normalize_providers(Service) == ClassProvider(token=Service, cls=Service)

    def test_descriptor_passes_through(self) -> None:
        provider = ValueProvider(token="V", value=1)

        assert normalize_providers(provider) is provider

    def test_sequence_returns_list(self) -> None:
        result = normalize_providers((Service, {"token": "V", "use_value": 1}))

        assert result == [
            ClassProvider(token=Service, cls=Service),
            ValueProvider(token="V", value=1),
        ]

    def test_mapping_value(self) -> None:
        value = object()

        assert normalize_provider({"token": "V", "use_value": value}) == ValueProvider(token="V", value=value)

    def test_mapping_value_none(self) -> None:
        assert normalize_provider({"token": "V", "use_value": None}) == ValueProvider(token="V", value=None)

    def test_mapping_class_with_lifetime(self) -> None:
        provider = normalize_provider({"token": "IService", "use_class": Service, "lifetime": "per_request"})

        assert provider == ClassProvider(token="IService", cls=Service, lifetime=Lifetime.PER_REQUEST)

    def test_mapping_factory_with_inject(self) -> None:
        provider = normalize_provider({"token": "S", "use_factory": build_service, "inject": ["a", "b"]})

        assert provider == FactoryProvider(token="S", factory=build_service, inject=("a", "b"))

    def test_descriptor_fields_are_canonicalized(self) -> None:
        provider = normalize_provider(
            FactoryProvider(token="S", factory=build_service, inject=["a"], lifetime="per_request"),  # type: ignore[arg-type]
        )

        assert provider == FactoryProvider(
            token="S",
            factory=build_service,
            inject=("a",),
            lifetime=Lifetime.PER_REQUEST,
        )

    @pytest.mark.parametrize(
        ("provider", "match"),
        [
            (42, "Expected a class"),
            ("Service", "Expected a class"),
            (None, "Expected a class"),
            ({"use_value": 1}, "missing the 'token' key"),
            ({"token": "V"}, "exactly one of"),
            ({"token": "V", "use_value": 1, "use_class": Service}, "exactly one of"),
            ({"token": "V", "use_class": "Service"}, "must be a class"),
            ({"token": "V", "use_factory": 42}, "must be callable"),
            ({"token": "V", "use_factory": build_service, "inject": "a"}, "must be a list of tokens"),
            ({"token": "V", "use_class": Service, "inject": ["a"]}, "only valid with 'use_factory'"),
            ({"token": "V", "use_class": Service, "lifetime": "forever"}, "unknown lifetime"),
            ({"token": "V", "useClass": Service}, "Unknown provider keys"),
            ({"token": ["V"], "use_value": 1}, "must be hashable"),
            (ClassProvider(token="V", cls=42), "must be a class"),  # type: ignore[arg-type]
            (FactoryProvider(token="V", factory=42), "must be callable"),  # type: ignore[arg-type]
            (FactoryProvider(token="V", factory=build_service, inject="a"), "must be a list of tokens"),
            (ClassProvider(token="V", cls=Service, lifetime="forever"), "unknown lifetime"),  # type: ignore[arg-type]
            (ValueProvider(token={}, value=1), "must be hashable"),
        ],
    )
    def test_invalid_providers(self, provider: Any, match: str) -> None:
        with pytest.raises(InvalidProviderError, match=match):
            normalize_providers(provider)

    def test_invalid_item_in_sequence(self) -> None:
        with pytest.raises(InvalidProviderError):
            normalize_providers([Service, 42])


class TestRegistryEntry:
    def test_singleton_class_entry_caches(self) -> None:
        entry = RegistryEntry(provider=ClassProvider(token=Service, cls=Service), lifetime=Lifetime.SINGLETON)

        assert entry.caches_instances
        assert not entry.is_cached

        entry.instance = None

        assert entry.is_cached

    def test_per_request_class_entry_does_not_cache(self) -> None:
        entry = RegistryEntry(provider=ClassProvider(token=Service, cls=Service), lifetime=Lifetime.PER_REQUEST)

        assert not entry.caches_instances

    def test_factory_entry_does_not_cache(self) -> None:
        entry = RegistryEntry(
            provider=FactoryProvider(token=Service, factory=build_service),
            lifetime=Lifetime.SINGLETON,
        )

        assert not entry.caches_instances
