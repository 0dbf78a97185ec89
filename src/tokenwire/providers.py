from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, TypeAlias, Union

from tokenwire.exceptions import InvalidProviderError
from tokenwire.tokens import format_token

Token: TypeAlias = Any
"""A registry key: a string, an ``InjectionToken``, a class, or any hashable object."""

_EMPTY: Any = object()

_STRATEGY_KEYS = ("use_value", "use_class", "use_factory")
_ALLOWED_KEYS = frozenset(("token", "inject", "lifetime", *_STRATEGY_KEYS))


class Lifetime(str, Enum):
    """Defines how long an instance built from a class provider is reused."""

    SINGLETON = "singleton"
    """One instance is built on first resolution and cached in the owning container."""

    PER_REQUEST = "per_request"
    """A new instance is built every time the token is resolved."""


@dataclass(frozen=True, kw_only=True)
class ValueProvider:
    """Provide a prebuilt value that is returned as-is on every resolution."""

    token: Token
    value: Any


@dataclass(frozen=True, kw_only=True)
class ClassProvider:
    """Provide instances of ``cls`` built from its injection metadata.

    ``lifetime=None`` defers to the container's ``default_lifetime``.
    """

    token: Token
    cls: type[Any]
    lifetime: Lifetime | None = None


@dataclass(frozen=True, kw_only=True)
class FactoryProvider:
    """Provide the result of calling ``factory`` with resolved ``inject`` tokens.

    Factories run on every resolution and their results are never cached.
    ``lifetime`` is accepted for symmetry with ``ClassProvider`` but does not
    change that behavior.
    """

    token: Token
    factory: Callable[..., Any]
    inject: Sequence[Token] = ()
    lifetime: Lifetime | None = None


Provider: TypeAlias = Union[ValueProvider, ClassProvider, FactoryProvider]
"""Any provider descriptor accepted by ``Container.register``."""

ProviderLike: TypeAlias = Union[Provider, type[Any], Mapping[str, Any]]
"""A descriptor, a bare class, or a mapping that normalizes into a descriptor."""


@dataclass(kw_only=True)
class RegistryEntry:
    """Hold per-container resolution state for one registered token."""

    provider: Provider
    """The descriptor this entry was created from."""
    lifetime: Lifetime
    """Effective lifetime after applying the container default."""
    instance: Any = field(default=_EMPTY)
    """Cached singleton instance, or the empty sentinel until first built."""
    resolving: bool = False
    """True while this entry is building an instance; a nested request means a cycle."""

    @property
    def is_cached(self) -> bool:
        """Return true once a singleton instance has been stored."""
        return self.instance is not _EMPTY

    @property
    def caches_instances(self) -> bool:
        """Return true when built instances should be stored in this entry."""
        return isinstance(self.provider, ClassProvider) and self.lifetime is Lifetime.SINGLETON


def normalize_providers(
    provider: ProviderLike | Sequence[ProviderLike],
) -> Provider | list[Provider]:
    """Convert registration input into provider descriptors.

    Args:
        provider: A descriptor, a class, a mapping with ``token`` and exactly
            one of ``use_value``/``use_class``/``use_factory``, or a list or
            tuple of these.

    Returns:
        A single descriptor, or a list of descriptors when a sequence was given.

    Raises:
        InvalidProviderError: If any item is not a recognizable provider shape.

    Examples:
        .. code-block:: python

            normalize_providers(Service)
            # ClassProvider(token=Service, cls=Service, lifetime=None)

            normalize_providers([{"token": "url", "use_value": "sqlite://"}])
            # [ValueProvider(token='url', value='sqlite://')]

    """
    if isinstance(provider, (list, tuple)):
        return [normalize_provider(item) for item in provider]
    return normalize_provider(provider)


def normalize_provider(provider: ProviderLike) -> Provider:
    """Convert one registration item into a validated provider descriptor."""
    if isinstance(provider, (ValueProvider, ClassProvider, FactoryProvider)):
        return _validate_descriptor(provider)
    if inspect.isclass(provider):
        return ClassProvider(token=provider, cls=provider)
    if isinstance(provider, Mapping):
        return _provider_from_mapping(provider)

    msg = f"Expected a class, a provider descriptor or a provider mapping, got {provider!r}."
    raise InvalidProviderError(msg)


def _provider_from_mapping(provider: Mapping[str, Any]) -> Provider:
    unknown = sorted(str(key) for key in provider if key not in _ALLOWED_KEYS)
    if unknown:
        msg = f"Unknown provider keys {unknown} in {dict(provider)!r}."
        raise InvalidProviderError(msg)

    if "token" not in provider:
        msg = f"Provider mapping {dict(provider)!r} is missing the 'token' key."
        raise InvalidProviderError(msg)
    token = provider["token"]

    strategies = [key for key in _STRATEGY_KEYS if key in provider]
    if len(strategies) != 1:
        msg = (
            f"Provider for {format_token(token)} must define exactly one of "
            f"{', '.join(_STRATEGY_KEYS)}; got {strategies or 'none'}."
        )
        raise InvalidProviderError(msg)
    strategy = strategies[0]

    if "inject" in provider and strategy != "use_factory":
        msg = f"Provider for {format_token(token)}: 'inject' is only valid with 'use_factory'."
        raise InvalidProviderError(msg)

    descriptor: Provider
    if strategy == "use_value":
        # Values are always shared; a lifetime has nothing to control.
        _coerce_lifetime(token, provider.get("lifetime"))
        descriptor = ValueProvider(token=token, value=provider["use_value"])
    elif strategy == "use_class":
        descriptor = ClassProvider(token=token, cls=provider["use_class"], lifetime=provider.get("lifetime"))
    else:
        descriptor = FactoryProvider(
            token=token,
            factory=provider["use_factory"],
            inject=provider.get("inject") or (),
            lifetime=provider.get("lifetime"),
        )
    return _validate_descriptor(descriptor)


def _validate_descriptor(provider: Provider) -> Provider:
    """Check a descriptor's fields and return it with canonical ``inject`` and ``lifetime``."""
    token = provider.token
    try:
        hash(token)
    except TypeError:
        msg = f"Provider token must be hashable, got {token!r}."
        raise InvalidProviderError(msg) from None

    if isinstance(provider, ValueProvider):
        return provider

    lifetime = _coerce_lifetime(token, provider.lifetime)

    if isinstance(provider, ClassProvider):
        if not inspect.isclass(provider.cls):
            msg = f"Provider for {format_token(token)}: class provider must be a class, got {provider.cls!r}."
            raise InvalidProviderError(msg)
        if lifetime is provider.lifetime:
            return provider
        return replace(provider, lifetime=lifetime)

    if not callable(provider.factory):
        msg = f"Provider for {format_token(token)}: factory must be callable, got {provider.factory!r}."
        raise InvalidProviderError(msg)
    inject = provider.inject
    if isinstance(inject, (str, bytes)) or not isinstance(inject, Sequence):
        msg = f"Provider for {format_token(token)}: 'inject' must be a list of tokens, got {inject!r}."
        raise InvalidProviderError(msg)
    if lifetime is provider.lifetime and isinstance(inject, tuple):
        return provider
    return replace(provider, inject=tuple(inject), lifetime=lifetime)


def _coerce_lifetime(token: Token, lifetime: object) -> Lifetime | None:
    if lifetime is None or isinstance(lifetime, Lifetime):
        return lifetime
    try:
        return Lifetime(lifetime)
    except ValueError:
        msg = f"Provider for {format_token(token)}: unknown lifetime {lifetime!r}."
        raise InvalidProviderError(msg) from None


def describe_provider(provider: Provider) -> str:
    """Return a short strategy label used in debug logs."""
    if isinstance(provider, ValueProvider):
        return "value"
    if isinstance(provider, ClassProvider):
        return f"class {provider.cls.__qualname__}"
    return f"factory {getattr(provider.factory, '__qualname__', repr(provider.factory))}"
