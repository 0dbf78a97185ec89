from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar, overload

from typing_extensions import Self

from tokenwire.exceptions import CircularDependencyError, UnresolvedTokenError
from tokenwire.metadata import InjectionMetadataSource, default_metadata
from tokenwire.providers import (
    ClassProvider,
    FactoryProvider,
    Lifetime,
    Provider,
    ProviderLike,
    RegistryEntry,
    Token,
    ValueProvider,
    describe_provider,
    normalize_providers,
)
from tokenwire.tokens import InjectionToken, format_token, format_trace

T = TypeVar("T")

logger = logging.getLogger(__name__)

_POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class Container:
    """Register providers under tokens and resolve them into wired instances.

    A container owns a registry of providers and may delegate lookups to a
    parent container. ``resolve`` looks the token up locally first and walks
    toward the root on a miss. Dependencies of a provider are always resolved
    in the container that owns the provider, not in the container the caller
    started from.

    Class providers are singletons by default: the first resolution builds
    the instance and caches it in the owning container. Factories run on every
    resolution. Values are returned as registered.

    Examples:
        .. code-block:: python

            container = Container()
            container.register(
                [
                    {"token": "DATABASE_URL", "use_value": "sqlite://"},
                    UserRepository,
                    {"token": "IUserService", "use_class": UserService},
                ],
            )

            with_request = container.create_scope()
            service = with_request.resolve("IUserService")

    """

    def __init__(
        self,
        parent: Container | None = None,
        *,
        metadata: InjectionMetadataSource | None = None,
        default_lifetime: Lifetime = Lifetime.SINGLETON,
    ) -> None:
        """Initialize an empty container.

        Args:
            parent: Container to delegate to when a token is not registered
                here. Prefer ``create_scope`` over passing it directly.
            metadata: Source of constructor injections for class providers.
                Defaults to the process-wide ``default_metadata`` table.
            default_lifetime: Lifetime applied to class providers registered
                without an explicit ``lifetime``.

        """
        self._parent = parent
        self._metadata: InjectionMetadataSource = metadata if metadata is not None else default_metadata
        self._default_lifetime = default_lifetime
        self._registry: dict[Token, RegistryEntry] = {}

    @property
    def parent(self) -> Container | None:
        """Return the container this one delegates to, if any."""
        return self._parent

    # region Registration Methods

    def register(self, provider: ProviderLike | Sequence[ProviderLike]) -> None:
        """Register one provider or an ordered sequence of providers.

        Registering a token that is already registered in this container
        replaces the previous provider. Parent containers are never touched.

        Args:
            provider: A ``ValueProvider``, ``ClassProvider`` or ``FactoryProvider``,
                a bare class (registered under itself), a mapping with ``token``
                and exactly one of ``use_value``/``use_class``/``use_factory``,
                or a list or tuple of these.

        Raises:
            InvalidProviderError: If any item is not a recognizable provider.
                Nothing is registered in that case, even for a sequence.

        Examples:
            .. code-block:: python

                container.register(Clock)
                container.register({"token": "IClock", "use_class": SystemClock})
                container.register(
                    {"token": "now", "use_factory": lambda clock: clock.now(), "inject": ["IClock"]},
                )

        """
        normalized = normalize_providers(provider)
        providers = normalized if isinstance(normalized, list) else [normalized]
        for item in providers:
            self._register_one(item)

    def add_value(self, token: Token, value: Any) -> None:
        """Register ``value`` to be returned as-is for ``token``."""
        self.register(ValueProvider(token=token, value=value))

    def add_class(
        self,
        cls: type[Any],
        *,
        token: Token | None = None,
        lifetime: Lifetime | None = None,
    ) -> None:
        """Register ``cls`` under ``token``, or under itself when ``token`` is omitted."""
        self.register(ClassProvider(token=cls if token is None else token, cls=cls, lifetime=lifetime))

    def add_factory(
        self,
        factory: Callable[..., Any],
        *,
        token: Token,
        inject: Sequence[Token] = (),
        lifetime: Lifetime | None = None,
    ) -> None:
        """Register ``factory`` to be called with the resolved ``inject`` tokens."""
        self.register(FactoryProvider(token=token, factory=factory, inject=inject, lifetime=lifetime))

    def _register_one(self, provider: Provider) -> None:
        if isinstance(provider, ValueProvider):
            lifetime = Lifetime.SINGLETON
        else:
            lifetime = provider.lifetime if provider.lifetime is not None else self._default_lifetime

        if provider.token in self._registry:
            logger.debug("Replacing provider for %s", format_token(provider.token))
        self._registry[provider.token] = RegistryEntry(provider=provider, lifetime=lifetime)
        logger.debug(
            "Registered %s for %s (lifetime=%s)",
            describe_provider(provider),
            format_token(provider.token),
            lifetime.value,
        )

    # endregion Registration Methods

    # region Resolution and Scope Management

    def has(self, token: Token) -> bool:
        """Return true when this container or an ancestor provides ``token``."""
        container: Container | None = self
        while container is not None:
            if token in container._registry:
                return True
            container = container._parent
        return False

    def __contains__(self, token: object) -> bool:
        return self.has(token)

    @overload
    def resolve(self, token: InjectionToken[T]) -> T: ...

    @overload
    def resolve(self, token: type[T]) -> T: ...

    @overload
    def resolve(self, token: Any) -> Any: ...

    def resolve(self, token: Any) -> Any:
        """Resolve ``token`` into an instance, building dependencies as needed.

        Args:
            token: Token to resolve.

        Returns:
            The registered value, the cached singleton, a newly built instance,
            or the factory result.

        Raises:
            UnresolvedTokenError: If no container in the chain provides
                ``token`` or one of its transitive dependencies. The message
                lists the dependency path, for example
                ``No provider for IC. Trace: IA --> IB --> IC``.
            CircularDependencyError: If building ``token`` requires itself.

        Examples:
            .. code-block:: python

                container.register({"token": "IA", "use_class": A})
                a = container.resolve("IA")

        """
        return self._resolve(token, (token,))

    def create_scope(self) -> Self:
        """Create a child container that delegates unknown tokens to this one.

        The child starts with an empty registry and shares this container's
        metadata source and default lifetime. Registrations made on the child
        are invisible to this container.
        """
        scope = type(self)(self, metadata=self._metadata, default_lifetime=self._default_lifetime)
        logger.debug("Created child scope %#x of %#x", id(scope), id(self))
        return scope

    def _resolve(self, token: Token, trace: tuple[Token, ...]) -> Any:
        entry = self._registry.get(token)

        if entry is None:
            if self._parent is None:
                logger.debug("No provider for %s (trace: %s)", format_token(token), format_trace(trace))
                raise UnresolvedTokenError(token, trace)
            logger.debug("Delegating %s to parent scope", format_token(token))
            return self._parent._resolve(token, trace)

        provider = entry.provider

        if isinstance(provider, ValueProvider):
            return provider.value

        if entry.is_cached:
            return entry.instance

        if entry.resolving:
            logger.debug("Circular dependency for %s (trace: %s)", format_token(token), format_trace(trace))
            raise CircularDependencyError(token, trace)

        entry.resolving = True
        try:
            if isinstance(provider, FactoryProvider):
                arguments = [self._resolve(dependency, (*trace, dependency)) for dependency in provider.inject]
                return provider.factory(*arguments)

            instance = self._construct(provider.cls, trace)
        finally:
            entry.resolving = False

        if entry.caches_instances:
            entry.instance = instance
            logger.debug("Cached singleton %s for %s", type(instance).__qualname__, format_token(token))
        return instance

    def _construct(self, cls: type[T], trace: tuple[Token, ...]) -> T:
        resolved: dict[int, Any] = {}
        for injection in self._metadata.get_injections(cls):
            resolved[injection.parameter_index] = self._resolve(injection.token, (*trace, injection.token))
        return cls(*_build_positional_arguments(cls, resolved))

    # endregion Resolution and Scope Management


def _build_positional_arguments(cls: type[Any], resolved: dict[int, Any]) -> list[Any]:
    """Lay out resolved injections by parameter index.

    Slots without an injection take the parameter default, or ``None`` when the
    parameter has none. The list always covers the required positional
    parameters so classes never marked for injection still construct.
    """
    try:
        parameters = [p for p in inspect.signature(cls).parameters.values() if p.kind in _POSITIONAL_KINDS]
    except (TypeError, ValueError):
        parameters = []

    required = sum(1 for parameter in parameters if parameter.default is inspect.Parameter.empty)
    length = max(required, max(resolved, default=-1) + 1)

    arguments: list[Any] = []
    for index in range(length):
        if index in resolved:
            arguments.append(resolved[index])
        elif index < len(parameters) and parameters[index].default is not inspect.Parameter.empty:
            arguments.append(parameters[index].default)
        else:
            arguments.append(None)
    return arguments
