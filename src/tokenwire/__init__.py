from tokenwire.container import Container
from tokenwire.exceptions import (
    CircularDependencyError,
    InvalidProviderError,
    TokenwireError,
    UnresolvedTokenError,
)
from tokenwire.metadata import (
    Inject,
    Injection,
    InjectionMetadataSource,
    InjectionRegistry,
    default_metadata,
    injectable,
)
from tokenwire.providers import (
    ClassProvider,
    FactoryProvider,
    Lifetime,
    Provider,
    ValueProvider,
    normalize_providers,
)
from tokenwire.tokens import InjectionToken, format_token

__all__ = [
    "CircularDependencyError",
    "ClassProvider",
    "Container",
    "FactoryProvider",
    "Inject",
    "Injection",
    "InjectionMetadataSource",
    "InjectionRegistry",
    "InjectionToken",
    "InvalidProviderError",
    "Lifetime",
    "Provider",
    "TokenwireError",
    "UnresolvedTokenError",
    "ValueProvider",
    "default_metadata",
    "format_token",
    "injectable",
    "normalize_providers",
]
