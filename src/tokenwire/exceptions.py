from __future__ import annotations

from typing import Any

from tokenwire.tokens import format_trace, format_token


class TokenwireError(Exception):
    """Represent a base class for all tokenwire-specific failures.

    Catch this type when you want to handle any tokenwire error path without
    matching each concrete exception class individually.
    """


class InvalidProviderError(TokenwireError):
    """Signal a registration payload that is not a recognizable provider.

    Raised by ``Container.register``, ``normalize_providers`` and the
    injection metadata registry when input is malformed, for example a mapping
    with two strategies, a ``use_class`` that is not a class, or a plain
    integer passed where a provider was expected.

    Typical fixes include passing a class, a ``ValueProvider``/``ClassProvider``/
    ``FactoryProvider`` instance, or a mapping with ``token`` and exactly one
    of ``use_value``/``use_class``/``use_factory``.
    """


class UnresolvedTokenError(TokenwireError):
    """Signal that a token has no provider anywhere in the scope chain.

    Raised by ``Container.resolve`` when neither the container nor any of its
    ancestors provides the requested token, or a token needed transitively to
    build it.

    The message lists the dependency path that led to the failure, outermost
    request first:

    .. code-block:: text

        No provider for IC. Trace: IA --> IB --> IC

    Attributes:
        token: The token that could not be resolved.
        trace: Tokens visited from the outermost request to ``token``.

    """

    prefix = "No provider for"

    def __init__(self, token: Any, trace: tuple[Any, ...]) -> None:
        self.token = token
        self.trace = trace
        super().__init__(f"{self.prefix} {format_token(token)}. Trace: {format_trace(trace)}")


class CircularDependencyError(UnresolvedTokenError):
    """Signal a dependency path that revisits a token it is still building.

    The trace ends with the repeated token, so ``A --> B --> A`` means ``A``
    needs ``B`` which needs ``A`` again.

    Typical fixes include breaking the cycle with a factory that resolves one
    side lazily, or registering one side as a prebuilt value.
    """

    prefix = "Circular dependency for"
