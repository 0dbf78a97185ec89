from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

T = TypeVar("T")

TRACE_SEPARATOR = " --> "


class InjectionToken(Generic[T]):
    """Identify a provider by a unique object instead of a class or string.

    Two tokens are never equal unless they are the same object, even when
    their descriptions match. The type parameter records what resolving the
    token produces, so ``container.resolve(DATABASE_URL)`` is typed as ``str``
    for ``DATABASE_URL: InjectionToken[str]``.

    Examples:
        .. code-block:: python

            DATABASE_URL: InjectionToken[str] = InjectionToken("DATABASE_URL")

            container.add_value(DATABASE_URL, "sqlite://")
            url = container.resolve(DATABASE_URL)

    """

    __slots__ = ("description",)

    def __init__(self, description: str) -> None:
        self.description = description

    def __repr__(self) -> str:
        return f"InjectionToken({self.description!r})"


def format_token(token: Any) -> str:
    """Return the human-readable form of a token used in error traces.

    Args:
        token: Token to print. Strings print as themselves, injection tokens
            as their description, classes as their ``__name__``.

    """
    if isinstance(token, str):
        return token
    if isinstance(token, InjectionToken):
        return token.description
    if isinstance(token, type):
        return token.__name__
    return str(token)


def format_trace(trace: Iterable[Any]) -> str:
    """Join a dependency path into ``A --> B --> C``."""
    return TRACE_SEPARATOR.join(format_token(token) for token in trace)
