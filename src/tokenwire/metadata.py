from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable, Sequence
from typing import Annotated, Any, NamedTuple, Protocol, TypeVar, get_args, get_origin, get_type_hints, overload

from tokenwire.exceptions import InvalidProviderError
from tokenwire.providers import Token

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type[Any])

_ANNOTATED_MARKER_MIN_ARGS = 2
_POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class Injection(NamedTuple):
    """Bind one constructor parameter, by position, to the token injected into it.

    ``parameter_index`` counts positional constructor parameters after ``self``,
    starting at zero.
    """

    parameter_index: int
    token: Token


class Inject(NamedTuple):
    """Select the token injected into a constructor parameter.

    Attach ``Inject`` metadata to ``typing.Annotated`` when the parameter's
    type is not itself the registration token.

    Examples:
        .. code-block:: python

            @injectable
            class UserRepository:
                def __init__(self, url: Annotated[str, Inject("DATABASE_URL")]) -> None:
                    self.url = url

    """

    token: Token


class InjectionMetadataSource(Protocol):
    """Supply ordered constructor injections for a class."""

    def get_injections(self, cls: type[Any]) -> Sequence[Injection]:
        """Return bindings for ``cls``, or an empty sequence when none are known."""
        ...


class InjectionRegistry:
    """Side table mapping classes to their constructor injections.

    Tables are keyed by class identity and populated once, usually at class
    definition time through ``injectable``. Subclasses never inherit a base
    class's table.
    """

    def __init__(self) -> None:
        self._injections: dict[type[Any], tuple[Injection, ...]] = {}

    def get_injections(self, cls: type[Any]) -> Sequence[Injection]:
        """Return bindings for ``cls`` ordered by parameter index."""
        return self._injections.get(cls, ())

    def set_injections(self, cls: type[Any], injections: Sequence[Injection | tuple[int, Token]]) -> None:
        """Replace the bindings stored for ``cls``.

        Args:
            cls: Class whose constructor receives the injections.
            injections: ``(parameter_index, token)`` pairs in any order.

        Raises:
            InvalidProviderError: If ``cls`` is not a class, or an index is
                negative or listed twice.

        """
        if not inspect.isclass(cls):
            msg = f"Injections can only be declared for classes, got {cls!r}."
            raise InvalidProviderError(msg)

        normalized = [Injection(*injection) for injection in injections]
        seen: set[int] = set()
        for injection in normalized:
            index = injection.parameter_index
            if not isinstance(index, int) or index < 0:
                msg = f"{cls.__qualname__}: parameter index must be a non-negative integer, got {index!r}."
                raise InvalidProviderError(msg)
            if index in seen:
                msg = f"{cls.__qualname__}: parameter index {index} is bound more than once."
                raise InvalidProviderError(msg)
            seen.add(index)

        normalized.sort(key=lambda injection: injection.parameter_index)
        self._injections[cls] = tuple(normalized)
        logger.debug("Declared %d injection(s) for %s", len(normalized), cls.__qualname__)

    @overload
    def injectable(self, cls: C, /) -> C: ...

    @overload
    def injectable(self, *, inject: Sequence[Token | None]) -> Callable[[C], C]: ...

    def injectable(
        self,
        cls: C | None = None,
        /,
        *,
        inject: Sequence[Token | None] | None = None,
    ) -> C | Callable[[C], C]:
        """Mark a class for injection and record its constructor bindings.

        Used bare, bindings come from ``__init__`` annotations: an
        ``Annotated[..., Inject(token)]`` parameter binds ``token`` and a plain
        class annotation binds that class. Other parameters stay unset.

        Used with ``inject=[...]``, position ``i`` binds ``inject[i]`` and
        ``None`` entries are skipped.

        Examples:
            .. code-block:: python

                @injectable
                class Service:
                    def __init__(self, repository: UserRepository) -> None: ...

                @injectable(inject=["DATABASE_URL", None, Clock])
                class Report:
                    def __init__(self, url, title="daily", clock=None) -> None: ...

        """

        def decorator(target: C) -> C:
            if inject is None:
                bindings = self._injections_from_annotations(target)
            else:
                bindings = [Injection(index, token) for index, token in enumerate(inject) if token is not None]
            self.set_injections(target, bindings)
            return target

        if cls is None:
            return decorator
        return decorator(cls)

    def _injections_from_annotations(self, cls: type[Any]) -> list[Injection]:
        if not inspect.isclass(cls):
            msg = f"@injectable can only decorate classes, got {cls!r}."
            raise InvalidProviderError(msg)

        init = cls.__init__
        if not inspect.isfunction(init):
            return []

        try:
            hints = get_type_hints(init, include_extras=True)
        except (NameError, TypeError) as error:
            msg = f"Cannot read constructor annotations of {cls.__qualname__}: {error}"
            raise InvalidProviderError(msg) from error

        parameters = [p for p in inspect.signature(init).parameters.values() if p.kind in _POSITIONAL_KINDS][1:]

        injections: list[Injection] = []
        for index, parameter in enumerate(parameters):
            token = _token_from_annotation(hints.get(parameter.name, inspect.Parameter.empty))
            if token is not inspect.Parameter.empty:
                injections.append(Injection(index, token))
        return injections


def _token_from_annotation(annotation: Any) -> Any:
    if get_origin(annotation) is Annotated:
        annotation_args = get_args(annotation)
        if len(annotation_args) >= _ANNOTATED_MARKER_MIN_ARGS:
            marker = next((item for item in annotation_args[1:] if isinstance(item, Inject)), None)
            if marker is not None:
                return marker.token
        annotation = annotation_args[0]

    if _is_runtime_class(annotation) and annotation.__module__ != "builtins":
        return annotation
    return inspect.Parameter.empty


def _is_runtime_class(candidate: object) -> bool:
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


default_metadata = InjectionRegistry()
"""Process-wide injection table used by containers created without ``metadata``."""

injectable = default_metadata.injectable
"""Shortcut for ``default_metadata.injectable``."""
