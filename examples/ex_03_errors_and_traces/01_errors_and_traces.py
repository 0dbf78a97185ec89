"""Errors and traces.

When a dependency is missing anywhere along the chain, ``UnresolvedTokenError``
reports the whole path from the requested token to the missing one.
"""

from __future__ import annotations

from tokenwire import Container, InvalidProviderError, UnresolvedTokenError, injectable


@injectable(inject=["IB"])
class A:
    def __init__(self, b: object) -> None:
        self.b = b


@injectable(inject=["IC"])
class B:
    def __init__(self, c: object) -> None:
        self.c = c


def main() -> None:
    container = Container()
    container.register([{"token": "IA", "use_class": A}, {"token": "IB", "use_class": B}])

    try:
        container.resolve("IA")
    except UnresolvedTokenError as error:
        print(error)  # => No provider for IC. Trace: IA --> IB --> IC

    try:
        container.register(42)  # type: ignore[arg-type]
    except InvalidProviderError as error:
        error_name = type(error).__name__

    print(f"invalid={error_name}")  # => invalid=InvalidProviderError


if __name__ == "__main__":
    main()
