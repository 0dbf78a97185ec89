"""Typed tokens and factories.

``InjectionToken`` gives a non-class dependency a unique, typed key. Factories
receive their ``inject`` tokens as positional arguments and run on every
resolution.
"""

from __future__ import annotations

from itertools import count

from tokenwire import Container, InjectionToken

BASE_URL: InjectionToken[str] = InjectionToken("BASE_URL")
REQUEST_ID: InjectionToken[int] = InjectionToken("REQUEST_ID")
ENDPOINT: InjectionToken[str] = InjectionToken("ENDPOINT")


def main() -> None:
    ids = count(1)

    container = Container()
    container.add_value(BASE_URL, "https://api.example.com")
    container.add_factory(lambda: next(ids), token=REQUEST_ID)
    container.add_factory(
        lambda base_url, request_id: f"{base_url}/requests/{request_id}",
        token=ENDPOINT,
        inject=[BASE_URL, REQUEST_ID],
    )

    print(container.resolve(ENDPOINT))  # => https://api.example.com/requests/1
    print(container.resolve(ENDPOINT))  # => https://api.example.com/requests/2


if __name__ == "__main__":
    main()
