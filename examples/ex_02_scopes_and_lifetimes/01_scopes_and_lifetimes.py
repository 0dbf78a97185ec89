"""Scopes and lifetimes.

Singletons are cached in the container that owns their provider, so every
child scope shares them. Per-request providers build a fresh instance on each
resolution. Child scopes can add or override tokens without touching the
parent.
"""

from __future__ import annotations

from tokenwire import Container, Lifetime, injectable


class Settings:
    def __init__(self) -> None:
        self.name = "app"


@injectable
class RequestHandler:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings


def main() -> None:
    root = Container()
    root.register(Settings)
    root.add_class(RequestHandler, lifetime=Lifetime.PER_REQUEST)

    first_request = root.create_scope()
    second_request = root.create_scope()

    first = first_request.resolve(RequestHandler)
    second = second_request.resolve(RequestHandler)

    print(f"handlers_distinct={first is not second}")  # => handlers_distinct=True
    print(f"settings_shared={first.settings is second.settings}")  # => settings_shared=True

    first_request.add_value("user", "alice")
    print(f"child_has_user={'user' in first_request}")  # => child_has_user=True
    print(f"root_has_user={'user' in root}")  # => root_has_user=False


if __name__ == "__main__":
    main()
