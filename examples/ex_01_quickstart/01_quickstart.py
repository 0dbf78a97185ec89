"""Quickstart: register providers and resolve a wired service.

Mark classes with ``@injectable`` so their constructor annotations become
injection tokens, register them, and resolve only the top-level service.
"""

from __future__ import annotations

from typing import Annotated

from tokenwire import Container, Inject, injectable


@injectable
class Database:
    def __init__(self, url: Annotated[str, Inject("DATABASE_URL")]) -> None:
        self.url = url


@injectable
class UserRepository:
    def __init__(self, database: Database) -> None:
        self.database = database


@injectable
class UserService:
    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository


def main() -> None:
    container = Container()
    container.register(
        [
            {"token": "DATABASE_URL", "use_value": "sqlite:///users.db"},
            Database,
            UserRepository,
            {"token": "IUserService", "use_class": UserService},
        ],
    )

    service = container.resolve("IUserService")

    print(f"db_url={service.repository.database.url}")  # => db_url=sqlite:///users.db

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database


if __name__ == "__main__":
    main()
