"""Tests for token printing."""

from __future__ import annotations

from enum import Enum

import pytest

from tokenwire.tokens import InjectionToken, format_token, format_trace


class UserService:
    pass


class Color(Enum):
    RED = "red"


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("IUserService", "IUserService"),
        (UserService, "UserService"),
        (InjectionToken("DATABASE_URL"), "DATABASE_URL"),
        (42, "42"),
        (Color.RED, "Color.RED"),
    ],
)
def test_format_token(token: object, expected: str) -> None:
    assert format_token(token) == expected


def test_format_trace() -> None:
    assert format_trace(["IA", UserService, InjectionToken("url")]) == "IA --> UserService --> url"


def test_format_trace_single_token() -> None:
    assert format_trace(["Unregistered"]) == "Unregistered"


def test_injection_token_equality_is_identity() -> None:
    first: InjectionToken[int] = InjectionToken("port")
    second: InjectionToken[int] = InjectionToken("port")

    assert first == first  # noqa: PLR0124
    assert first != second
    assert len({first, second}) == 2


def test_injection_token_repr() -> None:
    assert repr(InjectionToken("port")) == "InjectionToken('port')"
