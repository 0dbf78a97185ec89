"""Shared pytest fixtures for tokenwire tests."""

import pytest

from tokenwire.container import Container
from tokenwire.metadata import InjectionRegistry


@pytest.fixture()
def metadata() -> InjectionRegistry:
    """Empty injection table, isolated from the process-wide one."""
    return InjectionRegistry()


@pytest.fixture()
def container(metadata: InjectionRegistry) -> Container:
    """Root container reading injections from the isolated table."""
    return Container(metadata=metadata)
