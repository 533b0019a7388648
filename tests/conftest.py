"""Pytest configuration and fixtures."""

import logging

import pytest

from typedenv import InMemoryEnvStore, TypedEnvAccessor


def pytest_configure(config: pytest.Config) -> None:
    """Surface the accessors' fallback/debug records in failure output."""

    logging.getLogger("typedenv").setLevel(logging.DEBUG)


@pytest.fixture
def store() -> InMemoryEnvStore:
    """Isolated environment store; never touches os.environ."""
    return InMemoryEnvStore()


@pytest.fixture
def accessor(store: InMemoryEnvStore) -> TypedEnvAccessor:
    """Typed accessor over the isolated store."""
    return TypedEnvAccessor(store)
