"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from conjugate import get_registry
from conjugate.config import reset_settings

_ENV_VARS = (
    "CONJUGATE_WRITE_POLICY",
    "CONJUGATE_FORWARD_SPECIAL_METHODS",
    "CONJUGATE_CACHE_COMPOSITES",
)


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch):
    """Default settings and an empty composite registry for every test."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    get_registry().clear()
    yield
    reset_settings()
    get_registry().clear()


class FixtureBase:
    def __init__(self, name: str = "base"):
        self.name = name

    def who(self):
        return "Base"


class FixtureMixin:
    def __init__(self, size: int = 0):
        self.size = size

    def grow(self, by: int = 1):
        self.size += by
        return self.size


@pytest.fixture
def base_cls():
    return FixtureBase


@pytest.fixture
def mixin_cls():
    return FixtureMixin
