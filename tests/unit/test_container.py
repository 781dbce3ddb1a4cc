"""
Name: Composition Root Wiring Tests

Responsibilities:
  - APP_ENV decides in-memory vs Postgres adapters through Settings.is_test()
  - The Postgres pool is never opened just by wiring repositories
"""

import pytest

from sii_dicri.container import (
    database_status,
    get_catalog_repository,
    get_db_pool,
    get_user_repository,
)
from sii_dicri.crosscutting.config import get_settings
from sii_dicri.infrastructure.repositories import (
    InMemoryUserRepository,
    PostgresCatalogRepository,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("env", ["test", "Testing", " ci "])
def test_test_like_envs_are_detected(monkeypatch, env):
    monkeypatch.setenv("APP_ENV", env)
    get_settings.cache_clear()

    assert get_settings().is_test() is True
    assert isinstance(get_user_repository(), InMemoryUserRepository)
    assert database_status() == "in-memory"


def test_development_wires_postgres_without_connecting(monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")
    get_settings.cache_clear()

    assert get_settings().is_test() is False
    assert isinstance(get_catalog_repository(), PostgresCatalogRepository)
    assert get_db_pool().is_open is False
