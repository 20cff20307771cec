"""
Shared pytest fixtures for entityspine tests.

This module provides:
- Settings and logging isolation between tests
- An in-memory SQLite driver
- A ready ``Repository`` for :class:`entities.BlogPost`
"""

from __future__ import annotations

import logging
import os
from collections.abc import Generator

import pytest
import structlog

from entities import BlogPost
from entityspine.drivers import SqliteDriver
from entityspine.logging import HANDLER_NAME
from entityspine.repository import Repository
from entityspine.settings import _settings_cache


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop ENTITYSPINE_* variables, cached settings and logging handlers around every test."""
    for name in list(os.environ):
        if name.startswith("ENTITYSPINE_"):
            monkeypatch.delenv(name)
    _settings_cache.clear()
    root = logging.getLogger()
    root_level = root.level
    yield
    _settings_cache.clear()
    structlog.reset_defaults()
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
    root.setLevel(root_level)


@pytest.fixture
def driver() -> Generator[SqliteDriver, None, None]:
    sqlite = SqliteDriver(":memory:")
    yield sqlite
    sqlite.close()


@pytest.fixture
def posts(driver: SqliteDriver) -> Repository[BlogPost]:
    repo = Repository(driver, BlogPost)
    repo.create_schema()
    return repo
