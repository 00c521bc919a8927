from collections.abc import Iterator
import logging

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool
import structlog

from db_resource_provider.config import Settings, get_settings
from db_resource_provider.facade import ResourceDataFactory

ROOT = "/x/"


def make_engine() -> Engine:
    """In-memory SQLite engine that can be shared between threads."""
    return create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration around each test."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = make_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def connection(engine) -> Iterator[Connection]:
    with engine.connect() as connection:
        yield connection


@pytest.fixture
def data_factory(connection) -> ResourceDataFactory:
    return ResourceDataFactory(connection, ROOT)


@pytest.fixture
def settings() -> Settings:
    return Settings(datasource_name="accounts-db", root_path=ROOT)


@pytest.fixture
def engine_maker() -> Iterator:
    """Create extra in-memory engines, disposed after the test."""
    created: list[Engine] = []

    def _make() -> Engine:
        engine = make_engine()
        created.append(engine)
        return engine

    yield _make
    for engine in created:
        engine.dispose()
