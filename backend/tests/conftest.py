# backend/tests/conftest.py
"""
Fixtures compartidas de la suite.

Por defecto cada test usa un fichero SQLite temporal (aiosqlite) con las
foreign keys activadas. Con TEST_DATABASE_URL apuntando a PostgreSQL la suite
corre contra esa base de datos, recreando el esquema en cada test.
"""

import os

# Hashes baratos en los tests; debe fijarse antes de importar storefront
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine

from storefront.db.init_db import create_schema

from factories import make_session_factory

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


def sqlite_engine(path, begin_statement: str = "BEGIN"):
    """
    Motor aiosqlite que gestiona él mismo el BEGIN de cada transacción.

    Con begin_statement="BEGIN IMMEDIATE" cada transacción toma el bloqueo de
    escritura al empezar, de modo que dos transacciones concurrentes se
    ejecutan una detrás de otra, igual que con FOR UPDATE en PostgreSQL.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", connect_args={"timeout": 30})

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql(begin_statement)

    return engine


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "storefront_test.db"


@pytest.fixture
async def engine(db_path):
    if TEST_DATABASE_URL:
        test_engine = create_async_engine(TEST_DATABASE_URL)
    else:
        test_engine = sqlite_engine(db_path)
    await create_schema(test_engine, reset=True)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def concurrent_engine(engine, db_path):
    """Motor para lanzar transacciones en paralelo sobre la misma base de datos."""
    if TEST_DATABASE_URL:
        yield engine
        return
    immediate_engine = sqlite_engine(db_path, begin_statement="BEGIN IMMEDIATE")
    yield immediate_engine
    await immediate_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session
