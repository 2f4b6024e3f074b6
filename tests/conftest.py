"""Shared test fixtures for namedsql."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, text

from namedsql import Context


@pytest.fixture
def ctx():
    return Context.background()


@pytest.fixture
def engine():
    eng = create_engine("sqlite://")
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    """Connection to an in-memory sqlite database with a small users table."""
    with engine.connect() as conn:
        conn.execute(text("""
            CREATE TABLE users (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                team TEXT,
                active INTEGER NOT NULL DEFAULT 1
            )
        """))
        conn.execute(text("""
            INSERT INTO users (id, name, team) VALUES
                (1, 'ada', 'core'),
                (2, 'bob', 'web'),
                (3, 'cy', 'core'),
                (4, 'dee', 'ops')
        """))
        yield conn


@pytest.fixture
def mock_db():
    """Mock Connection whose driver connection exposes cancel()."""
    conn = MagicMock()
    conn.execute.return_value.returns_rows = True
    return conn
