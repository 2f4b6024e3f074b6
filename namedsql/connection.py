"""Engine and connection factory configured from DATABASE_URL."""

import os
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool


def get_engine(database_url: Optional[str] = None) -> Engine:
    """Create an engine; database_url defaults to the DATABASE_URL environment variable.

    postgresql:// URLs use the psycopg2 driver. Connections are not pooled.
    """
    database_url = database_url or os.environ.get("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL must be set")
    return create_engine(database_url, poolclass=NullPool)


@contextmanager
def open_db(database_url: Optional[str] = None):
    """Context manager yielding an autocommit Connection; always closed and disposed."""
    engine = get_engine(database_url)
    try:
        with engine.connect() as conn:
            yield conn.execution_options(isolation_level="AUTOCOMMIT")
    finally:
        engine.dispose()
