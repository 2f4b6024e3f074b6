"""Context-aware execution on a SQLAlchemy Connection.

The Connection is caller-owned: nothing here commits, rolls back, pools or
retries. While a statement runs, the context is watched and the driver
connection is asked to abort it (psycopg2 cancel(), sqlite3 interrupt()).
"""

import logging
from contextlib import contextmanager

from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError, MultipleResultsFound, NoResultFound

from .context import Context
from .errors import NoRowsError, TooManyRowsError
from .scan import scan_all, scan_row

logger = logging.getLogger(__name__)


def _interrupter(db: Connection):
    raw = db.connection.dbapi_connection

    def interrupt():
        abort = getattr(raw, "cancel", None) or getattr(raw, "interrupt", None)
        if abort is None:
            logger.warning("Context ended but %s cannot cancel statements", type(raw).__name__)
            return
        try:
            abort()
        except Exception as e:
            logger.warning("Failed to cancel in-flight statement: %s", e)

    return interrupt


@contextmanager
def _guarded(ctx: Context, db: Connection):
    """Run the block under ctx; driver errors after ctx ended become ctx errors."""
    ctx.raise_if_done()
    with ctx.watch(_interrupter(db)):
        try:
            yield
        except DBAPIError as e:
            err = ctx.err()
            if err is not None:
                raise err from e
            raise


def get(ctx: Context, db: Connection, dest, stmt):
    """Execute stmt expecting exactly one row and scan it into dest."""
    with _guarded(ctx, db):
        result = db.execute(stmt)
        if not result.returns_rows:
            raise NoRowsError()
        try:
            row = result.one()
        except NoResultFound as e:
            raise NoRowsError() from e
        except MultipleResultsFound as e:
            raise TooManyRowsError() from e
    return scan_row(dest, row)


def select(ctx: Context, db: Connection, dest, stmt) -> list:
    """Execute stmt and scan every row into dest."""
    with _guarded(ctx, db):
        result = db.execute(stmt)
        rows = result.all() if result.returns_rows else []
    logger.debug("Fetched %d rows", len(rows))
    return scan_all(dest, rows)


def execute(ctx: Context, db: Connection, stmt) -> int:
    """Execute stmt and return the affected row count."""
    with _guarded(ctx, db):
        return db.execute(stmt).rowcount
