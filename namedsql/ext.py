"""Named-parameter query helpers.

All helpers take a SQLAlchemy Connection, a query with `:name`
placeholders and an optional parameter source (mapping, dataclass or
namedtuple; None means no parameters).

    ctx = Context.background()
    user = named_get(ctx, conn, User, "SELECT * FROM users WHERE id = :id", {"id": 7})
    ids = named_select(ctx, conn, int, "SELECT id FROM users WHERE team IN (:teams)",
                       {"teams": ["a", "b"]})
    exec_for_rows(ctx, conn, None, "UPDATE users SET active = :active", {"active": False})
"""

import logging
from typing import Optional

from sqlalchemy.engine import Connection

from . import executor
from .context import Context
from .named import BoundQuery, named, render

logger = logging.getLogger(__name__)


def safe_bind_named(db: Connection, query: str, params=None) -> BoundQuery:
    """Bind a named query for db's dialect. params may be None."""
    if params is None:
        params = {}
    # :name -> bound parameters, list values expanding
    stmt = named(query, params)
    # dialect placeholders (?, %(name)s, $1 ...) with lists expanded
    bound = render(stmt, db.dialect)
    logger.debug("Bound query: %s (%d args)", bound.sql, len(bound.args))
    return bound


def named_get(ctx: Context, db: Connection, dest, query: str, params=None):
    """Fetch exactly one row and return it scanned into dest.

    Unlike named_select, dest is required. Raises NoRowsError on an empty
    result and TooManyRowsError when more than one row matches.
    """
    bound = safe_bind_named(db, query, params)
    return executor.get(ctx, db, dest, bound.statement)


def named_select(ctx: Context, db: Connection, dest, query: str, params=None) -> Optional[list]:
    """Fetch all rows scanned into dest.

    With dest None the rows are read and discarded and None is returned, so
    the call works like named_exec for INSERT/UPDATE/DELETE.
    """
    bound = safe_bind_named(db, query, params)
    if dest is None:
        executor.select(ctx, db, tuple, bound.statement)
        return None
    return executor.select(ctx, db, dest, bound.statement)


def exec_for_rows(ctx: Context, db: Connection, dest, query: str, params=None) -> Optional[list]:
    """Execute a statement and return its rows scanned into dest.

    Same as named_select; use it when running the statement is the point and
    the returned rows are either wanted or explicitly discarded (dest None).
    """
    return named_select(ctx, db, dest, query, params)


def named_exec(ctx: Context, db: Connection, query: str, params=None) -> int:
    """Execute a named statement and return the affected row count."""
    bound = safe_bind_named(db, query, params)
    return executor.execute(ctx, db, bound.statement)
