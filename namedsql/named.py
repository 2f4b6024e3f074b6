"""Named parameter binding on SQLAlchemy text() constructs.

    stmt = named("SELECT * FROM users WHERE team = :team AND id IN (:ids)",
                 {"team": "core", "ids": [1, 2, 3]})
    render(stmt, sqlite_dialect)
    -> BoundQuery(sql="SELECT * FROM users WHERE team = ? AND id IN (?, ?, ?)",
                  args=["core", 1, 2, 3], ...)
"""

import dataclasses
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Dialect
from sqlalchemy.sql.elements import TextClause

from .errors import BindError

_MISSING = object()


@dataclass
class BoundQuery:
    """A statement with its values bound, rendered for one dialect.

    args is a list in placeholder order for positional paramstyles
    (qmark, format, numeric) and a dict for named ones (pyformat, named).
    """
    sql: str
    args: Union[list, dict]
    statement: TextClause


def _is_namedtuple(obj) -> bool:
    return isinstance(obj, tuple) and hasattr(obj, "_fields")


def source_values(params) -> Mapping:
    """Flatten a parameter source into a name -> value mapping.

    Mappings are used as is; dataclass fields are keyed by their
    metadata "db" alias or field name; namedtuples by field name.
    """
    if isinstance(params, Mapping):
        return params
    if dataclasses.is_dataclass(params) and not isinstance(params, type):
        return {f.metadata.get("db", f.name): getattr(params, f.name) for f in dataclasses.fields(params)}
    if _is_namedtuple(params):
        return params._asdict()
    raise BindError(
        f"unsupported parameter source {type(params).__name__}; "
        "expected a mapping, dataclass or namedtuple"
    )


def placeholder_names(query: str) -> list[str]:
    """Names of the `:name` placeholders SQLAlchemy finds in query."""
    return list(text(query).compile().binds)


def _unwrap_in_list(query: str, name: str) -> str:
    # expanding parameters render their own parentheses: IN (:ids) -> IN :ids
    return re.sub(r"\(\s*:%s\s*\)" % re.escape(name), ":" + name, query)


def named(query: str, params) -> TextClause:
    """Build a text() statement with every placeholder bound from params.

    list and tuple values become expanding parameters, one placeholder
    per element.
    """
    values = source_values(params)
    binds = []
    for name in placeholder_names(query):
        value = values.get(name, _MISSING)
        if value is _MISSING:
            raise BindError(f"could not find name {name!r} in {type(params).__name__}")
        if isinstance(value, (list, tuple)):
            if not value:
                raise BindError(f"empty list passed to 'in' query for {name!r}")
            query = _unwrap_in_list(query, name)
            binds.append(bindparam(name, value=list(value), expanding=True))
        else:
            binds.append(bindparam(name, value=value))
    return text(query).bindparams(*binds)


def render(stmt: TextClause, dialect: Dialect) -> BoundQuery:
    """Compile stmt into the dialect's native placeholders with expanded lists."""
    compiled = stmt.compile(dialect=dialect, compile_kwargs={"render_postcompile": True})
    params = compiled.params
    if compiled.positional:
        args = [params[name] for name in compiled.positiontup]
    else:
        args = dict(params)
    return BoundQuery(sql=str(compiled), args=args, statement=stmt)
