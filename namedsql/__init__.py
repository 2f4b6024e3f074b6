"""Named-parameter helpers over SQLAlchemy connections."""

from .connection import get_engine, open_db
from .context import Context
from .errors import (
    BindError,
    ContextCanceled,
    ContextDeadlineExceeded,
    ContextError,
    Error,
    NoRowsError,
    ScanError,
    TooManyRowsError,
)
from .ext import exec_for_rows, named_exec, named_get, named_select, safe_bind_named
from .named import BoundQuery, named, render

__all__ = [
    "get_engine", "open_db",
    "Context",
    "Error", "BindError", "NoRowsError", "TooManyRowsError", "ScanError",
    "ContextError", "ContextCanceled", "ContextDeadlineExceeded",
    "named_get", "named_select", "exec_for_rows", "named_exec", "safe_bind_named",
    "BoundQuery", "named", "render",
]
