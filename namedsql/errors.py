"""Exceptions raised by the named-query helpers.

Driver errors (psycopg2.Error, sqlite3.Error, ...) are never wrapped; they
reach the caller unchanged.
"""


class Error(Exception):
    """Base class for namedsql errors."""


class BindError(Error, ValueError):
    """Named-parameter substitution or list expansion failed."""


class NoRowsError(Error, LookupError):
    """A single-row fetch matched zero rows."""

    def __init__(self, message="no rows in result set"):
        super().__init__(message)


class TooManyRowsError(Error):
    """A single-row fetch matched more than one row."""

    def __init__(self, message="expected one row, got more"):
        super().__init__(message)


class ScanError(Error, TypeError):
    """Result columns could not be written into the destination shape."""


class ContextError(Error):
    """The execution context ended before the call completed."""


class ContextCanceled(ContextError):
    def __init__(self, message="context canceled"):
        super().__init__(message)


class ContextDeadlineExceeded(ContextError, TimeoutError):
    def __init__(self, message="context deadline exceeded"):
        super().__init__(message)
