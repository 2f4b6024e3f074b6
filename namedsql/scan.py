"""Mapping SQLAlchemy rows into destination row types.

- dataclass class:  columns map to fields (field metadata "db" renames)
- namedtuple class: columns map to fields
- dict:             {column: value}
- tuple:            raw values in column order
- anything else:    scalar; the row must have exactly one column
"""

import dataclasses

from .errors import ScanError


def _scan_record(dest, mapping, names):
    unknown = [col for col in mapping if col not in names]
    if unknown:
        raise ScanError(f"missing destination name {unknown[0]!r} in {dest.__name__}")
    try:
        return dest(**{names[col]: value for col, value in mapping.items()})
    except TypeError as e:
        raise ScanError(f"cannot scan into {dest.__name__}: {e}") from e


def _scan_scalar(dest, row):
    name = getattr(dest, "__name__", repr(dest))
    if len(row) != 1:
        raise ScanError(f"scannable dest type {name} with {len(row)} columns, expected 1")
    value = row[0]
    if isinstance(dest, type) and isinstance(value, dest):
        return value
    if value is None:
        raise ScanError(f"converting NULL to {name} is unsupported")
    try:
        return dest(value)
    except (TypeError, ValueError) as e:
        raise ScanError(f"converting {value!r} to {name}: {e}") from e


def scan_row(dest, row):
    """Build one dest value from a sqlalchemy Row."""
    if dest is None:
        raise ScanError("nil destination; pass a row type to scan into")

    if dataclasses.is_dataclass(dest) and isinstance(dest, type):
        names = {f.metadata.get("db", f.name): f.name for f in dataclasses.fields(dest) if f.init}
        return _scan_record(dest, row._mapping, names)
    if isinstance(dest, type) and issubclass(dest, tuple) and hasattr(dest, "_fields"):
        return _scan_record(dest, row._mapping, {f: f for f in dest._fields})
    if dest is dict:
        return dict(row._mapping)
    if dest is tuple:
        return tuple(row)
    return _scan_scalar(dest, row)


def scan_all(dest, rows) -> list:
    return [scan_row(dest, row) for row in rows]
