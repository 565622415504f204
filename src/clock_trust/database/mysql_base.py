from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, time, timedelta
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..common.datetime_utils import to_naive_utc
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One unit of work: yields (connection, cursor), commits on a clean exit.

    Any exception rolls the transaction back and propagates to the caller.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def rows(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def first_row(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def datetime_to_mysql(value: datetime) -> datetime:
    # DATETIME columns carry no zone; clock events are stored as naive UTC.
    return to_naive_utc(value)


def time_from_mysql(value: Any) -> Optional[time]:
    """TIME columns come back as timedelta from the pure-Python connector, as time or str elsewhere."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)
    if isinstance(value, str):
        hh, mm, *rest = value.strip().split(":")
        return time(int(hh), int(mm), int(rest[0]) if rest and rest[0] else 0)
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def time_to_mysql(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M:%S") if value is not None else None


def float_or_none(value: Any) -> Optional[float]:
    # DOUBLE columns arrive as float, DECIMAL ones as Decimal
    return float(value) if value is not None else None
