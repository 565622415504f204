from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from .connection import DatabaseConnection
from .mysql_base import db_cursor

_logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

_DB_SELECTION = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")


def _strip_create_db_and_use(sql: str) -> str:
    # The configured database name wins over the one written in schema.sql.
    return _DB_SELECTION.sub("", sql)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Yield the statements of a script.

    Lines starting with '--' are dropped; ';' ends a statement unless it sits
    inside a quoted string.
    """
    body = "\n".join(ln for ln in sql.splitlines() if not ln.lstrip().startswith("--"))
    quote = None
    escaped = False
    start = 0
    for i, ch in enumerate(body):
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = body[start:i].strip()
            start = i + 1
            if stmt:
                yield stmt
    tail = body[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        cur.close()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path = SCHEMA_PATH) -> int:
    """Create the clock_events and day_schedules tables if missing. Returns the statement count."""
    ensure_database_exists(conn_factory)
    statements = list(iter_sql_statements(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))))

    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)

    _logger.info("Schema applied to %s (%d statements)", conn_factory.config.database, len(statements))
    return len(statements)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
