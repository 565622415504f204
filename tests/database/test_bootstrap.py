from datetime import datetime, time, timedelta

from clock_trust.core.enums import EventType
from clock_trust.database.bootstrap import SCHEMA_PATH, _strip_create_db_and_use, iter_sql_statements
from clock_trust.database.mysql_base import time_from_mysql, time_to_mysql
from clock_trust.events.mysql_event_repository import _row_to_event


def test_schema_splits_into_table_statements():
    sql = _strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))

    assert len(statements) == 2
    assert statements[0].startswith("CREATE TABLE IF NOT EXISTS clock_events")
    assert statements[1].startswith("CREATE TABLE IF NOT EXISTS day_schedules")


def test_semicolons_inside_quotes_do_not_split():
    statements = list(iter_sql_statements("INSERT INTO t VALUES('a;b');\n-- note; here\nSELECT 1;"))

    assert statements == ["INSERT INTO t VALUES('a;b')", "SELECT 1"]


def test_time_from_mysql():
    assert time_from_mysql(timedelta(hours=8, minutes=30)) == time(8, 30)
    assert time_from_mysql("17:05") == time(17, 5)
    assert time_from_mysql(time(12, 0)) == time(12, 0)
    assert time_from_mysql(None) is None
    assert time_to_mysql(time(8, 5)) == "08:05:00"


def test_row_to_event_restores_bundle():
    row = {
        "event_id": "abc",
        "employee_id": "E1",
        "company_id": "C1",
        "user_id": "U1",
        "event_type": "ENTRY",
        "event_timestamp": datetime(2025, 1, 6, 8, 5),
        "latitude": 10.5,
        "longitude": None,
        "integrity_hash": "h",
        "integrity_salt": "s",
        "integrity_signature": "sig",
        "integrity_timestamp": "2025-01-06T08:05:00.000",
        "integrity_version": "1.0",
        "integrity_algorithm": "SHA256",
        "integrity_fields": "type,user_id,employee_id,company_id,timestamp",
        "integrity_checksum": "c",
    }
    event = _row_to_event(row)

    assert event.id == "abc"
    assert event.type == EventType.ENTRY
    assert event.longitude is None
    assert event.integrity_bundle.included_fields == ("type", "user_id", "employee_id", "company_id", "timestamp")

    unsealed = _row_to_event({**row, "integrity_hash": None})
    assert unsealed.integrity_bundle is None
