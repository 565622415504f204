from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EventType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import datetime_to_mysql, db_cursor, first_row, float_or_none, rows
from .model import ClockEvent, IntegrityBundle
from .repository import ClockEventRepository

_COLUMNS = """
    event_id, employee_id, company_id, user_id, event_type, event_timestamp,
    latitude, longitude, ip_address, device_descriptor, photo_ref, nfc_tag,
    integrity_hash, integrity_salt, integrity_signature, integrity_timestamp,
    integrity_version, integrity_algorithm, integrity_fields, integrity_checksum
"""


def _row_to_event(r: dict) -> ClockEvent:
    bundle = None
    if r.get("integrity_hash"):
        bundle = IntegrityBundle(
            hash=r["integrity_hash"],
            salt=r["integrity_salt"],
            signature=r["integrity_signature"],
            timestamp=r["integrity_timestamp"],
            version=r["integrity_version"],
            algorithm=r.get("integrity_algorithm") or "SHA256",
            included_fields=tuple(f for f in (r.get("integrity_fields") or "").split(",") if f),
            checksum=r["integrity_checksum"],
        )
    return ClockEvent(
        id=str(r["event_id"]),
        employee_id=str(r["employee_id"]),
        company_id=str(r["company_id"]),
        user_id=str(r["user_id"]),
        type=EventType(r["event_type"]),
        timestamp=r["event_timestamp"],
        latitude=float_or_none(r.get("latitude")),
        longitude=float_or_none(r.get("longitude")),
        ip_address=r.get("ip_address"),
        device_descriptor=r.get("device_descriptor"),
        photo_ref=r.get("photo_ref"),
        nfc_tag=r.get("nfc_tag"),
        integrity_bundle=bundle,
    )


class MySQLClockEventRepository(ClockEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee_since(self, employee_id: str, since: datetime) -> Sequence[ClockEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM clock_events
                WHERE employee_id=%s AND event_timestamp >= %s
                ORDER BY event_timestamp ASC
                """,
                (employee_id, since),
            )
            return [_row_to_event(r) for r in rows(cur)]

    def get_by_id(self, event_id: str) -> Optional[ClockEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM clock_events WHERE event_id=%s", (event_id,))
            r = first_row(cur)
            return _row_to_event(r) if r else None

    def create(self, event: ClockEvent) -> str:
        event_id = event.id or uuid.uuid4().hex
        b = event.integrity_bundle
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO clock_events({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    event_id,
                    event.employee_id,
                    event.company_id,
                    event.user_id,
                    event.type.value,
                    datetime_to_mysql(event.timestamp),
                    event.latitude,
                    event.longitude,
                    event.ip_address,
                    event.device_descriptor,
                    event.photo_ref,
                    event.nfc_tag,
                    b.hash if b else None,
                    b.salt if b else None,
                    b.signature if b else None,
                    b.timestamp if b else None,
                    b.version if b else None,
                    b.algorithm if b else None,
                    ",".join(b.included_fields) if b else None,
                    b.checksum if b else None,
                ),
            )
        return event_id
