from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, rows, time_from_mysql, time_to_mysql
from .model import DaySchedule, WeeklySchedule
from .repository import WeeklyScheduleRepository


class MySQLWeeklyScheduleRepository(WeeklyScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee(self, employee_id: str) -> Optional[WeeklySchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT day_of_week, is_work_day, start_time, end_time, break_start, break_end, tolerance_minutes
                FROM day_schedules
                WHERE employee_id=%s
                ORDER BY day_of_week
                """,
                (employee_id,),
            )
            found = rows(cur)
            if not found:
                return None
            return WeeklySchedule(
                employee_id=employee_id,
                days=tuple(
                    DaySchedule(
                        day_of_week=int(r["day_of_week"]),
                        is_work_day=bool(r["is_work_day"]),
                        start_time=time_from_mysql(r.get("start_time")),
                        end_time=time_from_mysql(r.get("end_time")),
                        break_start=time_from_mysql(r.get("break_start")),
                        break_end=time_from_mysql(r.get("break_end")),
                        tolerance_minutes=int(r.get("tolerance_minutes") or 0),
                    )
                    for r in found
                ),
            )

    def save(self, schedule: WeeklySchedule) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM day_schedules WHERE employee_id=%s", (schedule.employee_id,))
            for d in schedule.days:
                cur.execute(
                    """
                    INSERT INTO day_schedules(employee_id, day_of_week, is_work_day, start_time, end_time,
                                              break_start, break_end, tolerance_minutes)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        schedule.employee_id,
                        int(d.day_of_week),
                        1 if d.is_work_day else 0,
                        time_to_mysql(d.start_time),
                        time_to_mysql(d.end_time),
                        time_to_mysql(d.break_start),
                        time_to_mysql(d.break_end),
                        int(d.tolerance_minutes),
                    ),
                )
