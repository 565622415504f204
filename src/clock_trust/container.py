from __future__ import annotations

from dataclasses import dataclass

from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLClockEventRepository
from .events.repository import ClockEventRepository
from .pipeline.locks import EmployeeLockRegistry
from .pipeline.service import ClockEventPipeline
from .pipeline.settings import PipelineSettings
from .schedules.mysql_schedule_repository import MySQLWeeklyScheduleRepository
from .schedules.repository import WeeklyScheduleRepository


@dataclass(frozen=True)
class Container:
    events_repo: ClockEventRepository
    schedules_repo: WeeklyScheduleRepository
    pipeline: ClockEventPipeline
    conn: DatabaseConnection | None = None


def build_container(
    *,
    events_repo: ClockEventRepository,
    schedules_repo: WeeklyScheduleRepository,
    settings: PipelineSettings,
    conn: DatabaseConnection | None = None,
) -> Container:
    pipeline = ClockEventPipeline(events_repo, schedules_repo, settings=settings, locks=EmployeeLockRegistry())
    return Container(events_repo=events_repo, schedules_repo=schedules_repo, pipeline=pipeline, conn=conn)


def build_mysql_container(*, db_config: dict, settings: PipelineSettings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_container(
        events_repo=MySQLClockEventRepository(conn),
        schedules_repo=MySQLWeeklyScheduleRepository(conn),
        settings=settings,
        conn=conn,
    )
