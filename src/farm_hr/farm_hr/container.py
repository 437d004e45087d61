from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .attendance.sweep import DailySweep
from .database.connection import DBConfig, DatabaseConnection
from .milk.mysql_milk_repository import MySQLMilkRepository
from .milk.service import MilkService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.service import ReportService
from .summaries.mysql_summary_repository import MySQLSummaryRepository
from .summaries.service import SummaryService
from .summaries.summarizer import Summarizer
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService
from .workoff.mysql_workoff_repository import MySQLWorkOffRepository
from .workoff.service import WorkOffService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    workoff_service: WorkOffService
    daily_sweep: DailySweep
    report_service: ReportService
    summary_service: SummaryService
    milk_service: MilkService


def build_services(
    *,
    users_repo,
    attendance_repo,
    workoff_repo,
    reports_repo,
    summaries_repo,
    milk_repo,
    summarizer: Summarizer,
) -> Container:
    """Wire services on top of any repository implementations (MySQL or in-memory)."""
    attendance_service = AttendanceService(attendance_repo, users_repo)
    workoff_service = WorkOffService(workoff_repo)

    return Container(
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        attendance_service=attendance_service,
        workoff_service=workoff_service,
        daily_sweep=DailySweep(attendance_service, workoff_service),
        report_service=ReportService(reports_repo),
        summary_service=SummaryService(summaries_repo, reports_repo, summarizer),
        milk_service=MilkService(milk_repo, users_repo),
    )


def build_container(*, db_config: dict, summarizer: Summarizer) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        workoff_repo=MySQLWorkOffRepository(conn),
        reports_repo=MySQLReportRepository(conn),
        summaries_repo=MySQLSummaryRepository(conn),
        milk_repo=MySQLMilkRepository(conn),
        summarizer=summarizer,
    )
