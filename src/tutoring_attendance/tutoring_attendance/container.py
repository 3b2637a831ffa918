from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.classifier import AttendanceClassifier
from .attendance.factory import ClassificationStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .finance.aggregator import FinancialAggregator
from .finance.calculator.standard_calculator import StandardWageCalculator
from .finance.mysql_finance_repository import MySQLFinanceRepository
from .finance.repository import FinanceRepository
from .finance.service import WageService
from .policies.mysql_policy_repository import MySQLPolicyRepository
from .policies.repository import PolicyRepository
from .policies.resolver import PolicyResolver
from .policies.service import PolicyService
from .reports.assembler import ReportAssembler
from .reports.rollup import RollupAggregator
from .reports.service import ReportService
from .schools.mysql_school_repository import MySQLSchoolDirectory
from .schools.repository import SchoolDirectory


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    policies_repo: PolicyRepository
    school_directory: SchoolDirectory
    attendance_repo: AttendanceRepository
    finance_repo: FinanceRepository

    policy_resolver: PolicyResolver
    policy_service: PolicyService
    attendance_service: AttendanceService
    wage_service: WageService
    report_service: ReportService


def wire(
    *,
    policies_repo: PolicyRepository,
    school_directory: SchoolDirectory,
    attendance_repo: AttendanceRepository,
    finance_repo: FinanceRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Assemble services over any set of repositories (MySQL or in-memory)."""

    resolver = PolicyResolver(policies_repo, school_directory)
    policy_service = PolicyService(policies_repo, school_directory, resolver)
    attendance_service = AttendanceService(
        attendance_repo,
        school_directory,
        resolver,
        classifier=AttendanceClassifier(ClassificationStrategyFactory()),
    )
    wage_service = WageService(finance_repo, calculator=StandardWageCalculator())
    report_service = ReportService(
        attendance_repo,
        finance_repo,
        RollupAggregator(resolver),
        financial=FinancialAggregator(),
        assembler=ReportAssembler(),
    )

    return Container(
        conn=conn,
        policies_repo=policies_repo,
        school_directory=school_directory,
        attendance_repo=attendance_repo,
        finance_repo=finance_repo,
        policy_resolver=resolver,
        policy_service=policy_service,
        attendance_service=attendance_service,
        wage_service=wage_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return wire(
        conn=conn,
        policies_repo=MySQLPolicyRepository(conn),
        school_directory=MySQLSchoolDirectory(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        finance_repo=MySQLFinanceRepository(conn),
    )
