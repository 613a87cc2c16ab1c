from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .aggregation.service import HoursAggregationService
from .bonus.mysql_bonus_repository import MySQLBonusRepository
from .bonus.service import BonusService
from .core.constants import DEFAULT_TARGET_HOURS
from .core.enums import RecordSource
from .database.connection import DBConfig, DatabaseConnection
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .reconciliation.service import ReconciliationService
from .targets.mysql_target_repository import MySQLTargetHoursRepository
from .targets.service import TargetHoursService
from .worktime.mysql_worktime_repository import MySQLWorkTimeRepository
from .worktime.service import WorkTimeService
from .worktime.validator import SubmissionValidator


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    profiles_repo: MySQLProfileRepository
    worktime_repo: MySQLWorkTimeRepository
    bonus_repo: MySQLBonusRepository
    targets_repo: MySQLTargetHoursRepository

    worktime_service: WorkTimeService
    reconciliation_service: ReconciliationService
    aggregation_service: HoursAggregationService
    bonus_service: BonusService
    target_hours_service: TargetHoursService


def build_container(
    *,
    db_config: dict,
    default_target_hours: Decimal = DEFAULT_TARGET_HOURS,
    completion_source: RecordSource = RecordSource.SELF,
) -> Container:
    conn = DatabaseConnection.for_config(DBConfig.from_mapping(db_config))

    profiles_repo = MySQLProfileRepository(conn)
    worktime_repo = MySQLWorkTimeRepository(conn)
    bonus_repo = MySQLBonusRepository(conn)
    targets_repo = MySQLTargetHoursRepository(conn)

    reconciliation_service = ReconciliationService(worktime_repo)
    worktime_service = WorkTimeService(
        worktime_repo,
        profiles_repo,
        validator=SubmissionValidator(worktime_repo, profiles_repo),
        reconciliation=reconciliation_service,
    )
    aggregation_service = HoursAggregationService(worktime_repo, completion_source=completion_source)
    bonus_service = BonusService(bonus_repo, profiles_repo, aggregation_service)
    target_hours_service = TargetHoursService(
        targets_repo,
        profiles_repo,
        aggregation_service,
        default_target=default_target_hours,
    )

    return Container(
        conn=conn,
        profiles_repo=profiles_repo,
        worktime_repo=worktime_repo,
        bonus_repo=bonus_repo,
        targets_repo=targets_repo,
        worktime_service=worktime_service,
        reconciliation_service=reconciliation_service,
        aggregation_service=aggregation_service,
        bonus_service=bonus_service,
        target_hours_service=target_hours_service,
    )
