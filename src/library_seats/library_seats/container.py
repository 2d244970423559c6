from __future__ import annotations

from dataclasses import dataclass

from .catalog.service import CatalogService
from .core.constants import DEFAULT_EXPIRING_SOON_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .database.unit_of_work import MySQLUnitOfWork, UnitOfWork
from .stats.mysql_stats_repository import MySQLStatsRepository
from .stats.repository import StatsRepository
from .stats.service import StatsService
from .students.service import MembershipService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    uow: UnitOfWork
    users_repo: UserRepository
    stats_repo: StatsRepository

    auth_service: AuthService
    membership_service: MembershipService
    catalog_service: CatalogService
    stats_service: StatsService


def build_container(*, db_config: dict, expiring_soon_days: int = DEFAULT_EXPIRING_SOON_DAYS) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    uow = MySQLUnitOfWork(conn)
    users_repo = MySQLUserRepository(conn)
    stats_repo = MySQLStatsRepository(conn)

    return Container(
        uow=uow,
        users_repo=users_repo,
        stats_repo=stats_repo,
        auth_service=AuthService(users_repo),
        membership_service=MembershipService(uow, expiring_soon_days=expiring_soon_days),
        catalog_service=CatalogService(uow),
        stats_service=StatsService(stats_repo),
    )
