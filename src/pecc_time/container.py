from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .submissions.mysql_submission_repository import MySQLSubmissionRepository
from .submissions.repository import SubmissionRepository
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    time_entries_repo: TimeEntryRepository
    submissions_repo: SubmissionRepository

    conn: Optional[DatabaseConnection] = None


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return Container(
        users_repo=MySQLUserRepository(conn),
        time_entries_repo=MySQLTimeEntryRepository(conn),
        submissions_repo=MySQLSubmissionRepository(conn),
        conn=conn,
    )
