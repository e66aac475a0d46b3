from __future__ import annotations

import dataclasses
from typing import Any, Sequence

from ..common.datetime_utils import to_utc_naive
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_datetime, normalize_mysql_decimal
from .model import ContractorSubmission
from .repository import SubmissionRepository


def _row_to_submission(row: dict[str, Any]) -> ContractorSubmission:
    return ContractorSubmission(
        id=int(row["id"]),
        contractor_id=int(row["contractor_id"]),
        employee_name=row["employee_name"],
        cedula=row["cedula"],
        obra=row["obra"],
        hours_worked=normalize_mysql_decimal(row["hours_worked"]),
        daily_rate=normalize_mysql_decimal(row["daily_rate"]),
        submission_date=normalize_mysql_datetime(row["submission_date"]),
    )


class MySQLSubmissionRepository(SubmissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ContractorSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, contractor_id, employee_name, cedula, obra,
                       hours_worked, daily_rate, submission_date
                FROM contractor_submissions
                ORDER BY submission_date, id
                """
            )
            return [_row_to_submission(r) for r in fetchall(cur)]

    def create(self, submission: ContractorSubmission) -> ContractorSubmission:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO contractor_submissions(
                    contractor_id, employee_name, cedula, obra, hours_worked, daily_rate, submission_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(submission.contractor_id),
                    submission.employee_name,
                    submission.cedula,
                    submission.obra,
                    float(submission.hours_worked),
                    float(submission.daily_rate),
                    to_utc_naive(submission.submission_date),
                ),
            )
            return dataclasses.replace(submission, id=int(cur.lastrowid))
