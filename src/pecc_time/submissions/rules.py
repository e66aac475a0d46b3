from __future__ import annotations

from typing import Iterable

from ..common.validators import require_non_empty, require_non_negative
from ..core.constants import STANDARD_WORKDAY_HOURS
from .model import ContractorSubmission


def contractor_cost(submission: ContractorSubmission) -> float:
    """Cost of a submission: the daily rate prorated over a fixed workday."""
    return submission.hours_worked * submission.daily_rate / STANDARD_WORKDAY_HOURS


def total_contractor_cost(submissions: Iterable[ContractorSubmission]) -> float:
    return sum(contractor_cost(s) for s in submissions)


def submissions_for_contractor(submissions: Iterable[ContractorSubmission], contractor_id: int) -> list[ContractorSubmission]:
    mine = [s for s in submissions if s.contractor_id == contractor_id]
    mine.sort(key=lambda s: s.submission_date, reverse=True)
    return mine


def validate_submission(submission: ContractorSubmission) -> ContractorSubmission:
    require_non_empty(submission.employee_name, "Employee name")
    require_non_empty(submission.cedula, "Cedula")
    require_non_empty(submission.obra, "Obra")
    require_non_negative(submission.hours_worked, "Hours worked")
    require_non_negative(submission.daily_rate, "Daily rate")
    return submission
