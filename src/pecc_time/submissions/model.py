from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ContractorSubmission:
    """Hours a contractor reports for one of their workers on a project (obra)."""

    id: Optional[int]
    contractor_id: int
    employee_name: str
    cedula: str
    obra: str
    hours_worked: float
    daily_rate: float
    submission_date: datetime
