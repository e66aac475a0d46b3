from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..submissions.model import ContractorSubmission
from ..submissions.rules import contractor_cost, total_contractor_cost
from ..time_entries.model import TimeEntry
from ..time_entries.rules import duration_hours, total_hours, total_overtime


@dataclass(frozen=True)
class DashboardSummary:
    total_hours: float
    total_overtime: float
    total_contractor_cost: float
    per_user: list[dict]
    per_obra: list[dict]


class SummaryService:
    """Aggregates shown on the admin dashboard."""

    def build_summary(
        self,
        *,
        time_entries: Iterable[TimeEntry],
        submissions: Iterable[ContractorSubmission],
    ) -> DashboardSummary:
        entries = list(time_entries)
        subs = list(submissions)

        per_user_map: dict[int, dict] = {}
        for e in entries:
            s = per_user_map.get(e.user_id)
            if not s:
                s = {
                    "user_id": e.user_id,
                    "user_name": e.user_name,
                    "total_hours": 0.0,
                    "overtime_hours": 0.0,
                    "open_entries": 0,
                }
                per_user_map[e.user_id] = s
            hours = duration_hours(e)
            if hours is None:
                s["open_entries"] += 1
            else:
                s["total_hours"] += hours
            s["overtime_hours"] += e.overtime_hours or 0.0

        per_obra_map: dict[str, dict] = {}
        for sub in subs:
            o = per_obra_map.setdefault(sub.obra, {"obra": sub.obra, "hours_worked": 0.0, "cost": 0.0})
            o["hours_worked"] += sub.hours_worked
            o["cost"] += contractor_cost(sub)

        per_user = sorted(per_user_map.values(), key=lambda x: x["total_hours"], reverse=True)
        per_obra = sorted(per_obra_map.values(), key=lambda x: x["cost"], reverse=True)

        return DashboardSummary(
            total_hours=total_hours(entries),
            total_overtime=total_overtime(entries),
            total_contractor_cost=total_contractor_cost(subs),
            per_user=per_user,
            per_obra=per_obra,
        )
