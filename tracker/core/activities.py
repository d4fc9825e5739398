"""
tracker/core/activities.py
Pure helpers over an activity list: id assignment, date projection, stats.
"""
import time
from datetime import date as date_type
from typing import Iterable, List, Optional

from tracker.api.schemas import Activity


def today() -> str:
    return date_type.today().isoformat()


def new_activity_id(existing: Iterable[str] = (), now_ms: Optional[int] = None) -> str:
    """Epoch-millisecond id, bumped forward until it is unused."""
    taken = set(existing)
    candidate = int(now_ms if now_ms is not None else time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def filter_by_date(activities: List[Activity], selected_date: str) -> List[Activity]:
    return [a for a in activities if a.date == selected_date]


def completion_rate(total: int, completed: int) -> int:
    if total == 0:
        return 0
    # Half rounds up
    return (200 * completed + total) // (2 * total)


def completion_stats(activities: List[Activity]) -> dict:
    total = len(activities)
    completed = sum(1 for a in activities if a.completed)
    return {
        "total": total,
        "completed": completed,
        "completion_rate": completion_rate(total, completed),
    }
