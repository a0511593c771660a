from collections import Counter
from typing import Dict, Iterable, List, Optional

from config.settings import settings
from schemas.attendance import Attendance


def sort_attendance(records: Iterable[Attendance]) -> List[Attendance]:
    # ISO dates sort correctly as text; newest first
    return sorted(records, key=lambda r: r.date, reverse=True)


def latest_attendance(records: Iterable[Attendance]) -> Optional[Attendance]:
    ordered = sort_attendance(records)
    return ordered[0] if ordered else None


def latest_status(records: Iterable[Attendance]) -> str:
    latest = latest_attendance(records)
    if latest is None or not latest.status:
        return settings.UNMARKED_STATUS
    return latest.status


def attendance_summary(records: Iterable[Attendance]) -> Dict[str, int]:
    return dict(Counter(r.status or settings.UNMARKED_STATUS for r in records))
