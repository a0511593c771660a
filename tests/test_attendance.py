from schemas.attendance import Attendance
from services.attendance import attendance_summary, latest_attendance, latest_status, sort_attendance

RECORDS = [
    Attendance(student_id="S1", date="2025-01-10", status="Present"),
    Attendance(student_id="S1", date="2025-01-12", status="Absent"),
    Attendance(student_id="S1", date="2025-01-11", status="Present"),
]


def test_sorted_newest_first():
    assert [r.date for r in sort_attendance(RECORDS)] == ["2025-01-12", "2025-01-11", "2025-01-10"]


def test_latest_status():
    assert latest_attendance(RECORDS).date == "2025-01-12"
    assert latest_status(RECORDS) == "Absent"


def test_no_records_is_unmarked():
    assert latest_attendance([]) is None
    assert latest_status([]) == "Unmarked"


def test_summary_counts_each_status():
    assert attendance_summary(RECORDS) == {"Present": 2, "Absent": 1}
