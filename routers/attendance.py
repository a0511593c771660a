from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from models.attendance import PupilAttendance as AttendanceModel
from schemas.attendance import Attendance as AttendanceSchema, AttendanceCreate
from services.attendance import attendance_summary, latest_status, sort_attendance

router = APIRouter(prefix="/attendance", tags=["attendance"])


def _records(db: Session, student_id: str, school_id: str, academic_year: str):
    rows = (
        db.query(AttendanceModel)
        .filter(AttendanceModel.student_id == student_id)
        .filter(AttendanceModel.school_id == school_id)
        .filter(AttendanceModel.academic_year == academic_year)
        .all()
    )
    return [AttendanceSchema.model_validate(r) for r in rows]


# ✅ [MARK] one pupil, one day (re-marking the same day overwrites)
@router.post("/", status_code=201)
def mark_attendance(mark: AttendanceCreate, db: Session = Depends(get_db)):
    record = (
        db.query(AttendanceModel)
        .filter(AttendanceModel.student_id == mark.student_id)
        .filter(AttendanceModel.school_id == mark.school_id)
        .filter(AttendanceModel.date == mark.date)
        .first()
    )
    if record is None:
        record = AttendanceModel(**mark.model_dump())
        db.add(record)
    else:
        record.status = mark.status

    db.commit()
    db.refresh(record)
    return {"success": True, "data": AttendanceSchema.model_validate(record).model_dump()}


# ✅ [LATEST] most recent status, "Unmarked" when nothing recorded
@router.get("/{student_id}/latest")
def get_latest_status(student_id: str, school_id: str, academic_year: str, db: Session = Depends(get_db)):
    records = _records(db, student_id, school_id, academic_year)
    ordered = sort_attendance(records)
    return {
        "success": True,
        "data": {
            "student_id": student_id,
            "status": latest_status(ordered),
            "date": ordered[0].date if ordered else None,
        },
    }


# ✅ [HISTORY] newest first, with a count per status
@router.get("/{student_id}")
def get_attendance_history(student_id: str, school_id: str, academic_year: str, db: Session = Depends(get_db)):
    records = sort_attendance(_records(db, student_id, school_id, academic_year))
    return {
        "success": True,
        "data": {
            "student_id": student_id,
            "summary": attendance_summary(records),
            "records": [r.model_dump() for r in records],
        },
    }
