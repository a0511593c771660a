"""
Bulk-load the pupil register exported as CSV.

Expected columns: studentID, studentName, class, academicYear, schoolId, gender
A pupil already registered for the same school and academic year is updated, not added twice.
"""
import csv
import sys

from sqlalchemy.orm import Session

from database.db import Base, SessionLocal, engine
from models.pupils import Pupil as PupilModel  # ✅ model import

CSV_PATH = "data/pupils.csv"  # ✅ default file path


def migrate_pupils(csv_path: str = CSV_PATH) -> int:
    Base.metadata.create_all(bind=engine)
    db: Session = SessionLocal()
    count = 0

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                key = dict(
                    student_id=row["studentID"].strip(),
                    academic_year=row["academicYear"].strip(),
                    school_id=row["schoolId"].strip(),
                )
                fields = dict(
                    student_name=row["studentName"].strip().upper(),   # names are kept in capitals
                    class_name=row["class"].strip(),
                    gender=(row.get("gender") or "").strip() or None,
                )
                pupil = db.query(PupilModel).filter_by(**key).first()
                if pupil is None:
                    db.add(PupilModel(**key, **fields))
                    db.flush()   # the next lookup must see this row (autoflush is off)
                else:
                    for name, value in fields.items():
                        setattr(pupil, name, value)
                count += 1
        db.commit()
    finally:
        db.close()

    print(f"✅ pupil CSV -> DB import done ({count} rows)")
    return count


if __name__ == "__main__":
    migrate_pupils(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
