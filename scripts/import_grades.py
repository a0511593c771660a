"""
Bulk-load grade sheets exported as CSV.

Expected columns: pupilID, subject, test, grade, className, academicYear, schoolId
Rows for an existing (pupil, subject, test) in the same class/year/school overwrite it.
"""
import csv
import sys

from sqlalchemy.orm import Session

from database.db import Base, SessionLocal, engine
from models.grades import PupilGrade as PupilGradeModel  # ✅ model import

CSV_PATH = "data/grades.csv"  # ✅ default file path


def _blank_to_none(value):
    value = (value or "").strip()
    return value or None


def migrate_grades(csv_path: str = CSV_PATH) -> int:
    Base.metadata.create_all(bind=engine)
    db: Session = SessionLocal()
    count = 0

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                key = dict(
                    pupil_id=row["pupilID"].strip(),
                    subject=row["subject"].strip(),
                    test=row["test"].strip(),
                    class_name=row["className"].strip(),
                    academic_year=row["academicYear"].strip(),
                    school_id=row["schoolId"].strip(),
                )
                grade = db.query(PupilGradeModel).filter_by(**key).first()
                if grade is None:
                    grade = PupilGradeModel(**key)
                    db.add(grade)
                    db.flush()   # the next lookup must see this row (autoflush is off)
                grade.grade = _blank_to_none(row.get("grade"))
                count += 1
        db.commit()
    finally:
        db.close()

    print(f"✅ grade CSV -> DB import done ({count} rows)")
    return count


if __name__ == "__main__":
    migrate_grades(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
