from sqlalchemy import Column, Integer, String, UniqueConstraint
from database.db import Base

class PupilGrade(Base):
    __tablename__ = "pupil_grades"  # one test score per pupil / subject / test

    id = Column(Integer, primary_key=True, index=True)              # grade row ID (Primary Key)
    pupil_id = Column(String(50), nullable=False, index=True)       # pupils.student_id
    subject = Column(String(100), nullable=False)                   # subject name
    test = Column(String(30), nullable=False)                       # e.g. "Term 1 T2"
    grade = Column(String(20))                                      # raw score as entered (string or number)
    class_name = Column(String(50), nullable=False)                 # partition key
    academic_year = Column(String(20), nullable=False)              # partition key
    school_id = Column(String(50), nullable=False, index=True)      # partition key

    # ✅ at most one record per (subject, test) for a pupil in a class/year/school
    __table_args__ = (
        UniqueConstraint(
            "school_id", "academic_year", "class_name", "pupil_id", "subject", "test",
            name="uq_pupil_grade_partition",
        ),
    )
