from sqlalchemy import Column, Integer, String
from database.db import Base

class PupilAttendance(Base):
    __tablename__ = "pupil_attendance"  # daily attendance marks

    id = Column(Integer, primary_key=True, index=True)         # attendance ID (Primary Key)
    student_id = Column(String(50), nullable=False, index=True)
    school_id = Column(String(50), nullable=False)
    academic_year = Column(String(20), nullable=False)
    date = Column(String(10), nullable=False)                  # ISO date "YYYY-MM-DD"
    status = Column(String(20), nullable=False)                # Present / Absent / Late
