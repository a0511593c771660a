from sqlalchemy import Column, Integer, String
from database.db import Base

class Pupil(Base):
    __tablename__ = "pupils"  # pupil roster (registration)

    id = Column(Integer, primary_key=True, index=True)              # row ID (Primary Key)
    student_id = Column(String(50), nullable=False, index=True)     # school-issued pupil ID (studentID)
    student_name = Column(String(150), nullable=False)              # pupil name
    class_name = Column(String(50), nullable=False)                 # class, e.g. "Basic 6"
    academic_year = Column(String(20), nullable=False)              # e.g. "2024-2025"
    school_id = Column(String(50), nullable=False, index=True)      # owning school
    gender = Column(String(10))                                     # Male / Female
