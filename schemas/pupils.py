from pydantic import BaseModel
from typing import Optional

# ✅ input (POST)
class PupilCreate(BaseModel):
    student_id: str                          # school-issued pupil ID
    student_name: str                        # pupil name
    class_name: str                          # class
    academic_year: str                       # academic year
    school_id: str                           # school
    gender: Optional[str] = None             # gender

# ✅ output (GET)
class Pupil(PupilCreate):
    id: int

    class Config:
        from_attributes = True
