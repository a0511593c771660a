from pydantic import BaseModel, Field
from typing import Optional

class AttendanceCreate(BaseModel):
    student_id: str                          # pupil ID
    school_id: str
    academic_year: str
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")   # "YYYY-MM-DD"
    status: str                              # Present / Absent / Late

class Attendance(BaseModel):
    student_id: str
    date: str
    status: Optional[str] = None
    school_id: Optional[str] = None
    academic_year: Optional[str] = None

    class Config:
        from_attributes = True
