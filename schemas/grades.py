from pydantic import BaseModel, field_validator
from typing import Optional, Union

from config.settings import settings


def _known_tests():
    return {test for tests in settings.TERM_TESTS.values() for test in tests}


# ✅ one test score as handed to the aggregation core
#    - grade may arrive as a number or as the string typed into the sheet
class GradeRecord(BaseModel):
    pupil_id: str                                  # pupil ID (studentID)
    subject: str                                   # subject name
    test: str                                      # e.g. "Term 1 T1"
    grade: Optional[Union[float, str]] = None      # None / "" = not entered
    class_name: Optional[str] = None
    academic_year: Optional[str] = None
    school_id: Optional[str] = None

    class Config:
        from_attributes = True


# ✅ input (POST/PUT)
class GradeCreate(BaseModel):
    pupil_id: str
    subject: str
    test: str
    grade: Optional[Union[float, str]] = None
    class_name: str
    academic_year: str
    school_id: str

    @field_validator("test")
    @classmethod
    def _check_test(cls, v: str) -> str:
        if v not in _known_tests():
            raise ValueError(f"unknown test name: {v}")
        return v

    @field_validator("grade", mode="before")
    @classmethod
    def _stringify(cls, v):
        # stored as text, like the grade sheet sends it
        if v is None:
            return None
        return str(v).strip() or None


# ✅ output (GET)
class Grade(GradeCreate):
    id: int

    class Config:
        from_attributes = True
