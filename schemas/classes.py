from pydantic import BaseModel, Field
from typing import Optional

# ✅ create / update request body
#    subject_percentage = max achievable total of subject means for the class
class ClassConfigUpsert(BaseModel):
    class_name: str
    school_id: str
    academic_year: str
    subject_percentage: Optional[float] = Field(default=None, ge=0)


# ✅ response / read schema
class ClassConfig(ClassConfigUpsert):
    id: int

    class Config:
        from_attributes = True
