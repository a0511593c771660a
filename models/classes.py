from sqlalchemy import Column, Integer, Float, String, UniqueConstraint
from database.db import Base

class ClassConfig(Base):
    __tablename__ = "class_configs"

    id = Column(Integer, primary_key=True, index=True)      # class config ID (PK)
    class_name = Column(String(50), nullable=False)         # e.g. "Basic 6"
    school_id = Column(String(50), nullable=False)          # owning school
    academic_year = Column(String(20), nullable=False)      # e.g. "2024-2025"

    # ✅ maximum achievable total of subject means (percentage denominator)
    #    - NULL means "number of subjects x 100"
    subject_percentage = Column(Float)

    __table_args__ = (
        UniqueConstraint("school_id", "academic_year", "class_name", name="uq_class_config"),
    )
