from sqlalchemy import Column, Integer, Float, String, UniqueConstraint
from database.db import Base

class FeeCost(Base):
    __tablename__ = "fee_costs"  # total fee configured per class and year

    id = Column(Integer, primary_key=True, index=True)         # fee cost ID (Primary Key)
    class_name = Column(String(50), nullable=False)            # class
    academic_year = Column(String(20), nullable=False)         # academic year
    school_id = Column(String(50), nullable=False)             # owning school
    total_amount = Column(Float, nullable=False, default=0)    # total fee (GHS)

    __table_args__ = (
        UniqueConstraint("school_id", "academic_year", "class_name", name="uq_fee_cost"),
    )
