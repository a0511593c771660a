from sqlalchemy import Column, Integer, Float, String, Date
from database.db import Base

class Receipt(Base):
    __tablename__ = "receipts"  # fee payments

    id = Column(Integer, primary_key=True, index=True)         # receipt ID (Primary Key)
    student_id = Column(String(50), nullable=False, index=True)
    student_name = Column(String(150))
    class_name = Column(String(50))                            # class at the time of payment
    academic_year = Column(String(20), nullable=False)
    school_id = Column(String(50), nullable=False)
    amount = Column(Float, nullable=False)                     # amount paid (GHS)
    payment_date = Column(Date)
