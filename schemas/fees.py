from pydantic import BaseModel, Field
from typing import Optional, Union
from datetime import date


class FeeCostUpsert(BaseModel):
    class_name: str
    academic_year: str
    school_id: str
    total_amount: float = Field(..., ge=0)


class FeeCost(FeeCostUpsert):
    id: int

    class Config:
        from_attributes = True


class ReceiptCreate(BaseModel):
    student_id: str
    student_name: Optional[str] = None
    class_name: Optional[str] = None
    academic_year: str
    school_id: str
    amount: float = Field(..., gt=0)         # must be greater than zero
    payment_date: Optional[date] = None


class Receipt(BaseModel):
    student_id: str
    student_name: Optional[str] = None
    class_name: Optional[str] = None
    academic_year: str
    school_id: Optional[str] = None
    amount: Optional[Union[float, str]] = None   # legacy rows may hold text

    class Config:
        from_attributes = True


class FeeBalance(BaseModel):
    student_id: str
    academic_year: str
    class_name: Optional[str] = None
    total_fee: float = 0.0
    total_paid: float = 0.0
    balance: float = 0.0
    cleared: bool = True


class OutstandingFee(BaseModel):
    student_id: str
    student_name: Optional[str] = None
    class_name: Optional[str] = None
    academic_year: str
    total_fee: float = 0.0
    total_paid: float = 0.0
    outstanding: float = 0.0
