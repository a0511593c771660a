from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from models.fees import FeeCost as FeeCostModel
from models.receipts import Receipt as ReceiptModel
from schemas.fees import FeeCost as FeeCostSchema, FeeCostUpsert, Receipt as ReceiptSchema, ReceiptCreate
from services.fees import fee_balance, outstanding_fees, previous_academic_year

router = APIRouter(prefix="/fees", tags=["fees"])


def _school_costs(db: Session, school_id: str):
    rows = db.query(FeeCostModel).filter(FeeCostModel.school_id == school_id).all()
    return [FeeCostSchema.model_validate(r) for r in rows]


def _student_receipts(db: Session, school_id: str, student_id: str):
    rows = (
        db.query(ReceiptModel)
        .filter(ReceiptModel.school_id == school_id)
        .filter(ReceiptModel.student_id == student_id)
        .order_by(ReceiptModel.id)
        .all()
    )
    return [ReceiptSchema.model_validate(r) for r in rows]


# ==========================================================
# [1] Fee costs
# ==========================================================

# ✅ [UPSERT] total fee of a class for a year
@router.put("/costs")
def upsert_fee_cost(cost: FeeCostUpsert, db: Session = Depends(get_db)):
    db_cost = (
        db.query(FeeCostModel)
        .filter(FeeCostModel.school_id == cost.school_id)
        .filter(FeeCostModel.academic_year == cost.academic_year)
        .filter(FeeCostModel.class_name == cost.class_name)
        .first()
    )
    if db_cost is None:
        db_cost = FeeCostModel(**cost.model_dump())
        db.add(db_cost)
    else:
        db_cost.total_amount = cost.total_amount

    db.commit()
    db.refresh(db_cost)
    return {"success": True, "data": FeeCostSchema.model_validate(db_cost).model_dump()}


# ✅ [READ] every fee cost of a school
@router.get("/costs")
def read_fee_costs(school_id: str, db: Session = Depends(get_db)):
    return {"success": True, "data": [c.model_dump() for c in _school_costs(db, school_id)]}


# ==========================================================
# [2] Receipts
# ==========================================================

# ✅ [CREATE] record a payment and return the new balance
@router.post("/receipts", status_code=201)
def create_receipt(receipt: ReceiptCreate, db: Session = Depends(get_db)):
    db_receipt = ReceiptModel(**receipt.model_dump())
    db.add(db_receipt)
    db.commit()
    db.refresh(db_receipt)

    balance = fee_balance(
        _student_receipts(db, receipt.school_id, receipt.student_id),
        _school_costs(db, receipt.school_id),
        receipt.student_id,
        receipt.academic_year,
        receipt.class_name,
    )
    return {
        "success": True,
        "data": {"receipt_id": db_receipt.id, "balance": balance.model_dump()},
        "message": "Receipt saved successfully",
    }


# ==========================================================
# [3] Balances
# ==========================================================

# ✅ [BALANCE] one student, one year
@router.get("/balance/{student_id}")
def get_fee_balance(
    student_id: str,
    school_id: str,
    academic_year: str,
    class_name: str = None,
    db: Session = Depends(get_db),
):
    balance = fee_balance(
        _student_receipts(db, school_id, student_id),
        _school_costs(db, school_id),
        student_id,
        academic_year,
        class_name,
    )
    return {"success": True, "data": balance.model_dump()}


# ✅ [BALANCE] what is left from the year before current_year
@router.get("/previous-balance/{student_id}")
def get_previous_balance(student_id: str, school_id: str, current_year: str, db: Session = Depends(get_db)):
    costs = _school_costs(db, school_id)
    previous = previous_academic_year((c.academic_year for c in costs), current_year)
    if previous is None:
        return {"success": True, "data": None, "message": "No previous academic year configured"}

    balance = fee_balance(_student_receipts(db, school_id, student_id), costs, student_id, previous)
    return {"success": True, "data": balance.model_dump()}


# ✅ [OUTSTANDING] students still owing for the current year
@router.get("/outstanding")
def get_outstanding(school_id: str, current_year: str, only_owing: bool = True, db: Session = Depends(get_db)):
    records = (
        db.query(ReceiptModel)
        .filter(ReceiptModel.school_id == school_id)
        .filter(ReceiptModel.academic_year == current_year)
        .order_by(ReceiptModel.id)
        .all()
    )
    receipts = [ReceiptSchema.model_validate(r) for r in records]
    rows = outstanding_fees(receipts, _school_costs(db, school_id), current_year, only_owing=only_owing)
    rows.sort(key=lambda r: r.outstanding, reverse=True)
    return {
        "success": True,
        "data": {"count": len(rows), "students": [r.model_dump() for r in rows]},
    }
