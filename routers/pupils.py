from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from models.pupils import Pupil as PupilModel
from schemas.pupils import Pupil as PupilSchema, PupilCreate
from utils.responses import error_response

router = APIRouter(prefix="/pupils", tags=["pupils"])


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [CREATE] register a pupil in a class for a year
@router.post("/", status_code=201)
def create_pupil(pupil: PupilCreate, db: Session = Depends(get_db)):
    exists = (
        db.query(PupilModel)
        .filter(PupilModel.student_id == pupil.student_id)
        .filter(PupilModel.school_id == pupil.school_id)
        .filter(PupilModel.academic_year == pupil.academic_year)
        .first()
    )
    if exists:
        return error_response(409, f"{pupil.student_id} is already registered for {pupil.academic_year}")

    db_pupil = PupilModel(**pupil.model_dump())
    db.add(db_pupil)
    db.commit()
    db.refresh(db_pupil)
    return {
        "success": True,
        "data": PupilSchema.model_validate(db_pupil).model_dump(),
        "message": "Pupil registered successfully",
    }


# ✅ [READ] class list
@router.get("/")
def read_class_pupils(school_id: str, academic_year: str, class_name: str, db: Session = Depends(get_db)):
    records = (
        db.query(PupilModel)
        .filter(PupilModel.school_id == school_id)
        .filter(PupilModel.academic_year == academic_year)
        .filter(PupilModel.class_name == class_name)
        .order_by(PupilModel.student_name)
        .all()
    )
    return {
        "success": True,
        "data": [PupilSchema.model_validate(r).model_dump() for r in records],
    }


# ==========================================================
# [2] Dynamic routes
# ==========================================================

# ✅ [READ] latest registration of one pupil
@router.get("/{student_id}")
def read_pupil(student_id: str, school_id: str, db: Session = Depends(get_db)):
    pupil = (
        db.query(PupilModel)
        .filter(PupilModel.student_id == student_id)
        .filter(PupilModel.school_id == school_id)
        .order_by(PupilModel.academic_year.desc())
        .first()
    )
    if pupil is None:
        return error_response(404, "Pupil not found")
    return {"success": True, "data": PupilSchema.model_validate(pupil).model_dump()}
