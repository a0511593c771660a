import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.db import get_db
from models.grades import PupilGrade as PupilGradeModel
from schemas.grades import Grade as GradeSchema, GradeCreate
from utils.responses import error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/grades", tags=["grades"])


def _find_existing(db: Session, grade: GradeCreate):
    return (
        db.query(PupilGradeModel)
        .filter(PupilGradeModel.school_id == grade.school_id)
        .filter(PupilGradeModel.academic_year == grade.academic_year)
        .filter(PupilGradeModel.class_name == grade.class_name)
        .filter(PupilGradeModel.pupil_id == grade.pupil_id)
        .filter(PupilGradeModel.subject == grade.subject)
        .filter(PupilGradeModel.test == grade.test)
        .first()
    )


# ==========================================================
# [1] Static routes (partition listing)
# ==========================================================

# ✅ [READ] every grade record of a class for a year
@router.get("/")
def read_class_grades(school_id: str, academic_year: str, class_name: str, db: Session = Depends(get_db)):
    records = (
        db.query(PupilGradeModel)
        .filter(PupilGradeModel.school_id == school_id)
        .filter(PupilGradeModel.academic_year == academic_year)
        .filter(PupilGradeModel.class_name == class_name)
        .order_by(PupilGradeModel.id)
        .all()
    )
    return {
        "success": True,
        "data": [GradeSchema.model_validate(r).model_dump() for r in records],
    }


# ==========================================================
# [2] CRUD
# ==========================================================

def _duplicate(grade: GradeCreate):
    return error_response(409, f"{grade.pupil_id} already has a {grade.test} grade for {grade.subject}")


# ✅ [CREATE] one test score; a second record for the same subject/test is refused
@router.post("/", status_code=201)
def create_grade(grade: GradeCreate, db: Session = Depends(get_db)):
    if _find_existing(db, grade) is not None:
        return _duplicate(grade)

    db_grade = PupilGradeModel(**grade.model_dump())
    db.add(db_grade)
    try:
        db.commit()
    except IntegrityError:
        # another request stored the same key after the lookup above
        db.rollback()
        return _duplicate(grade)
    db.refresh(db_grade)
    return {
        "success": True,
        "data": GradeSchema.model_validate(db_grade).model_dump(),
        "message": "Grade created successfully",
    }


# ✅ [UPSERT] create or overwrite the record for (pupil, subject, test)
@router.put("/")
def upsert_grade(grade: GradeCreate, db: Session = Depends(get_db)):
    db_grade = _find_existing(db, grade)
    if db_grade is None:
        db_grade = PupilGradeModel(**grade.model_dump())
        db.add(db_grade)
    else:
        logger.info("Overriding %s %s grade for %s", grade.subject, grade.test, grade.pupil_id)
        db_grade.grade = grade.grade

    db.commit()
    db.refresh(db_grade)
    return {
        "success": True,
        "data": GradeSchema.model_validate(db_grade).model_dump(),
        "message": "Grade saved successfully",
    }


# ✅ [READ] one record
@router.get("/{grade_id}")
def read_grade(grade_id: int, db: Session = Depends(get_db)):
    grade = db.query(PupilGradeModel).filter(PupilGradeModel.id == grade_id).first()
    if grade is None:
        return error_response(404, "Grade not found")
    return {"success": True, "data": GradeSchema.model_validate(grade).model_dump()}


# ✅ [DELETE] one record
@router.delete("/{grade_id}")
def delete_grade(grade_id: int, db: Session = Depends(get_db)):
    grade = db.query(PupilGradeModel).filter(PupilGradeModel.id == grade_id).first()
    if grade is None:
        return error_response(404, "Grade not found")

    db.delete(grade)
    db.commit()
    return {
        "success": True,
        "data": {"grade_id": grade_id, "message": "Grade deleted successfully"},
    }
