import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from services.grading import UnknownTermError, build_class_matrix, build_report_card, build_subject_matrix
from services.report_service import load_term_aggregate
from utils.responses import error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


# ==========================================================
# [REPORT CARD] one pupil, one term
# ==========================================================

# ✅ subject rows (T1, T2, mean, subject rank) + total, percentage, class position
@router.get("/report-card/{pupil_id}")
def get_report_card(
    pupil_id: str,
    school_id: str = Query(...),
    academic_year: str = Query(..., description="e.g. 2024-2025"),
    class_name: str = Query(...),
    term: str = Query("Term 1", description="Term 1 / Term 2 / Term 3"),
    db: Session = Depends(get_db),
):
    try:
        aggregate, names = load_term_aggregate(db, school_id, academic_year, class_name, term)
    except UnknownTermError as e:
        return error_response(400, str(e))

    card = build_report_card(aggregate, pupil_id)
    if not card.rows:
        logger.info("No grades for pupil %s in %s %s", pupil_id, class_name, term)

    return {
        "success": True,
        "data": {
            "student_name": names.get(pupil_id),
            "class_name": class_name,
            "academic_year": academic_year,
            "term": term,
            "denominator_configured": aggregate.denominator_configured,
            **card.model_dump(),
        },
    }


# ==========================================================
# [MATRIX] whole class, every subject
# ==========================================================
@router.get("/class-matrix")
def get_class_matrix(
    school_id: str,
    academic_year: str,
    class_name: str,
    term: str = "Term 1",
    db: Session = Depends(get_db),
):
    try:
        aggregate, names = load_term_aggregate(db, school_id, academic_year, class_name, term)
    except UnknownTermError as e:
        return error_response(400, str(e))

    matrix = build_class_matrix(aggregate, names)
    return {
        "success": True,
        "data": {
            "class_name": class_name,
            "academic_year": academic_year,
            "term": term,
            "denominator_configured": aggregate.denominator_configured,
            **matrix.model_dump(),
        },
    }


# ==========================================================
# [MATRIX] whole class, single subject
# ==========================================================
@router.get("/subject-matrix")
def get_subject_matrix(
    school_id: str,
    academic_year: str,
    class_name: str,
    subject: str,
    term: str = "Term 1",
    db: Session = Depends(get_db),
):
    try:
        aggregate, names = load_term_aggregate(db, school_id, academic_year, class_name, term)
    except UnknownTermError as e:
        return error_response(400, str(e))

    rows = build_subject_matrix(aggregate, subject)
    return {
        "success": True,
        "data": {
            "class_name": class_name,
            "academic_year": academic_year,
            "term": term,
            "subject": subject,
            "rows": [
                {"student_name": names.get(score.pupil_id), **score.model_dump()}
                for score in rows
            ],
        },
    }
