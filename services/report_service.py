"""
services/report_service.py

Loads one class partition from the database and hands it to services/grading.py.
Every report endpoint goes through load_term_aggregate() so the report card, the
class matrix and the subject matrix always rank from the same records.
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from models.classes import ClassConfig as ClassConfigModel
from models.grades import PupilGrade as PupilGradeModel
from models.pupils import Pupil as PupilModel
from schemas.grades import GradeRecord
from schemas.reports import TermAggregate
from services.grading import aggregate_term, term_test_names

logger = logging.getLogger(__name__)


def fetch_grade_records(db: Session, school_id: str, academic_year: str, class_name: str) -> List[GradeRecord]:
    rows = (
        db.query(PupilGradeModel)
        .filter(PupilGradeModel.school_id == school_id)
        .filter(PupilGradeModel.academic_year == academic_year)
        .filter(PupilGradeModel.class_name == class_name)
        .order_by(PupilGradeModel.id)
        .all()
    )
    return [GradeRecord.model_validate(r) for r in rows]


def fetch_class_config(db: Session, school_id: str, academic_year: str, class_name: str) -> Optional[ClassConfigModel]:
    return (
        db.query(ClassConfigModel)
        .filter(ClassConfigModel.school_id == school_id)
        .filter(ClassConfigModel.academic_year == academic_year)
        .filter(ClassConfigModel.class_name == class_name)
        .first()
    )


def fetch_roster(
    db: Session, school_id: str, academic_year: str, class_name: str, records: List[GradeRecord]
) -> Tuple[List[str], Dict[str, str]]:
    """
    Registered pupils (by name) followed by any graded pupil missing from the register.
    Only graded pupils take part in ranking, so extra roster rows never move a rank.
    """
    pupils = (
        db.query(PupilModel)
        .filter(PupilModel.school_id == school_id)
        .filter(PupilModel.academic_year == academic_year)
        .filter(PupilModel.class_name == class_name)
        .order_by(PupilModel.student_name)
        .all()
    )
    names = {p.student_id: p.student_name for p in pupils}
    roster = list(names)
    for record in records:
        if record.pupil_id not in names and record.pupil_id not in roster:
            roster.append(record.pupil_id)
    return roster, names


def load_term_aggregate(
    db: Session, school_id: str, academic_year: str, class_name: str, term: str
) -> Tuple[TermAggregate, Dict[str, str]]:
    tests = term_test_names(term)   # UnknownTermError for a bad term label
    records = fetch_grade_records(db, school_id, academic_year, class_name)
    roster, names = fetch_roster(db, school_id, academic_year, class_name, records)
    config = fetch_class_config(db, school_id, academic_year, class_name)

    if config is None or not config.subject_percentage:
        logger.info(
            "No subject percentage for %s / %s / %s, using subjects x 100",
            school_id, academic_year, class_name,
        )

    aggregate = aggregate_term(
        records,
        tests,
        subject_percentage=config.subject_percentage if config else None,
        roster=roster,
    )
    logger.info(
        "Aggregated %s for %s (%d records, %d pupils, %d subjects)",
        term, class_name, len(records), len(aggregate.pupils), len(aggregate.subjects),
    )
    return aggregate, names
