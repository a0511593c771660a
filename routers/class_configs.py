from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from models.classes import ClassConfig as ClassConfigModel
from schemas.classes import ClassConfig as ClassConfigSchema, ClassConfigUpsert
from services.report_service import fetch_class_config
from utils.responses import error_response

router = APIRouter(prefix="/class-configs", tags=["class configuration"])


# ✅ [UPSERT] set the percentage denominator of a class
@router.put("/")
def upsert_class_config(config: ClassConfigUpsert, db: Session = Depends(get_db)):
    db_config = fetch_class_config(db, config.school_id, config.academic_year, config.class_name)
    if db_config is None:
        db_config = ClassConfigModel(**config.model_dump())
        db.add(db_config)
    else:
        db_config.subject_percentage = config.subject_percentage

    db.commit()
    db.refresh(db_config)
    return {
        "success": True,
        "data": ClassConfigSchema.model_validate(db_config).model_dump(),
        "message": "Class configuration saved",
    }


# ✅ [READ] configuration of one class
@router.get("/")
def read_class_config(school_id: str, academic_year: str, class_name: str, db: Session = Depends(get_db)):
    db_config = fetch_class_config(db, school_id, academic_year, class_name)
    if db_config is None:
        return error_response(404, "Class configuration not found")
    return {"success": True, "data": ClassConfigSchema.model_validate(db_config).model_dump()}
