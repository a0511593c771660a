import os
import tempfile

import pytest

# ✅ point the app at a throwaway SQLite file before any project module is imported
_TMP_DIR = tempfile.mkdtemp(prefix="school-grades-")
os.environ["SQLITE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
for _name in ("DB_USER", "DB_PASSWORD", "DB_HOST", "DB_NAME"):
    os.environ.pop(_name, None)

from fastapi.testclient import TestClient  # noqa: E402

from database.db import Base, engine  # noqa: E402
from main import app  # noqa: E402
from schemas.grades import GradeRecord  # noqa: E402


@pytest.fixture
def client():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def record():
    """GradeRecord factory: record("A", "English", "Term 1 T1", 90)"""
    def _make(pupil_id, subject, test, grade):
        return GradeRecord(pupil_id=pupil_id, subject=subject, test=test, grade=grade)
    return _make
