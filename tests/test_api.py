import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect

from database.db import Base, engine
from main import app

SCHOOL, YEAR, CLASS = "SCH1", "2024-2025", "Basic 6"
PARTITION = {"school_id": SCHOOL, "academic_year": YEAR, "class_name": CLASS}
DASH = "—"


def _register(client, student_id, name):
    resp = client.post("/v1/pupils/", json={"student_id": student_id, "student_name": name, **PARTITION})
    assert resp.status_code == 201


def _grade(client, pupil_id, subject, test, grade):
    resp = client.post(
        "/v1/grades/",
        json={"pupil_id": pupil_id, "subject": subject, "test": test, "grade": grade, **PARTITION},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.fixture
def graded_class(client):
    # Ama:  English 90/90, Maths 80/80 -> 170
    # Kofi: English 70/70, Maths 80/80 -> 150
    # Yaw:  English 50/-               -> 25
    # Esi:  registered, no grades
    for student_id, name in [("P1", "AMA"), ("P2", "KOFI"), ("P3", "YAW"), ("P4", "ESI")]:
        _register(client, student_id, name)
    for pupil_id, english, maths in [("P1", (90, 90), (80, 80)), ("P2", (70, "70"), (80, 80))]:
        _grade(client, pupil_id, "English", "Term 1 T1", english[0])
        _grade(client, pupil_id, "English", "Term 1 T2", english[1])
        _grade(client, pupil_id, "Maths", "Term 1 T1", maths[0])
        _grade(client, pupil_id, "Maths", "Term 1 T2", maths[1])
    _grade(client, "P3", "English", "Term 1 T1", 50)

    resp = client.put("/v1/class-configs/", json={**PARTITION, "subject_percentage": 200})
    assert resp.status_code == 200
    return client


def test_tables_created_on_startup():
    Base.metadata.drop_all(bind=engine)
    with TestClient(app):
        assert inspect(engine).has_table("pupil_grades")


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
    assert "X-Latency-Ms" in client.get("/health").headers


# ==========================================================
# Grades
# ==========================================================

def test_duplicate_grade_is_refused(client):
    _grade(client, "P1", "English", "Term 1 T1", 90)
    resp = client.post(
        "/v1/grades/",
        json={"pupil_id": "P1", "subject": "English", "test": "Term 1 T1", "grade": 10, **PARTITION},
    )
    assert resp.status_code == 409
    assert resp.json()["success"] is False
    assert resp.json()["error"]["code"] == 409


def test_unknown_test_name_is_rejected(client):
    resp = client.post(
        "/v1/grades/",
        json={"pupil_id": "P1", "subject": "English", "test": "Term 5 T1", "grade": 90, **PARTITION},
    )
    assert resp.status_code == 422


def test_concurrent_duplicate_grade_gets_409(client, monkeypatch):
    _grade(client, "P1", "English", "Term 1 T1", 90)
    # the lookup misses, as when another request inserts in between
    monkeypatch.setattr("routers.grades._find_existing", lambda db, grade: None)

    resp = client.post(
        "/v1/grades/",
        json={"pupil_id": "P1", "subject": "English", "test": "Term 1 T1", "grade": 10, **PARTITION},
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == 409
    assert [g["grade"] for g in client.get("/v1/grades/", params=PARTITION).json()["data"]] == ["90"]


def test_grade_upsert_and_listing(client):
    created = _grade(client, "P1", "English", "Term 1 T1", 90)
    assert created["grade"] == "90"

    resp = client.put(
        "/v1/grades/",
        json={"pupil_id": "P1", "subject": "English", "test": "Term 1 T1", "grade": 95, **PARTITION},
    )
    assert resp.json()["data"]["id"] == created["id"]

    listing = client.get("/v1/grades/", params=PARTITION).json()["data"]
    assert [(g["pupil_id"], g["grade"]) for g in listing] == [("P1", "95")]


def test_grade_delete(client):
    created = _grade(client, "P1", "English", "Term 1 T1", 90)
    assert client.delete(f"/v1/grades/{created['id']}").json()["success"] is True
    assert client.get(f"/v1/grades/{created['id']}").status_code == 404


# ==========================================================
# Reports
# ==========================================================

def test_report_card(graded_class):
    resp = graded_class.get("/v1/reports/report-card/P1", params={**PARTITION, "term": "Term 1"})
    data = resp.json()["data"]

    assert data["student_name"] == "AMA"
    assert [(r["subject"], r["mean"], r["rank"]) for r in data["rows"]] == [("English", 90, 1), ("Maths", 80, 1)]
    assert data["total_marks"] == 170
    assert data["percentage"] == 85.0
    assert data["rank"] == 1
    assert data["denominator_configured"] is True
    assert data["class_size"] == 4


def test_report_card_partial_pupil(graded_class):
    data = graded_class.get("/v1/reports/report-card/P3", params=PARTITION).json()["data"]

    assert [(r["subject"], r["test1"], r["test2"], r["mean"], r["rank"]) for r in data["rows"]] == [
        ("English", 50, None, 25, 3)
    ]
    assert data["percentage"] == 12.5
    assert data["rank"] == 3


def test_report_card_without_grades(graded_class):
    data = graded_class.get("/v1/reports/report-card/P4", params=PARTITION).json()["data"]
    assert data["rows"] == []
    assert data["total_marks"] == 0
    assert data["rank"] == DASH


def test_report_card_unknown_term(graded_class):
    resp = graded_class.get("/v1/reports/report-card/P1", params={**PARTITION, "term": "Term 9"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_class_matrix(graded_class):
    data = graded_class.get("/v1/reports/class-matrix", params=PARTITION).json()["data"]

    assert data["subjects"] == ["English", "Maths"]
    assert [row["student_name"] for row in data["rows"]] == ["AMA", "ESI", "KOFI", "YAW"]

    rows = {row["pupil_id"]: row for row in data["rows"]}
    assert rows["P2"]["cells"]["Maths"]["rank"] == 1
    assert rows["P2"]["total"]["rank"] == 2
    assert rows["P2"]["total"]["percentage"] == 75.0
    assert rows["P3"]["cells"]["Maths"]["rank"] == DASH
    assert rows["P4"]["total"]["rank"] == DASH


def test_subject_matrix(graded_class):
    params = {**PARTITION, "subject": "Maths"}
    rows = graded_class.get("/v1/reports/subject-matrix", params=params).json()["data"]["rows"]
    assert [(r["student_name"], r["rank"]) for r in rows] == [("AMA", 1), ("ESI", DASH), ("KOFI", 1), ("YAW", DASH)]


def test_default_denominator_without_class_config(client):
    _grade(client, "P1", "English", "Term 2 T1", 60)
    _grade(client, "P1", "English", "Term 2 T2", 80)

    data = client.get("/v1/reports/report-card/P1", params={**PARTITION, "term": "Term 2"}).json()["data"]
    assert data["denominator_configured"] is False
    assert data["denominator"] == 100
    assert data["percentage"] == 70.0


def test_grade_override_is_reflected(graded_class):
    graded_class.put(
        "/v1/grades/",
        json={"pupil_id": "P3", "subject": "English", "test": "Term 1 T2", "grade": 100, **PARTITION},
    )
    data = graded_class.get("/v1/reports/report-card/P3", params=PARTITION).json()["data"]
    assert data["rows"][0]["mean"] == 75
    assert data["rows"][0]["rank"] == 2


# ==========================================================
# Fees / attendance
# ==========================================================

def test_fee_balance_flow(client):
    client.put("/v1/fees/costs", json={"class_name": CLASS, "academic_year": YEAR, "school_id": SCHOOL, "total_amount": 500})
    resp = client.post(
        "/v1/fees/receipts",
        json={"student_id": "P1", "student_name": "AMA", "class_name": CLASS, "academic_year": YEAR,
              "school_id": SCHOOL, "amount": 200},
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["balance"]["balance"] == 300

    balance = client.get("/v1/fees/balance/P1", params={"school_id": SCHOOL, "academic_year": YEAR}).json()["data"]
    assert balance["total_paid"] == 200
    assert balance["cleared"] is False

    outstanding = client.get("/v1/fees/outstanding", params={"school_id": SCHOOL, "current_year": YEAR}).json()["data"]
    assert outstanding["count"] == 1
    assert outstanding["students"][0]["outstanding"] == 300


def test_receipt_amount_must_be_positive(client):
    resp = client.post(
        "/v1/fees/receipts",
        json={"student_id": "P1", "academic_year": YEAR, "school_id": SCHOOL, "amount": 0},
    )
    assert resp.status_code == 422


def test_attendance_latest_status(client):
    params = {"school_id": SCHOOL, "academic_year": YEAR}
    assert client.get("/v1/attendance/P1/latest", params=params).json()["data"]["status"] == "Unmarked"

    for date, status in [("2025-02-03", "Present"), ("2025-02-04", "Absent")]:
        resp = client.post("/v1/attendance/", json={"student_id": "P1", "date": date, "status": status, **params})
        assert resp.status_code == 201

    latest = client.get("/v1/attendance/P1/latest", params=params).json()["data"]
    assert (latest["status"], latest["date"]) == ("Absent", "2025-02-04")

    history = client.get("/v1/attendance/P1", params=params).json()["data"]
    assert history["summary"] == {"Present": 1, "Absent": 1}


def test_outstanding_ignores_earlier_year_receipts(client):
    previous = "2023-2024"
    client.put("/v1/fees/costs", json={"class_name": CLASS, "academic_year": YEAR, "school_id": SCHOOL, "total_amount": 400})
    for academic_year, class_name, amount in [(previous, "Basic 5", 30), (YEAR, CLASS, 100)]:
        resp = client.post(
            "/v1/fees/receipts",
            json={"student_id": "P1", "student_name": "AMA", "class_name": class_name,
                  "academic_year": academic_year, "school_id": SCHOOL, "amount": amount},
        )
        assert resp.status_code == 201

    students = client.get("/v1/fees/outstanding", params={"school_id": SCHOOL, "current_year": YEAR}).json()["data"]["students"]
    assert [(s["student_id"], s["total_paid"], s["outstanding"]) for s in students] == [("P1", 100, 300)]
