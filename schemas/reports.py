"""
schemas/reports.py

Derived report structures produced by services/grading.py.
None of these are persisted; they are rebuilt from the grade records on every request.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

Rank = Union[int, str]   # 1-based position, or the "—" placeholder


class SubjectScore(BaseModel):
    """One pupil's standing in one subject for a term."""
    pupil_id: str
    subject: str
    test1: Optional[float] = None      # first test of the term (None = absent)
    test2: Optional[float] = None      # second test of the term
    raw_mean: float = 0.0              # unrounded, used for totals
    mean: int = 0                      # rounded for display
    rank: Rank
    graded: bool = False               # at least one test entered
    band: str = "none"                 # pass / fail / none


class PupilTotal(BaseModel):
    pupil_id: str
    total_mean: float = 0.0            # sum of unrounded subject means
    total_marks: int = 0               # rounded for display
    percentage: float = 0.0
    rank: Rank
    subject_count: int = 0             # subjects with at least one test entered


class TermAggregate(BaseModel):
    tests: List[str]
    subjects: List[str] = Field(default_factory=list)
    pupils: List[str] = Field(default_factory=list)
    subject_scores: Dict[str, List[SubjectScore]] = Field(default_factory=dict)
    totals: Dict[str, PupilTotal] = Field(default_factory=dict)
    denominator: float = 0.0
    denominator_configured: bool = False


class ReportCard(BaseModel):
    pupil_id: str
    tests: List[str]
    rows: List[SubjectScore] = Field(default_factory=list)
    total_mean: float = 0.0
    total_marks: int = 0
    percentage: float = 0.0
    rank: Rank
    denominator: float = 0.0
    class_size: int = 0


class ClassMatrixRow(BaseModel):
    pupil_id: str
    student_name: Optional[str] = None
    cells: Dict[str, SubjectScore] = Field(default_factory=dict)
    total: PupilTotal


class ClassMatrix(BaseModel):
    tests: List[str]
    subjects: List[str] = Field(default_factory=list)
    denominator: float = 0.0
    rows: List[ClassMatrixRow] = Field(default_factory=list)
