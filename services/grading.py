"""
services/grading.py

Term grade aggregation shared by every report view.

- Input : grade records for one (school_id, academic_year, class_name) partition,
          the two test names of the term, and the class subject_percentage.
- Output: per-subject means and ranks, per-pupil totals, ranks and percentages.
- No database, web or cache dependency: callers fetch the partition and call
  aggregate_term() again whenever their records change.

Rules
- mean = (test1 + test2) / 2; a missing test counts as 0, the divisor is always 2
- ranks are competition ranks over the unrounded values ([90, 90, 80] -> 1, 1, 3)
- a pupil with no entered test for a subject is not ranked in it (rank "—")
- a pupil whose total is 0 is not ranked overall (rank "—")
- display means/totals are rounded half up; aggregation uses the raw values
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

from config.settings import settings
from schemas.grades import GradeRecord
from schemas.reports import (
    ClassMatrix, ClassMatrixRow, PupilTotal, ReportCard, SubjectScore, TermAggregate,
)

logger = logging.getLogger(__name__)

ScoreKey = Tuple[str, str, str]   # (pupil_id, subject, test)


class UnknownTermError(ValueError):
    """Raised when a term label has no test names configured."""


# ==========================================================
# [HELPERS] numbers
# ==========================================================

def round_half_up(value: float, digits: int = 0) -> float:
    """Round like the grade sheets do: 65.5 -> 66, 64.5 -> 65 (never to even)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def coerce_number(value: Any, label: str = "grade") -> Optional[float]:
    """
    Number or numeric string -> float; None/"" -> None.
    Anything that does not parse is logged and treated as missing.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = float(text)
        except ValueError:
            logger.warning("Ignoring malformed %s %r", label, value)
            return None
    if math.isnan(parsed) or math.isinf(parsed):
        logger.warning("Ignoring non-finite %s %r", label, value)
        return None
    return parsed


def parse_grade(value: Any) -> Optional[float]:
    return coerce_number(value, "grade")


def grade_band(value: Optional[float], pass_mark: Optional[float] = None) -> str:
    """pass / fail colour band used on report cards and matrices"""
    if value is None:
        return "none"
    mark = settings.PASS_MARK if pass_mark is None else pass_mark
    return "pass" if value >= mark else "fail"


# ==========================================================
# [1] Subject mean
# ==========================================================

def subject_mean(test1: Optional[float], test2: Optional[float]) -> float:
    """Unrounded mean of the two term tests, absent tests counted as 0."""
    return ((test1 or 0.0) + (test2 or 0.0)) / 2


# ==========================================================
# [2] Ranking
# ==========================================================

def competition_ranks(scored: Iterable[Tuple[Hashable, float]]) -> Dict[Hashable, int]:
    """
    Rank (key, value) pairs by value, highest first.

    Equal values share the rank of the first of the group and the next distinct
    value takes its 1-based position: [90, 90, 80] -> [1, 1, 3].
    The sort is stable, so tied keys keep their input order in the result.
    """
    ordered = sorted(scored, key=lambda item: item[1], reverse=True)

    ranks: Dict[Hashable, int] = {}
    previous_value = None
    previous_rank = 0
    for position, (key, value) in enumerate(ordered, start=1):
        rank = previous_rank if position > 1 and value == previous_value else position
        ranks[key] = rank
        previous_value, previous_rank = value, rank
    return ranks


# ==========================================================
# [3] Percentage
# ==========================================================

def resolve_denominator(subject_percentage: Any, subject_count: int) -> float:
    configured = coerce_number(subject_percentage, "subject_percentage")
    if configured is not None and configured > 0:
        return configured
    return float(subject_count * 100)


def percentage(total: float, denominator: float) -> float:
    if not denominator or denominator <= 0 or not total:
        return 0.0
    return round_half_up(total / denominator * 100, 1)


# ==========================================================
# [4] Term aggregation
# ==========================================================

def term_test_names(term: str, term_tests: Optional[Mapping[str, Sequence[str]]] = None) -> List[str]:
    mapping = settings.TERM_TESTS if term_tests is None else term_tests
    if term not in mapping:
        raise UnknownTermError(f"Unknown term: {term}")
    return list(mapping[term])


def _index_records(
    records: Iterable[GradeRecord], tests: Sequence[str]
) -> Tuple[List[str], List[str], Dict[ScoreKey, Optional[float]]]:
    pupils: List[str] = []
    seen_pupils = set()
    subjects = set()
    scores: Dict[ScoreKey, Optional[float]] = {}

    for record in records:
        if record.pupil_id not in seen_pupils:
            seen_pupils.add(record.pupil_id)
            pupils.append(record.pupil_id)
        if record.test not in tests:
            continue

        subjects.add(record.subject)
        key = (record.pupil_id, record.subject, record.test)
        if key in scores:
            logger.warning("Duplicate grade record for %s / %s / %s, keeping the first", *key)
            continue
        scores[key] = parse_grade(record.grade)

    return pupils, sorted(subjects), scores


def aggregate_term(
    records: Iterable[GradeRecord],
    tests: Sequence[str],
    subject_percentage: Any = None,
    roster: Optional[Sequence[str]] = None,
    pass_mark: Optional[float] = None,
) -> TermAggregate:
    """
    Compute subject scores and pupil totals for one class and one term.

    records            -- every grade record of the class partition (any term)
    tests              -- the term's two test names, e.g. ["Term 1 T1", "Term 1 T2"]
    subject_percentage -- class denominator; None/0 falls back to subjects x 100
    roster             -- pupil IDs to report on, in display order; defaults to
                          the pupils found in the records
    """
    if len(tests) < 2:
        raise ValueError("a term needs two test names")
    test1, test2 = tests[0], tests[1]

    record_pupils, subjects, scores = _index_records(records, (test1, test2))
    pupils = list(roster) if roster is not None else record_pupils
    placeholder = settings.RANK_PLACEHOLDER

    subject_scores: Dict[str, List[SubjectScore]] = {}
    raw_totals: Dict[str, float] = {pupil_id: 0.0 for pupil_id in pupils}
    graded_counts: Dict[str, int] = {pupil_id: 0 for pupil_id in pupils}

    for subject in subjects:
        entries = []
        for pupil_id in pupils:
            t1 = scores.get((pupil_id, subject, test1))
            t2 = scores.get((pupil_id, subject, test2))
            graded = t1 is not None or t2 is not None
            entries.append((pupil_id, t1, t2, subject_mean(t1, t2), graded))

        ranks = competition_ranks(
            (pupil_id, raw) for pupil_id, _, _, raw, graded in entries if graded
        )

        rows = []
        for pupil_id, t1, t2, raw, graded in entries:
            mean = int(round_half_up(raw))
            rows.append(SubjectScore(
                pupil_id=pupil_id,
                subject=subject,
                test1=t1,
                test2=t2,
                raw_mean=raw,
                mean=mean,
                rank=ranks.get(pupil_id, placeholder),
                graded=graded,
                band=grade_band(mean if graded else None, pass_mark),
            ))
            if graded:
                raw_totals[pupil_id] += raw
                graded_counts[pupil_id] += 1
        subject_scores[subject] = rows

    denominator = resolve_denominator(subject_percentage, len(subjects))
    overall = competition_ranks(
        (pupil_id, total) for pupil_id, total in raw_totals.items() if total != 0
    )

    totals = {
        pupil_id: PupilTotal(
            pupil_id=pupil_id,
            total_mean=total,
            total_marks=int(round_half_up(total)),
            percentage=percentage(total, denominator),
            rank=overall.get(pupil_id, placeholder),
            subject_count=graded_counts[pupil_id],
        )
        for pupil_id, total in raw_totals.items()
    }

    configured = coerce_number(subject_percentage, "subject_percentage")
    return TermAggregate(
        tests=[test1, test2],
        subjects=subjects,
        pupils=pupils,
        subject_scores=subject_scores,
        totals=totals,
        denominator=denominator,
        denominator_configured=configured is not None and configured > 0,
    )


# ==========================================================
# [5] Views built on one aggregate
# ==========================================================

def _empty_total(pupil_id: str) -> PupilTotal:
    return PupilTotal(pupil_id=pupil_id, rank=settings.RANK_PLACEHOLDER)


def build_report_card(aggregate: TermAggregate, pupil_id: str) -> ReportCard:
    """Individual term report: only subjects the pupil has an entered test for."""
    rows = [
        score
        for subject in aggregate.subjects
        for score in aggregate.subject_scores[subject]
        if score.pupil_id == pupil_id and score.graded
    ]
    total = aggregate.totals.get(pupil_id) or _empty_total(pupil_id)

    return ReportCard(
        pupil_id=pupil_id,
        tests=aggregate.tests,
        rows=rows,
        total_mean=total.total_mean,
        total_marks=total.total_marks,
        percentage=total.percentage,
        rank=total.rank,
        denominator=aggregate.denominator,
        class_size=len(aggregate.pupils),
    )


def build_class_matrix(aggregate: TermAggregate, names: Optional[Mapping[str, str]] = None) -> ClassMatrix:
    """Every pupil x every subject, plus the overall column."""
    names = names or {}
    by_pupil: Dict[str, Dict[str, SubjectScore]] = {pupil_id: {} for pupil_id in aggregate.pupils}
    for subject in aggregate.subjects:
        for score in aggregate.subject_scores[subject]:
            by_pupil[score.pupil_id][subject] = score

    rows = [
        ClassMatrixRow(
            pupil_id=pupil_id,
            student_name=names.get(pupil_id),
            cells=by_pupil[pupil_id],
            total=aggregate.totals.get(pupil_id) or _empty_total(pupil_id),
        )
        for pupil_id in aggregate.pupils
    ]
    return ClassMatrix(
        tests=aggregate.tests,
        subjects=aggregate.subjects,
        denominator=aggregate.denominator,
        rows=rows,
    )


def build_subject_matrix(aggregate: TermAggregate, subject: str) -> List[SubjectScore]:
    """One subject column for the whole class, roster order; unknown subject -> []"""
    return list(aggregate.subject_scores.get(subject, []))
