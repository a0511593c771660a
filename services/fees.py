"""
services/fees.py

Fee balance helpers: receipts are summed per (student, academic year) and
compared against the total fee configured for the class.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from schemas.fees import FeeBalance, FeeCost, OutstandingFee, Receipt
from services.grading import coerce_number

logger = logging.getLogger(__name__)


def coerce_amount(value) -> float:
    amount = coerce_number(value, "amount")
    return amount if amount is not None else 0.0


def total_paid(receipts: Iterable[Receipt], student_id: str, academic_year: str) -> float:
    return sum(
        coerce_amount(r.amount)
        for r in receipts
        if r.student_id == student_id and r.academic_year == academic_year
    )


def find_fee_cost(fee_costs: Iterable[FeeCost], class_name: Optional[str], academic_year: str) -> Optional[FeeCost]:
    for cost in fee_costs:
        if cost.class_name == class_name and cost.academic_year == academic_year:
            return cost
    return None


def fee_balance(
    receipts: Sequence[Receipt],
    fee_costs: Sequence[FeeCost],
    student_id: str,
    academic_year: str,
    class_name: Optional[str] = None,
) -> FeeBalance:
    """
    Balance of one student for one academic year.

    When class_name is not given, the class written on the student's first
    receipt of that year is used (pupils may have moved class since).
    """
    year_receipts = [r for r in receipts if r.student_id == student_id and r.academic_year == academic_year]
    if class_name is None:
        class_name = next((r.class_name for r in year_receipts if r.class_name), None)

    cost = find_fee_cost(fee_costs, class_name, academic_year)
    total_fee = coerce_amount(cost.total_amount) if cost else 0.0
    paid = sum(coerce_amount(r.amount) for r in year_receipts)
    balance = total_fee - paid

    return FeeBalance(
        student_id=student_id,
        academic_year=academic_year,
        class_name=class_name,
        total_fee=total_fee,
        total_paid=paid,
        balance=balance,
        cleared=balance <= 0,
    )


def previous_academic_year(years: Iterable[str], current: str) -> Optional[str]:
    """The year sorted just before `current`, e.g. 2023-2024 for 2024-2025."""
    ordered = sorted(set(years) | {current})
    index = ordered.index(current)
    return ordered[index - 1] if index > 0 else None


def outstanding_fees(
    receipts: Iterable[Receipt],
    fee_costs: Sequence[FeeCost],
    current_year: str,
    only_owing: bool = False,
) -> List[OutstandingFee]:
    """
    One row per student who paid anything in current_year.
    Receipts from other academic years are ignored; the class fee is the one
    configured for the class on the student's first receipt of the year.
    """
    by_student: Dict[str, OutstandingFee] = {}
    for r in receipts:
        if r.academic_year != current_year:
            continue
        row = by_student.get(r.student_id)
        if row is None:
            row = OutstandingFee(
                student_id=r.student_id,
                student_name=r.student_name,
                class_name=r.class_name,
                academic_year=r.academic_year,
            )
            by_student[r.student_id] = row
        row.total_paid += coerce_amount(r.amount)

    rows = []
    for row in by_student.values():
        cost = find_fee_cost(fee_costs, row.class_name, row.academic_year)
        if cost:
            row.total_fee = coerce_amount(cost.total_amount)
        row.outstanding = row.total_fee - row.total_paid
        if only_owing and row.outstanding <= 0:
            continue
        rows.append(row)

    logger.debug("Outstanding fee rows for %s: %d", current_year, len(rows))
    return rows
