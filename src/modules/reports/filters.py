"""Narrow fetched collections to the records a report covers."""

from dataclasses import dataclass, field

from src.modules.reports.schemas import (
    Expense,
    FeePayment,
    FinancialReportFilters,
    ReportData,
    ReportType,
    Student,
)
from src.shared.utils.formatting import parse_iso_date


@dataclass(frozen=True)
class ReportScope:
    """Records left after filtering. Lists keep input order."""

    payments: list[FeePayment] = field(default_factory=list)
    expenses: list[Expense] = field(default_factory=list)
    applicable_student_ids: frozenset[int] | None = None  # None when class is "All"
    payment: FeePayment | None = None  # receipt only


def student_ids_of_class(students: list[Student], class_level: str) -> frozenset[int]:
    """Ids of students whose class matches exactly."""
    return frozenset(s.id for s in students if s.class_level == class_level)


def payment_in_term(
    payment: FeePayment,
    filters: FinancialReportFilters,
    student_ids: frozenset[int] | None,
) -> bool:
    if payment.term != filters.term or payment.year != filters.year:
        return False
    return student_ids is None or payment.student_id in student_ids


def expense_in_year(expense: Expense, year: int) -> bool:
    """Expenses are year-scoped only; undated expenses never match."""
    parsed = parse_iso_date(expense.expense_date)
    return parsed is not None and parsed.year == year


def expense_in_range(expense: Expense, date_from: str | None, date_to: str | None) -> bool:
    """Inclusive ISO string comparison (lexicographic order equals date order)."""
    if date_from and expense.expense_date < date_from:
        return False
    if date_to and expense.expense_date > date_to:
        return False
    return True


def narrow(
    data: ReportData,
    filters: FinancialReportFilters,
    report_type: ReportType,
) -> ReportScope:
    """
    Apply report filters to the collections.

    fee-collection, income-statement, outstanding, student-balances: payments by term, year
    and class. income-statement also keeps expenses of the filter year (term is not applied).
    expense: expenses by inclusive date range. receipt: the payment with filters.payment_id.
    """
    student_ids = None
    if not filters.all_classes:
        student_ids = student_ids_of_class(data.students, filters.class_level)

    match report_type:
        case ReportType.FEE_COLLECTION | ReportType.OUTSTANDING | ReportType.STUDENT_BALANCES:
            payments = [p for p in data.payments if payment_in_term(p, filters, student_ids)]
            return ReportScope(payments=payments, applicable_student_ids=student_ids)
        case ReportType.INCOME_STATEMENT:
            payments = [p for p in data.payments if payment_in_term(p, filters, student_ids)]
            expenses = [e for e in data.expenses if expense_in_year(e, filters.year)]
            return ReportScope(
                payments=payments,
                expenses=expenses,
                applicable_student_ids=student_ids,
            )
        case ReportType.EXPENSE:
            expenses = [
                e for e in data.expenses
                if expense_in_range(e, filters.date_from, filters.date_to)
            ]
            return ReportScope(expenses=expenses)
        case ReportType.RECEIPT:
            if filters.payment_id is None:
                return ReportScope()
            payment = next((p for p in data.payments if p.id == filters.payment_id), None)
            return ReportScope(payment=payment)
        case _:
            raise ValueError(f"Unknown report type: {report_type}")
