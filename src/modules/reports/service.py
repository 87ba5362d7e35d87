"""Service for financial reports: turns fetched records into report data."""

import logging
from decimal import Decimal

from src.modules.reports.filters import narrow
from src.modules.reports.schemas import (
    UNCATEGORIZED,
    UNKNOWN_CLASS,
    UNKNOWN_STUDENT,
    ExpenseCategory,
    ExpenseGroup,
    ExpenseLine,
    ExpenseReport,
    FeeBreakdownItem,
    FeeCollectionGroup,
    FeeCollectionLine,
    FeeCollectionReport,
    FinancialReportFilters,
    GroupedAmount,
    IncomeLine,
    IncomeStatement,
    OutstandingFeesReport,
    PaymentReceipt,
    ReportData,
    ReportResult,
    ReportType,
    Student,
    StudentBalanceRow,
    StudentBalancesReport,
    StudentFeeBreakdownRow,
)
from src.shared.utils.money import ZERO

logger = logging.getLogger(__name__)


def _by_balance_desc(rows: list) -> list:
    # sorted() is stable with reverse=True: equal balances keep first-seen order
    return sorted(rows, key=lambda r: r.balance, reverse=True)


class ReportsService:
    """Build report data from already-fetched payments, expenses, categories and students."""

    def __init__(self, data: ReportData):
        self.data = data
        # First record wins for duplicate ids
        self._students: dict[int, Student] = {}
        for s in data.students:
            self._students.setdefault(s.id, s)
        self._categories: dict[int, ExpenseCategory] = {}
        for c in data.categories:
            self._categories.setdefault(c.id, c)

    def student_name(self, student_id: int | None) -> str:
        student = self._students.get(student_id) if student_id is not None else None
        return (student.name if student else None) or UNKNOWN_STUDENT

    def student_class(self, student_id: int | None) -> str:
        student = self._students.get(student_id) if student_id is not None else None
        return (student.class_level if student else None) or UNKNOWN_CLASS

    def category_name(self, category_id: int | None) -> str:
        category = self._categories.get(category_id) if category_id is not None else None
        return (category.name if category else None) or UNCATEGORIZED

    def aggregate(self, report_type: ReportType, filters: FinancialReportFilters) -> ReportResult | None:
        """Run the aggregation for report_type. None only for a receipt with no matching payment."""
        match report_type:
            case ReportType.FEE_COLLECTION:
                return self.fee_collection(filters)
            case ReportType.EXPENSE:
                return self.expense_report(filters)
            case ReportType.INCOME_STATEMENT:
                return self.income_statement(filters)
            case ReportType.OUTSTANDING:
                return self.outstanding_fees(filters)
            case ReportType.STUDENT_BALANCES:
                return self.student_balances(filters)
            case ReportType.RECEIPT:
                return self.receipt(filters)
            case _:
                raise ValueError(f"Unknown report type: {report_type}")

    def fee_collection(self, filters: FinancialReportFilters) -> FeeCollectionReport:
        """
        Fee Collection: payments grouped by fee type in order of first appearance.

        Each group carries its payments and a due/paid subtotal; grand totals are
        the sums of the subtotals.
        """
        scope = narrow(self.data, filters, ReportType.FEE_COLLECTION)

        groups: dict[str, FeeCollectionGroup] = {}
        lines: list[FeeCollectionLine] = []
        for p in scope.payments:
            line = FeeCollectionLine(
                payment_id=p.id,
                fee_type=p.fee_type,
                payment_date=p.payment_date,
                student_name=self.student_name(p.student_id),
                class_level=self.student_class(p.student_id),
                amount_due=p.amount_due,
                amount_paid=p.amount_paid,
                status=p.status or "pending",
                payment_method=p.payment_method or "-",
                receipt_number=p.receipt_number or "-",
            )
            lines.append(line)
            group = groups.get(p.fee_type)
            if group is None:
                group = groups[p.fee_type] = FeeCollectionGroup(fee_type=p.fee_type)
            group.lines.append(line)
            group.total_due += p.amount_due
            group.total_paid += p.amount_paid

        total_due = sum((g.total_due for g in groups.values()), ZERO)
        total_paid = sum((g.total_paid for g in groups.values()), ZERO)
        return FeeCollectionReport(
            term=filters.term,
            year=filters.year,
            class_level=filters.class_level,
            groups=list(groups.values()),
            lines=lines,
            total_due=total_due,
            total_paid=total_paid,
        )

    def expense_report(self, filters: FinancialReportFilters) -> ExpenseReport:
        """Expense report: expenses in the date range grouped by category name (first-seen order)."""
        scope = narrow(self.data, filters, ReportType.EXPENSE)

        groups: dict[str, ExpenseGroup] = {}
        lines: list[ExpenseLine] = []
        for e in scope.expenses:
            category = self.category_name(e.category_id)
            line = ExpenseLine(
                expense_id=e.id,
                category=category,
                expense_date=e.expense_date,
                description=e.description or "",
                vendor_name=e.vendor_name or "-",
                receipt_number=e.receipt_number or "-",
                amount=e.amount,
            )
            lines.append(line)
            group = groups.get(category)
            if group is None:
                group = groups[category] = ExpenseGroup(category=category)
            group.lines.append(line)
            group.total += e.amount

        return ExpenseReport(
            date_from=filters.date_from,
            date_to=filters.date_to,
            groups=list(groups.values()),
            lines=lines,
            total=sum((g.total for g in groups.values()), ZERO),
        )

    def income_statement(self, filters: FinancialReportFilters) -> IncomeStatement:
        """
        Income Statement: revenue (amount paid) by fee type for the term, and
        expenses by category for the whole year.
        """
        scope = narrow(self.data, filters, ReportType.INCOME_STATEMENT)

        revenue: dict[str, Decimal] = {}
        for p in scope.payments:
            revenue[p.fee_type] = revenue.get(p.fee_type, ZERO) + p.amount_paid

        expenses: dict[str, Decimal] = {}
        for e in scope.expenses:
            category = self.category_name(e.category_id)
            expenses[category] = expenses.get(category, ZERO) + e.amount

        return IncomeStatement(
            term=filters.term,
            year=filters.year,
            revenue_lines=[IncomeLine(label=k, amount=v) for k, v in revenue.items()],
            expense_lines=[IncomeLine(label=k, amount=v) for k, v in expenses.items()],
            total_revenue=sum(revenue.values(), ZERO),
            total_expenses=sum(expenses.values(), ZERO),
        )

    def outstanding_fees(self, filters: FinancialReportFilters) -> OutstandingFeesReport:
        """
        Outstanding Fees: due/paid per student across fee types.

        Students with balance <= 0 are left out; the rest are sorted by balance, largest first.
        """
        scope = narrow(self.data, filters, ReportType.OUTSTANDING)

        by_student: dict[int, GroupedAmount] = {}
        for p in scope.payments:
            if p.student_id is None:
                continue
            acc = by_student.get(p.student_id)
            if acc is None:
                acc = by_student[p.student_id] = GroupedAmount(key=p.student_id)
            acc.due += p.amount_due
            acc.paid += p.amount_paid

        rows = [
            StudentBalanceRow(
                student_id=sid,
                name=self.student_name(sid),
                class_level=self.student_class(sid),
                total_due=acc.due,
                total_paid=acc.paid,
                balance=acc.balance,
            )
            for sid, acc in by_student.items()
            if acc.balance > 0
        ]
        rows = _by_balance_desc(rows)

        return OutstandingFeesReport(
            term=filters.term,
            year=filters.year,
            class_level=filters.class_level,
            rows=rows,
            total_outstanding=sum((r.balance for r in rows), ZERO),
            student_count=len(rows),
        )

    def student_balances(self, filters: FinancialReportFilters) -> StudentBalancesReport:
        """
        Student Fee Balances: per student, due/paid per fee type.

        Unlike Outstanding Fees, fully paid (and overpaid) students stay in the report.
        """
        scope = narrow(self.data, filters, ReportType.STUDENT_BALANCES)

        by_student: dict[int, dict[str, FeeBreakdownItem]] = {}
        for p in scope.payments:
            if p.student_id is None:
                continue
            fees = by_student.setdefault(p.student_id, {})
            item = fees.get(p.fee_type)
            if item is None:
                item = fees[p.fee_type] = FeeBreakdownItem(fee_type=p.fee_type)
            item.due += p.amount_due
            item.paid += p.amount_paid

        rows = []
        for sid, fees in by_student.items():
            total_due = sum((f.due for f in fees.values()), ZERO)
            total_paid = sum((f.paid for f in fees.values()), ZERO)
            rows.append(
                StudentFeeBreakdownRow(
                    student_id=sid,
                    name=self.student_name(sid),
                    class_level=self.student_class(sid),
                    fees=list(fees.values()),
                    total_due=total_due,
                    total_paid=total_paid,
                    balance=total_due - total_paid,
                )
            )
        rows = _by_balance_desc(rows)

        return StudentBalancesReport(
            term=filters.term,
            year=filters.year,
            class_level=filters.class_level,
            rows=rows,
            total_due=sum((r.total_due for r in rows), ZERO),
            total_paid=sum((r.total_paid for r in rows), ZERO),
            total_outstanding=sum((r.balance for r in rows), ZERO),
            student_count=len(rows),
        )

    def receipt(self, filters: FinancialReportFilters) -> PaymentReceipt | None:
        """Receipt for filters.payment_id, or None when no payment matches."""
        payment = narrow(self.data, filters, ReportType.RECEIPT).payment
        if payment is None:
            logger.warning("Receipt requested for unknown payment id=%s", filters.payment_id)
            return None
        return PaymentReceipt(
            payment_id=payment.id,
            receipt_number=payment.receipt_number or f"RCP-{payment.id}",
            payment_date=payment.payment_date,
            student_name=self.student_name(payment.student_id),
            class_level=self.student_class(payment.student_id),
            fee_type=payment.fee_type,
            term=payment.term,
            year=payment.year,
            amount_paid=payment.amount_paid,
            amount_due=payment.amount_due,
            balance=payment.balance,
            payment_method=payment.payment_method or "Cash",
        )
