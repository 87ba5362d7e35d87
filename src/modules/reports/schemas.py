"""Schemas for financial reports: input records, filters and aggregation results."""

from datetime import date
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Literal, Union

from pydantic import Field, field_validator

from src.core.config import settings
from src.shared.schemas.base import BaseSchema, RecordSchema
from src.shared.utils.money import ZERO, to_money

ALL_CLASSES = "All"
UNKNOWN_STUDENT = "Unknown"
UNKNOWN_CLASS = "-"
UNCATEGORIZED = "Uncategorized"


class ReportType(StrEnum):
    """Report options offered on the financial reports screen."""

    FEE_COLLECTION = "fee-collection"
    EXPENSE = "expense"
    INCOME_STATEMENT = "income-statement"
    OUTSTANDING = "outstanding"
    STUDENT_BALANCES = "student-balances"
    RECEIPT = "receipt"


class ExportFormat(StrEnum):
    """Output formats."""

    PDF = "pdf"
    EXCEL = "excel"
    CSV = "csv"


def _money_before(v):
    try:
        return to_money(v)
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid amount: {v!r}") from e


def _iso_before(v):
    if isinstance(v, date):
        return v.isoformat()
    return v


# --- Input records (already fetched from the API) ---


class Student(RecordSchema):
    id: int
    name: str | None = None
    class_level: str | None = None


class FeePayment(RecordSchema):
    """Fee payment record. Missing amounts count as 0."""

    id: int
    student_id: int | None = None
    fee_type: str = ""
    term: int | None = None
    year: int | None = None
    amount_due: Decimal = ZERO
    amount_paid: Decimal = ZERO
    payment_date: str | None = None
    status: str | None = None
    payment_method: str | None = None
    receipt_number: str | None = None

    @field_validator("amount_due", "amount_paid", mode="before")
    @classmethod
    def default_amounts(cls, v):
        return _money_before(v)

    @field_validator("fee_type", mode="before")
    @classmethod
    def default_fee_type(cls, v):
        return "" if v is None else v

    @field_validator("payment_date", mode="before")
    @classmethod
    def iso_payment_date(cls, v):
        return _iso_before(v)

    @property
    def balance(self) -> Decimal:
        """Due minus paid; negative on overpayment."""
        return self.amount_due - self.amount_paid


class Expense(RecordSchema):
    id: int
    category_id: int | None = None
    amount: Decimal = ZERO
    description: str | None = None
    expense_date: str = ""
    vendor_name: str | None = None
    receipt_number: str | None = None
    status: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def default_amount(cls, v):
        return _money_before(v)

    @field_validator("expense_date", mode="before")
    @classmethod
    def iso_expense_date(cls, v):
        if v is None:
            return ""
        return _iso_before(v)


class ExpenseCategory(RecordSchema):
    id: int
    name: str | None = None


class ReportConfig(RecordSchema):
    """School details printed at the top of every report."""

    school_name: str = ""
    address_box: str | None = None
    contact_phones: str | None = None

    @classmethod
    def from_settings(cls) -> "ReportConfig":
        info = settings.school_info
        return cls(
            school_name=info["name"],
            address_box=info["address"] or None,
            contact_phones=info["phone"] or None,
        )


class FinancialReportFilters(RecordSchema):
    """Filters chosen on the reports screen."""

    term: int = Field(ge=1, le=3)
    year: int
    class_level: str = ALL_CLASSES
    date_from: str | None = None
    date_to: str | None = None
    payment_id: int | None = None

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def iso_dates(cls, v):
        if v == "":
            return None
        return _iso_before(v)

    @field_validator("class_level", mode="before")
    @classmethod
    def default_class(cls, v):
        return v or ALL_CLASSES

    @property
    def all_classes(self) -> bool:
        return self.class_level == ALL_CLASSES


class ReportData(BaseSchema):
    """Collections the reports are computed from."""

    payments: list[FeePayment] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    categories: list[ExpenseCategory] = Field(default_factory=list)
    students: list[Student] = Field(default_factory=list)


# --- Aggregation results ---


class GroupedAmount(BaseSchema):
    """Accumulated due/paid for one group key (fee type, category name or student id)."""

    key: str | int
    due: Decimal = ZERO
    paid: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.due - self.paid


# --- Fee Collection ---

class FeeCollectionLine(BaseSchema):
    """One payment in the Fee Collection report."""

    payment_id: int
    fee_type: str
    payment_date: str | None
    student_name: str
    class_level: str
    amount_due: Decimal
    amount_paid: Decimal
    status: str
    payment_method: str
    receipt_number: str

    @property
    def balance(self) -> Decimal:
        return self.amount_due - self.amount_paid


class FeeCollectionGroup(BaseSchema):
    """Payments of one fee type with subtotal."""

    fee_type: str
    lines: list[FeeCollectionLine] = Field(default_factory=list)
    total_due: Decimal = ZERO
    total_paid: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.total_due - self.total_paid


class FeeCollectionReport(BaseSchema):
    """Fee Collection: payments grouped by fee type (first-seen order)."""

    report_type: Literal[ReportType.FEE_COLLECTION] = ReportType.FEE_COLLECTION
    term: int
    year: int
    class_level: str
    groups: list[FeeCollectionGroup]
    lines: list[FeeCollectionLine]  # filtered order, for flat exports
    total_due: Decimal
    total_paid: Decimal

    @property
    def balance(self) -> Decimal:
        return self.total_due - self.total_paid


# --- Expense Report ---

class ExpenseLine(BaseSchema):
    """One expense in the Expense report."""

    expense_id: int
    category: str
    expense_date: str
    description: str
    vendor_name: str
    receipt_number: str
    amount: Decimal


class ExpenseGroup(BaseSchema):
    """Expenses of one category with subtotal."""

    category: str
    lines: list[ExpenseLine] = Field(default_factory=list)
    total: Decimal = ZERO


class ExpenseReport(BaseSchema):
    """Expense report: expenses grouped by category (first-seen order)."""

    report_type: Literal[ReportType.EXPENSE] = ReportType.EXPENSE
    date_from: str | None
    date_to: str | None
    groups: list[ExpenseGroup]
    lines: list[ExpenseLine]  # filtered order, for flat exports
    total: Decimal

    @property
    def range_label(self) -> str:
        if self.date_from or self.date_to:
            return f"{self.date_from or 'Start'} to {self.date_to or 'Present'}"
        return "All Time"


# --- Income Statement ---

class IncomeLine(BaseSchema):
    """Revenue line (fee type) or expense line (category)."""

    label: str
    amount: Decimal


class IncomeStatement(BaseSchema):
    """Revenue (term-scoped) vs expenses (year-scoped)."""

    report_type: Literal[ReportType.INCOME_STATEMENT] = ReportType.INCOME_STATEMENT
    term: int
    year: int
    revenue_lines: list[IncomeLine]
    expense_lines: list[IncomeLine]
    total_revenue: Decimal
    total_expenses: Decimal

    @property
    def net_income(self) -> Decimal:
        return self.total_revenue - self.total_expenses

    @property
    def is_profit(self) -> bool:
        return self.net_income >= 0

    @property
    def net_income_tone(self) -> str:
        return "positive" if self.is_profit else "negative"


# --- Outstanding Fees ---

class StudentBalanceRow(BaseSchema):
    """Per-student totals across all fee types."""

    student_id: int
    name: str
    class_level: str
    total_due: Decimal
    total_paid: Decimal
    balance: Decimal


class OutstandingFeesReport(BaseSchema):
    """Students with a positive balance only, largest balance first."""

    report_type: Literal[ReportType.OUTSTANDING] = ReportType.OUTSTANDING
    term: int
    year: int
    class_level: str
    rows: list[StudentBalanceRow]
    total_outstanding: Decimal
    student_count: int


# --- Student Balances ---

class FeeBreakdownItem(BaseSchema):
    fee_type: str
    due: Decimal = ZERO
    paid: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.due - self.paid


class StudentFeeBreakdownRow(BaseSchema):
    """Per-student fee breakdown (fee types in first-seen order)."""

    student_id: int
    name: str
    class_level: str
    fees: list[FeeBreakdownItem]
    total_due: Decimal
    total_paid: Decimal
    balance: Decimal

    @property
    def owing_fees(self) -> list[FeeBreakdownItem]:
        """Fee types still owing money."""
        return [f for f in self.fees if f.balance > 0]

    @property
    def fully_paid(self) -> bool:
        return not self.owing_fees


class StudentBalancesReport(BaseSchema):
    """All students with fee breakdown, largest balance first (fully paid kept)."""

    report_type: Literal[ReportType.STUDENT_BALANCES] = ReportType.STUDENT_BALANCES
    term: int
    year: int
    class_level: str
    rows: list[StudentFeeBreakdownRow]
    total_due: Decimal
    total_paid: Decimal
    total_outstanding: Decimal
    student_count: int


# --- Receipt ---

class PaymentReceipt(BaseSchema):
    """Single payment receipt."""

    report_type: Literal[ReportType.RECEIPT] = ReportType.RECEIPT
    payment_id: int
    receipt_number: str
    payment_date: str | None
    student_name: str
    class_level: str
    fee_type: str
    term: int | None
    year: int | None
    amount_paid: Decimal
    amount_due: Decimal
    balance: Decimal
    payment_method: str


ReportResult = Union[
    FeeCollectionReport,
    ExpenseReport,
    IncomeStatement,
    OutstandingFeesReport,
    StudentBalancesReport,
    PaymentReceipt,
]
