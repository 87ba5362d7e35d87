"""Turn report data into document sections and flat spreadsheet rows."""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from src.core.pdf.layout import DocumentLayout, ReportHeader, SummaryLine, TableSection
from src.core.pdf.service import DocumentRenderer, amount_to_words
from src.modules.reports.schemas import (
    ALL_CLASSES,
    ExpenseReport,
    FeeCollectionReport,
    IncomeStatement,
    OutstandingFeesReport,
    PaymentReceipt,
    ReportConfig,
    ReportResult,
    StudentBalancesReport,
    StudentFeeBreakdownRow,
)
from src.shared.utils.formatting import format_currency, format_date, format_generated_on

FULLY_PAID = "Fully Paid"

# Head row fills
BLUE = "#0052cc"
GREEN = "#00875a"
RED = "#ff5630"
ORANGE = "#ff991f"

_SHEET_NAME_FORBIDDEN = re.compile(r"[\\/?*\[\]:]")


@dataclass
class Sheet:
    """One worksheet: column order, fixed widths (characters) and uniform rows."""

    name: str
    columns: list[str]
    rows: list[dict[str, str | int | float | Decimal]] = field(default_factory=list)
    widths: list[int] = field(default_factory=list)


@dataclass
class AssembledReport:
    document: DocumentLayout
    sheets: list[Sheet]


def sheet_name(name: str) -> str:
    """Excel sheet names: max 31 characters, no \\ / ? * [ ] :"""
    return _SHEET_NAME_FORBIDDEN.sub("_", name)[:31]


def class_label(class_level: str) -> str:
    return "All Classes" if class_level == ALL_CLASSES else class_level


def build_header(config: ReportConfig, generated_on: date) -> ReportHeader:
    return ReportHeader(
        school_name=config.school_name or "School Name",
        address=config.address_box,
        phones=config.contact_phones,
        generated_line=f"Generated: {format_generated_on(generated_on)}",
    )


def breakdown_text(row: StudentFeeBreakdownRow) -> str:
    """Document form: fee types still owing, one per line, or 'Fully Paid'."""
    owing = [f"{f.fee_type}: {format_currency(f.balance)}" for f in row.owing_fees]
    return "\n".join(owing) or FULLY_PAID


def breakdown_sheet_text(row: StudentFeeBreakdownRow) -> str:
    """Spreadsheet form: every fee type with its balance, '; '-separated."""
    return "; ".join(f"{f.fee_type}: {format_currency(f.balance)}" for f in row.fees)


# --- Fee Collection ---

def _fee_collection(report: FeeCollectionReport, header: ReportHeader) -> AssembledReport:
    sections = []
    for group in report.groups:
        sections.append(
            TableSection(
                title=group.fee_type,
                head=["Date", "Student", "Class", "Due", "Paid", "Status", "Method"],
                body=[
                    [
                        format_date(line.payment_date),
                        line.student_name,
                        line.class_level,
                        format_currency(line.amount_due),
                        format_currency(line.amount_paid),
                        line.status,
                        line.payment_method,
                    ]
                    for line in group.lines
                ],
                subtotal=[
                    "", "SUBTOTAL", "",
                    format_currency(group.total_due), format_currency(group.total_paid),
                    "", "",
                ],
                accent=BLUE,
                numeric_columns=(3, 4),
            )
        )
    document = DocumentLayout(
        title=(
            f"Fee Collection Report - {class_label(report.class_level)}"
            f" - Term {report.term}, {report.year}"
        ),
        header=header,
        sections=sections,
        summary=[
            SummaryLine(
                f"GRAND TOTAL - Due: {format_currency(report.total_due)}"
                f" | Paid: {format_currency(report.total_paid)}"
                f" | Balance: {format_currency(report.balance)}"
            )
        ],
    )
    sheet = Sheet(
        name=sheet_name(f"Fee_Collection_{report.class_level}"),
        columns=[
            "Date", "Student Name", "Class", "Fee Type", "Amount Due", "Amount Paid",
            "Balance", "Status", "Payment Method", "Receipt Number",
        ],
        rows=[
            {
                "Date": format_date(line.payment_date),
                "Student Name": line.student_name,
                "Class": line.class_level,
                "Fee Type": line.fee_type,
                "Amount Due": line.amount_due,
                "Amount Paid": line.amount_paid,
                "Balance": line.balance,
                "Status": line.status,
                "Payment Method": line.payment_method,
                "Receipt Number": line.receipt_number,
            }
            for line in report.lines
        ],
        widths=[12, 30, 10, 20, 15, 15, 15, 12, 15, 18],
    )
    return AssembledReport(document=document, sheets=[sheet])


# --- Expense Report ---

def _expense(report: ExpenseReport, header: ReportHeader) -> AssembledReport:
    sections = [
        TableSection(
            title=group.category,
            head=["Date", "Description", "Vendor", "Receipt #", "Amount"],
            body=[
                [
                    format_date(line.expense_date),
                    line.description,
                    line.vendor_name,
                    line.receipt_number,
                    format_currency(line.amount),
                ]
                for line in group.lines
            ],
            subtotal=["", "SUBTOTAL", "", "", format_currency(group.total)],
            accent=RED,
            numeric_columns=(4,),
        )
        for group in report.groups
    ]
    document = DocumentLayout(
        title=f"Expense Report - {report.range_label}",
        header=header,
        sections=sections,
        summary=[SummaryLine(f"GRAND TOTAL: {format_currency(report.total)}")],
    )
    sheet = Sheet(
        name="Expenses",
        columns=["Date", "Category", "Description", "Vendor", "Receipt Number", "Amount"],
        rows=[
            {
                "Date": format_date(line.expense_date),
                "Category": line.category,
                "Description": line.description,
                "Vendor": line.vendor_name,
                "Receipt Number": line.receipt_number,
                "Amount": line.amount,
            }
            for line in report.lines
        ],
        widths=[12, 20, 40, 25, 18, 15],
    )
    return AssembledReport(document=document, sheets=[sheet])


# --- Income Statement ---

def _income_statement(report: IncomeStatement, header: ReportHeader) -> AssembledReport:
    revenue = TableSection(
        title="REVENUE",
        head=["Fee Type", "Amount"],
        body=[
            *[[line.label, format_currency(line.amount)] for line in report.revenue_lines],
            ["TOTAL REVENUE", format_currency(report.total_revenue)],
        ],
        theme="plain",
        accent=GREEN,
        numeric_columns=(1,),
        bold_last_row=True,
    )
    expenses = TableSection(
        title="EXPENSES",
        head=["Category", "Amount"],
        body=[
            *[[line.label, format_currency(line.amount)] for line in report.expense_lines],
            ["TOTAL EXPENSES", format_currency(report.total_expenses)],
        ],
        theme="plain",
        accent=RED,
        numeric_columns=(1,),
        bold_last_row=True,
    )
    document = DocumentLayout(
        title=f"Income Statement - Term {report.term}, {report.year}",
        header=header,
        sections=[revenue, expenses],
        summary=[
            SummaryLine(
                f"NET INCOME: {format_currency(report.net_income)}",
                tone=report.net_income_tone,
                size="large",
            )
        ],
    )
    sheets = [
        Sheet(
            name="Summary",
            columns=["Item", "Amount"],
            rows=[
                {"Item": "Total Revenue", "Amount": report.total_revenue},
                {"Item": "Total Expenses", "Amount": report.total_expenses},
                {"Item": "Net Income", "Amount": report.net_income},
            ],
            widths=[20, 18],
        ),
        Sheet(
            name="Revenue",
            columns=["Fee Type", "Amount"],
            rows=[
                *[{"Fee Type": line.label, "Amount": line.amount} for line in report.revenue_lines],
                {"Fee Type": "TOTAL REVENUE", "Amount": report.total_revenue},
            ],
            widths=[30, 18],
        ),
        Sheet(
            name="Expenses",
            columns=["Category", "Amount"],
            rows=[
                *[{"Category": line.label, "Amount": line.amount} for line in report.expense_lines],
                {"Category": "TOTAL EXPENSES", "Amount": report.total_expenses},
            ],
            widths=[30, 18],
        ),
    ]
    return AssembledReport(document=document, sheets=sheets)


# --- Outstanding Fees ---

def _outstanding(report: OutstandingFeesReport, header: ReportHeader) -> AssembledReport:
    section = TableSection(
        head=["#", "Student Name", "Class", "Total Due", "Paid", "Balance"],
        body=[
            [
                str(idx),
                row.name,
                row.class_level,
                format_currency(row.total_due),
                format_currency(row.total_paid),
                format_currency(row.balance),
            ]
            for idx, row in enumerate(report.rows, start=1)
        ],
        accent=ORANGE,
        numeric_columns=(3, 4, 5),
    )
    document = DocumentLayout(
        title=(
            f"Outstanding Fees Report - {class_label(report.class_level)}"
            f" - Term {report.term}, {report.year}"
        ),
        header=header,
        sections=[section],
        summary=[
            SummaryLine(f"Total Students with Outstanding Fees: {report.student_count}"),
            SummaryLine(f"Total Outstanding Amount: {format_currency(report.total_outstanding)}"),
        ],
    )
    sheet = Sheet(
        name="Outstanding_Fees",
        columns=["Student Name", "Class", "Total Due", "Total Paid", "Balance"],
        rows=[
            {
                "Student Name": row.name,
                "Class": row.class_level,
                "Total Due": row.total_due,
                "Total Paid": row.total_paid,
                "Balance": row.balance,
            }
            for row in report.rows
        ],
        widths=[30, 10, 15, 15, 15],
    )
    return AssembledReport(document=document, sheets=[sheet])


# --- Student Balances ---

def _student_balances(report: StudentBalancesReport, header: ReportHeader) -> AssembledReport:
    section = TableSection(
        head=["#", "Student Name", "Class", "Fee Breakdown", "Total Due", "Total Paid", "Balance"],
        body=[
            [
                str(idx),
                row.name,
                row.class_level,
                breakdown_text(row),
                format_currency(row.total_due),
                format_currency(row.total_paid),
                format_currency(row.balance),
            ]
            for idx, row in enumerate(report.rows, start=1)
        ],
        accent=BLUE,
        numeric_columns=(4, 5, 6),
    )
    document = DocumentLayout(
        title=(
            f"Student Fee Balances - {class_label(report.class_level)}"
            f" - Term {report.term}, {report.year}"
        ),
        header=header,
        sections=[section],
        summary=[
            SummaryLine(f"Total Students: {report.student_count}"),
            SummaryLine(f"Total Due: {format_currency(report.total_due)}"),
            SummaryLine(f"Total Paid: {format_currency(report.total_paid)}"),
            SummaryLine(f"Total Outstanding: {format_currency(report.total_outstanding)}"),
        ],
    )
    sheet = Sheet(
        name="Student_Balances",
        columns=["Student Name", "Class", "Fee Breakdown", "Total Due", "Total Paid", "Balance"],
        rows=[
            {
                "Student Name": row.name,
                "Class": row.class_level,
                "Fee Breakdown": breakdown_sheet_text(row),
                "Total Due": row.total_due,
                "Total Paid": row.total_paid,
                "Balance": row.balance,
            }
            for row in report.rows
        ],
        widths=[30, 10, 50, 15, 15, 15],
    )
    return AssembledReport(document=document, sheets=[sheet])


def assemble(
    result: ReportResult,
    config: ReportConfig,
    generated_on: date | None = None,
) -> AssembledReport:
    """Document layout and flat sheets for a report. Receipts use build_receipt_context instead."""
    header = build_header(config, generated_on or date.today())
    match result:
        case FeeCollectionReport():
            return _fee_collection(result, header)
        case ExpenseReport():
            return _expense(result, header)
        case IncomeStatement():
            return _income_statement(result, header)
        case OutstandingFeesReport():
            return _outstanding(result, header)
        case StudentBalancesReport():
            return _student_balances(result, header)
        case PaymentReceipt():
            raise TypeError("Receipts are rendered with build_receipt_context")
        case _:
            raise TypeError(f"Unknown report result: {type(result).__name__}")


def build_receipt_context(
    receipt: PaymentReceipt,
    config: ReportConfig,
    generated_on: date | None = None,
) -> dict:
    """Build template context for the receipt PDF."""
    return {
        "receipt": {
            "receipt_number": receipt.receipt_number,
            "date": format_date(receipt.payment_date),
            "student_name": receipt.student_name,
            "class_level": receipt.class_level,
            "fee_type": receipt.fee_type,
            "term": f"Term {receipt.term}" if receipt.term is not None else "-",
            "year": str(receipt.year) if receipt.year is not None else "-",
            "amount_paid": format_currency(receipt.amount_paid),
            "amount_due": format_currency(receipt.amount_due),
            "balance": format_currency(receipt.balance),
            "payment_method": receipt.payment_method,
        },
        "amount_in_words": amount_to_words(float(receipt.amount_paid)),
        "school_info": {
            "name": config.school_name or "School Name",
            "address": config.address_box or "",
            "phone": config.contact_phones or "",
        },
        "generated_line": f"Generated: {format_generated_on(generated_on or date.today())}",
    }


def write_document(
    layout: DocumentLayout,
    renderer: DocumentRenderer,
    page_threshold: float,
) -> bytes:
    """
    Feed a layout to the document renderer.

    After each section the cursor reported by the renderer is checked; past the
    threshold, the next section starts on a new page.
    """
    renderer.begin(layout.title, layout.header)
    for section in layout.sections:
        cursor = renderer.add_section(section)
        if cursor > page_threshold:
            renderer.add_page()
    renderer.add_summary(layout.summary)
    return renderer.finish()
