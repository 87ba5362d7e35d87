"""Export financial reports: aggregation + renderer per report type, output file naming."""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from src.core.config import settings
from src.core.exceptions import ReportRenderingError, UnsupportedExportError
from src.core.pdf.service import pdf_service
from src.modules.reports.assembly import assemble, build_receipt_context, write_document
from src.modules.reports.excel_export import export_csv, export_workbook
from src.modules.reports.schemas import (
    ALL_CLASSES,
    ExportFormat,
    FinancialReportFilters,
    PaymentReceipt,
    ReportConfig,
    ReportData,
    ReportType,
)
from src.modules.reports.service import ReportsService
from src.shared.utils.formatting import safe_filename_part

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    ExportFormat.PDF: "application/pdf",
    ExportFormat.EXCEL: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.CSV: "text/csv",
}

EXTENSIONS = {
    ExportFormat.PDF: "pdf",
    ExportFormat.EXCEL: "xlsx",
    ExportFormat.CSV: "csv",
}

# Document file names: <ReportName>_Report_Term<term>_<year>.pdf
DOCUMENT_NAMES = {
    ReportType.FEE_COLLECTION: "Fee_Collection",
    ReportType.INCOME_STATEMENT: "Income_Statement",
    ReportType.OUTSTANDING: "Outstanding_Fees",
    ReportType.STUDENT_BALANCES: "Student_Fee_Balances",
}

# Spreadsheet file names carry the class: <Name>_<class|All>_Term<term>_<year>.<ext>
SHEET_NAMES = {
    ReportType.FEE_COLLECTION: "Fee_Collection",
    ReportType.OUTSTANDING: "Outstanding_Fees",
    ReportType.STUDENT_BALANCES: "Student_Balances",
}

SUPPORTED_FORMATS = {
    ReportType.FEE_COLLECTION: {ExportFormat.PDF, ExportFormat.EXCEL, ExportFormat.CSV},
    ReportType.EXPENSE: {ExportFormat.PDF, ExportFormat.EXCEL, ExportFormat.CSV},
    ReportType.INCOME_STATEMENT: {ExportFormat.PDF, ExportFormat.EXCEL},
    ReportType.OUTSTANDING: {ExportFormat.PDF, ExportFormat.EXCEL, ExportFormat.CSV},
    ReportType.STUDENT_BALANCES: {ExportFormat.PDF, ExportFormat.EXCEL, ExportFormat.CSV},
    ReportType.RECEIPT: {ExportFormat.PDF},
}


@dataclass(frozen=True)
class ExportArtifact:
    """Rendered report ready to be saved or downloaded."""

    filename: str
    content: bytes
    media_type: str
    report_type: ReportType


def build_filename(
    report_type: ReportType,
    export_format: ExportFormat,
    filters: FinancialReportFilters,
    receipt: PaymentReceipt | None = None,
) -> str:
    """
    File name encoding report type and the filters that scoped it.

    Term reports: Fee_Collection_Report_Term1_2024.pdf, or Fee_Collection_P.5_Term1_2024.xlsx
    for spreadsheets (class included). Expenses: Expense_Report_<from|all>_to_<to|present>.<ext>.
    Receipts: Receipt_<Student_Name>_<feeType>_Term<term>.pdf.
    """
    ext = EXTENSIONS[export_format]
    term_year = f"Term{filters.term}_{filters.year}"
    match report_type:
        case ReportType.EXPENSE:
            date_from = safe_filename_part(filters.date_from or "all")
            date_to = safe_filename_part(filters.date_to or "present")
            return f"Expense_Report_{date_from}_to_{date_to}.{ext}"
        case ReportType.RECEIPT:
            if receipt is None:
                raise ValueError("Receipt file name needs the receipt")
            term = receipt.term if receipt.term is not None else "-"
            name = safe_filename_part(receipt.student_name)
            return f"Receipt_{name}_{safe_filename_part(receipt.fee_type)}_Term{term}.{ext}"
        case ReportType.INCOME_STATEMENT:
            return f"{DOCUMENT_NAMES[report_type]}_Report_{term_year}.{ext}"
        case ReportType.FEE_COLLECTION | ReportType.OUTSTANDING | ReportType.STUDENT_BALANCES:
            if export_format == ExportFormat.PDF:
                return f"{DOCUMENT_NAMES[report_type]}_Report_{term_year}.{ext}"
            label = ALL_CLASSES if filters.all_classes else safe_filename_part(filters.class_level)
            return f"{SHEET_NAMES[report_type]}_{label}_{term_year}.{ext}"
        case _:
            raise ValueError(f"Unknown report type: {report_type}")


def export_report(
    report_type: ReportType,
    export_format: ExportFormat,
    data: ReportData,
    filters: FinancialReportFilters,
    config: ReportConfig | None = None,
    generated_on: date | None = None,
) -> ExportArtifact | None:
    """
    Compute a report and render it in the requested format.

    Returns None when a receipt is requested for a payment that does not exist.
    Raises UnsupportedExportError for formats a report does not have, and
    ReportRenderingError (report type attached) when rendering fails. No retries.
    """
    report_type = ReportType(report_type)
    export_format = ExportFormat(export_format)
    if export_format not in SUPPORTED_FORMATS[report_type]:
        raise UnsupportedExportError(report_type.value, export_format.value)

    config = config or ReportConfig.from_settings()
    generated_on = generated_on or date.today()
    result = ReportsService(data).aggregate(report_type, filters)
    if result is None:
        return None

    try:
        if isinstance(result, PaymentReceipt):
            context = build_receipt_context(result, config, generated_on)
            content = pdf_service.generate_receipt_pdf(context)
        else:
            assembled = assemble(result, config, generated_on)
            match export_format:
                case ExportFormat.PDF:
                    content = write_document(
                        assembled.document,
                        pdf_service.report_renderer(),
                        settings.page_content_threshold_mm,
                    )
                case ExportFormat.EXCEL:
                    content = export_workbook(assembled.sheets, generated_on)
                case ExportFormat.CSV:
                    content = export_csv(assembled.sheets[0])
    except Exception as e:
        logger.exception("Failed to export %s report as %s", report_type.value, export_format.value)
        raise ReportRenderingError(report_type.value, export_format.value, str(e)) from e

    filename = build_filename(
        report_type,
        export_format,
        filters,
        receipt=result if isinstance(result, PaymentReceipt) else None,
    )
    logger.info("Exported %s report as %s: %s", report_type.value, export_format.value, filename)
    return ExportArtifact(
        filename=filename,
        content=content,
        media_type=MEDIA_TYPES[export_format],
        report_type=report_type,
    )


def save_artifact(artifact: ExportArtifact, directory: str | Path | None = None) -> Path:
    """Write the exported file to directory (default: settings.report_output_dir)."""
    target_dir = Path(directory or settings.report_output_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / artifact.filename
    path.write_bytes(artifact.content)
    logger.info("Saved %s", path)
    return path
