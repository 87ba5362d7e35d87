from src.core.pdf.layout import DocumentLayout, ReportHeader, SummaryLine, TableSection
from src.core.pdf.service import (
    DocumentRenderer,
    ReportPdfRenderer,
    amount_to_words,
    pdf_service,
)

__all__ = [
    "pdf_service",
    "amount_to_words",
    "DocumentRenderer",
    "ReportPdfRenderer",
    "DocumentLayout",
    "ReportHeader",
    "SummaryLine",
    "TableSection",
]
