"""PDF generation (financial reports and payment receipts) from HTML templates."""

from pathlib import Path
from typing import Protocol

from jinja2 import Environment, FileSystemLoader
from num2words import num2words

from src.core.exceptions import PdfGenerationUnavailableError
from src.core.pdf.layout import ReportHeader, SummaryLine, TableSection

TEMPLATE_DIR = Path(__file__).resolve().parent.parent.parent / "templates" / "pdf"


def amount_to_words(amount: float) -> str:
    """Convert amount to words (e.g. 50000 -> 'Fifty Thousand Shillings Only')."""
    amount_int = int(round(amount, 0))
    words = num2words(amount_int, lang="en").title()
    return f"{words} Shillings Only"


def _template_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )


def html_to_pdf(html_content: str) -> bytes:
    """Render HTML with WeasyPrint and return PDF bytes."""
    try:
        from weasyprint import HTML
    except (OSError, ImportError) as e:
        raise PdfGenerationUnavailableError(
            f"PDF generation unavailable (WeasyPrint/system libs). On macOS: brew install pango glib. {e!s}"
        ) from e
    try:
        return HTML(string=html_content).write_pdf()
    except Exception as e:
        raise PdfGenerationUnavailableError(str(e)) from e


class DocumentRenderer(Protocol):
    """Paginated document back end. Every call returns the vertical cursor (mm) after it."""

    def begin(self, title: str, header: ReportHeader) -> float: ...

    def add_section(self, section: TableSection) -> float: ...

    def add_page(self) -> float: ...

    def add_summary(self, lines: list[SummaryLine]) -> float: ...

    def finish(self) -> bytes: ...


class ReportPdfRenderer:
    """
    A4 report document: header block, table sections, explicit page breaks, totals.

    The cursor is an estimate of how far down the current page the content reaches,
    using fixed heights per element (millimetres).
    """

    TOP_MARGIN_MM = 20.0
    HEADER_HEIGHT_MM = 35.0
    SECTION_TITLE_MM = 6.0
    HEAD_ROW_MM = 8.0
    BODY_LINE_MM = 6.0
    TABLE_GAP_MM = 10.0
    SUMMARY_LINE_MM = 7.0

    def __init__(self, env: Environment | None = None) -> None:
        self._env = env or _template_env()
        self._title = ""
        self._header: ReportHeader | None = None
        self._blocks: list[dict] = []
        self._cursor = 0.0
        self.page_count = 0

    @property
    def cursor(self) -> float:
        return self._cursor

    def begin(self, title: str, header: ReportHeader) -> float:
        self._title = title
        self._header = header
        self._blocks = []
        self.page_count = 1
        self._cursor = self.TOP_MARGIN_MM + self.HEADER_HEIGHT_MM
        return self._cursor

    def add_section(self, section: TableSection) -> float:
        if section.title:
            self._cursor += self.SECTION_TITLE_MM
        self._cursor += self.HEAD_ROW_MM
        for row in section.rows:
            lines = max((cell.count("\n") + 1 for cell in row), default=1)
            self._cursor += self.BODY_LINE_MM * lines
        self._cursor += self.TABLE_GAP_MM
        self._blocks.append({"kind": "section", "section": section})
        return self._cursor

    def add_page(self) -> float:
        self._blocks.append({"kind": "page_break"})
        self.page_count += 1
        self._cursor = self.TOP_MARGIN_MM
        return self._cursor

    def add_summary(self, lines: list[SummaryLine]) -> float:
        if lines:
            self._blocks.append({"kind": "summary", "lines": lines})
            self._cursor += self.SUMMARY_LINE_MM * len(lines)
        return self._cursor

    def render_html(self) -> str:
        template = self._env.get_template("report.html")
        return template.render(
            title=self._title,
            header=self._header,
            blocks=self._blocks,
        )

    def finish(self) -> bytes:
        return html_to_pdf(self.render_html())


class PDFService:
    """Generate PDF documents from Jinja2 templates and WeasyPrint."""

    def __init__(self) -> None:
        self._env = _template_env()

    def report_renderer(self) -> ReportPdfRenderer:
        """Fresh renderer for one report document."""
        return ReportPdfRenderer(self._env)

    def render_receipt_html(self, context: dict) -> str:
        template = self._env.get_template("receipt.html")
        return template.render(**context)

    def generate_receipt_pdf(self, context: dict) -> bytes:
        """Render receipt template with context and return PDF bytes."""
        return html_to_pdf(self.render_receipt_html(context))


pdf_service = PDFService()
