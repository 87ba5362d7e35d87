"""Tests for the PDF renderers. WeasyPrint is mocked so the suite does not need system libs."""

from unittest.mock import MagicMock, patch

import pytest

from src.core.exceptions import PdfGenerationUnavailableError
from src.core.pdf.layout import ReportHeader, SummaryLine, TableSection
from src.core.pdf.service import ReportPdfRenderer, amount_to_words, html_to_pdf, pdf_service

FAKE_PDF = b"%PDF-1.4 fake pdf content"

HEADER = ReportHeader(
    school_name="Kampala Hill Primary School",
    address="P.O. Box 123, Kampala",
    phones=None,
    generated_line="Generated: 15/03/2024",
)


def _section(rows: int, title: str | None = "Tuition") -> TableSection:
    return TableSection(
        title=title,
        head=["Date", "Amount"],
        body=[["01 Feb 2024", f"UGX {i:,}"] for i in range(rows)],
        subtotal=["SUBTOTAL", "UGX 0"],
        numeric_columns=(1,),
    )


class TestReportPdfRendererCursor:
    """The renderer reports how far down the page the content reaches."""

    def test_begin_returns_position_below_header(self):
        renderer = ReportPdfRenderer()
        assert renderer.begin("Report", HEADER) == 55.0
        assert renderer.page_count == 1

    def test_section_advances_cursor(self):
        """Title 6 + head 8 + (2 rows + subtotal) * 6 + gap 10."""
        renderer = ReportPdfRenderer()
        renderer.begin("Report", HEADER)
        assert renderer.add_section(_section(2)) == 55.0 + 6 + 8 + 18 + 10

    def test_multiline_cells_take_more_room(self):
        renderer = ReportPdfRenderer()
        renderer.begin("Report", HEADER)
        section = TableSection(head=["Breakdown"], body=[["Tuition: UGX 1\nBoarding: UGX 2"]])
        assert renderer.add_section(section) == 55.0 + 8 + 12 + 10

    def test_add_page_resets_cursor(self):
        renderer = ReportPdfRenderer()
        renderer.begin("Report", HEADER)
        renderer.add_section(_section(30))
        assert renderer.add_page() == 20.0
        assert renderer.page_count == 2

    def test_summary_lines(self):
        renderer = ReportPdfRenderer()
        start = renderer.begin("Report", HEADER)
        assert renderer.add_summary([SummaryLine("A"), SummaryLine("B")]) == start + 14
        assert renderer.add_summary([]) == start + 14


class TestReportPdfRendererHtml:
    def test_html_contains_header_tables_and_breaks(self):
        renderer = ReportPdfRenderer()
        renderer.begin("Fee Collection Report - All Classes - Term 1, 2024", HEADER)
        renderer.add_section(_section(1))
        renderer.add_page()
        renderer.add_section(_section(1, title="Boarding"))
        renderer.add_summary([SummaryLine("NET INCOME: UGX -5,000", tone="negative", size="large")])
        html = renderer.render_html()

        assert "Kampala Hill Primary School" in html
        assert "P.O. Box 123, Kampala" in html
        assert "Fee Collection Report - All Classes - Term 1, 2024" in html
        assert "Generated: 15/03/2024" in html
        assert html.index("Tuition") < html.index("page-break\"></div>") < html.index("Boarding")
        assert "SUBTOTAL" in html
        assert 'class="negative large"' in html

    def test_html_escapes_record_text(self):
        renderer = ReportPdfRenderer()
        renderer.begin("Report", HEADER)
        renderer.add_section(TableSection(head=["Description"], body=[["<b>Chalk & pens</b>"]]))
        html = renderer.render_html()
        assert "&lt;b&gt;Chalk &amp; pens&lt;/b&gt;" in html

    def test_finish_renders_pdf(self):
        renderer = ReportPdfRenderer()
        renderer.begin("Report", HEADER)
        with patch("src.core.pdf.service.html_to_pdf", return_value=FAKE_PDF) as mock_pdf:
            assert renderer.finish() == FAKE_PDF
        assert "Report" in mock_pdf.call_args.args[0]


class TestHtmlToPdf:
    def test_weasyprint_failure_raises_unavailable(self):
        fake_weasyprint = MagicMock()
        fake_weasyprint.HTML.return_value.write_pdf.side_effect = RuntimeError("pango missing")
        with patch.dict("sys.modules", {"weasyprint": fake_weasyprint}):
            with pytest.raises(PdfGenerationUnavailableError) as exc_info:
                html_to_pdf("<html></html>")
        assert "pango missing" in exc_info.value.message
        assert exc_info.value.status_code == 503

    def test_weasyprint_bytes_returned(self):
        fake_weasyprint = MagicMock()
        fake_weasyprint.HTML.return_value.write_pdf.return_value = FAKE_PDF
        with patch.dict("sys.modules", {"weasyprint": fake_weasyprint}):
            assert html_to_pdf("<html></html>") == FAKE_PDF
        fake_weasyprint.HTML.assert_called_once_with(string="<html></html>")


class TestReceiptTemplate:
    def test_receipt_html(self):
        context = {
            "receipt": {
                "receipt_number": "RCP-7",
                "date": "05 Mar 2024",
                "student_name": "Alice Nambi",
                "class_level": "P.5",
                "fee_type": "Tuition",
                "term": "Term 1",
                "year": "2024",
                "amount_paid": "UGX 60,000",
                "amount_due": "UGX 100,000",
                "balance": "UGX 40,000",
                "payment_method": "Cash",
            },
            "amount_in_words": "Sixty Thousand Shillings Only",
            "school_info": {"name": "Kampala Hill Primary School", "address": "", "phone": ""},
            "generated_line": "Generated: 15/03/2024",
        }
        html = pdf_service.render_receipt_html(context)
        assert "PAYMENT RECEIPT" in html
        assert "RCP-7" in html
        assert "Balance: UGX 40,000" in html
        assert "Sixty Thousand Shillings Only" in html


class TestAmountToWords:
    def test_whole_amount(self):
        assert amount_to_words(60000) == "Sixty Thousand Shillings Only"

    def test_rounds_fraction(self):
        assert amount_to_words(99.6) == "One Hundred Shillings Only"
