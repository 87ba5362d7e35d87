from typing import Any


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppException):
    """Validation error."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message=message, status_code=422, details=details)


class UnsupportedExportError(ValidationError):
    """Report type has no rendering in the requested format (e.g. receipt as Excel)."""

    def __init__(self, report_type: str, export_format: str):
        super().__init__(
            message=f"{export_format.upper()} export not available for report type '{report_type}'",
            field="export_format",
        )
        self.details.update({"report_type": report_type, "export_format": export_format})


class ReportRenderingError(AppException):
    """Document or spreadsheet composition failed for a report."""

    def __init__(self, report_type: str, export_format: str, message: str):
        super().__init__(
            message=f"Failed to render {report_type} report as {export_format}: {message}",
            status_code=500,
            details={"report_type": report_type, "export_format": export_format},
        )
        self.report_type = report_type
        self.export_format = export_format


class PdfGenerationUnavailableError(AppException):
    """WeasyPrint/system libraries not available (e.g. pango on macOS)."""

    def __init__(self, message: str | None = None):
        msg = message or (
            "PDF generation is not available on this system. "
            "On macOS install: brew install pango glib."
        )
        super().__init__(message=msg, status_code=503)
