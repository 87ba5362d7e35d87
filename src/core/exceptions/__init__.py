from src.core.exceptions.base import (
    AppException,
    ValidationError,
    UnsupportedExportError,
    ReportRenderingError,
    PdfGenerationUnavailableError,
)

__all__ = [
    "AppException",
    "ValidationError",
    "UnsupportedExportError",
    "ReportRenderingError",
    "PdfGenerationUnavailableError",
]
