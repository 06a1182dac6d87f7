"""Output formats for resume-pdf."""
from resume_pdf.export.multi_format import (
    SUPPORTED_FORMATS,
    FormatResult,
    generate_multiple_formats,
)
from resume_pdf.export.pdf import PDFGenerator, generate_pdf
from resume_pdf.export.text import generate_plain_text

__all__ = [
    "SUPPORTED_FORMATS",
    "FormatResult",
    "PDFGenerator",
    "generate_multiple_formats",
    "generate_pdf",
    "generate_plain_text",
]
