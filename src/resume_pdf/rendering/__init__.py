"""Headless-browser PDF rendering: renderer pool, exporter and determinism normalizer."""

from resume_pdf.rendering.exporter import DocumentExporter
from resume_pdf.rendering.network import NetworkPolicy
from resume_pdf.rendering.normalizer import normalize_pdf_bytes, normalize_pdf_file
from resume_pdf.rendering.pool import RendererPool

__all__ = [
    "DocumentExporter",
    "NetworkPolicy",
    "RendererPool",
    "normalize_pdf_bytes",
    "normalize_pdf_file",
]
