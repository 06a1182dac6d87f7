"""Dispatch one resume to several output formats."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from resume_pdf.config import AppConfig
from resume_pdf.errors import filesystem_error_from
from resume_pdf.export.pdf import PDFGenerator
from resume_pdf.export.text import generate_plain_text
from resume_pdf.models.options import DEFAULT_TEMPLATE, RenderOptions
from resume_pdf.models.resume import ResumeDocument
from resume_pdf.validators.resume_validator import load_resume

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("pdf", "html", "txt")


@dataclass
class FormatResult:
    format: str
    file_path: Path | None
    success: bool
    error: str | None = None


async def _write_text(path: Path, content: str) -> None:
    await asyncio.to_thread(path.write_text, content, encoding="utf-8")


async def export_formats(
    resume: ResumeDocument,
    formats: list[str],
    output_dir: str | Path,
    base_name: str,
    *,
    generator: PDFGenerator,
    template: str = DEFAULT_TEMPLATE,
    ats_mode: bool = False,
    timestamp: bool = False,
    today: date | None = None,
) -> list[FormatResult]:
    """Write each requested format; a failing format does not stop the rest."""
    output_dir = Path(output_dir)
    try:
        await asyncio.to_thread(output_dir.mkdir, parents=True, exist_ok=True)
    except OSError as exc:
        raise filesystem_error_from(
            exc, f"Cannot create output directory: {output_dir}", path=str(output_dir)
        ) from exc
    suffix = f"-{(today or date.today()).isoformat()}" if timestamp else ""

    results: list[FormatResult] = []
    for fmt in formats:
        path = output_dir / f"{base_name}{suffix}.{fmt}"
        try:
            if fmt == "pdf":
                options = RenderOptions(template=template, ats_mode=ats_mode, output=path)
                await generator.generate(resume, options)
            elif fmt == "html":
                options = RenderOptions(template=template, ats_mode=ats_mode)
                await _write_text(path, generator.renderer.render(resume, options))
            elif fmt == "txt":
                await _write_text(path, generate_plain_text(resume))
            else:
                raise ValueError(f"Unsupported format: {fmt}")
        except Exception as exc:
            logger.warning("Failed to export %s: %s", fmt, exc)
            results.append(FormatResult(format=fmt, file_path=None, success=False, error=str(exc)))
            continue
        results.append(FormatResult(format=fmt, file_path=path, success=True))
    return results


async def generate_multiple_formats(
    resume_file: str | Path,
    formats: list[str],
    output_dir: str | Path,
    *,
    base_name: str | None = None,
    template: str = DEFAULT_TEMPLATE,
    ats_mode: bool = False,
    timestamp: bool = False,
    config: AppConfig | None = None,
) -> list[FormatResult]:
    """Validate resume_file and export it to every format in formats."""
    resume = load_resume(resume_file)
    async with PDFGenerator(config) as generator:
        return await export_formats(
            resume,
            formats,
            output_dir,
            base_name or Path(resume_file).stem,
            generator=generator,
            template=template,
            ats_mode=ats_mode,
            timestamp=timestamp,
        )
