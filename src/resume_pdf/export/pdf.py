"""PDF generation: render HTML, print it through the renderer pool, normalize."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from resume_pdf.config import AppConfig
from resume_pdf.errors import filesystem_error_from
from resume_pdf.models.options import RenderOptions
from resume_pdf.models.resume import ResumeDocument
from resume_pdf.rendering.exporter import DocumentExporter
from resume_pdf.rendering.normalizer import normalize_pdf_file
from resume_pdf.rendering.pool import RendererPool
from resume_pdf.templates.cache import TemplateCache
from resume_pdf.templates.renderer import HTMLRenderer

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path("resume.pdf")


class PDFGenerator:
    """Composition root for PDF output.

    Owns one RendererPool and one HTMLRenderer. Use as an async context
    manager, or call ``close()``, so the browser process is shut down.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        pool: RendererPool | None = None,
        renderer: HTMLRenderer | None = None,
        exporter: DocumentExporter | None = None,
    ):
        self.config = config or AppConfig()
        self.pool = pool or RendererPool(self.config.renderer)
        self.renderer = renderer or HTMLRenderer(
            TemplateCache(
                max_size=self.config.templates.cache_max_size,
                ttl_seconds=self.config.templates.cache_ttl_seconds,
            ),
            offline_check=self.config.templates.offline_check,
        )
        self.exporter = exporter or DocumentExporter(self.config.renderer.content_timeout_ms)

    async def __aenter__(self) -> PDFGenerator:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.pool.shutdown()

    async def generate(self, resume: ResumeDocument, options: RenderOptions | None = None) -> Path:
        """Write the resume as a PDF and return its path."""
        options = options or RenderOptions()
        output_path = Path(options.output or DEFAULT_OUTPUT)

        try:
            await asyncio.to_thread(output_path.parent.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise filesystem_error_from(
                exc,
                f"Cannot create output directory: {output_path.parent}",
                path=str(output_path.parent),
            ) from exc

        html = self.renderer.render(resume, options)

        async with self.pool.page() as page:
            await self.exporter.export(html, page, output_path)

        if options.deterministic:
            await normalize_pdf_file(output_path, options.determinism)

        logger.info("Generated %s", output_path)
        return output_path


async def generate_pdf(
    resume: ResumeDocument,
    options: RenderOptions | None = None,
    config: AppConfig | None = None,
) -> Path:
    """One-shot helper: generate a single PDF with a private renderer pool."""
    async with PDFGenerator(config) as generator:
        return await generator.generate(resume, options)
