"""Tests for the PDF generation pipeline."""

import asyncio
import time

import pytest

from resume_pdf.errors import FileSystemError
from resume_pdf.export import pdf as pdf_module
from resume_pdf.export.pdf import PDFGenerator, generate_pdf
from resume_pdf.models.options import DeterminismConfig, RenderOptions
from resume_pdf.rendering.pool import RendererPool

FIXED = "D:20240101000000+00'00'"


@pytest.fixture
def generator(launcher):
    return PDFGenerator(pool=RendererPool(browser_factory=launcher))


class TestPDFGenerator:
    @pytest.mark.asyncio
    async def test_generate_writes_pdf(self, generator, minimal_resume, tmp_path, xref_valid):
        output = tmp_path / "out.pdf"
        async with generator:
            path = await generator.generate(minimal_resume, RenderOptions(output=output))
        assert path == output
        data = output.read_bytes()
        assert data.startswith(b"%PDF-")
        assert b"/Title (John Doe - Resume)" in data
        assert b"/CreationDate (D:" not in data
        assert b"/Producer (Resume PDF Generator)" in data
        assert xref_valid(data)

    @pytest.mark.asyncio
    async def test_repeated_runs_byte_identical(self, generator, sample_resume, tmp_path, monkeypatch):
        first = tmp_path / "first.pdf"
        second = tmp_path / "second.pdf"
        async with generator:
            await generator.generate(sample_resume, RenderOptions(output=first))
            await asyncio.sleep(1.1)
            if hasattr(time, "tzset"):
                monkeypatch.setenv("TZ", "Asia/Tokyo")
                time.tzset()
            try:
                await generator.generate(sample_resume, RenderOptions(output=second))
            finally:
                monkeypatch.undo()
                if hasattr(time, "tzset"):
                    time.tzset()
        assert first.read_bytes() == second.read_bytes()

    @pytest.mark.asyncio
    async def test_fixed_creation_date(self, generator, minimal_resume, tmp_path):
        options = RenderOptions(
            output=tmp_path / "out.pdf",
            determinism=DeterminismConfig(fixed_creation_date=FIXED),
        )
        async with generator:
            path = await generator.generate(minimal_resume, options)
        data = path.read_bytes()
        assert data.count(b"/CreationDate") == 1
        assert f"/CreationDate ({FIXED})".encode() in data

    @pytest.mark.asyncio
    async def test_non_deterministic_keeps_metadata(self, generator, minimal_resume, tmp_path):
        options = RenderOptions(output=tmp_path / "out.pdf", deterministic=False)
        async with generator:
            path = await generator.generate(minimal_resume, options)
        assert b"/CreationDate (D:" in path.read_bytes()

    @pytest.mark.asyncio
    async def test_creates_output_directory(self, generator, minimal_resume, tmp_path):
        output = tmp_path / "a" / "b" / "out.pdf"
        async with generator:
            await generator.generate(minimal_resume, RenderOptions(output=output))
        assert output.exists()

    @pytest.mark.asyncio
    async def test_unwritable_directory(self, generator, minimal_resume, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("x")
        async with generator:
            with pytest.raises(FileSystemError, match="Cannot create output directory"):
                await generator.generate(minimal_resume, RenderOptions(output=blocker / "out.pdf"))

    @pytest.mark.asyncio
    async def test_default_output(self, generator, minimal_resume, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        async with generator:
            path = await generator.generate(minimal_resume)
        assert (tmp_path / path).exists()
        assert path.name == "resume.pdf"

    @pytest.mark.asyncio
    async def test_page_released_after_export(self, generator, launcher, minimal_resume, tmp_path):
        async with generator:
            await generator.generate(minimal_resume, RenderOptions(output=tmp_path / "out.pdf"))
            assert generator.pool.stats()["leased_pages"] == 0
            assert launcher.browsers[0].contexts[0].pages[0].closed

    @pytest.mark.asyncio
    async def test_close_shuts_down_pool(self, generator, launcher, minimal_resume, tmp_path):
        async with generator:
            await generator.generate(minimal_resume, RenderOptions(output=tmp_path / "out.pdf"))
        assert "browser.close" in launcher.events
        assert not generator.pool.is_alive()

    @pytest.mark.asyncio
    async def test_ats_mode_html(self, generator, launcher, sample_resume, tmp_path):
        options = RenderOptions(output=tmp_path / "out.pdf", ats_mode=True, template="professional")
        async with generator:
            await generator.generate(sample_resume, options)
            html = launcher.browsers[0].contexts[0].pages[0].html
        assert "text-transform: uppercase" not in html
        assert "Georgia" in html


class TestGeneratePdf:
    @pytest.mark.asyncio
    async def test_one_shot(self, launcher, minimal_resume, tmp_path, monkeypatch):
        monkeypatch.setattr(
            pdf_module,
            "RendererPool",
            lambda config: RendererPool(config, browser_factory=launcher),
        )
        path = await generate_pdf(minimal_resume, RenderOptions(output=tmp_path / "cv.pdf"))
        assert path.exists()
        assert launcher.events[-1] == "browser.close"
