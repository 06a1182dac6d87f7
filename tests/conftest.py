"""Shared test fixtures."""

from __future__ import annotations

import time
import uuid
from pathlib import Path

import pytest

from resume_pdf.models.resume import ResumeDocument


def build_pdf(
    title: str = "John Doe - Resume",
    creation_date: str | None = "D:20250312094501+09'00'",
    file_id: str | None = None,
    producer: str = "Skia/PDF m124",
    creator: str = r"Mozilla/5.0 \(X11; Linux x86_64\) HeadlessChrome/124.0.0.0",
    eol: str = "\n",
) -> bytes:
    """Build a small PDF laid out the way Chromium's Skia backend writes it."""
    info = f"<</Title ({title}){eol}/Creator ({creator}){eol}/Producer ({producer})"
    if creation_date:
        info += f"{eol}/CreationDate ({creation_date}){eol}/ModDate ({creation_date})"
    info += ">>"
    content = "BT /F1 12 Tf 72 720 Td (Hello) Tj ET"
    objects = [
        "<</Type /Catalog /Pages 2 0 R>>",
        "<</Type /Pages /Kids [3 0 R] /Count 1>>",
        "<</Type /Page /Parent 2 0 R /MediaBox [0 0 595 842] /Contents 4 0 R>>",
        f"<</Length {len(content)}>>{eol}stream{eol}{content}{eol}endstream",
        info,
    ]
    out = f"%PDF-1.4{eol}%\xe2\xe3\xcf\xd3{eol}"
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += f"{number} 0 obj{eol}{body}{eol}endobj{eol}"
    xref_at = len(out)
    entry_eol = " \n" if eol == "\n" else "\r\n"
    out += f"xref{eol}0 {len(objects) + 1}{eol}"
    out += f"0000000000 65535 f{entry_eol}"
    for offset in offsets:
        out += f"{offset:010d} 00000 n{entry_eol}"
    file_id = file_id or uuid.uuid4().hex
    out += f"trailer{eol}<</Size {len(objects) + 1}{eol}/Root 1 0 R{eol}/Info 5 0 R"
    out += f"{eol}/ID [<{file_id}> <{file_id}>]>>{eol}"
    out += f"startxref{eol}{xref_at}{eol}%%EOF"
    return out.encode("latin-1")


def xref_offsets_valid(data: bytes) -> bool:
    """Every in-use xref entry points at its 'N 0 obj' header and startxref at 'xref'."""
    text = data.decode("latin-1")
    xref_at = int(text.rsplit("startxref", 1)[1].split()[0])
    if not text.startswith("xref", xref_at):
        return False
    lines = text[xref_at:].split("trailer")[0].splitlines()[2:]
    for number, line in enumerate(lines):
        offset, _gen, kind = line.split()[:3]
        if kind == "n" and not text.startswith(f"{number} 0 obj", int(offset)):
            return False
    return True


class FakePage:
    """Stands in for playwright.async_api.Page."""

    def __init__(self, context: FakeContext):
        self.context = context
        self.viewport: dict | None = None
        self.routes: list = []
        self.html: str | None = None
        self.set_content_kwargs: dict = {}
        self.pdf_kwargs: dict = {}
        self.closed = False
        self.evaluated: list[str] = []
        self.set_content_error: Exception | None = None
        self.pdf_error: Exception | None = None
        self.close_error: Exception | None = None

    async def set_viewport_size(self, size: dict) -> None:
        self.viewport = size

    async def route(self, pattern: str, handler) -> None:
        self.routes.append((pattern, handler))

    async def set_content(self, html: str, **kwargs) -> None:
        if self.set_content_error:
            raise self.set_content_error
        self.html = html
        self.set_content_kwargs = kwargs

    async def pdf(self, path: str | None = None, **kwargs) -> bytes:
        if self.pdf_error:
            raise self.pdf_error
        self.pdf_kwargs = kwargs
        title = self.html.split("<title>")[1].split("</title>")[0] if self.html else ""
        stamp = time.strftime("D:%Y%m%d%H%M%S+00'00'", time.gmtime(time.time()))
        data = build_pdf(title=title, creation_date=stamp)
        if path:
            Path(path).write_bytes(data)
        return data

    async def evaluate(self, script: str):
        self.evaluated.append(script)

    async def close(self) -> None:
        if self.close_error:
            raise self.close_error
        self.closed = True


class FakeContext:
    def __init__(self, browser: FakeBrowser, **kwargs):
        self.browser = browser
        self.kwargs = kwargs
        self.pages: list[FakePage] = []
        self.closed = False

    async def new_page(self) -> FakePage:
        if not self.browser.connected:
            raise RuntimeError("Target page, context or browser has been closed")
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True
        self.browser.events.append("context.close")


class FakeBrowser:
    def __init__(self, events: list[str]):
        self.connected = True
        self.contexts: list[FakeContext] = []
        self.events = events

    def is_connected(self) -> bool:
        return self.connected

    async def new_context(self, **kwargs) -> FakeContext:
        context = FakeContext(self, **kwargs)
        self.contexts.append(context)
        return context

    async def close(self) -> None:
        self.connected = False
        self.events.append("browser.close")

    def kill(self) -> None:
        """Simulate the Chromium process dying underneath the pool."""
        self.connected = False


class BrowserLauncher:
    """Browser factory for RendererPool that records every launch."""

    def __init__(self):
        self.browsers: list[FakeBrowser] = []
        self.events: list[str] = []

    async def __call__(self) -> FakeBrowser:
        browser = FakeBrowser(self.events)
        self.browsers.append(browser)
        self.events.append("launch")
        return browser

    @property
    def launches(self) -> int:
        return len(self.browsers)


@pytest.fixture
def launcher() -> BrowserLauncher:
    return BrowserLauncher()


@pytest.fixture
def raw_pdf():
    """Factory for Chromium-style PDFs; see build_pdf for arguments."""
    return build_pdf


@pytest.fixture
def xref_valid():
    return xref_offsets_valid


@pytest.fixture
def sample_resume_data() -> dict:
    return {
        "basics": {
            "name": "Jane Smith",
            "label": "Senior Software Engineer",
            "email": "jane@example.com",
            "phone": "+1 555 0100",
            "url": "https://jane.dev",
            "summary": "Backend engineer focused on reliable data pipelines.",
            "location": {"city": "Portland", "region": "OR"},
            "profiles": [{"network": "GitHub", "username": "jsmith", "url": "https://github.com/jsmith"}],
        },
        "work": [
            {
                "name": "Acme Corp",
                "position": "Staff Engineer",
                "startDate": "2021-03-15",
                "location": "Remote",
                "summary": "Platform team lead.",
                "highlights": ["Cut build times by 40%", "Led migration to Kubernetes"],
            },
            {
                "name": "Initech",
                "position": "Software Engineer",
                "startDate": "2017-06-01",
                "endDate": "2021-02-28",
                "highlights": ["Built the billing service"],
            },
        ],
        "education": [
            {
                "institution": "Oregon State University",
                "area": "Computer Science",
                "studyType": "BSc",
                "startDate": "2013-09-01",
                "endDate": "2017-06-01",
                "gpa": "3.8",
            }
        ],
        "skills": [
            {"name": "Languages", "keywords": ["Python", "Go", "SQL"]},
            {"name": "Infrastructure", "keywords": ["Kubernetes", "Terraform"]},
        ],
        "projects": [
            {
                "name": "pgwatch",
                "description": "Postgres metrics exporter",
                "startDate": "2020-01-01",
                "highlights": ["500 GitHub stars"],
                "keywords": ["Go", "Prometheus"],
            }
        ],
        "awards": [{"title": "Engineer of the Year", "awarder": "Acme Corp", "date": "2022-12-01"}],
        "languages": [{"language": "English", "fluency": "Native"}],
    }


@pytest.fixture
def sample_resume(sample_resume_data) -> ResumeDocument:
    return ResumeDocument.model_validate(sample_resume_data)


@pytest.fixture
def minimal_resume() -> ResumeDocument:
    return ResumeDocument.model_validate(
        {
            "basics": {"name": "John Doe", "email": "john@example.com"},
            "work": [{"name": "Acme", "position": "Engineer", "startDate": "2020-01-01"}],
        }
    )


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage(FakeContext(FakeBrowser([])))
