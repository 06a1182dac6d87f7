"""Render a ResumeDocument into self-contained HTML using Jinja2 templates."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, Template
from jinja2 import TemplateError as JinjaTemplateError

from resume_pdf.errors import TemplateError
from resume_pdf.models.options import DEFAULT_TEMPLATE, RenderOptions
from resume_pdf.models.resume import ResumeDocument
from resume_pdf.templates.cache import TemplateCache
from resume_pdf.templates.offline_check import check_offline_compatibility

logger = logging.getLogger(__name__)

HTML_TEMPLATES_DIR = Path(__file__).parent / "html"

AVAILABLE_TEMPLATES = ("ats-optimized", "professional")
TEMPLATE_ALIASES = {"ats": "ats-optimized", "ultra-ats": "ats-optimized"}

PRESENT = "Present"
INVALID_DATE = "Invalid Date"

# Fixed English names so output does not depend on the process locale.
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_DATE_ONLY = re.compile(r"^(\d{4})(?:-(\d{1,2})(?:-(\d{1,2}))?)?$")

_CONTACT_ICONS = {
    "email": "\U0001F4E7",
    "phone": "\U0001F4DE",
    "location": "\U0001F4CD",
    "url": "\U0001F310",
}


def _parse_year_month(value: str) -> tuple[int, int] | None:
    """Return (year, month) without any timezone conversion.

    Date-only strings are split by hand; "2024-01-15" is always January 2024.
    Datetimes keep the calendar date written in the string, whatever its offset.
    """
    value = value.strip()
    m = _DATE_ONLY.match(value)
    if m:
        year = int(m.group(1))
        month = int(m.group(2) or 1)
        return (year, month) if 1 <= month <= 12 else None
    if "T" in value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed.year, parsed.month
    return None


def format_date(value: str | None) -> str:
    """Format a date string as "Month YYYY"; empty means the entry is ongoing."""
    if not value:
        return PRESENT
    parsed = _parse_year_month(value)
    if parsed is None:
        return INVALID_DATE
    year, month = parsed
    return f"{MONTH_NAMES[month - 1]} {year}"


def format_year(value: str | None) -> str:
    if not value:
        return ""
    parsed = _parse_year_month(value)
    return str(parsed[0]) if parsed else ""


def join_list(items, separator: str = ", ") -> str:
    if not items:
        return ""
    return separator.join(str(i) for i in items)


def contact_icon(kind: str, ats_mode: bool) -> str:
    if ats_mode:
        return ""
    icon = _CONTACT_ICONS.get(kind)
    return f"{icon} " if icon else ""


def build_environment(templates_dir: Path = HTML_TEMPLATES_DIR) -> Environment:
    """Jinja2 environment with the resume filters registered.

    Jinja's own template cache is disabled; TemplateCache decides residency.
    """
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        cache_size=0,
        keep_trailing_newline=True,
    )
    env.filters["format_date"] = format_date
    env.filters["format_year"] = format_year
    env.filters["join_list"] = join_list
    env.filters["contact_icon"] = contact_icon
    return env


def resolve_template_name(name: str | None) -> str:
    """Map a requested template id onto a built-in one, falling back to the default."""
    if not name:
        return DEFAULT_TEMPLATE
    name = TEMPLATE_ALIASES.get(name, name)
    if name not in AVAILABLE_TEMPLATES:
        logger.warning("Unknown template %r, using %r", name, DEFAULT_TEMPLATE)
        return DEFAULT_TEMPLATE
    return name


class HTMLRenderer:
    """Compiles the built-in templates (through a TemplateCache) and renders resumes."""

    def __init__(
        self,
        cache: TemplateCache[Template] | None = None,
        *,
        offline_check: bool = True,
        environment: Environment | None = None,
    ):
        self.cache = cache if cache is not None else TemplateCache()
        self.offline_check = offline_check
        self.env = environment or build_environment()

    def compiled(self, name: str) -> Template:
        """Return the compiled template for an already-resolved template id."""
        return self.cache.get_template(name, lambda: self.env.get_template(f"{name}.html.j2"))

    def render(self, resume: ResumeDocument, options: RenderOptions | None = None) -> str:
        """Render resume to a complete HTML document string."""
        options = options or RenderOptions()
        name = resolve_template_name(options.template)
        try:
            html = self.compiled(name).render(
                resume=resume,
                ats_mode=options.ats_mode,
                template_name=name,
                title=resume.document_title,
            )
        except JinjaTemplateError as exc:
            raise TemplateError(f"Failed to render template {name!r}: {exc}", template=name) from exc
        if self.offline_check:
            self._report_offline_issues(html)
        return html

    @staticmethod
    def _report_offline_issues(html: str) -> None:
        report = check_offline_compatibility(html)
        for issue in report.issues:
            logger.warning("Offline compatibility issue: %s", issue)
        for warning in report.warnings:
            logger.debug("Offline compatibility warning: %s", warning)


_default_renderer: HTMLRenderer | None = None


def render_html(resume: ResumeDocument, options: RenderOptions | None = None) -> str:
    """Render with a shared process-wide renderer and template cache."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = HTMLRenderer()
    return _default_renderer.render(resume, options)
