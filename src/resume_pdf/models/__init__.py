"""Data models for resume rendering."""

from resume_pdf.models.options import (
    DEFAULT_TEMPLATE,
    DeterminismConfig,
    RenderOptions,
    format_pdf_date,
)
from resume_pdf.models.resume import (
    Award,
    Basics,
    Certification,
    EducationEntry,
    Interest,
    Language,
    Location,
    Profile,
    Project,
    Publication,
    Reference,
    ResumeDocument,
    SkillGroup,
    WorkEntry,
)

__all__ = [
    "DEFAULT_TEMPLATE",
    "Award",
    "Basics",
    "Certification",
    "DeterminismConfig",
    "EducationEntry",
    "Interest",
    "Language",
    "Location",
    "Profile",
    "Project",
    "Publication",
    "Reference",
    "RenderOptions",
    "ResumeDocument",
    "SkillGroup",
    "WorkEntry",
    "format_pdf_date",
]
