"""Pydantic models for validated resume input (JSON Resume layout)."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

_SECTION_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
    "extra": "ignore",
}


class _Section(BaseModel):
    model_config = _SECTION_CONFIG


class Location(_Section):
    address: str | None = None
    postal_code: str | None = None
    city: str | None = None
    country_code: str | None = None
    region: str | None = None


class Profile(_Section):
    network: str | None = None
    username: str | None = None
    url: str | None = None


class Basics(_Section):
    name: str
    label: str | None = None
    email: str | None = None
    phone: str | None = None
    url: str | None = None
    summary: str | None = None
    location: Location | None = None
    profiles: list[Profile] = []


class WorkEntry(_Section):
    name: str
    position: str
    start_date: str
    end_date: str | None = None
    url: str | None = None
    summary: str | None = None
    location: str | None = None
    highlights: list[str] = []


class EducationEntry(_Section):
    institution: str | None = None
    area: str | None = None
    study_type: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    location: str | None = None
    gpa: str | None = None
    courses: list[str] = []


class SkillGroup(_Section):
    name: str | None = None
    level: str | None = None
    keywords: list[str] = []


class Project(_Section):
    name: str | None = None
    description: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    url: str | None = None
    highlights: list[str] = []
    keywords: list[str] = []


class Award(_Section):
    title: str | None = None
    date: str | None = None
    awarder: str | None = None
    summary: str | None = None


class Certification(_Section):
    name: str | None = None
    date: str | None = None
    issuer: str | None = None
    url: str | None = None


class Publication(_Section):
    name: str | None = None
    publisher: str | None = None
    release_date: str | None = None
    url: str | None = None
    summary: str | None = None


class Language(_Section):
    language: str | None = None
    fluency: str | None = None


class Interest(_Section):
    name: str | None = None
    keywords: list[str] = []


class Reference(_Section):
    name: str | None = None
    reference: str | None = None


class ResumeDocument(_Section):
    """A validated resume. Every section other than basics is optional."""

    basics: Basics
    work: list[WorkEntry] = []
    education: list[EducationEntry] = []
    skills: list[SkillGroup] = []
    projects: list[Project] = []
    awards: list[Award] = []
    certifications: list[Certification] = []
    publications: list[Publication] = []
    languages: list[Language] = []
    interests: list[Interest] = []
    references: list[Reference] = []

    @property
    def document_title(self) -> str:
        return f"{self.basics.name} - Resume"
