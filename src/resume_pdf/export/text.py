"""Plain-text resume output."""

from __future__ import annotations

from resume_pdf.models.resume import ResumeDocument
from resume_pdf.templates.renderer import PRESENT, format_date

RULE = "-" * 40


def _heading(title: str, underline: str = "=") -> list[str]:
    return [title, underline * len(title), ""]


def _date_range(start: str | None, end: str | None) -> str | None:
    if not start and not end:
        return None
    return f"{format_date(start) if start else ''} - {format_date(end) if end else PRESENT}"


def generate_plain_text(resume: ResumeDocument) -> str:
    """Render resume as underlined-heading plain text."""
    lines: list[str] = []
    basics = resume.basics

    lines.append(basics.name)
    lines.append("=" * len(basics.name))
    if basics.label:
        lines.append(basics.label)
    lines.append("")

    lines += ["CONTACT INFORMATION", "-" * 19]
    if basics.email:
        lines.append(f"Email: {basics.email}")
    if basics.phone:
        lines.append(f"Phone: {basics.phone}")
    if basics.url:
        lines.append(f"Website: {basics.url}")
    if basics.location:
        parts = [p for p in (basics.location.city, basics.location.region) if p]
        if parts:
            lines.append(f"Location: {', '.join(parts)}")
    for profile in basics.profiles:
        if profile.network and profile.url:
            lines.append(f"{profile.network}: {profile.url}")
    lines.append("")

    if basics.summary:
        lines += ["SUMMARY", "-" * 7, basics.summary, ""]

    if resume.work:
        lines += _heading("WORK EXPERIENCE")
        for job in resume.work:
            lines.append(job.position)
            lines.append(f"{job.name} - {job.location}" if job.location else job.name)
            lines.append(_date_range(job.start_date, job.end_date))
            lines.append("")
            if job.summary:
                lines += [job.summary, ""]
            if job.highlights:
                lines += [f"• {h}" for h in job.highlights]
                lines.append("")
            lines += [RULE, ""]

    if resume.education:
        lines += _heading("EDUCATION")
        for edu in resume.education:
            if edu.study_type and edu.area:
                lines.append(f"{edu.study_type} in {edu.area}")
            elif edu.area or edu.study_type:
                lines.append(edu.area or edu.study_type)
            if edu.institution:
                lines.append(edu.institution)
            dates = _date_range(edu.start_date, edu.end_date)
            if dates:
                lines.append(dates)
            if edu.gpa:
                lines.append(f"GPA: {edu.gpa}")
            if edu.courses:
                lines.append("Relevant Courses:")
                lines += [f"• {c}" for c in edu.courses]
            lines += ["", RULE, ""]

    if resume.skills:
        lines += _heading("SKILLS")
        for group in resume.skills:
            if group.name:
                lines.append(f"{group.name}:")
            if group.keywords:
                lines.append(f"  {', '.join(group.keywords)}")
            if group.level:
                lines.append(f"  Level: {group.level}")
            lines.append("")

    if resume.projects:
        lines += _heading("PROJECTS")
        for project in resume.projects:
            if project.name:
                lines.append(project.name)
            if project.url:
                lines.append(project.url)
            dates = _date_range(project.start_date, project.end_date)
            if dates:
                lines.append(dates)
            if project.description:
                lines.append(project.description)
            lines += [f"• {h}" for h in project.highlights]
            if project.keywords:
                lines.append(f"Technologies: {', '.join(project.keywords)}")
            lines += ["", RULE, ""]

    if resume.awards:
        lines += _heading("AWARDS")
        for award in resume.awards:
            if award.title:
                lines.append(award.title)
            if award.awarder:
                lines.append(f"Awarded by: {award.awarder}")
            if award.date:
                lines.append(f"Date: {format_date(award.date)}")
            if award.summary:
                lines.append(award.summary)
            lines.append("")

    if resume.certifications:
        lines += _heading("CERTIFICATIONS")
        for cert in resume.certifications:
            if cert.name:
                lines.append(cert.name)
            if cert.issuer:
                lines.append(f"Issuer: {cert.issuer}")
            if cert.date:
                lines.append(f"Date: {format_date(cert.date)}")
            if cert.url:
                lines.append(f"URL: {cert.url}")
            lines.append("")

    if resume.publications:
        lines += _heading("PUBLICATIONS")
        for pub in resume.publications:
            if pub.name:
                lines.append(pub.name)
            if pub.publisher:
                lines.append(f"Publisher: {pub.publisher}")
            if pub.release_date:
                lines.append(f"Date: {format_date(pub.release_date)}")
            if pub.summary:
                lines.append(pub.summary)
            lines.append("")

    if resume.languages:
        lines += _heading("LANGUAGES")
        for lang in resume.languages:
            parts = [lang.language or "", f"({lang.fluency})" if lang.fluency else ""]
            line = " ".join(p for p in parts if p)
            if line:
                lines.append(line)
        lines.append("")

    if resume.interests:
        lines += _heading("INTERESTS")
        for interest in resume.interests:
            if not interest.name:
                continue
            lines.append(interest.name)
            if interest.keywords:
                lines.append(f"  {', '.join(interest.keywords)}")
            lines.append("")

    if resume.references:
        lines += _heading("REFERENCES")
        for ref in resume.references:
            if ref.name:
                lines.append(ref.name)
            if ref.reference:
                lines.append(f"  {ref.reference}")
            lines.append("")

    return "\n".join(lines)
