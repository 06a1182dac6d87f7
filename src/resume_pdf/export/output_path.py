"""Output filename derivation and overwrite protection."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from resume_pdf.errors import FileSystemError, filesystem_error_from
from resume_pdf.models.options import DEFAULT_TEMPLATE


def automatic_name(input_path: str | Path, template: str | None = None, ats_mode: bool = False) -> str:
    """resume.json -> resume.pdf, resume-ats.pdf or resume-<template>.pdf."""
    base = Path(input_path).stem
    if ats_mode:
        suffix = "-ats"
    elif template and template != DEFAULT_TEMPLATE:
        suffix = f"-{template}"
    else:
        suffix = ""
    return f"{base}{suffix}.pdf"


def timestamped_name(filename: str | Path, today: date | None = None) -> str:
    path = Path(filename)
    stamp = (today or date.today()).isoformat()
    return f"{path.stem}-{stamp}{path.suffix}"


def validate_output_path(output_path: str | Path) -> None:
    text = str(output_path)
    if not text.strip():
        raise ValueError("Output path cannot be empty")
    if "\0" in text:
        raise ValueError("Output path contains invalid characters")
    if not text.endswith(".pdf"):
        raise ValueError("Output file must have .pdf extension")
    if Path(text).resolve() == Path(Path(text).resolve().anchor):
        raise ValueError("Invalid output path")


def generate_output_path(
    input_path: str | Path,
    output: str | Path | None = None,
    *,
    template: str | None = None,
    ats_mode: bool = False,
    timestamp: bool = False,
    force: bool = False,
    today: date | None = None,
) -> Path:
    """Work out where the PDF for input_path should be written."""
    if not str(input_path).strip():
        raise ValueError("Input path cannot be empty")

    if output:
        validate_output_path(output)
        path = Path(output).resolve()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise filesystem_error_from(
                exc, f"Cannot create output directory: {path.parent}", path=str(path.parent)
            ) from exc
        if path.exists() and not force:
            raise FileSystemError("File already exists. Use --force to overwrite", path=str(path))
        return path

    name = automatic_name(input_path, template, ats_mode)
    if timestamp:
        name = timestamped_name(name, today)
    return Path(name).resolve()
