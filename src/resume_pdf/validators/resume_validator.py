"""Schema validation for resume JSON input."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator

from resume_pdf.errors import FileSystemError, ValidationError
from resume_pdf.models.resume import ResumeDocument
from resume_pdf.schemas.resume_schema import RESUME_SCHEMA

logger = logging.getLogger(__name__)

_validator = Draft7Validator(RESUME_SCHEMA, format_checker=Draft7Validator.FORMAT_CHECKER)
_REQUIRED_RE = re.compile(r"^'(?P<name>[^']+)' is a required property")


def format_error_path(parts) -> str:
    """Render a jsonschema path as basics.name or work[0].startDate."""
    out = ""
    for part in parts:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out


def _describe(error) -> dict[str, Any]:
    path = format_error_path(error.absolute_path)
    info: dict[str, Any] = {
        "path": path,
        "message": error.message,
        "validator": error.validator,
    }
    if error.validator == "required":
        m = _REQUIRED_RE.match(error.message)
        if m:
            info["missing"] = m.group("name")
    elif error.validator == "format":
        info["format"] = error.validator_value
    elif error.validator == "type":
        info["expected"] = error.validator_value
    return info


def collect_errors(data: Any) -> list[dict[str, Any]]:
    """Return every schema violation in data, ordered by path."""
    errors = sorted(_validator.iter_errors(data), key=lambda e: list(map(str, e.absolute_path)))
    return [_describe(e) for e in errors]


def validate_resume_data(data: Any) -> None:
    """Raise ValidationError if data does not match the resume schema."""
    errors = collect_errors(data)
    if not errors:
        return
    lines = [f"{e['path'] or '(root)'}: {e['message']}" for e in errors]
    logger.debug("Resume validation failed with %d errors", len(errors))
    raise ValidationError("Resume validation failed:\n" + "\n".join(lines), errors)


def parse_resume_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError("Invalid JSON format", line=exc.lineno, column=exc.colno) from exc


def validate_resume_json(text: str) -> dict:
    """Parse and validate a JSON string, returning the parsed object."""
    data = parse_resume_json(text)
    validate_resume_data(data)
    return data


def read_resume_text(path: str | Path) -> str:
    """Read a resume file, mapping OS failures to FileSystemError."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FileSystemError(f"File not found: {path}", path=str(path)) from exc
    except PermissionError as exc:
        raise FileSystemError(f"Permission denied: {path}", path=str(path)) from exc
    except IsADirectoryError as exc:
        raise FileSystemError(f"Not a file: {path}", path=str(path)) from exc
    return text


def validate_resume_file(path: str | Path) -> dict:
    """Read, parse and validate a resume file."""
    return validate_resume_json(read_resume_text(path))


def load_resume(path: str | Path) -> ResumeDocument:
    """Validate a resume file and return it as a ResumeDocument."""
    return ResumeDocument.model_validate(validate_resume_file(path))
