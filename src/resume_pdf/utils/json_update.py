"""In-place edits to a resume JSON file, with a backup of the previous version."""

from __future__ import annotations

import copy
import json
import logging
import re
import shutil
from pathlib import Path
from typing import Any

from resume_pdf.errors import filesystem_error_from
from resume_pdf.validators.resume_validator import (
    parse_resume_json,
    read_resume_text,
    validate_resume_data,
)

logger = logging.getLogger(__name__)

ROOT_SECTIONS = frozenset({
    "basics", "work", "education", "skills", "projects", "awards",
    "certifications", "publications", "languages", "interests", "references",
})

_SEGMENT = re.compile(r"^(?P<key>[^\[\]]+)(?:\[(?P<index>\d+)\])?$")


def backup_path(path: str | Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + ".bak")


def create_backup(path: str | Path) -> Path:
    """Copy path to path.bak, replacing any earlier backup."""
    target = backup_path(path)
    try:
        shutil.copy2(path, target)
    except OSError as exc:
        raise filesystem_error_from(exc, f"Cannot create backup: {target}", path=str(target)) from exc
    logger.debug("Backed up %s to %s", path, target)
    return target


def parse_field_path(field_path: str) -> list[str | int]:
    """``work[0].position`` -> ["work", 0, "position"]."""
    segments: list[str | int] = []
    for part in field_path.split("."):
        match = _SEGMENT.match(part)
        if match is None:
            raise ValueError(f"Invalid field path: {field_path}")
        segments.append(match.group("key"))
        if match.group("index") is not None:
            segments.append(int(match.group("index")))
    return segments


def parse_assignment(assignment: str) -> tuple[str, str]:
    """Split ``basics.name=Jane Doe`` at the first ``=``."""
    field_path, sep, value = assignment.partition("=")
    if not sep or not field_path:
        raise ValueError(f'Invalid set operation: {assignment}. Expected format: "path=value"')
    return field_path, value


def set_field(data: dict, field_path: str, value: Any) -> dict:
    """Return a copy of data with value stored at field_path.

    Missing containers along the way are created, but only below a known
    top-level resume section. Writing past the end of a list pads it with
    empty objects.
    """
    segments = parse_field_path(field_path)
    updated = copy.deepcopy(data)
    current: Any = updated
    for i, segment in enumerate(segments[:-1]):
        following = segments[i + 1]
        if isinstance(segment, int):
            _pad(current, segment)
        elif not isinstance(current, dict):
            raise ValueError(f"Cannot set {segment!r} on a non-object. Path: {field_path}")
        elif current.get(segment) is None:
            if i == 0 and segment not in ROOT_SECTIONS:
                raise ValueError(f"Invalid root property: {segment}. Path: {field_path}")
            current[segment] = [] if isinstance(following, int) else {}
        current = current[segment]

    last = segments[-1]
    if isinstance(last, int):
        _pad(current, last)
    elif not isinstance(current, dict):
        raise ValueError(f"Cannot set {last!r} on a non-object. Path: {field_path}")
    current[last] = value
    return updated


def _pad(items: Any, index: int) -> None:
    if not isinstance(items, list):
        raise ValueError(f"Expected a list before [{index}]")
    while len(items) <= index:
        items.append({})


def add_work_experience(data: dict, entry: dict) -> dict:
    """Return a copy of data with entry as the most recent work item."""
    if not isinstance(entry, dict):
        raise ValueError("A work entry must be a JSON object")
    updated = copy.deepcopy(data)
    updated.setdefault("work", [])
    updated["work"].insert(0, dict(entry))
    return updated


def apply_updates(
    path: str | Path,
    assignments: list[str] | None = None,
    *,
    add_work: dict | None = None,
    backup: bool = True,
) -> Path | None:
    """Apply ``path=value`` assignments (and an optional new work entry) to a resume file.

    The edited document must pass schema validation before anything is
    written. Returns the backup path, or None when ``backup`` is False.
    """
    path = Path(path)
    data = parse_resume_json(read_resume_text(path))
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a JSON object")

    for assignment in assignments or []:
        field_path, value = parse_assignment(assignment)
        data = set_field(data, field_path, value)
    if add_work is not None:
        data = add_work_experience(data, add_work)

    validate_resume_data(data)

    saved = create_backup(path) if backup else None
    try:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as exc:
        raise filesystem_error_from(exc, f"Cannot write {path}", path=str(path)) from exc
    logger.info("Updated %s (%d fields)", path, len(assignments or []))
    return saved
