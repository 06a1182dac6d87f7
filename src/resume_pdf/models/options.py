"""Render options and determinism settings."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_TEMPLATE = "ats-optimized"
PDF_DATE_PATTERN = re.compile(r"^D:\d{14}\+00'00'$")
_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def format_pdf_date(value: datetime | None = None) -> str:
    """Format a datetime as a fixed-width UTC PDF date: D:YYYYMMDDHHmmSS+00'00'."""
    value = value or _EPOCH
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("D:%Y%m%d%H%M%S") + "+00'00'"


class DeterminismConfig(BaseModel):
    remove_timestamps: bool = True
    remove_variable_metadata: bool = True
    fixed_creation_date: str | None = None

    model_config = {"frozen": True}

    @field_validator("fixed_creation_date")
    @classmethod
    def _check_pdf_date(cls, value: str | None) -> str | None:
        if value is not None and not PDF_DATE_PATTERN.match(value):
            raise ValueError(
                f"fixed_creation_date must look like D:YYYYMMDDHHmmSS+00'00', got {value!r}"
            )
        return value


class RenderOptions(BaseModel):
    template: str = DEFAULT_TEMPLATE
    ats_mode: bool = False
    deterministic: bool = True
    determinism: DeterminismConfig = Field(default_factory=DeterminismConfig)
    output: Path | None = None

    model_config = {"frozen": True}
