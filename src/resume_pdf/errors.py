"""Typed errors raised by the resume generator, with user-facing suggestions."""

from __future__ import annotations

import errno
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ErrorSuggestion:
    action: str
    command: str | None = None
    explanation: str | None = None


class ResumeGeneratorError(Exception):
    """Base class for all errors surfaced to the CLI."""

    def __init__(
        self,
        message: str,
        code: str,
        is_catastrophic: bool = False,
        suggestions: list[ErrorSuggestion] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.is_catastrophic = is_catastrophic
        self.suggestions = list(suggestions or [])

    def formatted_message(self, debug: bool = False) -> str:
        """Return the message followed by numbered suggestions."""
        lines = [self.message]
        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"  {i}. {suggestion.action}")
                if suggestion.command:
                    lines.append(f"     Command: {suggestion.command}")
                if suggestion.explanation:
                    lines.append(f"     {suggestion.explanation}")
        if debug:
            lines.append("")
            lines.append(f"Error code: {self.code}")
            lines.append(f"Catastrophic: {self.is_catastrophic}")
        return "\n".join(lines)


class ValidationError(ResumeGeneratorError):
    """Input data failed JSON parsing or schema validation."""

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
        line: int | None = None,
        column: int | None = None,
    ):
        if line is not None:
            message += f" at line {line}"
            if column is not None:
                message += f", column {column}"
        self.errors = list(errors or [])
        self.line = line
        self.column = column
        super().__init__(
            message, "VALIDATION_ERROR", suggestions=_validation_suggestions(self.errors)
        )


class FileSystemError(ResumeGeneratorError):
    """A path could not be read or written."""

    def __init__(self, message: str, path: str | None = None, is_catastrophic: bool = False):
        self.path = path
        super().__init__(
            message,
            "FILESYSTEM_ERROR",
            is_catastrophic=is_catastrophic,
            suggestions=_filesystem_suggestions(message, path),
        )


class PDFGenerationError(ResumeGeneratorError):
    """Rendering or exporting the PDF failed."""

    def __init__(self, message: str, context: str | None = None):
        self.context = context
        super().__init__(
            message, "PDF_GENERATION_ERROR", suggestions=_pdf_suggestions(message)
        )


class PoolUnavailableError(PDFGenerationError):
    """The renderer pool is shutting down and cannot issue pages."""


class TemplateError(ResumeGeneratorError):
    def __init__(self, message: str, template: str | None = None):
        self.template = template
        super().__init__(
            message,
            "TEMPLATE_ERROR",
            suggestions=[
                ErrorSuggestion(
                    action="Try a different template",
                    command="resume-pdf generate resume.json --template professional",
                ),
                ErrorSuggestion(
                    action="Use ATS mode for maximum compatibility",
                    command="resume-pdf generate resume.json --ats-mode",
                ),
            ],
        )


# full or read-only filesystem
_CATASTROPHIC_ERRNOS = frozenset({errno.ENOSPC, errno.EROFS})


def is_catastrophic_failure(exc: BaseException) -> bool:
    if isinstance(exc, OSError) and exc.errno in _CATASTROPHIC_ERRNOS:
        return True
    message = str(exc)
    return "ENOSPC" in message or "EROFS" in message


def filesystem_error_from(exc: BaseException, message: str, path: str | None = None) -> FileSystemError:
    """Wrap an OS-level failure, keeping its reason in the message."""
    reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
    return FileSystemError(
        f"{message} ({reason})" if reason else message,
        path=path,
        is_catastrophic=is_catastrophic_failure(exc),
    )


def exit_code_for(error: BaseException) -> int:
    """Process exit code: 2 for catastrophic failures, 1 for everything else."""
    if isinstance(error, ResumeGeneratorError) and error.is_catastrophic:
        return 2
    return 1


def _validation_suggestions(errors: list[dict[str, Any]]) -> list[ErrorSuggestion]:
    suggestions: list[ErrorSuggestion] = []
    for error in errors:
        keyword = error.get("validator")
        if keyword == "required":
            missing = error.get("missing", "")
            suggestions.append(ErrorSuggestion(
                action=f"Add the required field: {missing}",
                explanation=f"The field '{missing}' is required by the resume schema.",
            ))
        elif keyword == "format":
            fmt = error.get("format")
            if fmt == "email":
                suggestions.append(ErrorSuggestion(
                    action="Fix email format",
                    explanation='Use a valid email like "user@example.com"',
                ))
            elif fmt == "date":
                suggestions.append(ErrorSuggestion(
                    action="Fix date format",
                    explanation='Use ISO dates like "2024-01-15"',
                ))
            elif fmt == "uri":
                suggestions.append(ErrorSuggestion(
                    action="Fix URL format",
                    explanation='Use a complete URL like "https://example.com"',
                ))
        elif keyword == "type":
            suggestions.append(ErrorSuggestion(
                action=f"Change {error.get('path') or 'value'} to {error.get('expected')} type",
            ))
        elif keyword == "additionalProperties":
            suggestions.append(ErrorSuggestion(
                action="Remove unknown fields",
                explanation="This field is not part of the resume schema",
            ))

    if not suggestions:
        suggestions.append(ErrorSuggestion(
            action="Check the resume against the schema",
            command="resume-pdf validate resume.json",
        ))
    return suggestions


def _filesystem_suggestions(message: str, path: str | None) -> list[ErrorSuggestion]:
    lowered = message.lower()
    suggestions: list[ErrorSuggestion] = []
    if "not found" in lowered or "no such file" in lowered:
        suggestions.append(ErrorSuggestion(
            action="Check if the file path is correct",
            explanation=f'Verify that "{path}" exists' if path else None,
        ))
    if "permission" in lowered or "access denied" in lowered:
        suggestions.append(ErrorSuggestion(
            action="Check file permissions",
            command=f'ls -la "{path}"' if path else "ls -la",
        ))
    if "no space" in lowered or "disk" in lowered:
        suggestions.append(ErrorSuggestion(action="Free up disk space", command="df -h"))
    if "already exists" in lowered:
        suggestions.append(ErrorSuggestion(
            action="Overwrite the existing file",
            command="resume-pdf generate resume.json --force",
        ))
    return suggestions


def _pdf_suggestions(message: str) -> list[ErrorSuggestion]:
    lowered = message.lower()
    suggestions: list[ErrorSuggestion] = []
    if "browser" in lowered or "chromium" in lowered or "executable" in lowered:
        suggestions.append(ErrorSuggestion(
            action="Install Playwright browsers",
            command="playwright install chromium",
        ))
    if "timeout" in lowered:
        suggestions.append(ErrorSuggestion(
            action="Try ATS mode, which uses minimal styling",
            command="resume-pdf generate resume.json --ats-mode",
        ))
    suggestions.append(ErrorSuggestion(
        action="Validate your JSON first",
        command="resume-pdf validate resume.json",
    ))
    return suggestions
