"""Turn canonical HTML into a PDF file through a leased renderer page."""

from __future__ import annotations

import errno
import logging
from pathlib import Path
from typing import Any

from resume_pdf.errors import PDFGenerationError, filesystem_error_from

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TIMEOUT_MS = 10000

PDF_OPTIONS: dict[str, Any] = {
    "format": "A4",
    "margin": {"top": "0.5in", "right": "0.5in", "bottom": "0.5in", "left": "0.5in"},
    "print_background": True,
    "prefer_css_page_size": True,
    "tagged": True,
    "scale": 1,
    "display_header_footer": False,
}

_FILESYSTEM_ERRNOS = {errno.ENOENT, errno.EACCES, errno.EPERM, errno.ENOSPC, errno.EROFS, errno.ENOTDIR}


def _is_filesystem_error(exc: BaseException) -> bool:
    if isinstance(exc, OSError) and exc.errno in _FILESYSTEM_ERRNOS:
        return True
    # Playwright surfaces write failures as its own Error with the errno name in the text
    message = str(exc)
    return any(code in message for code in ("ENOENT", "EACCES", "EPERM", "ENOSPC", "EROFS"))


class DocumentExporter:
    """Sets HTML on a page and prints it to ``output_path``.

    The containing directory of ``output_path`` must already exist.
    """

    def __init__(self, content_timeout_ms: int = DEFAULT_CONTENT_TIMEOUT_MS):
        self.content_timeout_ms = content_timeout_ms

    async def export(self, html: str, page: Any, output_path: str | Path) -> Path:
        output_path = Path(output_path)
        try:
            await page.set_content(
                html,
                wait_until="domcontentloaded",
                timeout=self.content_timeout_ms,
            )
            await page.pdf(path=str(output_path), **PDF_OPTIONS)
        except Exception as exc:
            if _is_filesystem_error(exc):
                raise filesystem_error_from(
                    exc, f"Cannot write to output path: {output_path}", path=str(output_path)
                ) from exc
            raise PDFGenerationError(
                f"Failed to generate PDF: {exc}", context=str(output_path)
            ) from exc

        logger.debug("Exported %s", output_path)
        return output_path
