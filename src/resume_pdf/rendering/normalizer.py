"""Strip run-to-run variable metadata from exported PDFs.

Chromium writes the wall-clock time, a random file identifier and its own
version string into every PDF. The passes below rewrite those fields so that
identical input gives identical bytes. The file is handled as latin-1 text,
which maps every byte to exactly one character, so content outside the
matched metadata tokens round-trips unchanged.

Passes, in order:

``strip_dates``
    ``/CreationDate (...)`` and ``/ModDate (...)`` (literal or hex strings)
    are removed, then the value of any other ``/Key (D:YYYYMMDDHHmmSS...)``
    pair is emptied to ``()``. Date-like text inside other strings is left
    alone.
``strip_ids``
    the trailer ``/ID [<...> <...>]`` array is removed.
``pin_producer``
    ``/Producer`` and ``/Creator`` values become ``(Resume PDF Generator)``.
``insert_creation_date``
    with a fixed creation date configured, any ``/CreationDate`` is removed
    and ``/CreationDate (<fixed>)`` is inserted right after the ``/Title``
    value.
``rebuild_xref``
    byte offsets in a classic cross-reference table and ``startxref`` are
    recomputed for the edited file.

Every pass is a no-op on its own output, so normalizing twice gives the same
bytes as normalizing once.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path

from resume_pdf.errors import filesystem_error_from
from resume_pdf.models.options import DeterminismConfig

logger = logging.getLogger(__name__)

PRODUCER = "Resume PDF Generator"

# literal string (one level of balanced parentheses) or hex string
_PDF_STRING = r"(?:\((?:[^()\\]|\\.|\((?:[^()\\]|\\.)*\))*\)|<[0-9A-Fa-f\s]*>)"

_CREATION_DATE = re.compile(r"\s*/CreationDate\s*" + _PDF_STRING, re.S)
_MOD_DATE = re.compile(r"\s*/ModDate\s*" + _PDF_STRING, re.S)
_STRAY_DATE = re.compile(r"(/[A-Za-z]\w*\s*)\(D:\d{14}[^()\\]*\)")
_ID_ARRAY = re.compile(r"/ID\s*\[[^\]]*\]")
_PRODUCER = re.compile(r"/Producer\s*" + _PDF_STRING, re.S)
_CREATOR = re.compile(r"/Creator\s*" + _PDF_STRING, re.S)
_TITLE = re.compile(r"/Title\s*" + _PDF_STRING, re.S)

_STREAM = re.compile(r"stream\r?\n.*?endstream", re.S)
_OBJ_HEADER = re.compile(r"(?m)^(\d+) (\d+) obj\b")
_XREF = re.compile(r"(?m)^xref\r?\n0 (\d+)\r?\n")
_STARTXREF = re.compile(r"startxref(\r?\n)\d+")


def strip_dates(text: str) -> str:
    text = _CREATION_DATE.sub("", text)
    text = _MOD_DATE.sub("", text)
    return _STRAY_DATE.sub(r"\1()", text)


def strip_ids(text: str) -> str:
    return _ID_ARRAY.sub("", text)


def pin_producer(text: str, producer: str = PRODUCER) -> str:
    text = _PRODUCER.sub(lambda _: f"/Producer ({producer})", text)
    return _CREATOR.sub(lambda _: f"/Creator ({producer})", text)


def insert_creation_date(text: str, creation_date: str) -> str:
    text = _CREATION_DATE.sub("", text)
    title = _TITLE.search(text)
    if title is None:
        logger.debug("No /Title in document, fixed creation date not inserted")
        return text
    end = title.end()
    return f"{text[:end]}\n/CreationDate ({creation_date}){text[end:]}"


def rebuild_xref(text: str) -> str:
    """Recompute a single-section xref table and startxref after edits."""
    matches = list(_XREF.finditer(text))
    if not matches:
        return text
    xref = matches[-1]
    count = int(xref.group(1))
    entries_start = xref.end()
    entries = [text[entries_start + 20 * i: entries_start + 20 * (i + 1)] for i in range(count)]
    if not all(len(e) == 20 and e[17] in "nf" for e in entries):
        logger.debug("Unrecognised xref layout, leaving offsets untouched")
        return text

    streams = [m.span() for m in _STREAM.finditer(text, 0, xref.start())]
    offsets: dict[int, int] = {}
    for header in _OBJ_HEADER.finditer(text, 0, xref.start()):
        pos = header.start()
        if any(start <= pos < end for start, end in streams):
            continue
        offsets[int(header.group(1))] = pos

    rebuilt = []
    for number, entry in enumerate(entries):
        if entry[17] == "n" and number in offsets:
            entry = f"{offsets[number]:010d}{entry[10:]}"
        rebuilt.append(entry)

    text = text[:entries_start] + "".join(rebuilt) + text[entries_start + 20 * count:]
    return _STARTXREF.sub(lambda m: f"startxref{m.group(1)}{xref.start()}", text)


def normalize_pdf_bytes(data: bytes, config: DeterminismConfig | None = None) -> bytes:
    """Apply the normalization passes selected by config to a PDF byte string."""
    config = config or DeterminismConfig()
    text = data.decode("latin-1")
    if config.remove_timestamps:
        text = strip_dates(text)
    if config.remove_variable_metadata:
        text = strip_ids(text)
        text = pin_producer(text)
    if config.fixed_creation_date:
        text = insert_creation_date(text, config.fixed_creation_date)
    text = rebuild_xref(text)
    return text.encode("latin-1")


async def normalize_pdf_file(path: str | Path, config: DeterminismConfig | None = None) -> None:
    """Rewrite the PDF at path in place."""
    config = config or DeterminismConfig()
    if not (config.remove_timestamps or config.remove_variable_metadata or config.fixed_creation_date):
        return
    path = Path(path)
    try:
        data = await asyncio.to_thread(path.read_bytes)
        normalized = normalize_pdf_bytes(data, config)
        if normalized != data:
            await asyncio.to_thread(path.write_bytes, normalized)
    except OSError as exc:
        raise filesystem_error_from(exc, f"Cannot normalize {path}", path=str(path)) from exc
    logger.debug("Normalized %s (%d -> %d bytes)", path, len(data), len(normalized))
