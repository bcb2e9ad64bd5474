"""Text extraction for files handed to ``repoagent index --file``.

Dispatch by extension:
  .pdf              → pypdf, page by page (pages without text are skipped)
  .html / .htm      → html2text (links and images dropped)
  anything else     → read as UTF-8 text (undecodable bytes replaced)

Extraction only recovers readable text; whitespace normalization and
sentence chunking happen afterwards in the chunker.
"""

from __future__ import annotations

from pathlib import Path

import html2text
import pypdf

_PDF_EXTS = {".pdf"}
_HTML_EXTS = {".html", ".htm"}

_h2t = html2text.HTML2Text()
_h2t.ignore_links = True
_h2t.ignore_images = True
_h2t.body_width = 0


def detect_format(path: Path | str) -> str:
    """Return 'pdf', 'html' or 'text' for *path* based on its extension."""
    ext = Path(path).suffix.lower()
    if ext in _PDF_EXTS:
        return "pdf"
    if ext in _HTML_EXTS:
        return "html"
    return "text"


def extract_text(path: Path | str) -> str:
    """Return the readable text content of the file at *path*.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If *path* is a directory.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: '{p}'")
    if p.is_dir():
        raise ValueError(f"Expected a file, got a directory: '{p}'")

    fmt = detect_format(p)
    if fmt == "pdf":
        return _extract_pdf(p)
    raw = p.read_text(encoding="utf-8", errors="replace")
    if fmt == "html":
        return html_to_text(raw)
    return raw


def html_to_text(html: str) -> str:
    """Convert an HTML document to plain text."""
    return _h2t.handle(html)


def _extract_pdf(path: Path) -> str:
    reader = pypdf.PdfReader(str(path))
    parts: list[str] = []
    for page in reader.pages:
        page_text = (page.extract_text() or "").strip()
        if page_text:
            parts.append(page_text)
    return "\n\n".join(parts)
