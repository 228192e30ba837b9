"""
PDF text extraction.

Uses pdfplumber as primary extractor (word-level tokens in reading order),
with pypdf as fallback. Pages are read in ascending order; a page's tokens
are joined with single spaces and pages are separated by a blank line, so
the same document always produces the same text.
"""

import importlib
import io
import logging
from types import ModuleType
from typing import Callable, Sequence

from ..errors import DocumentParseError, EngineUnavailable

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"
TOKEN_SEPARATOR = " "

FALLBACK_HINT = "Please upload a .txt file or paste the résumé text instead."


def join_pages(pages: Sequence[Sequence[str]]) -> str:
    """
    Join per-page token lists into one trimmed text.

    >>> join_pages([["Page", "1"], ["Page", "2"]])
    'Page 1\\n\\nPage 2'
    """
    return PAGE_SEPARATOR.join(TOKEN_SEPARATOR.join(tokens) for tokens in pages).strip()


def _pdfplumber_pages(pdfplumber: ModuleType, data: bytes) -> list[list[str]]:
    """Word tokens per page via pdfplumber."""
    pages = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for i, page in enumerate(pdf.pages):
            words = page.extract_words()
            tokens = [w["text"] for w in words if w.get("text")]
            if not tokens:
                logger.debug(f"Page {i + 1}: no text extracted")
            pages.append(tokens)
    return pages


def _pypdf_pages(pypdf: ModuleType, data: bytes) -> list[list[str]]:
    """Whitespace-split page text via pypdf."""
    reader = pypdf.PdfReader(io.BytesIO(data))
    pages = []
    for i, page in enumerate(reader.pages):
        page_text = page.extract_text() or ""
        if not page_text.strip():
            logger.debug(f"Page {i + 1}: no text extracted")
        pages.append(page_text.split())
    return pages


_PAGE_READERS: dict[str, Callable[[ModuleType, bytes], list[list[str]]]] = {
    "pdfplumber": _pdfplumber_pages,
    "pypdf": _pypdf_pages,
}


def _import_engine(name: str) -> ModuleType | None:
    """Import a PDF engine by name; None if it isn't installed."""
    try:
        return importlib.import_module(name)
    except ImportError:
        logger.debug(f"{name} not available")
        return None


def extract_text_from_pdf(
    data: bytes,
    engines: Sequence[str] = ("pdfplumber", "pypdf"),
) -> tuple[str, str, int]:
    """
    Extract text from PDF bytes.

    Engines are tried in order. The first one that parses the document and
    finds text wins; if every engine parses but finds nothing, the (empty)
    result of the first one is returned so the caller can report a scanned
    document.

    Args:
        data: Raw PDF bytes.
        engines: Engine names to try, from ``pdfplumber`` and ``pypdf``.

    Returns:
        Tuple of (extracted_text, method_used, page_count).

    Raises:
        EngineUnavailable: If none of the engines can be imported.
        DocumentParseError: If every available engine failed to parse.
    """
    available = []
    failures = []
    empty_result: tuple[str, str, int] | None = None

    for name in engines:
        reader = _PAGE_READERS.get(name)
        if reader is None:
            logger.warning(f"Unknown PDF engine '{name}' skipped")
            continue

        module = _import_engine(name)
        if module is None:
            continue
        available.append(name)

        try:
            pages = reader(module, data)
        except Exception as e:
            logger.warning(f"{name} failed to parse PDF: {e}")
            failures.append(f"{name}: {e}")
            continue

        text = join_pages(pages)
        if text:
            logger.info(f"Extracted {len(text)} chars from {len(pages)} page(s) via {name}")
            return text, name, len(pages)

        logger.warning(f"{name} returned empty text")
        if empty_result is None:
            empty_result = (text, name, len(pages))

    if empty_result is not None:
        return empty_result

    if not available:
        raise EngineUnavailable(
            f"No PDF engine is available (tried: {', '.join(engines) or 'none'}). "
            f"Install pdfplumber or pypdf, or retry later. {FALLBACK_HINT}"
        )

    raise DocumentParseError(
        f"PDF processing failed: {'; '.join(failures)}. {FALLBACK_HINT}"
    )
