"""
Document extraction package.

Turns an uploaded résumé (plain text or PDF bytes) into plain text,
enforcing the upload size limit and the minimum amount of usable text.
"""

import logging
from pathlib import Path

from ..config import MEDIA_PDF, MEDIA_TEXT, ExtractionConfig
from ..errors import InsufficientText, UnsupportedFormat, ValidationError
from ..models.document import ExtractedDocument
from .pdf_extractor import FALLBACK_HINT, extract_text_from_pdf, join_pages

logger = logging.getLogger(__name__)

SUFFIX_MEDIA_KINDS = {
    ".txt": MEDIA_TEXT,
    ".text": MEDIA_TEXT,
    ".pdf": MEDIA_PDF,
}

__all__ = [
    "extract_document",
    "extract_file",
    "join_pages",
    "media_kind_for_path",
    "normalize_media_kind",
]


def normalize_media_kind(media_kind: str) -> str:
    """Lower-case a media type and drop parameters ("text/plain; charset=utf-8")."""
    return media_kind.split(";", 1)[0].strip().lower()


def media_kind_for_path(path: str | Path) -> str:
    """
    Map a filename suffix to a declared media kind.

    Raises:
        UnsupportedFormat: For anything other than .txt or .pdf.
    """
    suffix = Path(path).suffix.lower()
    try:
        return SUFFIX_MEDIA_KINDS[suffix]
    except KeyError:
        raise UnsupportedFormat(
            f"Unsupported file type '{suffix or Path(path).name}'. Please upload a .txt or .pdf file."
        )


def _check_size(byte_size: int, config: ExtractionConfig) -> None:
    if byte_size > config.max_upload_bytes:
        limit_mib = config.max_upload_bytes / (1024 * 1024)
        raise ValidationError(
            f"File is too large ({byte_size:,} bytes). "
            f"Please upload a file smaller than {limit_mib:g} MB."
        )


def extract_document(
    data: bytes,
    media_kind: str,
    filename: str | None = None,
    config: ExtractionConfig | None = None,
) -> ExtractedDocument:
    """
    Extract text from an uploaded document.

    Routes to the appropriate extractor based on the declared media kind.
    Plain text comes back exactly as decoded; PDF text is page-joined and
    trimmed.

    Args:
        data: Raw document bytes.
        media_kind: Declared media type, ``text/plain`` or ``application/pdf``.
        filename: Original filename, for reporting only.
        config: Limits and engine order (defaults to ExtractionConfig()).

    Returns:
        ExtractedDocument with the extracted text.

    Raises:
        ValidationError: If the upload is too large or not valid UTF-8 text.
        UnsupportedFormat: If the media kind is not accepted.
        EngineUnavailable: If no PDF engine can be loaded.
        InsufficientText: If a PDF yields too little text.
        DocumentParseError: If the PDF could not be parsed.
    """
    config = config or ExtractionConfig()
    kind = normalize_media_kind(media_kind)
    label = filename or "upload"

    # Size is checked before any decoding or parsing
    _check_size(len(data), config)

    if kind not in config.accepted_media_kinds:
        raise UnsupportedFormat(
            f"Unsupported file type '{media_kind}'. Please upload a .txt or .pdf file."
        )

    doc = ExtractedDocument(media_kind=kind, byte_size=len(data), filename=filename)

    if kind == MEDIA_TEXT:
        try:
            doc.text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError(
                f"Could not read {label} as UTF-8 text ({e.reason}). "
                "Please save it as UTF-8 or paste the text instead."
            )
        doc.extraction_method = "utf-8"

    elif kind == MEDIA_PDF:
        text, method, page_count = extract_text_from_pdf(data, engines=config.pdf_engines)
        if len(text) < config.min_pdf_chars:
            raise InsufficientText(
                f"Only {len(text)} characters of text were found in {label} "
                f"(minimum {config.min_pdf_chars}). The PDF may be a scanned image "
                f"without selectable text. {FALLBACK_HINT}"
            )
        doc.text = text
        doc.extraction_method = method
        doc.page_count = page_count

    logger.info(f"  {label}: {doc.char_count} chars via {doc.extraction_method}")
    return doc


def extract_file(path: str | Path, config: ExtractionConfig | None = None) -> ExtractedDocument:
    """
    Extract text from a document on disk, inferring its kind from the suffix.

    The size limit is checked from file metadata before the file is read.
    """
    config = config or ExtractionConfig()
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Document not found: {path}")

    media_kind = media_kind_for_path(path)
    _check_size(path.stat().st_size, config)
    return extract_document(path.read_bytes(), media_kind, filename=path.name, config=config)
