"""
Extracted document model.

Represents an uploaded résumé after text extraction, with the metadata the
pipeline and CLI report back to the user.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class ExtractedDocument:
    """A single uploaded document turned into plain text."""
    # Upload info
    media_kind: str          # "text/plain" or "application/pdf"
    byte_size: int
    filename: Optional[str] = None

    # Extracted content
    text: str = ""
    page_count: int = 0      # 0 for plain text

    # Metadata
    extracted_at: str = field(default_factory=lambda: datetime.now().isoformat())
    extraction_method: str = ""  # e.g., "utf-8", "pdfplumber", "pypdf"

    @property
    def char_count(self) -> int:
        return len(self.text)

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    @property
    def text_preview(self) -> str:
        """First 200 characters of text for quick display."""
        if len(self.text) <= 200:
            return self.text
        return self.text[:200] + "..."

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output (text excluded)."""
        return {
            "filename": self.filename,
            "media_kind": self.media_kind,
            "byte_size": self.byte_size,
            "page_count": self.page_count,
            "char_count": self.char_count,
            "word_count": self.word_count,
            "extracted_at": self.extracted_at,
            "extraction_method": self.extraction_method,
        }
