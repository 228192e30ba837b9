"""
Tests for document extraction module.

Run with: pytest tests/test_extraction.py
"""

import sys

import pytest

from conftest import build_pdf
from cvcoach.config import ExtractionConfig
from cvcoach.errors import (
    DocumentParseError,
    EngineUnavailable,
    InsufficientText,
    UnsupportedFormat,
    ValidationError,
)
from cvcoach.extraction import (
    extract_document,
    extract_file,
    join_pages,
    media_kind_for_path,
    normalize_media_kind,
)
from cvcoach.extraction import pdf_extractor


LONG_LINE = "Senior data engineer building Python and SQL pipelines"


class TestPlainText:
    """Plain text is returned exactly as decoded."""

    @pytest.mark.parametrize("text", [
        "",
        "  leading and trailing whitespace kept  \n",
        "Windows\r\nline endings\r\n",
        "Ünïcödé résumé — 履歷",
    ])
    def test_identity(self, text):
        doc = extract_document(text.encode("utf-8"), "text/plain")
        assert doc.text == text
        assert doc.extraction_method == "utf-8"
        assert doc.page_count == 0

    def test_charset_parameter_is_accepted(self):
        doc = extract_document(b"hello", "Text/Plain; charset=utf-8")
        assert doc.text == "hello"
        assert doc.media_kind == "text/plain"

    def test_invalid_utf8_is_rejected(self):
        with pytest.raises(ValidationError, match="UTF-8"):
            extract_document(b"\xff\xfe\xfa", "text/plain")


class TestUploadLimits:

    def test_oversized_upload_rejected_before_parsing(self, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("parser must not run")

        monkeypatch.setattr("cvcoach.extraction.extract_text_from_pdf", fail)
        data = b"x" * (6 * 1024 * 1024)
        with pytest.raises(ValidationError, match="too large"):
            extract_document(data, "application/pdf")

    def test_exactly_at_limit_is_accepted(self):
        data = b"a" * (5 * 1024 * 1024)
        doc = extract_document(data, "text/plain")
        assert doc.byte_size == 5 * 1024 * 1024

    def test_unsupported_kind(self):
        with pytest.raises(UnsupportedFormat):
            extract_document(b"PK\x03\x04", "application/vnd.openxmlformats-officedocument.wordprocessingml.document")

    def test_unsupported_format_is_a_validation_error(self):
        assert issubclass(UnsupportedFormat, ValidationError)

    def test_extract_file_checks_size_from_metadata(self, tmp_path):
        path = tmp_path / "big.txt"
        path.write_bytes(b"a" * 2048)
        with pytest.raises(ValidationError):
            extract_file(path, ExtractionConfig(max_upload_bytes=1024))


class TestMediaKinds:

    @pytest.mark.parametrize("name,kind", [
        ("cv.txt", "text/plain"),
        ("CV.PDF", "application/pdf"),
    ])
    def test_suffix_mapping(self, name, kind):
        assert media_kind_for_path(name) == kind

    def test_unknown_suffix(self):
        with pytest.raises(UnsupportedFormat):
            media_kind_for_path("cv.docx")

    def test_normalize(self):
        assert normalize_media_kind(" Application/PDF ") == "application/pdf"


class TestPageJoin:

    def test_three_pages(self):
        pages = [["Page", "1"], ["Page", "2"], ["Page", "3"]]
        assert join_pages(pages) == "Page 1\n\nPage 2\n\nPage 3"

    def test_result_is_trimmed(self):
        assert join_pages([[], ["only", "text"], []]) == "only text"

    def test_blank_page_in_the_middle_keeps_separators(self):
        assert join_pages([["a"], [], ["b"]]) == "a\n\n\n\nb"


class TestPDFExtraction:
    """Tests for PDF text extraction against generated documents."""

    def test_three_page_document_in_page_order(self):
        data = build_pdf(["Page 1", "Page 2", "Page 3"])
        doc = extract_document(data, "application/pdf", config=ExtractionConfig(min_pdf_chars=0))
        assert doc.text == "Page 1\n\nPage 2\n\nPage 3"
        assert doc.page_count == 3
        assert doc.extraction_method == "pdfplumber"

    def test_tokens_within_page_are_space_joined(self):
        data = build_pdf([f"{LONG_LINE}\nsecond line", "Education\nBSc Computer Science"])
        doc = extract_document(data, "application/pdf", filename="cv.pdf")
        assert doc.text == f"{LONG_LINE} second line\n\nEducation BSc Computer Science"
        assert doc.filename == "cv.pdf"

    def test_short_pdf_is_insufficient(self):
        data = build_pdf(["Page 1", "Page 2", "Page 3"])
        with pytest.raises(InsufficientText) as exc_info:
            extract_document(data, "application/pdf")
        assert "paste" in str(exc_info.value)

    def test_pdf_without_text_layer_is_insufficient(self):
        data = build_pdf([""])
        with pytest.raises(InsufficientText):
            extract_document(data, "application/pdf")

    def test_pypdf_engine(self):
        data = build_pdf([LONG_LINE, "Page two of the resume"])
        config = ExtractionConfig(pdf_engines=["pypdf"])
        doc = extract_document(data, "application/pdf", config=config)
        assert doc.text == f"{LONG_LINE}\n\nPage two of the resume"
        assert doc.extraction_method == "pypdf"

    def test_no_engine_available(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "pdfplumber", None)
        monkeypatch.setitem(sys.modules, "pypdf", None)
        with pytest.raises(EngineUnavailable) as exc_info:
            extract_document(build_pdf([LONG_LINE]), "application/pdf")
        assert "paste" in str(exc_info.value)

    def test_falls_back_when_primary_engine_fails(self, monkeypatch):
        def broken(module, data):
            raise RuntimeError("bad xref")

        monkeypatch.setitem(pdf_extractor._PAGE_READERS, "pdfplumber", broken)
        doc = extract_document(build_pdf([LONG_LINE]), "application/pdf")
        assert doc.text == LONG_LINE
        assert doc.extraction_method == "pypdf"

    def test_every_engine_failing_reports_engine_messages(self, monkeypatch):
        def broken(module, data):
            raise RuntimeError("bad xref")

        monkeypatch.setitem(pdf_extractor._PAGE_READERS, "pdfplumber", broken)
        monkeypatch.setitem(pdf_extractor._PAGE_READERS, "pypdf", broken)
        with pytest.raises(DocumentParseError, match="bad xref"):
            extract_document(b"%PDF-1.4 not really", "application/pdf")
