"""Tests for document type detection, loading and saving."""

from email.message import EmailMessage

import pytest
from docx.document import Document
from openpyxl import Workbook
from pptx.presentation import Presentation
from pypdf import PdfWriter

from docedit.exceptions import NotFoundError, ParameterValidationError
from docedit.sessions import DocumentType, detect_type, load_document, new_document, save_document


class TestDetectType:
    """Test extension mapping"""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("a.xlsx", DocumentType.EXCEL),
            ("a.XLSM", DocumentType.EXCEL),
            ("a.docx", DocumentType.WORD),
            ("a.pptx", DocumentType.POWERPOINT),
            ("a.pdf", DocumentType.PDF),
            ("a.eml", DocumentType.EMAIL),
        ],
    )
    def test_known_extensions(self, name, expected):
        """Test supported extensions, case-insensitively"""
        assert detect_type(name) is expected

    @pytest.mark.parametrize("name", ["a.txt", "a.doc", "noext"])
    def test_unsupported_extension(self, name):
        """Test other extensions are parameter errors on 'path'"""
        with pytest.raises(ParameterValidationError) as exc_info:
            detect_type(name)
        assert exc_info.value.parameter == "path"


class TestNewDocument:
    """Test blank documents"""

    def test_engine_types(self):
        """Test each type maps to its engine object"""
        assert isinstance(new_document(DocumentType.EXCEL), Workbook)
        assert isinstance(new_document(DocumentType.POWERPOINT), Presentation)
        assert isinstance(new_document(DocumentType.EMAIL), EmailMessage)
        assert isinstance(new_document(DocumentType.WORD), Document)

    def test_new_pdf_has_one_letter_page(self):
        """Test a new PDF starts with one US Letter page"""
        writer = new_document(DocumentType.PDF)
        assert isinstance(writer, PdfWriter)
        assert len(writer.pages) == 1
        assert float(writer.pages[0].mediabox.width) == 612


class TestLoadAndSave:
    """Test reading documents back after saving"""

    def test_missing_file(self, tmp_path):
        """Test a missing file is a not-found error"""
        with pytest.raises(NotFoundError):
            load_document(tmp_path / "missing.docx")

    def test_workbook(self, tmp_path, workbook):
        """Test a workbook keeps its sheet and cells"""
        workbook["Data"]["B2"] = "kept"
        path = tmp_path / "book.xlsx"
        assert save_document(workbook, path) == path.stat().st_size
        loaded = load_document(path)
        assert loaded.sheetnames == ["Data"]
        assert loaded["Data"]["B2"].value == "kept"

    def test_word(self, tmp_path, word_document):
        """Test a document keeps its paragraphs"""
        path = tmp_path / "doc.docx"
        save_document(word_document, path)
        loaded = load_document(path)
        assert [p.text for p in loaded.paragraphs][0] == "Quarterly report"

    def test_presentation(self, tmp_path, presentation):
        """Test a presentation keeps its slides"""
        path = tmp_path / "deck.pptx"
        save_document(presentation, path)
        assert len(load_document(path).slides) == 2

    def test_pdf(self, tmp_path, pdf_writer):
        """Test a PDF keeps its pages"""
        path = tmp_path / "file.pdf"
        save_document(pdf_writer, path)
        assert len(load_document(path).pages) == 2

    def test_email(self, tmp_path, email_message):
        """Test a message keeps its headers"""
        path = tmp_path / "mail.eml"
        save_document(email_message, path)
        loaded = load_document(path)
        assert isinstance(loaded, EmailMessage)
        assert loaded["Subject"] == "Status update"

    def test_save_creates_parent_directories(self, tmp_path, workbook):
        """Test missing directories are created and no temp file remains"""
        path = tmp_path / "nested" / "dir" / "book.xlsx"
        save_document(workbook, path)
        assert path.exists()
        assert [p.name for p in path.parent.iterdir()] == ["book.xlsx"]
