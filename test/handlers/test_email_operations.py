"""Tests for email content and attachment operations."""

import pytest

from docedit.exceptions import NotFoundError, ParameterValidationError
from docedit.handlers.email import attachments, content


@pytest.fixture
def report_file(tmp_path):
    path = tmp_path / "report.csv"
    path.write_text("region,total\nnorth,10\n", encoding="utf-8")
    return path


class TestContent:
    """Test reading and editing message content"""

    def test_get(self, email_message, run_op):
        """Test get returns headers, recipients and body"""
        result, context = run_op(content.get, email_message)
        assert result.subject == "Status update"
        assert result.sender == "Alice <alice@example.com>"
        assert result.to == ["bob@example.com"]
        assert result.cc == ["carol@example.com"]
        assert result.body == "Hello Bob,\nAll good.\n"
        assert result.is_html is False
        assert result.attachment_count == 0
        assert context.modified is False

    def test_set_subject(self, email_message, run_op):
        """Test the subject header is replaced, not duplicated"""
        _, context = run_op(content.set_subject, email_message, subject="Final update")
        assert email_message.get_all("Subject") == ["Final update"]
        assert context.modified is True

    def test_set_subject_single_line(self, email_message, run_op):
        """Test header injection through newlines is rejected"""
        with pytest.raises(ParameterValidationError):
            run_op(content.set_subject, email_message, subject="a\nBcc: evil@example.com")
        assert email_message["Subject"] == "Status update"

    def test_set_body_html(self, email_message, run_op):
        """Test the body can become HTML"""
        run_op(content.set_body, email_message, body="<p>Hi</p>", isHtml=True)
        result, _ = run_op(content.get, email_message)
        assert result.is_html is True
        assert "<p>Hi</p>" in result.body

    def test_set_body_keeps_attachments(self, email_message, run_op, report_file):
        """Test replacing the body keeps existing attachments"""
        run_op(attachments.add, email_message, attachmentPath=str(report_file))
        run_op(content.set_body, email_message, body="New body")
        result, _ = run_op(content.get, email_message)
        assert result.body.strip() == "New body"
        assert result.attachment_count == 1

    def test_set_recipients(self, email_message, run_op):
        """Test given headers are replaced and others left alone"""
        result, context = run_op(
            content.set_recipients, email_message, to=["Dan <dan@example.com>", "erin@example.com"]
        )
        assert result.to == ["Dan <dan@example.com>", "erin@example.com"]
        assert result.cc == ["carol@example.com"]
        assert context.modified is True

    def test_set_recipients_accepts_string(self, email_message, run_op):
        """Test a single string is one recipient"""
        result, _ = run_op(content.set_recipients, email_message, bcc="audit@example.com")
        assert result.bcc == ["audit@example.com"]

    def test_set_recipients_invalid_address(self, email_message, run_op):
        """Test addresses without '@' are rejected"""
        with pytest.raises(ParameterValidationError) as exc_info:
            run_op(content.set_recipients, email_message, to=["not-an-address"])
        assert exc_info.value.parameter == "to"

    def test_set_recipients_requires_one_header(self, email_message, run_op):
        """Test at least one of to, cc, bcc is needed"""
        with pytest.raises(ParameterValidationError):
            run_op(content.set_recipients, email_message)


class TestAttachments:
    """Test attachment operations"""

    def test_add_and_list(self, email_message, run_op, report_file):
        """Test an attachment is added with a guessed content type"""
        result, context = run_op(attachments.add, email_message, attachmentPath=str(report_file))
        assert result.attachment_index == 0
        assert result.filename == "report.csv"
        assert context.modified is True

        listing, list_context = run_op(attachments.get, email_message)
        assert listing.count == 1
        assert listing.attachments[0].content_type == "text/csv"
        assert listing.attachments[0].size == report_file.stat().st_size
        assert list_context.modified is False

    def test_add_with_custom_name(self, email_message, run_op, report_file):
        """Test the name parameter overrides the file name"""
        result, _ = run_op(attachments.add, email_message, attachmentPath=str(report_file), name="totals.csv")
        assert result.filename == "totals.csv"

    def test_add_missing_file(self, email_message, run_op, tmp_path):
        """Test a missing source file is a not-found error"""
        with pytest.raises(NotFoundError):
            run_op(attachments.add, email_message, attachmentPath=str(tmp_path / "missing.pdf"))

    def test_remove(self, email_message, run_op, report_file):
        """Test remove drops the attachment"""
        run_op(attachments.add, email_message, attachmentPath=str(report_file))
        result, context = run_op(attachments.remove, email_message, attachmentIndex=0)
        assert result.filename == "report.csv"
        assert list(email_message.iter_attachments()) == []
        assert context.modified is True

    def test_remove_out_of_range(self, email_message, run_op):
        """Test a bad attachment index is a not-found error"""
        with pytest.raises(NotFoundError):
            run_op(attachments.remove, email_message, attachmentIndex=0)

    def test_extract_writes_file_without_modifying(self, email_message, run_op, report_file, tmp_path):
        """Test extract writes the payload and leaves the message unmodified"""
        run_op(attachments.add, email_message, attachmentPath=str(report_file))
        output_dir = tmp_path / "out"

        result, context = run_op(attachments.extract, email_message, attachmentIndex=0, outputDir=str(output_dir))

        written = output_dir / "report.csv"
        assert result.output_path == str(written)
        assert written.read_bytes() == report_file.read_bytes()
        assert context.modified is False

    def test_extract_is_read_only_operation(self):
        """Test extract is declared as not mutating"""
        assert attachments.extract.mutates is False
