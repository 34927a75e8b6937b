"""Tests for PDF page, properties and text operations."""

import pytest

from docedit.exceptions import NotFoundError, ParameterValidationError, ValidationError
from docedit.handlers.pdf import pages, properties, text


class TestPages:
    """Test page operations"""

    def test_add_appends_page_with_neighbour_size(self, pdf_writer, run_op):
        """Test add appends a page sized like the last page"""
        result, context = run_op(pages.add, pdf_writer)
        assert len(pdf_writer.pages) == 3
        assert result.page_index == 2
        assert result.page_count == 3
        assert float(pdf_writer.pages[2].mediabox.width) == 612
        assert context.modified is True

    def test_add_with_explicit_size_and_position(self, pdf_writer, run_op):
        """Test insertAt and explicit dimensions"""
        run_op(pages.add, pdf_writer, insertAt=0, width=595, height=842)
        first = pdf_writer.pages[0]
        assert float(first.mediabox.width) == 595
        assert float(first.mediabox.height) == 842

    def test_add_insert_at_out_of_range(self, pdf_writer, run_op):
        """Test insertAt is validated"""
        with pytest.raises(ParameterValidationError):
            run_op(pages.add, pdf_writer, insertAt=7)
        assert len(pdf_writer.pages) == 2

    def test_delete(self, pdf_writer, run_op):
        """Test delete removes a page"""
        result, context = run_op(pages.delete, pdf_writer, pageIndex=0)
        assert len(pdf_writer.pages) == 1
        assert result.page_count == 1
        assert context.modified is True

    def test_delete_only_page_rejected(self, pdf_writer, run_op):
        """Test the only page cannot be deleted"""
        run_op(pages.delete, pdf_writer, pageIndex=1)
        with pytest.raises(ValidationError):
            run_op(pages.delete, pdf_writer, pageIndex=0)

    def test_delete_out_of_range(self, pdf_writer, run_op):
        """Test a bad page index is a not-found error"""
        with pytest.raises(NotFoundError):
            run_op(pages.delete, pdf_writer, pageIndex=2)

    def test_rotate_one_page(self, pdf_writer, run_op):
        """Test rotating a single page"""
        result, context = run_op(pages.rotate, pdf_writer, pageIndex=1, rotation=90)
        assert pdf_writer.pages[1].rotation == 90
        assert pdf_writer.pages[0].rotation == 0
        assert result.rotated_pages == [1]
        assert context.modified is True

    def test_rotate_all_pages_counter_clockwise(self, pdf_writer, run_op):
        """Test -90 rotates every page when no index is given"""
        result, _ = run_op(pages.rotate, pdf_writer, rotation=-90)
        assert result.rotated_pages == [0, 1]
        info, _ = run_op(pages.get_info, pdf_writer)
        assert [page.rotation for page in info.pages] == [270, 270]

    def test_rotate_invalid_angle(self, pdf_writer, run_op):
        """Test only multiples of 90 are accepted"""
        with pytest.raises(ParameterValidationError) as exc_info:
            run_op(pages.rotate, pdf_writer, rotation=45)
        assert exc_info.value.parameter == "rotation"

    def test_get_info(self, pdf_writer, run_op):
        """Test page count and sizes"""
        result, context = run_op(pages.get_info, pdf_writer)
        assert result.page_count == 2
        assert result.pages[0].width == 612
        assert result.pages[0].height == 792
        assert context.modified is False


class TestProperties:
    """Test document information"""

    def test_set_then_get(self, pdf_writer, run_op):
        """Test set stores fields that get reads back"""
        result, context = run_op(properties.set_properties, pdf_writer, title="Plan", author="Ops")
        assert result.updated == {"title": "Plan", "author": "Ops"}
        assert context.modified is True

        info, info_context = run_op(properties.get, pdf_writer)
        assert info.title == "Plan"
        assert info.author == "Ops"
        assert info.page_count == 2
        assert info_context.modified is False

    def test_set_requires_a_field(self, pdf_writer, run_op):
        """Test set without any field is rejected"""
        with pytest.raises(ParameterValidationError):
            run_op(properties.set_properties, pdf_writer)

    def test_operation_is_named_set(self):
        """Test the wire name of the setter"""
        assert properties.set_properties.name == "set"


class TestText:
    """Test text extraction"""

    def test_extract_blank_pages(self, pdf_writer, run_op):
        """Test blank pages extract as empty text"""
        result, context = run_op(text.extract, pdf_writer)
        assert result.page_count == 2
        assert [page.page_index for page in result.pages] == [0, 1]
        assert result.total_characters == 0
        assert context.modified is False

    def test_extract_one_page(self, pdf_writer, run_op):
        """Test pageIndex restricts extraction"""
        result, _ = run_op(text.extract, pdf_writer, pageIndex=1)
        assert [page.page_index for page in result.pages] == [1]

    def test_extract_out_of_range(self, pdf_writer, run_op):
        """Test a bad page index is a not-found error"""
        with pytest.raises(NotFoundError):
            run_op(text.extract, pdf_writer, pageIndex=9)
