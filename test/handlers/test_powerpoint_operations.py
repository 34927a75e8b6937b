"""Tests for PowerPoint slide and shape operations."""

import pytest
from pptx.util import Pt

from docedit.exceptions import NotFoundError, ParameterValidationError, ValidationError
from docedit.handlers.powerpoint import shapes, slides


class TestSlides:
    """Test slide operations"""

    def test_add_blank_slide_by_default(self, presentation, run_op):
        """Test add appends a slide using the blank layout"""
        result, context = run_op(slides.add, presentation)
        assert len(presentation.slides) == 3
        assert result.slide_index == 2
        assert result.layout == "Blank"
        assert context.modified is True

    def test_add_with_title_on_title_layout(self, presentation, run_op):
        """Test a title goes into the layout's title placeholder"""
        run_op(slides.add, presentation, layoutIndex=1, title="Agenda")
        assert presentation.slides[2].shapes.title.text == "Agenda"

    def test_add_with_title_on_blank_layout(self, presentation, run_op):
        """Test a title on a layout without placeholder becomes a text box"""
        run_op(slides.add, presentation, title="Notes")
        texts = [shape.text_frame.text for shape in presentation.slides[2].shapes if shape.has_text_frame]
        assert texts == ["Notes"]

    def test_add_layout_out_of_range(self, presentation, run_op):
        """Test layoutIndex is validated"""
        with pytest.raises(ParameterValidationError):
            run_op(slides.add, presentation, layoutIndex=99)
        assert len(presentation.slides) == 2

    def test_delete(self, presentation, run_op):
        """Test delete removes the slide"""
        result, context = run_op(slides.delete, presentation, slideIndex=0)
        assert len(presentation.slides) == 1
        assert presentation.slides[0].shapes.title is None
        assert context.modified is True

    def test_delete_only_slide_rejected(self, presentation, run_op):
        """Test the only slide cannot be deleted"""
        run_op(slides.delete, presentation, slideIndex=1)
        with pytest.raises(ValidationError):
            run_op(slides.delete, presentation, slideIndex=0)

    def test_delete_out_of_range(self, presentation, run_op):
        """Test a bad slide index is a not-found error"""
        with pytest.raises(NotFoundError):
            run_op(slides.delete, presentation, slideIndex=5)

    def test_hide_and_show(self, presentation, run_op):
        """Test hide toggles visibility"""
        _, context = run_op(slides.hide, presentation, slideIndex=1)
        assert presentation.slides[1]._element.get("show") == "0"
        assert context.modified is True

        run_op(slides.hide, presentation, slideIndex=1, hidden=False)
        assert presentation.slides[1]._element.get("show") is None

    def test_hide_already_hidden_is_not_a_change(self, presentation, run_op):
        """Test hiding a hidden slide leaves the flag unset"""
        run_op(slides.hide, presentation, slideIndex=0)
        _, context = run_op(slides.hide, presentation, slideIndex=0)
        assert context.modified is False

    def test_get_lists_slides(self, presentation, run_op):
        """Test get lists layout, title and visibility"""
        result, context = run_op(slides.get, presentation)
        assert result.count == 2
        assert result.slides[0].title == "Welcome"
        assert result.slides[1].title is None
        assert result.slides[0].hidden is False
        assert result.slide_width == 720.0
        assert context.modified is False


class TestShapes:
    """Test shape operations"""

    def test_add_text_box(self, presentation, run_op):
        """Test add_text places a text box in points"""
        result, context = run_op(
            shapes.add_text, presentation, slideIndex=1, text="Hello", x=36, y=48, width=200, height=50, fontSize=24
        )
        box = presentation.slides[1].shapes[result.shape_index]
        assert box.text_frame.text == "Hello"
        assert box.left == Pt(36)
        assert box.top == Pt(48)
        assert box.text_frame.paragraphs[0].runs[0].font.size == Pt(24)
        assert context.modified is True

    def test_add_text_rejects_non_positive_size(self, presentation, run_op):
        """Test width and height must be positive"""
        with pytest.raises(ParameterValidationError):
            run_op(shapes.add_text, presentation, slideIndex=1, text="x", width=0)

    def test_edit_text(self, presentation, run_op):
        """Test edit_text replaces the text of a shape"""
        result, context = run_op(shapes.edit_text, presentation, slideIndex=0, shapeIndex=0, text="Hi there")
        assert presentation.slides[0].shapes[0].text_frame.text == "Hi there"
        assert context.modified is True

    def test_edit_text_collapses_paragraphs(self, presentation, run_op):
        """Test multi-paragraph text is replaced by a single paragraph"""
        box = presentation.slides[1].shapes.add_textbox(Pt(0), Pt(0), Pt(100), Pt(100))
        box.text_frame.text = "one\ntwo"
        run_op(shapes.edit_text, presentation, slideIndex=1, shapeIndex=0, text="three")
        assert box.text_frame.text == "three"

    def test_delete_shape(self, presentation, run_op):
        """Test delete removes a shape"""
        before = len(presentation.slides[0].shapes)
        _, context = run_op(shapes.delete, presentation, slideIndex=0, shapeIndex=0)
        assert len(presentation.slides[0].shapes) == before - 1
        assert context.modified is True

    def test_shape_out_of_range(self, presentation, run_op):
        """Test a bad shape index is a not-found error"""
        with pytest.raises(NotFoundError):
            run_op(shapes.delete, presentation, slideIndex=1, shapeIndex=0)

    def test_get_lists_shapes(self, presentation, run_op):
        """Test get lists shapes with geometry and text"""
        run_op(shapes.add_text, presentation, slideIndex=1, text="Body", x=10, y=20, width=100, height=40)
        result, context = run_op(shapes.get, presentation, slideIndex=1)
        assert result.count == 1
        info = result.shapes[0]
        assert info.text == "Body"
        assert info.x == 10.0
        assert info.y == 20.0
        assert info.width == 100.0
        assert context.modified is False
