"""PowerPoint shape operations: add and edit text boxes, delete and list shapes."""

from __future__ import annotations

from pptx.util import Pt

from docedit.exceptions import ParameterValidationError
from docedit.handlers.powerpoint.helpers import get_shape, get_slide, to_points
from docedit.handlers.powerpoint.results import ShapeInfo, ShapeListResult, ShapeResult
from docedit.operations import ParameterSpec, engine_errors, operation

SLIDE_INDEX = ParameterSpec("slideIndex", "integer", "Slide index (0-based)", required=True)
SHAPE_INDEX = ParameterSpec("shapeIndex", "integer", "Shape index on the slide (0-based)", required=True)


def _text_frame(shape, slide_index: int, shape_index: int):
    if not shape.has_text_frame:
        raise ParameterValidationError(
            "shapeIndex",
            f"Shape {shape_index} on slide {slide_index} ('{shape.name}') has no text frame",
        )
    return shape.text_frame


@operation(
    "add_text",
    result=ShapeResult,
    mutates=True,
    parameters=[
        SLIDE_INDEX,
        ParameterSpec("text", "string", "Text of the new text box", required=True),
        ParameterSpec("x", "number", "Left position in points", default=72),
        ParameterSpec("y", "number", "Top position in points", default=72),
        ParameterSpec("width", "number", "Width in points", default=432),
        ParameterSpec("height", "number", "Height in points", default=72),
        ParameterSpec("fontSize", "number", "Font size in points"),
    ],
)
def add_text(view, parameters) -> ShapeResult:
    """Add a text box to a slide."""
    parameters.require_all("slideIndex", "text")
    slide_index = parameters.get_required("slideIndex", int)
    text = parameters.get_required("text", str)
    x = parameters.get_optional("x", float, 72.0)
    y = parameters.get_optional("y", float, 72.0)
    width = parameters.get_optional("width", float, 432.0)
    height = parameters.get_optional("height", float, 72.0)
    if width <= 0 or height <= 0:
        raise ParameterValidationError("width", "width and height must be positive")
    font_size = parameters.get_optional("fontSize", float, 0.0)
    slide = get_slide(view.document, slide_index)

    with engine_errors(f"slide {slide_index}"):
        box = slide.shapes.add_textbox(Pt(x), Pt(y), Pt(width), Pt(height))
        box.text_frame.text = text
        if font_size > 0:
            for paragraph in box.text_frame.paragraphs:
                for run in paragraph.runs:
                    run.font.size = Pt(font_size)
    view.mark_modified()

    shape_index = len(slide.shapes) - 1
    return ShapeResult(
        message=f"Text box added to slide {slide_index} as shape {shape_index}.",
        slide_index=slide_index,
        shape_index=shape_index,
        shape_id=box.shape_id,
    )


@operation(
    "edit_text",
    result=ShapeResult,
    mutates=True,
    parameters=[SLIDE_INDEX, SHAPE_INDEX, ParameterSpec("text", "string", "New text", required=True)],
)
def edit_text(view, parameters) -> ShapeResult:
    """Replace the text of a shape, keeping the first run's formatting."""
    parameters.require_all("slideIndex", "shapeIndex", "text")
    slide_index = parameters.get_required("slideIndex", int)
    shape_index = parameters.get_required("shapeIndex", int)
    text = parameters.get_required("text", str)
    slide = get_slide(view.document, slide_index)
    shape = get_shape(slide, slide_index, shape_index)
    frame = _text_frame(shape, slide_index, shape_index)

    with engine_errors(f"shape {shape_index} on slide {slide_index}"):
        first = frame.paragraphs[0]
        if first.runs:
            first.runs[0].text = text
            for run in first.runs[1:]:
                run._r.getparent().remove(run._r)
            for paragraph in frame.paragraphs[1:]:
                paragraph._p.getparent().remove(paragraph._p)
        else:
            frame.text = text
    view.mark_modified()
    return ShapeResult(
        message=f"Text of shape {shape_index} on slide {slide_index} updated.",
        slide_index=slide_index,
        shape_index=shape_index,
        shape_id=shape.shape_id,
    )


@operation("delete", result=ShapeResult, mutates=True, parameters=[SLIDE_INDEX, SHAPE_INDEX])
def delete(view, parameters) -> ShapeResult:
    """Delete a shape from a slide."""
    parameters.require_all("slideIndex", "shapeIndex")
    slide_index = parameters.get_required("slideIndex", int)
    shape_index = parameters.get_required("shapeIndex", int)
    slide = get_slide(view.document, slide_index)
    shape = get_shape(slide, slide_index, shape_index)

    shape_id = shape.shape_id
    with engine_errors(f"shape {shape_index} on slide {slide_index}"):
        element = shape._element
        element.getparent().remove(element)
    view.mark_modified()
    return ShapeResult(
        message=f"Shape {shape_index} deleted from slide {slide_index}.",
        slide_index=slide_index,
        shape_index=shape_index,
        shape_id=shape_id,
    )


@operation("get", result=ShapeListResult, parameters=[SLIDE_INDEX])
def get(view, parameters) -> ShapeListResult:
    """List the shapes of a slide with geometry and text."""
    slide_index = parameters.get_required("slideIndex", int)
    slide = get_slide(view.document, slide_index)
    shapes = [
        ShapeInfo(
            index=index,
            shape_id=shape.shape_id,
            name=shape.name,
            shape_type=str(shape.shape_type) if shape.shape_type is not None else None,
            x=to_points(shape.left),
            y=to_points(shape.top),
            width=to_points(shape.width),
            height=to_points(shape.height),
            text=shape.text_frame.text if shape.has_text_frame else None,
        )
        for index, shape in enumerate(slide.shapes)
    ]
    return ShapeListResult(
        message=f"Slide {slide_index} has {len(shapes)} shape(s).",
        slide_index=slide_index,
        count=len(shapes),
        shapes=shapes,
    )


OPERATIONS = [add_text, edit_text, delete, get]
