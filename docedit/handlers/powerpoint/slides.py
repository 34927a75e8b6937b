"""PowerPoint slide operations: add, delete, hide and list."""

from __future__ import annotations

from typing import Optional

from pptx.util import Pt

from docedit.exceptions import ParameterValidationError, ValidationError
from docedit.handlers.powerpoint.helpers import get_slide, is_hidden, slide_title, to_points
from docedit.handlers.powerpoint.results import SlideInfo, SlideListResult, SlideResult
from docedit.operations import ParameterSpec, engine_errors, operation

BLANK_LAYOUT_INDEX = 6
SLIDE_INDEX = ParameterSpec("slideIndex", "integer", "Slide index (0-based)", required=True)


@operation(
    "add",
    result=SlideResult,
    mutates=True,
    parameters=[
        ParameterSpec("layoutIndex", "integer", "Slide layout index (default: blank layout)"),
        ParameterSpec("title", "string", "Optional slide title"),
    ],
)
def add(view, parameters) -> SlideResult:
    """Append a slide using one of the master's layouts."""
    presentation = view.document
    layouts = presentation.slide_layouts
    layout_index = parameters.get_optional("layoutIndex", Optional[int])
    if layout_index is None:
        layout_index = BLANK_LAYOUT_INDEX if len(layouts) > BLANK_LAYOUT_INDEX else len(layouts) - 1
    if layout_index < 0 or layout_index >= len(layouts):
        raise ParameterValidationError(
            "layoutIndex",
            f"layoutIndex {layout_index} is out of range (valid: 0-{len(layouts) - 1})",
        )
    title = parameters.get_optional("title", Optional[str])

    layout = layouts[layout_index]
    with engine_errors(f"layout {layout_index}"):
        slide = presentation.slides.add_slide(layout)
        if title is not None:
            if slide.shapes.title is not None:
                slide.shapes.title.text = title
            else:
                width = presentation.slide_width - Pt(72)
                box = slide.shapes.add_textbox(Pt(36), Pt(24), width, Pt(60))
                box.text_frame.text = title
    view.mark_modified()

    index = len(presentation.slides) - 1
    return SlideResult(message=f"Slide {index} added with layout '{layout.name}'.", slide_index=index, layout=layout.name)


@operation("delete", result=SlideResult, mutates=True, parameters=[SLIDE_INDEX])
def delete(view, parameters) -> SlideResult:
    """Delete a slide. The last remaining slide cannot be deleted."""
    presentation = view.document
    index = parameters.get_required("slideIndex", int)
    get_slide(presentation, index)
    if len(presentation.slides) == 1:
        raise ValidationError(
            "Cannot delete the only slide in the presentation", details={"slideIndex": index}
        )

    with engine_errors(f"slide {index}"):
        slide_ids = presentation.slides._sldIdLst
        slide_id = list(slide_ids)[index]
        presentation.part.drop_rel(slide_id.rId)
        slide_ids.remove(slide_id)
    view.mark_modified()
    return SlideResult(message=f"Slide {index} deleted.", slide_index=index)


@operation(
    "hide",
    result=SlideResult,
    mutates=True,
    parameters=[
        SLIDE_INDEX,
        ParameterSpec("hidden", "boolean", "True to hide, false to show", default=True),
    ],
)
def hide(view, parameters) -> SlideResult:
    """Hide or unhide a slide in slide shows."""
    index = parameters.get_required("slideIndex", int)
    hidden = parameters.get_optional("hidden", bool, True)
    slide = get_slide(view.document, index)

    if is_hidden(slide) != hidden:
        with engine_errors(f"slide {index}"):
            if hidden:
                slide._element.set("show", "0")
            else:
                slide._element.attrib.pop("show", None)
        view.mark_modified()
    state = "hidden" if hidden else "visible"
    return SlideResult(message=f"Slide {index} is {state}.", slide_index=index)


@operation("get", result=SlideListResult)
def get(view, parameters) -> SlideListResult:
    """List slides with layout, shape count, title and visibility."""
    presentation = view.document
    slides = [
        SlideInfo(
            index=index,
            layout=slide.slide_layout.name if slide.slide_layout is not None else None,
            shape_count=len(slide.shapes),
            title=slide_title(slide),
            hidden=is_hidden(slide),
        )
        for index, slide in enumerate(presentation.slides)
    ]
    return SlideListResult(
        message=f"Presentation has {len(slides)} slide(s).",
        count=len(slides),
        slide_width=to_points(presentation.slide_width) or 0.0,
        slide_height=to_points(presentation.slide_height) or 0.0,
        slides=slides,
    )


OPERATIONS = [add, delete, hide, get]
