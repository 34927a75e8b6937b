"""Slide and shape lookup helpers shared by the PowerPoint handlers."""

from typing import Optional

from pptx.presentation import Presentation
from pptx.slide import Slide
from pptx.util import Emu

from docedit.exceptions import NotFoundError


def get_slide(presentation: Presentation, index: int) -> Slide:
    """Return the slide at a 0-based index.

    Raises:
        NotFoundError: If the index is out of range
    """
    count = len(presentation.slides)
    if index < 0 or index >= count:
        raise NotFoundError(
            f"Slide index {index} is out of range "
            f"(presentation has {count} slide(s), valid: 0-{count - 1})",
            details={"slideIndex": index, "slide_count": count},
        )
    return presentation.slides[index]


def get_shape(slide: Slide, slide_index: int, index: int):
    count = len(slide.shapes)
    if index < 0 or index >= count:
        raise NotFoundError(
            f"Shape index {index} is out of range on slide {slide_index} "
            f"(slide has {count} shape(s), valid: 0-{count - 1})",
            details={"slideIndex": slide_index, "shapeIndex": index, "shape_count": count},
        )
    return slide.shapes[index]


def to_points(length) -> Optional[float]:
    if length is None:
        return None
    return round(Emu(length).pt, 2)


def is_hidden(slide: Slide) -> bool:
    return slide._element.get("show") == "0"


def slide_title(slide: Slide) -> Optional[str]:
    title = slide.shapes.title
    if title is None or not title.has_text_frame:
        return None
    return title.text_frame.text
