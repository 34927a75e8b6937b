"""PowerPoint (python-pptx Presentation) operation registries."""

from pptx.presentation import Presentation

from docedit.handlers.powerpoint import shapes, slides
from docedit.operations import OperationRegistry


def build_registries():
    return [
        OperationRegistry("ppt_slide", Presentation, "powerpoint", "Add, delete, hide and list slides").register_all(
            slides.OPERATIONS
        ),
        OperationRegistry(
            "ppt_shape", Presentation, "powerpoint", "Add and edit text boxes, delete and list shapes"
        ).register_all(shapes.OPERATIONS),
    ]


__all__ = ["build_registries"]
