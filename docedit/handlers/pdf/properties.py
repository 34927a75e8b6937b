"""PDF document information: read and set."""

from __future__ import annotations

from typing import Optional

from docedit.exceptions import ParameterValidationError
from docedit.handlers.pdf.results import PropertiesResult, PropertiesSetResult
from docedit.operations import ParameterSpec, engine_errors, operation

# parameter name -> document information key
PROPERTY_KEYS = {
    "title": "/Title",
    "author": "/Author",
    "subject": "/Subject",
    "keywords": "/Keywords",
    "creator": "/Creator",
    "producer": "/Producer",
}


def _info_value(metadata, key: str) -> Optional[str]:
    if metadata is None:
        return None
    value = metadata.get(key)
    return None if value is None else str(value)


@operation("get", result=PropertiesResult)
def get(view, parameters) -> PropertiesResult:
    """Read the document information dictionary."""
    writer = view.document
    metadata = writer.metadata
    values = {name: _info_value(metadata, key) for name, key in PROPERTY_KEYS.items()}
    return PropertiesResult(
        message=f"Document properties read ({len(writer.pages)} page(s)).",
        page_count=len(writer.pages),
        **values,
    )


@operation(
    "set",
    result=PropertiesSetResult,
    mutates=True,
    parameters=[ParameterSpec(name, "string", f"Document {name}") for name in PROPERTY_KEYS],
)
def set_properties(view, parameters) -> PropertiesSetResult:
    """Set one or more document information fields."""
    updated = {}
    for name in PROPERTY_KEYS:
        value = parameters.get_optional(name, Optional[str])
        if value is not None:
            updated[name] = value
    if not updated:
        raise ParameterValidationError(
            "title", f"Provide at least one of: {', '.join(PROPERTY_KEYS)}"
        )

    with engine_errors("document properties"):
        view.document.add_metadata({PROPERTY_KEYS[name]: value for name, value in updated.items()})
    view.mark_modified()
    return PropertiesSetResult(message=f"Updated {', '.join(updated)}.", updated=updated)


OPERATIONS = [get, set_properties]
