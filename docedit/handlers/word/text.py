"""Word text operations: add, replace, search and statistics."""

from __future__ import annotations

import re
from typing import Optional

from docedit.exceptions import ParameterValidationError
from docedit.handlers.word.helpers import check_style, iter_all_paragraphs
from docedit.handlers.word.results import (
    SearchMatch,
    SearchResult,
    TextAddResult,
    TextReplaceResult,
    WordStatisticsResult,
)
from docedit.operations import ParameterSpec, engine_errors, operation

CONTEXT_CHARS = 30


@operation(
    "add",
    result=TextAddResult,
    mutates=True,
    parameters=[
        ParameterSpec("text", "string", "Text to append as a new paragraph", required=True),
        ParameterSpec("style", "string", "Paragraph style name, e.g. 'Heading 1'"),
        ParameterSpec("bold", "boolean", "Bold text", default=False),
        ParameterSpec("italic", "boolean", "Italic text", default=False),
    ],
)
def add(view, parameters) -> TextAddResult:
    """Append a paragraph of text at the end of the document."""
    document = view.document
    text = parameters.get_required("text", str)
    style = check_style(document, parameters.get_optional("style", Optional[str]))
    bold = parameters.get_optional("bold", bool, False)
    italic = parameters.get_optional("italic", bool, False)

    with engine_errors("adding text"):
        paragraph = document.add_paragraph(style=style)
        run = paragraph.add_run(text)
        if bold:
            run.bold = True
        if italic:
            run.italic = True
    view.mark_modified()

    index = len(document.paragraphs) - 1
    return TextAddResult(
        message=f"Text added as paragraph {index}.",
        paragraph_index=index,
        style=paragraph.style.name if paragraph.style is not None else None,
    )


def _pattern(text: str, match_case: bool) -> re.Pattern:
    return re.compile(re.escape(text), 0 if match_case else re.IGNORECASE)


def _replace_in_paragraph(paragraph, pattern: re.Pattern, replacement: str) -> int:
    """Replace matches run by run, falling back to the whole paragraph for matches split across runs."""
    runs = paragraph.runs
    joined = "".join(run.text for run in runs)
    expected = len(pattern.findall(joined))
    if not expected:
        return 0
    if sum(len(pattern.findall(run.text)) for run in runs) == expected:
        for run in runs:
            run.text = pattern.sub(lambda _match: replacement, run.text)
    else:
        # Some match spans runs: keep the first run's formatting for the whole text.
        runs[0].text = pattern.sub(lambda _match: replacement, joined)
        for run in runs[1:]:
            run.text = ""
    return expected


@operation(
    "replace",
    result=TextReplaceResult,
    mutates=True,
    parameters=[
        ParameterSpec("find", "string", "Text to find", required=True),
        ParameterSpec("replace", "string", "Replacement text", required=True),
        ParameterSpec("matchCase", "boolean", "Match case", default=True),
    ],
)
def replace(view, parameters) -> TextReplaceResult:
    """Replace text in body paragraphs and table cells."""
    parameters.require_all("find", "replace")
    find = parameters.get_required("find", str)
    if find == "":
        raise ParameterValidationError("find", "find must not be empty")
    replacement = parameters.get_required("replace", str)
    pattern = _pattern(find, parameters.get_optional("matchCase", bool, True))

    count = 0
    with engine_errors(f"replacing '{find}'"):
        for paragraph in iter_all_paragraphs(view.document):
            count += _replace_in_paragraph(paragraph, pattern, replacement)
    if count:
        view.mark_modified()
    return TextReplaceResult(message=f"Replaced {count} occurrence(s) of '{find}'.", replacements=count)


@operation(
    "search",
    result=SearchResult,
    parameters=[
        ParameterSpec("searchText", "string", "Text to search for", required=True),
        ParameterSpec("matchCase", "boolean", "Match case", default=False),
        ParameterSpec("maxResults", "integer", "Maximum matches to return", default=50),
    ],
)
def search(view, parameters) -> SearchResult:
    """Find text in body paragraphs, with surrounding context."""
    search_text = parameters.get_required("searchText", str)
    if search_text == "":
        raise ParameterValidationError("searchText", "searchText must not be empty")
    max_results = parameters.get_optional("maxResults", int, 50)
    if max_results < 1:
        raise ParameterValidationError("maxResults", f"maxResults must be >= 1, got {max_results}")
    pattern = _pattern(search_text, parameters.get_optional("matchCase", bool, False))

    matches = []
    total = 0
    for index, paragraph in enumerate(view.document.paragraphs):
        text = paragraph.text
        for found in pattern.finditer(text):
            total += 1
            if len(matches) < max_results:
                start = max(0, found.start() - CONTEXT_CHARS)
                end = min(len(text), found.end() + CONTEXT_CHARS)
                matches.append(
                    SearchMatch(paragraph_index=index, position=found.start(), context=text[start:end])
                )
    return SearchResult(
        message=f"Found {total} match(es) for '{search_text}'.",
        search_text=search_text,
        match_count=total,
        truncated=total > len(matches),
        matches=matches,
    )


@operation("get_statistics", result=WordStatisticsResult)
def get_statistics(view, parameters) -> WordStatisticsResult:
    """Count paragraphs, words, characters, tables and sections."""
    document = view.document
    texts = [paragraph.text for paragraph in iter_all_paragraphs(document)]
    body = document.paragraphs
    words = sum(len(text.split()) for text in texts)
    characters = sum(len(text) for text in texts)
    characters_no_spaces = sum(len("".join(text.split())) for text in texts)
    return WordStatisticsResult(
        message=f"Document has {len(body)} paragraph(s) and {words} word(s).",
        paragraphs=len(body),
        non_empty_paragraphs=sum(1 for paragraph in body if paragraph.text.strip()),
        words=words,
        characters=characters,
        characters_no_spaces=characters_no_spaces,
        tables=len(document.tables),
        sections=len(document.sections),
    )


OPERATIONS = [add, replace, search, get_statistics]
