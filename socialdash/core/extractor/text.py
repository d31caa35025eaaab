# socialdash/core/extractor/text.py
"""
Title and description heuristics.

Both chains always produce a non-empty string: the last step is a fallback
built from the resolved date (title) or the raw message (description).
"""

from __future__ import annotations

import re
from datetime import date
from typing import Sequence

TITLE_MAX_FIRST_LINE = 80
DESCRIPTION_FALLBACK_CHARS = 300
DESCRIPTION_MAX_PARAGRAPHS = 3

_QUOTED = r"[\"“”]([^\"“”\n]+)[\"“”]"


def _label(name: str, not_after: Sequence[str] = ()) -> str:
    # **Label:** / Label: / **Label**:
    guard = "".join(rf"(?<!{word} )" for word in not_after)
    return rf"(?:\*\*)?{guard}\b{name}(?:\*\*)?:(?:\*\*)?"


def _compile(patterns: Sequence[str]) -> tuple["re.Pattern[str]", ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


_LABELED_TITLE_PATTERNS = _compile([
    _label("Event Name") + r"\s*([^\n]+)",
    _label("Title", not_after=("Video", "Content")) + r"\s*([^\n]+)",
    _label("Video Title") + r"\s*([^\n]+)",
    _label("Content Title") + r"\s*([^\n]+)",
    _label("Title Suggestions") + r"\s*(?:[-•*]|\d+\.)?\s*" + _QUOTED,
    _label("Title Suggestions") + r"\s*(?:[-•*]|\d+\.)?\s*([^\n\"]+)",
])

_NATURAL_TITLE_PATTERNS = _compile([
    r"\btitled\s+" + _QUOTED,
    r"\btitled\s+([^,.!?\n]+)",
    r"\babout\s+" + _QUOTED,
    r"\b(?:called|named|with the title)\s+" + _QUOTED,
])

_TOPIC_PATTERN = re.compile(r"\b(?:video|content)\s+(?:about|on|for)\s+([^,.!?\n]+)", re.IGNORECASE)
_BOILERPLATE_PREFIX = re.compile(r"^(?:I[’']ve added |Here[’']s |Created )", re.IGNORECASE)

# Блок заканчивается на пустой строке перед новым заголовком/списком или в конце текста
_BLOCK_END = r"(?=\n\n\*\*|\n\n#|\n\n-|\n\n\d\.|\n\n\w+:|\n\n\Z|\Z)"

_DESCRIPTION_PATTERNS = _compile([
    _label(name) + r"\s+([\s\S]+?)" + _BLOCK_END
    for name in ("Description", "Content", "Video Outline")
])


def format_date_label(value: date) -> str:
    """Формат 6/15/2025 для дат в автоматических заголовках."""
    return f"{value.month}/{value.day}/{value.year}"


def _clean(value: str) -> str:
    return value.strip().strip("*").strip().strip("\"“”").strip()


def _first_group(patterns: Sequence["re.Pattern[str]"], message: str) -> str | None:
    for pattern in patterns:
        m = pattern.search(message)
        if m:
            value = _clean(m.group(1))
            if value:
                return value
    return None


def resolve_title(message: str, event_date: date) -> str:
    """
    Заголовок события по цепочке приоритетов:

    1. явные поля (Event Name / Title / Video Title / Content Title / Title Suggestions);
    2. ``titled "..."``, ``titled ...``, ``about "..."``;
    3. ``video about <topic>`` → ``"<topic> - <date>"``;
    4. первая строка короче 80 символов без вводных фраз;
    5. ``"Content for <date>"``.
    """
    title = _first_group(_LABELED_TITLE_PATTERNS, message) or _first_group(_NATURAL_TITLE_PATTERNS, message)
    if title:
        return title

    topic = _TOPIC_PATTERN.search(message)
    if topic and topic.group(1).strip():
        return f"{topic.group(1).strip()} - {format_date_label(event_date)}"

    first_line = message.split("\n")[0]
    if first_line and len(first_line) < TITLE_MAX_FIRST_LINE:
        stripped = _BOILERPLATE_PREFIX.sub("", first_line).strip()
        if stripped:
            return stripped

    return f"Content for {format_date_label(event_date)}"


def resolve_description(message: str, title: str) -> str:
    """
    Описание события:

    1. размеченный блок (Description / Content / Video Outline);
    2. до трёх первых абзацев, без первого, если в нём заголовок;
    3. первые 300 символов сообщения.
    """
    for pattern in _DESCRIPTION_PATTERNS:
        m = pattern.search(message)
        if m and m.group(1).strip():
            return m.group(1).strip()

    sections = message.split("\n\n")
    if len(sections) > 1:
        start = 1 if title in sections[0] else 0
        body = "\n\n".join(sections[start:start + DESCRIPTION_MAX_PARAGRAPHS]).strip()
        if body:
            return body

    return message[:DESCRIPTION_FALLBACK_CHARS]


__all__ = ["format_date_label", "resolve_title", "resolve_description"]
