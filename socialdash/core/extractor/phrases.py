# socialdash/core/extractor/phrases.py

from __future__ import annotations

import re

# Фразы, по которым чат решает, что ассистент предлагает что-то запланировать
SCHEDULING_PHRASES: tuple["re.Pattern[str]", ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\b(?:schedule|post|publish|create|make|plan|upload)(?:\s+a)?\s+(?:video|content|post|this)"
        r"(?:\s+[^.]*?)?\s+(?:on|for|by)\s+[^.?!]+",
        r"\b(?:recommended|suggest|proposal|idea)\s+(?:to|for)\s+(?:schedule|post|publish)\s+"
        r"(?:(?:a|the|this|your)\s+)?(?:video|content|post)\s+(?:on|for|by)\s+[^.?!]+",
        r"\b(?:on|by|for)\s+(?:the\s+)?\d+(?:st|nd|rd|th)?\s+(?:of\s+)?[a-z]+(?:\s+\d{4})?",
        r"\b(?:on|by|for)\s+(?:the\s+)?[a-z]+\s+\d+(?:st|nd|rd|th)?(?:\s+\d{4})?",
    )
)


def contains_scheduling_phrase(message: str) -> bool:
    """True, если в сообщении есть фраза о планировании контента на дату."""
    return any(pattern.search(message) for pattern in SCHEDULING_PHRASES)


__all__ = ["SCHEDULING_PHRASES", "contains_scheduling_phrase"]
