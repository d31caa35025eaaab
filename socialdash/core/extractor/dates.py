# socialdash/core/extractor/dates.py
"""
Date resolution for AI chat messages.

The rules form an ordered waterfall: every rule is tried in ``DATE_RULES``
order and the first candidate that resolves to a real date wins. A rule whose
candidates all fail (unknown month, impossible day) falls through to the next
one. A failed verb-qualified candidate ("at 5 pm", "for 2 weeks") keeps its
text: later rules never re-read that span, so it cannot become a bare day.

All dates are naive calendar dates relative to an explicit reference date.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional

log = logging.getLogger(__name__)

MONTHS: dict[str, int] = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7, "aug": 8,
    "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

_SUFFIX = r"(?:st|nd|rd|th)?"
_YEAR = r"(?:,?\s+(\d{4}))?"
# on / by / for / at / post this / posting on ...
_VERB = r"\b(?:on|by|for|at|post(?:ing)?\s+(?:this|on))"

Resolver = Callable[["re.Match[str]", date], Optional[date]]


@dataclass(frozen=True)
class DateRule:
    name: str
    pattern: "re.Pattern[str]"
    resolve: Resolver
    # неудачный кандидат закрывает свой фрагмент текста для следующих правил
    claims_failed: bool = False


@dataclass(frozen=True)
class DateMatch:
    value: date
    rule: str
    text: str


def month_number(token: str) -> int | None:
    """'June' / 'jun' / 'SEPT' → номер месяца; None для неизвестного слова."""
    return MONTHS.get(token.lower())


def as_reference_date(reference: date | datetime | None) -> date:
    if reference is None:
        return date.today()
    if isinstance(reference, datetime):
        return reference.date()
    return reference


def _year(raw: str | None, reference: date) -> int:
    return int(raw) if raw else reference.year


def _checked_date(year: int, month: int | None, day: int) -> date | None:
    if month is None:
        return None
    try:
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None


# --------------------------------------------------------------------------- #
#                                 resolvers                                   #
# --------------------------------------------------------------------------- #

def _month_then_day(m: "re.Match[str]", reference: date) -> date | None:
    return _checked_date(_year(m.group(3), reference), month_number(m.group(1)), int(m.group(2)))


def _day_then_month(m: "re.Match[str]", reference: date) -> date | None:
    return _checked_date(_year(m.group(3), reference), month_number(m.group(2)), int(m.group(1)))


def _numeric(m: "re.Match[str]", reference: date) -> date | None:
    first, second = int(m.group(1)), int(m.group(2))
    year = _year(m.group(3), reference)
    # first > 12 не может быть месяцем: DD/MM, иначе MM/DD
    if first > 12:
        return _checked_date(year, second, first)
    return _checked_date(year, first, second)


def _bare_day(m: "re.Match[str]", reference: date) -> date | None:
    # Не валидируется: 31-е в 30-дневном месяце переходит на 1-е следующего.
    day = int(m.group(1))
    try:
        return reference.replace(day=1) + timedelta(days=day - 1)
    except OverflowError:
        return None


def _offset(days: int) -> Resolver:
    def resolve(m: "re.Match[str]", reference: date) -> date | None:
        return reference + timedelta(days=days)
    return resolve


def _in_n_days(m: "re.Match[str]", reference: date) -> date | None:
    try:
        return reference + timedelta(days=int(m.group(1)))
    except OverflowError:
        return None


def _rule(name: str, pattern: str, resolve: Resolver, claims_failed: bool = False) -> DateRule:
    return DateRule(name, re.compile(pattern, re.IGNORECASE), resolve, claims_failed)


DATE_RULES: tuple[DateRule, ...] = (
    _rule(
        "structured_label",
        rf"(?:\*\*)?\bDate(?:\*\*)?:(?:\*\*)?\s+([a-z]+)\s+(\d+){_SUFFIX}{_YEAR}",
        _month_then_day,
    ),
    _rule("relative_tomorrow", r"\btomorrow\b", _offset(1)),
    _rule("relative_in_days", r"\bin\s+(\d+)\s+days\b", _in_n_days),
    _rule("relative_next_week", r"\bnext\s+week\b", _offset(7)),
    _rule("month_day", rf"{_VERB}\s+([a-z]+)\s+(\d+){_SUFFIX}{_YEAR}", _month_then_day, claims_failed=True),
    _rule("day_month", rf"{_VERB}\s+(\d+){_SUFFIX}\s+(?:of\s+)?([a-z]+){_YEAR}", _day_then_month, claims_failed=True),
    _rule("numeric", rf"{_VERB}\s+(\d{{1,2}})[/\-](\d{{1,2}})(?:[/\-](\d{{4}}))?", _numeric, claims_failed=True),
    _rule("bare_day", rf"{_VERB}\s+(\d+){_SUFFIX}", _bare_day),
)


def _overlaps(m: "re.Match[str]", spans: list[tuple[int, int]]) -> bool:
    start, end = m.span()
    return any(start < s_end and end > s_start for s_start, s_end in spans)


def resolve_date(
    message: str,
    reference: date | datetime | None = None,
    rules: tuple[DateRule, ...] = DATE_RULES,
) -> DateMatch | None:
    """
    Ищет дату в сообщении по упорядоченному списку правил.

    Args:
        message (str): Текст сообщения ассистента.
        reference (date | datetime | None): Опорная дата; по умолчанию сегодня.
        rules: Правила в порядке приоритета.

    Returns:
        DateMatch | None: Первая успешно разобранная дата или None.
    """
    ref = as_reference_date(reference)
    claimed: list[tuple[int, int]] = []
    for rule in rules:
        for m in rule.pattern.finditer(message):
            if _overlaps(m, claimed):
                log.debug("Rule '%s' candidate %r skipped: text already claimed", rule.name, m.group(0))
                continue
            value = rule.resolve(m, ref)
            if value is not None:
                log.debug("Date resolved by rule '%s' from %r: %s", rule.name, m.group(0), value)
                return DateMatch(value=value, rule=rule.name, text=m.group(0))
            log.debug("Rule '%s' candidate %r did not resolve", rule.name, m.group(0))
            if rule.claims_failed:
                claimed.append(m.span())
    return None


__all__ = [
    "MONTHS",
    "DateRule",
    "DateMatch",
    "DATE_RULES",
    "month_number",
    "as_reference_date",
    "resolve_date",
]
