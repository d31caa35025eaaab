from datetime import date, datetime

import pytest

from socialdash.core.extractor.dates import DATE_RULES, month_number, resolve_date

REF = date(2025, 6, 10)


def test_rule_order_is_the_documented_waterfall():
    assert [rule.name for rule in DATE_RULES] == [
        "structured_label",
        "relative_tomorrow",
        "relative_in_days",
        "relative_next_week",
        "month_day",
        "day_month",
        "numeric",
        "bare_day",
    ]


@pytest.mark.parametrize(
    "message",
    [
        "Let's post this tomorrow.",
        "TOMORROW works best for the reel",
        "Schedule the teaser on June 15, or tomorrow if you're ready.",
        "Upload on 25/12 or maybe tomorrow",
    ],
)
def test_tomorrow_is_reference_plus_one(message):
    match = resolve_date(message, REF)
    assert match is not None
    assert match.value == date(2025, 6, 11)
    assert match.rule == "relative_tomorrow"


@pytest.mark.parametrize(
    "message",
    ["Publish it in 5 days.", "On June 30 we start, but the post goes live in 5 days"],
)
def test_in_five_days(message):
    assert resolve_date(message, REF).value == date(2025, 6, 15)


def test_next_week():
    assert resolve_date("Let's aim for next week", REF).value == date(2025, 6, 17)


def test_structured_label_wins_over_relative_phrases():
    message = "Ready for tomorrow?\n\n**Date:** July 10, 2025\n**Event Name:** Q3 Recap"
    match = resolve_date(message, REF)
    assert match.value == date(2025, 7, 10)
    assert match.rule == "structured_label"


@pytest.mark.parametrize(
    "message,expected",
    [
        ("Date: August 3rd", date(2025, 8, 3)),
        ("**Date**: sept 9, 2026", date(2026, 9, 9)),
    ],
)
def test_structured_label_variants(message, expected):
    assert resolve_date(message, REF).value == expected


def test_structured_label_with_unknown_month_falls_through():
    match = resolve_date("Date: Someday 10\nLet's post on June 15th", REF)
    assert match.value == date(2025, 6, 15)
    assert match.rule == "month_day"


@pytest.mark.parametrize(
    "message,expected,rule",
    [
        ("Please schedule a video titled \"Summer Trends\" on June 15th", date(2025, 6, 15), "month_day"),
        ("Have it ready by Dec 3, 2026", date(2026, 12, 3), "month_day"),
        ("Post this on July 4", date(2025, 7, 4), "month_day"),
        ("Plan it for 12th of July", date(2025, 7, 12), "day_month"),
        ("Go live on 5 March 2026", date(2026, 3, 5), "day_month"),
        ("Posting on 25/12", date(2025, 12, 25), "numeric"),
        ("Upload it on 06-12", date(2025, 6, 12), "numeric"),
        ("Publish on 12/06/2026", date(2026, 12, 6), "numeric"),
        ("Let's do it on 20th", date(2025, 6, 20), "bare_day"),
    ],
)
def test_verb_qualified_rules(message, expected, rule):
    match = resolve_date(message, REF)
    assert match.value == expected
    assert match.rule == rule


def test_invalid_month_day_is_not_wrapped():
    assert resolve_date("Let's post on June 31st", REF) is None


def test_invalid_candidate_moves_on_to_next_candidate():
    match = resolve_date("Post on June 31, or on July 2 at the latest", REF)
    assert match.value == date(2025, 7, 2)


def test_bare_day_rolls_over_into_next_month():
    # 31-е в феврале: известная особенность, дата переходит в март
    assert resolve_date("Post on 31st", date(2025, 2, 10)).value == date(2025, 3, 3)


def test_verbs_need_a_word_boundary():
    assert resolve_date("Upon 5 reviews we decide", REF) is None


def test_no_date_found():
    assert resolve_date("Let's talk about cats", REF) is None


def test_reference_accepts_datetime():
    assert resolve_date("tomorrow", datetime(2025, 12, 31, 23, 59)).value == date(2026, 1, 1)


def test_month_number():
    assert month_number("June") == 6
    assert month_number("SEPT") == 9
    assert month_number("Someday") is None


@pytest.mark.parametrize("message", ["Post at 5 pm", "Keep posting for 2 weeks", "Go live on 13/13"])
def test_failed_verb_candidate_is_not_read_as_bare_day(message):
    assert resolve_date(message, REF) is None


def test_bare_day_still_found_after_unrelated_failed_candidate():
    match = resolve_date("Keep posting for 2 weeks, starting on 20th", REF)
    assert match.value == date(2025, 6, 20)
    assert match.rule == "bare_day"
