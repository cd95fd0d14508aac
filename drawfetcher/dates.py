"""Recover a draw date from text near a result."""

import re
from datetime import date
from typing import Iterable, Optional

import structlog

from .html_utils import clean_text

logger = structlog.get_logger(__name__)

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

RELATIVE_RE = re.compile(
    r"\b(?:today|tonight|this\s+(?:evening|afternoon|morning))\b", re.IGNORECASE
)

MONTH_NAME_RE = re.compile(
    r"\b(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
    r"\.?\s+(\d{1,2})(?:st|nd|rd|th)?(?!\d)(?:,?\s+(\d{4})(?!\d))?",
    re.IGNORECASE,
)

# "4-1-7" and "1-2-3-4" are draw results, not dates; "1/2 off" is a discount
NUMERIC_RE = re.compile(
    r"(?<![\d/-])(\d{1,2})([/-])(\d{1,2})(?:\2(\d{4}|\d{2}))?(?![\d/-])"
    r"(?!\s*(?:off|price)\b)",
    re.IGNORECASE,
)


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _month_name_date(text: str, today: date) -> Optional[date]:
    for match in MONTH_NAME_RE.finditer(text):
        month = MONTHS[match.group(1)[:3].lower()]
        year = int(match.group(3)) if match.group(3) else today.year
        parsed = _safe_date(year, month, int(match.group(2)))
        if parsed:
            return parsed
    return None


def _numeric_date(text: str, today: date) -> Optional[date]:
    for match in NUMERIC_RE.finditer(text):
        month, day, year = int(match.group(1)), int(match.group(3)), match.group(4)
        if year is None:
            year = today.year
        else:
            year = int(year)
            if year < 100:
                year += 2000
        parsed = _safe_date(year, month, day)
        if parsed:
            return parsed
    return None


def parse_date(text: str, today: date) -> Optional[date]:
    """
    Parse the first recognizable draw date in text.

    Forms are tried in priority order: relative phrase ("today", "tonight",
    "this evening"), month name ("September 10, 2025", "Sep 10"), then
    numeric ("9/10/2025", "9/10/25", "9/10"). A missing year defaults to the
    year of `today`; two-digit years are taken as 20xx.

    Args:
        text: Candidate text
        today: Current date in the reference timezone

    Returns:
        Parsed date or None
    """
    text = clean_text(text)
    if not text:
        return None

    if RELATIVE_RE.search(text):
        return today

    return _month_name_date(text, today) or _numeric_date(text, today)


def resolve_date(texts: Iterable[str], today: date) -> Optional[date]:
    """
    Return the first date found over candidate texts, innermost first.

    Args:
        texts: Candidate texts ordered from narrowest to widest scope
        today: Current date in the reference timezone

    Returns:
        Parsed date or None when no candidate holds a date
    """
    for level, text in enumerate(texts):
        parsed = parse_date(text, today)
        if parsed:
            logger.debug("date_resolved", level=level, draw_date=parsed.isoformat())
            return parsed

    logger.debug("date_not_found")
    return None
