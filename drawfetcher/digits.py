"""Recover exactly N draw digits from a region of a result page."""

import re
from typing import List, Optional, Pattern, Sequence

from bs4 import PageElement, Tag

from .html_utils import clean_text, has_marked_ancestor, is_within, iter_strings

# Bonus balls (Fireball, Wild Ball, ...) render one digit per element too.
DEFAULT_BONUS_MARKERS = ("bonus", "fireball", "fire-ball", "wild", "extra", "multiplier")

_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)

# Order matters: dates before bare numbers, prize phrasing before currency.
NOISE_PATTERNS: List[Pattern] = [
    # Copyright years: "© 2025", "(c) 2019-2025", "Copyright 2025"
    re.compile(r"(?:©|\(c\)|\bcopyright\b)\s*(?:\d{4}\s*[-–]\s*)?\d{4}", re.IGNORECASE),
    # Month-name dates: "September 10, 2025", "Sep 10th"
    re.compile(rf"\b{_MONTH}\.?\s+\d{{1,2}}(?:st|nd|rd|th)?(?:,?\s+\d{{4}})?\b", re.IGNORECASE),
    # Numeric dates: "9/10/2025", "09-10-25", "9/10"
    re.compile(r"(?<![\d/-])\d{1,2}[/-]\d{1,2}[/-](?:\d{4}|\d{2})(?![\d/-])"),
    re.compile(r"(?<![\d/])\d{1,2}/\d{1,2}(?![\d/])"),
    # Phone numbers: "555-1234", "(800) 555-1234", "1-800-555-1234"
    re.compile(r"(?:\b1[-.\s])?(?:\(\d{3}\)\s*|\b\d{3}[-.])?\b\d{3}[-.]\d{4}\b"),
    # Clock times: "12:59 PM", "7:30", "10 p.m."
    re.compile(r"\b\d{1,2}:\d{2}(?::\d{2})?(?:\s*[ap]\.?m\.?)?", re.IGNORECASE),
    re.compile(r"\b\d{1,2}\s*[ap]\.?m\.?(?!\w)", re.IGNORECASE),
    # Prize, payout, jackpot and odds phrasing with their amounts
    re.compile(
        r"\b(?:top\s+)?(?:prize|payout|pays|jackpot|win\s+up\s+to|odds)\b[^0-9]{0,20}"
        r"(?:1\s+in\s+)?[$€£]?\s*\d[\d,]*(?:\.\d+)?",
        re.IGNORECASE,
    ),
    # Currency amounts: "$5,000", "$0.50", "500 dollars"
    re.compile(r"[$€£]\s*\d[\d,]*(?:\.\d+)?(?:\s*(?:k|million|billion))?", re.IGNORECASE),
    re.compile(r"\b\d[\d,]*(?:\.\d+)?\s*(?:dollars|usd)\b", re.IGNORECASE),
    # Game names: "Pick 3", "Play-4", "Win 4", "Cash 3"
    re.compile(r"\b(?:pick|play|cash|daily|win)[\s-]*\d\b", re.IGNORECASE),
    # Draw numbers: "Draw #1234", "Drawing No. 5678"
    re.compile(r"\b(?:draw|drawing)\s*(?:no\.?|number|#)\s*\d+", re.IGNORECASE),
    re.compile(r"#\s*\d+"),
]


def clean_noise(text: str) -> str:
    """
    Remove numeric text that is never part of a draw result.

    Args:
        text: Flattened region text

    Returns:
        Text with copyright years, phone numbers, prices, prize/odds phrases,
        times, dates, game names and draw numbers replaced by spaces
    """
    text = clean_text(text)
    for pattern in NOISE_PATTERNS:
        text = pattern.sub(" ", text)
    return clean_text(text)


def _valid(value: Optional[str], count: int) -> Optional[str]:
    if value is not None and len(value) == count and value.isascii() and value.isdigit():
        return value
    return None


def structural_digits(
    region: Tag,
    count: int,
    start: Optional[PageElement] = None,
    stop_pattern: Optional[Pattern] = None,
    bonus_markers: Sequence[str] = DEFAULT_BONUS_MARKERS,
) -> Optional[str]:
    """
    Find the first run of exactly `count` consecutive single-digit elements.

    Args:
        region: Subtree to scan
        count: Number of digits to recover
        start: Element to begin scanning at (usually the slot label)
        stop_pattern: Text that ends the scan (another slot's label)
        bonus_markers: Class fragments of bonus-ball elements to skip

    Returns:
        Concatenated digits, or None
    """
    run: List[str] = []

    for node in iter_strings(region, start):
        text = node.strip()

        if re.fullmatch(r"[0-9]", text):
            if has_marked_ancestor(node, region, bonus_markers):
                continue
            run.append(text)
            continue

        if len(run) == count:
            break
        run = []

        if start is not None and is_within(node, start):
            continue
        if stop_pattern is not None and stop_pattern.search(text):
            break

    return _valid("".join(run), count) if len(run) == count else None


def textual_digits(text: str, count: int) -> Optional[str]:
    """
    Find `count` digits in flattened text.

    An isolated token of exactly `count` digits is preferred. Otherwise
    `count` single digits separated by short non-digit filler ("4 - 1 - 7")
    are accepted.

    Args:
        text: Flattened region text
        count: Number of digits to recover

    Returns:
        Digit string, or None
    """
    cleaned = clean_noise(text)
    if not cleaned:
        return None

    match = re.search(rf"(?<!\d)\d{{{count}}}(?!\d)", cleaned)
    if match:
        return _valid(match.group(0), count)

    spread = r"\d" + r"[^\d]{1,5}\d" * (count - 1)
    match = re.search(rf"(?<!\d){spread}(?!\d)", cleaned)
    if match:
        return _valid(re.sub(r"\D", "", match.group(0))[:count], count)

    return None


def region_text(
    region: Tag,
    start: Optional[PageElement] = None,
    stop_pattern: Optional[Pattern] = None,
    bonus_markers: Sequence[str] = DEFAULT_BONUS_MARKERS,
) -> str:
    """Flattened text of region from start onward, cut at the first stop match."""
    parts = []
    for node in iter_strings(region, start):
        text = node.strip()
        if has_marked_ancestor(node, region, bonus_markers):
            continue
        inside_start = start is not None and is_within(node, start)
        if not inside_start and stop_pattern is not None and stop_pattern.search(text):
            break
        parts.append(text)
    return clean_text(" ".join(parts))
