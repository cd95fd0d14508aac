"""Locate the element naming a draw slot."""

import re
from typing import Optional, Pattern, Sequence

import structlog
from bs4 import Tag

from .html_utils import element_text, get_element_depth

logger = structlog.get_logger(__name__)


def alias_pattern(aliases: Sequence[str]) -> Optional[Pattern]:
    """
    Compile a case-insensitive whole-word pattern matching any alias.

    Longer aliases are tried first so "this evening" wins over "evening".
    Whitespace inside an alias matches any run of whitespace.
    """
    words = sorted({" ".join(a.split()) for a in aliases if a and a.strip()}, key=len, reverse=True)
    if not words:
        return None
    body = "|".join(r"\s+".join(re.escape(part) for part in w.split(" ")) for w in words)
    return re.compile(rf"(?<!\w)(?:{body})(?!\w)", re.IGNORECASE)


def locate_label(
    scope: Tag,
    aliases: Sequence[str],
    rival_aliases: Sequence[str] = (),
) -> Optional[Tag]:
    """
    Find the most specific element inside scope naming the requested slot.

    Args:
        scope: Subtree to search
        aliases: Accepted label variants for the slot
        rival_aliases: Labels of the other slots on the same page

    Returns:
        Smallest matching element, preferring ones that do not also name a
        rival slot; None if nothing matches
    """
    pattern = alias_pattern(aliases)
    if pattern is None:
        return None
    rival = alias_pattern(rival_aliases)

    best = None
    best_key = None
    for element in scope.find_all(True):
        text = element_text(element)
        if not text or not pattern.search(text):
            continue
        key = (bool(rival and rival.search(text)), len(text), -get_element_depth(element))
        if best_key is None or key < best_key:
            best, best_key = element, key

    if best is None:
        logger.debug("label_not_found", aliases=list(aliases))
    return best
