"""Narrow a document down to its latest-results section."""

from typing import Callable, Optional, Sequence

import structlog
from bs4 import Tag

from .html_utils import element_text, get_element_depth
from .models import SourceDocument

logger = structlog.get_logger(__name__)

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

HeadingPredicate = Callable[[str], bool]


def heading_predicate(
    all_of: Sequence[str] = ("latest",),
    any_of: Sequence[str] = ("number", "result"),
) -> HeadingPredicate:
    """
    Build a predicate over heading text.

    Args:
        all_of: Keywords that must all appear
        any_of: Keywords of which at least one must appear (ignored if empty)

    Returns:
        Callable taking normalized heading text
    """
    required = [k.lower() for k in all_of]
    alternatives = [k.lower() for k in any_of]

    def predicate(text: str) -> bool:
        text = text.lower()
        if not all(k in text for k in required):
            return False
        return not alternatives or any(k in text for k in alternatives)

    return predicate


def _headings(root: Tag):
    for element in root.find_all(True):
        if element.name in HEADING_TAGS or element.get("role") == "heading":
            yield element


def _container_for(heading: Tag, heading_text: str) -> Optional[Tag]:
    """Nearest ancestor of heading holding more than the heading itself."""
    for ancestor in heading.parents:
        if not isinstance(ancestor, Tag) or ancestor.name == "[document]":
            return None
        if len(element_text(ancestor)) > len(heading_text):
            return ancestor
    return None


def resolve_scope(
    document: SourceDocument,
    predicate: Optional[HeadingPredicate] = None,
) -> Tag:
    """
    Return the smallest section whose heading satisfies predicate.

    Args:
        document: Parsed source document
        predicate: Heading text predicate (default: "latest" plus "number"/"result")

    Returns:
        Section container, or the whole document when no heading matches
    """
    predicate = predicate or heading_predicate()
    root = document.soup

    candidates = []
    for heading in _headings(root):
        text = element_text(heading)
        if not text or not predicate(text):
            continue
        container = _container_for(heading, text)
        if container is not None:
            candidates.append(container)

    if not candidates:
        logger.debug("scope_heading_not_found", url=document.url)
        return root

    scope = min(
        candidates,
        key=lambda c: (len(element_text(c)), -get_element_depth(c)),
    )
    logger.debug(
        "scope_resolved",
        url=document.url,
        tag=scope.name,
        text_length=len(element_text(scope)),
    )
    return scope
