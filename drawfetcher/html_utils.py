"""HTML processing utility functions."""

import re
from itertools import chain
from typing import Iterator, Optional, Union

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag
from bs4.element import PreformattedString

from .models import SourceDocument

NON_CONTENT_TAGS = ["script", "style", "noscript", "template", "svg"]


def clean_text(text: Optional[str]) -> str:
    """
    Clean and normalize extracted text.

    Args:
        text: Raw text to clean

    Returns:
        Cleaned text with normalized whitespace
    """
    if not text:
        return ""

    return re.sub(r"\s+", " ", text).strip()


def element_text(element: Union[Tag, NavigableString, None]) -> str:
    """Whitespace-collapsed text of an element, with child text separated by spaces."""
    if element is None:
        return ""
    if isinstance(element, NavigableString):
        return clean_text(str(element))
    return clean_text(element.get_text(" "))


def parse_document(html: Union[str, bytes], url: Optional[str] = None) -> SourceDocument:
    """
    Parse raw markup into a SourceDocument.

    Scripts, styles and other non-content elements are removed so that their
    text never takes part in label or digit matching.

    Args:
        html: Raw page markup
        url: URL the markup was fetched from

    Returns:
        SourceDocument wrapping the parsed tree
    """
    soup = BeautifulSoup(html or "", "lxml")

    for element in soup(NON_CONTENT_TAGS):
        element.decompose()

    return SourceDocument(soup=soup, url=url)


def is_within(node: PageElement, region: Tag) -> bool:
    """True if node is region itself or one of its descendants."""
    return node is region or any(parent is region for parent in node.parents)


def iter_strings(region: Tag, start: Optional[PageElement] = None) -> Iterator[NavigableString]:
    """
    Yield the non-blank text nodes of region in document order.

    Args:
        region: Subtree to walk
        start: Element to begin at (inclusive). Ignored unless inside region.

    Yields:
        Text nodes, excluding comments, CDATA and doctype nodes
    """
    if start is None or start is region or not is_within(start, region):
        nodes = region.descendants
    else:
        nodes = chain([start], start.next_elements)

    for node in nodes:
        if not is_within(node, region):
            break
        if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
            continue
        if node.strip():
            yield node


def class_tokens(element: Tag) -> list:
    """Lowercased class names of an element."""
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return [c.lower() for c in classes]


def has_marked_ancestor(node: PageElement, region: Tag, markers) -> bool:
    """True if node or an ancestor inside region carries a class containing a marker."""
    if not markers:
        return False

    current = node if isinstance(node, Tag) else node.parent
    while current is not None:
        if any(marker in token for token in class_tokens(current) for marker in markers):
            return True
        if current is region:
            break
        current = current.parent

    return False


def get_element_depth(element: PageElement) -> int:
    """
    Calculate depth of element in DOM tree.

    Args:
        element: BeautifulSoup element

    Returns:
        Depth level (root = 0)
    """
    depth = 0
    current = element.parent

    while current:
        depth += 1
        current = current.parent

    return depth
