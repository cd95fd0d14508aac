"""Run the scope -> label -> digits/date pipeline over one document."""

from datetime import date
from typing import Iterator, Optional, Sequence, Tuple

import structlog
from bs4 import Tag

from .dates import resolve_date
from .digits import DEFAULT_BONUS_MARKERS, region_text, structural_digits, textual_digits
from .html_utils import element_text, is_within
from .labels import alias_pattern, locate_label
from .models import ExtractionRequest, ExtractionResult, SourceDocument
from .scope import HeadingPredicate, resolve_scope

logger = structlog.get_logger(__name__)

CONTAINER_TAGS = {"div", "li", "ul", "ol", "dl", "dd", "p", "tr", "td", "table", "tbody"}
SECTION_TAGS = {"section", "article", "main", "aside"}


def _nearest(anchor: Tag, scope: Tag, names) -> Tag:
    """First ancestor of anchor with a tag name in names, never leaving scope."""
    for ancestor in anchor.parents:
        if ancestor is scope or not is_within(ancestor, scope):
            return scope
        if ancestor.name in names:
            return ancestor
    return scope


def scope_levels(anchor: Optional[Tag], scope: Tag) -> Iterator[Tuple[str, Tag]]:
    """
    Yield progressively wider regions around anchor, ending at scope.

    anchor -> nearest container -> enclosing section -> scope. Regions are
    produced lazily; a level that would reach the scope is folded into it.
    """
    if anchor is not None and anchor is not scope:
        yield "anchor", anchor
        container = _nearest(anchor, scope, CONTAINER_TAGS)
        if container is not scope:
            yield "container", container
            section = _nearest(container, scope, SECTION_TAGS)
            if section is not scope:
                yield "section", section

    yield "scope", scope


class Extractor:
    """Extract one slot's digits and draw date from a parsed document."""

    def __init__(
        self,
        scope_predicate: Optional[HeadingPredicate] = None,
        bonus_markers: Sequence[str] = DEFAULT_BONUS_MARKERS,
        require_label: bool = True,
    ):
        """
        Initialize extractor.

        Args:
            scope_predicate: Heading predicate used to narrow the document
            bonus_markers: Class fragments of bonus-ball elements to ignore
            require_label: If False, search the whole scope when no label is found
        """
        self.scope_predicate = scope_predicate
        self.bonus_markers = tuple(bonus_markers)
        self.require_label = require_label

    def extract(
        self,
        document: SourceDocument,
        request: ExtractionRequest,
        today: date,
    ) -> ExtractionResult:
        """
        Extract digits and draw date for request.

        Args:
            document: Parsed source document
            request: What to extract
            today: Current date in the reference timezone

        Returns:
            ExtractionResult; digits are absent on any miss
        """
        log = logger.bind(tag=request.tag, url=document.url)
        log.debug("extraction_started")

        try:
            return self._extract(document, request, today, log)
        except Exception as e:
            log.exception("extraction_failed", error=str(e))
            return ExtractionResult.absent(request, source_url=document.url)

    def _extract(self, document, request, today, log) -> ExtractionResult:
        scope = resolve_scope(document, self.scope_predicate)
        anchor = locate_label(scope, request.label_aliases, request.rival_aliases)

        if anchor is None:
            log.info("label_not_found", aliases=request.label_aliases)
            if self.require_label:
                return ExtractionResult.absent(request, source_url=document.url)

        stop = alias_pattern(request.rival_aliases)
        count = request.digit_count
        digits = method = level_name = None

        for level_name, region in scope_levels(anchor, scope):
            digits = structural_digits(
                region, count, start=anchor, stop_pattern=stop, bonus_markers=self.bonus_markers
            )
            if digits:
                method = "structural"
                break

            digits = textual_digits(
                region_text(region, start=anchor, stop_pattern=stop, bonus_markers=self.bonus_markers),
                count,
            )
            if digits:
                method = "textual"
                break

            log.debug("digits_not_found_at_level", level=level_name)

        if not digits:
            log.info("digits_not_found")
            return ExtractionResult.absent(request, source_url=document.url)

        draw_date = resolve_date(
            (element_text(region) for _, region in scope_levels(anchor, scope)), today
        )

        log.info(
            "extraction_completed",
            method=method,
            level=level_name,
            draw_date=draw_date.isoformat() if draw_date else None,
        )

        return ExtractionResult(
            state=request.state,
            game=request.game,
            slot=request.slot,
            digit_count=count,
            digits=digits,
            draw_date=draw_date,
            source_url=document.url,
            method=method,
            scope_level=level_name,
        )
