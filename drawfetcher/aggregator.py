"""Combine per-slot Pick 3 / Pick 4 results into a daily report."""

from datetime import date
from typing import Dict, Iterable, Optional, Tuple

import structlog

from .models import DailyReport, DrawPair, ExtractionResult, Game, Slot, StateConfig
from .validator import Validator

logger = structlog.get_logger(__name__)


def build_pair(
    state: str,
    slot: Slot,
    result3: Optional[ExtractionResult],
    result4: Optional[ExtractionResult],
    validator: Optional[Validator] = None,
) -> DrawPair:
    """
    Build the DrawPair for one slot.

    Malformed digit strings are treated as absent. The pair's date is the
    latest date attached to a half that produced valid digits.
    """
    validator = validator or Validator()
    digits3 = validator.clean(result3, 3)
    digits4 = validator.clean(result4, 4)

    dates = [
        r.draw_date
        for r, digits in ((result3, digits3), (result4, digits4))
        if digits and r.draw_date
    ]

    return DrawPair(
        state=state,
        slot=slot,
        digits3=digits3,
        digits4=digits4,
        resolved_date=max(dates) if dates else None,
    )


def aggregate(
    state_config: StateConfig,
    results: Iterable[ExtractionResult],
    today: date,
    validator: Optional[Validator] = None,
) -> DailyReport:
    """
    Produce the DailyReport for a state.

    Args:
        state_config: Slot table of the state
        results: Extraction results for any of its (slot, game) pairs
        today: Current date in the reference timezone
        validator: Digit validator

    Returns:
        DailyReport dated with the latest date among complete slots, or today
    """
    by_key: Dict[Tuple[Slot, Game], ExtractionResult] = {}
    for result in results:
        if result is not None and result.state == state_config.code:
            by_key[(result.slot, result.game)] = result

    combined: Dict[Slot, Optional[str]] = {}
    dates = []
    for slot in state_config.slots:
        pair = build_pair(
            state_config.code,
            slot,
            by_key.get((slot, Game.PICK3)),
            by_key.get((slot, Game.PICK4)),
            validator,
        )
        combined[slot] = pair.combined
        if pair.combined and pair.resolved_date:
            dates.append(pair.resolved_date)

        logger.info(
            "slot_resolved",
            state=state_config.code,
            slot=slot.value,
            digits3=pair.digits3,
            digits4=pair.digits4,
            combined=pair.combined,
        )

    report_date = max(dates) if dates else today
    if not dates:
        logger.info("report_date_defaulted", state=state_config.code, date_iso=today.isoformat())

    return DailyReport(
        state=state_config.code,
        date_iso=report_date,
        midday=combined.get(Slot.MIDDAY),
        evening=combined.get(Slot.EVENING),
        night=combined.get(Slot.NIGHT),
        has_night=state_config.has_night,
    )
