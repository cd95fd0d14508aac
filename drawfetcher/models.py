"""Data models for DrawFetcher."""

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Game(str, Enum):
    """Daily numbers game, named after the digit count it draws."""

    PICK3 = "pick3"
    PICK4 = "pick4"

    @property
    def digit_count(self) -> int:
        return 3 if self is Game.PICK3 else 4


class Slot(str, Enum):
    """Named draw time within a day."""

    MIDDAY = "midday"
    EVENING = "evening"
    NIGHT = "night"


@dataclass(frozen=True)
class SourceDocument:
    """Parsed result page and the URL it was fetched from."""

    soup: BeautifulSoup
    url: Optional[str] = None


class ExtractionRequest(BaseModel):
    """What to look for in a single document."""

    model_config = ConfigDict(frozen=True)

    state: str
    game: Game
    slot: Slot
    digit_count: int = Field(ge=3, le=4)
    label_aliases: List[str] = Field(min_length=1)
    rival_aliases: List[str] = Field(default_factory=list)  # other slots' labels on the same page

    @model_validator(mode="after")
    def _count_matches_game(self) -> "ExtractionRequest":
        if self.digit_count != self.game.digit_count:
            raise ValueError(
                f"digit_count {self.digit_count} does not match {self.game.value}"
            )
        return self

    @property
    def tag(self) -> str:
        """Correlation tag used in log events."""
        return f"{self.state}:{self.game.value}:{self.slot.value}"


class ExtractionResult(BaseModel):
    """Outcome of extracting one (state, game, slot) from one or more documents."""

    model_config = ConfigDict(frozen=True)

    state: str
    game: Game
    slot: Slot
    digit_count: int
    digits: Optional[str] = None
    draw_date: Optional[date] = None
    source_url: Optional[str] = None
    method: Optional[str] = None  # "structural" or "textual"
    scope_level: Optional[str] = None  # widening level that produced the digits

    @model_validator(mode="after")
    def _digits_complete(self) -> "ExtractionResult":
        if self.digits is not None and not re.fullmatch(
            rf"[0-9]{{{self.digit_count}}}", self.digits
        ):
            raise ValueError(
                f"digits must be exactly {self.digit_count} decimal digits, got {self.digits!r}"
            )
        return self

    @property
    def found(self) -> bool:
        return self.digits is not None

    @classmethod
    def absent(
        cls, request: ExtractionRequest, source_url: Optional[str] = None
    ) -> "ExtractionResult":
        return cls(
            state=request.state,
            game=request.game,
            slot=request.slot,
            digit_count=request.digit_count,
            source_url=source_url,
        )


class ValidationResult(BaseModel):
    """Result of validating a digit string."""

    valid: bool
    errors: List[str] = Field(default_factory=list)


class DrawPair(BaseModel):
    """Pick 3 and Pick 4 results for one slot."""

    model_config = ConfigDict(frozen=True)

    state: str
    slot: Slot
    digits3: Optional[str] = None
    digits4: Optional[str] = None
    resolved_date: Optional[date] = None

    @property
    def combined(self) -> Optional[str]:
        if self.digits3 and self.digits4:
            return f"{self.digits3}-{self.digits4}"
        return None


class DailyReport(BaseModel):
    """Latest results for a state, one combined string per slot."""

    model_config = ConfigDict(frozen=True)

    state: str
    date_iso: date = Field(serialization_alias="dateISO")
    midday: Optional[str] = None
    evening: Optional[str] = None
    night: Optional[str] = None
    has_night: bool = Field(default=False, exclude=True)

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation; ``night`` only for states with a third slot."""
        payload = self.model_dump(mode="json", by_alias=True)
        if not self.has_night:
            payload.pop("night", None)
        return payload


class SlotConfig(BaseModel):
    """Label aliases and candidate URLs for one slot of a state."""

    aliases: List[str] = Field(min_length=1)
    urls: Dict[Game, List[str]] = Field(default_factory=dict)

    @field_validator("aliases")
    @classmethod
    def _normalize_aliases(cls, value: List[str]) -> List[str]:
        aliases = []
        for alias in value:
            alias = " ".join(alias.split()).lower()
            if alias and alias not in aliases:
                aliases.append(alias)
        if not aliases:
            raise ValueError("at least one non-empty alias is required")
        return aliases


class StateConfig(BaseModel):
    """Per-state slot table."""

    code: str
    name: str
    slots: Dict[Slot, SlotConfig]

    @property
    def has_night(self) -> bool:
        return Slot.NIGHT in self.slots

    def rival_aliases(self, slot: Slot) -> List[str]:
        """Aliases of every other slot configured for this state."""
        rivals: List[str] = []
        for other, slot_config in self.slots.items():
            if other is not slot:
                rivals.extend(a for a in slot_config.aliases if a not in rivals)
        return rivals

    def request_for(self, slot: Slot, game: Game) -> ExtractionRequest:
        return ExtractionRequest(
            state=self.code,
            game=game,
            slot=slot,
            digit_count=game.digit_count,
            label_aliases=self.slots[slot].aliases,
            rival_aliases=self.rival_aliases(slot),
        )
