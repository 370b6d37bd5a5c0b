"""
Round-scoped session state and its pause/resume snapshot.

SessionState is discarded at the end of a round; only deck mastery
survives. The snapshot exists so an interrupted round can be resumed:
sets are stored as sorted lists and datetimes as ISO-8601 strings.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from src.core.errors import SessionSnapshotError
from src.core.models import Card, MissedCard


@dataclass
class SessionState:
    """Mutable state of the round in progress."""

    deck_id: str
    round_cards: list[Card]
    start_time: datetime
    response_start_time: datetime
    correct_cards: set[int] = field(default_factory=set)
    incorrect_cards: set[int] = field(default_factory=set)
    current_streak: int = 0
    max_streak: int = 0

    # Cards consumed from the front of round_cards
    cursor: int = 0
    answered_count: int = 0
    correct_answers: int = 0

    @property
    def current_card(self) -> Card | None:
        if self.cursor < len(self.round_cards):
            return self.round_cards[self.cursor]
        return None

    @property
    def remaining(self) -> list[Card]:
        """Current card plus everything after it."""
        return self.round_cards[self.cursor:]

    @property
    def is_complete(self) -> bool:
        return self.cursor >= len(self.round_cards)


# ============================================================================
# Snapshot models
# ============================================================================


class CardModel(BaseModel):
    idx: int
    name: str = ""
    side_a: str = ""
    side_b: str = ""
    side_c: str | None = None
    side_d: str | None = None
    side_e: str | None = None
    side_f: str | None = None
    level: int = 1

    def to_card(self) -> Card:
        return Card(**self.model_dump())


class MissedCardModel(BaseModel):
    card_index: int
    difficulty: float = Field(default=0.5, ge=0.0, le=1.0)
    miss_count: int = Field(default=1, ge=0)
    last_seen: datetime | None = None
    response_time_ms: int = 0

    def to_missed_card(self) -> MissedCard:
        return MissedCard(**self.model_dump())


class SessionSnapshot(BaseModel):
    """Everything needed to resume a paused round."""

    deck_id: str
    strategy_key: str
    source_cards: list[CardModel]
    round_cards: list[CardModel]
    correct_cards: list[int] = Field(default_factory=list)
    incorrect_cards: list[int] = Field(default_factory=list)
    missed_cards: list[MissedCardModel] = Field(default_factory=list)
    current_streak: int = 0
    max_streak: int = 0
    cursor: int = 0
    answered_count: int = 0
    correct_answers: int = 0
    start_time: datetime
    response_start_time: datetime

    @classmethod
    def capture(
        cls,
        state: SessionState,
        strategy_key: str,
        source_cards: list[Card],
        missed_cards: list[MissedCard],
    ) -> SessionSnapshot:
        return cls(
            deck_id=state.deck_id,
            strategy_key=strategy_key,
            source_cards=[CardModel(**asdict(card)) for card in source_cards],
            round_cards=[CardModel(**asdict(card)) for card in state.round_cards],
            correct_cards=sorted(state.correct_cards),
            incorrect_cards=sorted(state.incorrect_cards),
            missed_cards=[MissedCardModel(**asdict(m)) for m in missed_cards],
            current_streak=state.current_streak,
            max_streak=state.max_streak,
            cursor=state.cursor,
            answered_count=state.answered_count,
            correct_answers=state.correct_answers,
            start_time=state.start_time,
            response_start_time=state.response_start_time,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionSnapshot:
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SessionSnapshotError(f"Invalid session snapshot: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_state(self) -> SessionState:
        return SessionState(
            deck_id=self.deck_id,
            round_cards=[card.to_card() for card in self.round_cards],
            start_time=self.start_time,
            response_start_time=self.response_start_time,
            correct_cards=set(self.correct_cards),
            incorrect_cards=set(self.incorrect_cards),
            current_streak=self.current_streak,
            max_streak=self.max_streak,
            cursor=self.cursor,
            answered_count=self.answered_count,
            correct_answers=self.correct_answers,
        )
