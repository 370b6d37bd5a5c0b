"""
Flat, JSON-safe representation of deck mastery.

The storage layer only sees plain data:
- `mastered_cards` as an ordered list of [card_index, record] entries
- datetimes as ISO-8601 strings

Pydantic models validate the payload on the way back in, so a storage
layer never needs to understand mastery semantics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from src.core.errors import MasteryDataError
from src.mastery.tracker import DeckMastery, MasteryRecord

SCHEMA_VERSION = 1


class MasteryRecordModel(BaseModel):
    card_index: int
    consecutive_correct: int = Field(default=0, ge=0)
    attempt_count: int = Field(default=0, ge=0)
    last_seen: datetime | None = None
    mastered_at: datetime | None = None


class DeckMasteryModel(BaseModel):
    version: int = SCHEMA_VERSION
    deck_id: str
    mastered_cards: list[tuple[int, MasteryRecordModel]] = Field(default_factory=list)
    total_cards: int = Field(default=0, ge=0)
    mastery_threshold: int = Field(default=3, ge=1)
    last_updated: datetime | None = None


def deck_mastery_to_dict(deck: DeckMastery) -> dict[str, Any]:
    """Serialize a deck to plain JSON-compatible data."""
    model = DeckMasteryModel(
        deck_id=deck.deck_id,
        mastered_cards=[
            (
                index,
                MasteryRecordModel(
                    card_index=record.card_index,
                    consecutive_correct=record.consecutive_correct,
                    attempt_count=record.attempt_count,
                    last_seen=record.last_seen,
                    mastered_at=record.mastered_at,
                ),
            )
            for index, record in sorted(deck.mastered_cards.items())
        ],
        total_cards=deck.total_cards,
        mastery_threshold=deck.mastery_threshold,
        last_updated=deck.last_updated,
    )
    return model.model_dump(mode="json")


def deck_mastery_from_dict(data: dict[str, Any]) -> DeckMastery:
    """
    Rebuild a deck from its flat representation.

    Raises:
        MasteryDataError: If the payload is malformed
    """
    try:
        model = DeckMasteryModel.model_validate(data)
    except ValidationError as e:
        raise MasteryDataError(f"Invalid mastery payload: {e}") from e

    return DeckMastery(
        deck_id=model.deck_id,
        mastered_cards={
            index: MasteryRecord(**record.model_dump())
            for index, record in model.mastered_cards
        },
        total_cards=model.total_cards,
        mastery_threshold=model.mastery_threshold,
        last_updated=model.last_updated,
    )
